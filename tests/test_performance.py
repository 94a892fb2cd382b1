from datetime import date, datetime

import pytest

from models import db, Task, EmployeePerformance
from modules.performance.service import (
    compute_metrics, calculate_employee_performance, get_employee_performance, top_performers,
)
from modules.projects.service import create_project


def _done(due, finished, created=datetime(2030, 1, 1), checklist=None):
    return Task(title='t', status='Completed', due_date=due, completed_at=finished,
                created_at=created, checklist=checklist or [])


def test_no_tasks_means_all_zero():
    metrics = compute_metrics([])
    assert metrics == {
        'task_completion_rate': 0.0,
        'on_time_completion_rate': 0.0,
        'average_completion_time': 0.0,
        'checklist_item_completion_rate': 0.0,
        'progress_score': 0.0,
        'completed_tasks_count': 0,
        'total_tasks_count': 0,
    }


def test_weighted_score():
    tasks = [
        _done(date(2030, 1, 5), datetime(2030, 1, 5, 17), checklist=[
            {'text': 'a', 'completed': True}, {'text': 'b', 'completed': True}]),
        _done(date(2030, 1, 2), datetime(2030, 1, 3), checklist=[
            {'text': 'c', 'completed': False}, {'text': 'd', 'completed': True}]),
        Task(title='open', status='In Progress', checklist=[]),
        Task(title='new', status='Not Started', checklist=[]),
    ]
    metrics = compute_metrics(tasks)
    assert metrics['task_completion_rate'] == 50.0
    assert metrics['on_time_completion_rate'] == 50.0
    assert metrics['checklist_item_completion_rate'] == 75.0
    assert metrics['progress_score'] == pytest.approx(50 * 0.4 + 50 * 0.3 + 75 * 0.3)
    # (4.708 + 2) / 2 days
    assert metrics['average_completion_time'] == pytest.approx((4 + 17 / 24 + 2) / 2)
    assert (metrics['completed_tasks_count'], metrics['total_tasks_count']) == (2, 4)


def test_task_without_due_date_is_never_on_time():
    metrics = compute_metrics([_done(None, datetime(2030, 1, 2))])
    assert metrics['on_time_completion_rate'] == 0.0


def test_get_performance_calculates_when_missing(employee):
    assert db.session.get(EmployeePerformance, employee.id) is None
    record = get_employee_performance(employee.id)
    assert record.employee_id == employee.id
    assert record.to_dict()['metrics']['total_tasks_count'] == 0


def test_top_performers_sorted_by_score(employer, make_employee):
    slow, _ = make_employee(name='Slow')
    fast, _ = make_employee(name='Fast')
    project = create_project({'name': 'P'}, employer)
    db.session.add_all([
        Task(project_id=project.id, title='a', status='Completed', assigned_to=fast.id,
             due_date=date(2999, 1, 1), completed_at=datetime.utcnow()),
        Task(project_id=project.id, title='b', status='Not Started', assigned_to=slow.id),
    ])
    db.session.commit()
    calculate_employee_performance(fast.id)
    calculate_employee_performance(slow.id)

    ranked = top_performers(employer, limit=5)
    assert [r['name'] for r in ranked] == ['Fast', 'Slow']
    assert ranked[0]['metrics']['progress_score'] == pytest.approx(70.0)
    assert ranked[0]['department'] == 'Engineering'


def test_performance_api(employer_client, employee):
    body = employer_client.get('/api/performance/top?limit=1').get_json()
    assert len(body['employees']) == 1
    assert employer_client.get(f'/api/performance/{employee.id}').status_code == 200
