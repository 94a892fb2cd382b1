from datetime import date, timedelta

import pytest

from models import db, Task, Activity, EmployeePerformance
from modules.errors import PermissionDenied
from modules.projects.service import create_project
from modules.tasks.service import (
    create_task, update_task, list_tasks, filter_tasks, status_counts, toggle_checklist_item,
)


@pytest.fixture
def project(employer, employee):
    return create_project({'name': 'Ops', 'start_date': '2030-01-01', 'end_date': '2030-03-01',
                           'team': [employee.id]}, employer)


def _task(employer, project, **fields):
    data = {'project_id': project.id, 'title': 'Write docs'}
    data.update(fields)
    return create_task(data, employer)


def test_overdue_is_derived_from_due_date(today):
    task = Task(title='x', status='In Progress', due_date=today - timedelta(days=1))
    assert task.is_overdue(today)
    assert task.effective_status(today) == 'Overdue'

    task.status = 'completed'
    assert not task.is_overdue(today)

    task.status = 'Not Started'
    task.due_date = today
    assert not task.is_overdue(today)
    assert not Task(title='no due').is_overdue(today)


def test_create_task_updates_count_and_progress(employer, project, employee):
    _task(employer, project, assigned_to=employee.id, status='Completed')
    _task(employer, project)
    assert project.tasks_count == 2
    assert project.progress == 50
    assert project.status == 'In progress'


def test_create_task_rejects_foreign_assignee(employer, other_employer, project):
    from modules.employees.service import create_employee
    outsider, _, _ = create_employee({'name': 'Out', 'email': 'out@other.test',
                                      'position': 'Dev', 'department': 'Eng'}, other_employer.id)
    with pytest.raises(PermissionDenied):
        _task(employer, project, assigned_to=outsider.id)


def test_first_update_moves_project_out_of_not_started(employer, project):
    task = _task(employer, project)
    assert project.status == 'Not started'

    update_task(task.id, {'status': 'In Progress'}, employer)
    assert project.status == 'In progress'
    assert project.progress == 0


def test_completion_stamps_and_recalculates(employer, project, employee):
    task = _task(employer, project, assigned_to=employee.id)
    update_task(task.id, {'status': 'Completed'}, employer)

    assert task.completed_at is not None
    assert project.progress == 100
    assert project.status == 'Completed'
    perf = db.session.get(EmployeePerformance, employee.id)
    assert perf.completed_tasks_count == 1
    assert perf.task_completion_rate == 100.0

    update_task(task.id, {'status': 'In Progress'}, employer)
    assert task.completed_at is None


def test_reassignment_recalculates_previous_assignee(employer, project, make_employee):
    first, _ = make_employee(name='First')
    second, _ = make_employee(name='Second')
    task = _task(employer, project, assigned_to=first.id)
    assert db.session.get(EmployeePerformance, first.id).total_tasks_count == 1

    update_task(task.id, {'assigned_to': second.id}, employer)
    assert db.session.get(EmployeePerformance, first.id).total_tasks_count == 0
    assert db.session.get(EmployeePerformance, second.id).total_tasks_count == 1


def test_status_change_is_logged_as_activity(employer, project):
    task = _task(employer, project)
    update_task(task.id, {'status': 'In Progress'}, employer)
    actions = [a.action for a in Activity.query.filter_by(project_id=project.id)]
    assert 'changed "Write docs" to In Progress' in actions


def test_employee_updates_own_task_status_only(employee_client, employer):
    me = employee_client.employee
    project = create_project({'name': 'P', 'team': [me.id]}, employer)
    task = _task(employer, project, assigned_to=me.id)

    resp = employee_client.patch(f'/api/tasks/{task.id}', json={'status': 'In Progress'})
    assert resp.status_code == 200
    assert resp.get_json()['task']['status'] == 'In Progress'

    resp = employee_client.patch(f'/api/tasks/{task.id}', json={'due_date': '2040-01-01'})
    assert resp.status_code == 403

    other = _task(employer, project, title='Not mine')
    assert employee_client.patch(f'/api/tasks/{other.id}', json={'status': 'Completed'}).status_code == 403


def test_checklist_toggle(employer, project):
    task = _task(employer, project, checklist=['Draft', {'text': 'Review', 'completed': True}])
    assert [i['id'] for i in task.checklist] == [1, 2]

    toggle_checklist_item(task.id, 1, employer)
    assert [i['completed'] for i in task.checklist] == [True, True]


def test_list_tasks_merges_projects_without_duplicates(employer, project):
    second = create_project({'name': 'Second'}, employer)
    a = _task(employer, project)
    b = _task(employer, second)
    ids = [t.id for t in list_tasks(project_ids=[project.id, second.id, project.id])]
    assert ids == [a.id, b.id]
    assert [t.id for t in list_tasks(project_id=second.id)] == [b.id]
    assert len(list_tasks(employer_id=employer.id)) == 2


def test_filters_and_sorting(today):
    tasks = [
        Task(id=1, project_id=1, title='Fix login bug', status='Not Started', priority='Low',
             due_date=today - timedelta(days=2)),
        Task(id=2, project_id=1, title='Design logo', status='In Progress', priority='Critical',
             due_date=today + timedelta(days=5)),
        Task(id=3, project_id=2, title='Ship release', status='Completed', priority='High',
             due_date=today - timedelta(days=9)),
    ]
    assert [t.id for t in filter_tasks(tasks, status='Overdue', today=today)] == [1]
    assert [t.id for t in filter_tasks(tasks, priority='critical', today=today)] == [2]
    assert [t.id for t in filter_tasks(tasks, q='LOG', today=today)] == [1, 2]
    assert [t.id for t in filter_tasks(tasks, project_id=2, today=today)] == [3]
    assert [t.id for t in filter_tasks(tasks, sort='prio', today=today)] == [2, 3, 1]
    assert [t.id for t in filter_tasks(tasks, sort='due_asc', today=today)] == [3, 1, 2]

    counts = status_counts(tasks, today)
    assert counts == {'Not Started': 0, 'In Progress': 1, 'Completed': 1, 'Overdue': 1}


def test_task_list_api(employer_client, employer, project):
    _task(employer, project, due_date=(date.today() - timedelta(days=1)).isoformat())
    body = employer_client.get('/api/tasks/?status=Overdue').get_json()
    assert body['total'] == 1
    assert body['tasks'][0]['effective_status'] == 'Overdue'


def test_delete_task_recalculates(employer_client, employer, project):
    done = _task(employer, project, status='Completed')
    todo = _task(employer, project)
    assert project.progress == 50

    assert employer_client.delete(f'/api/tasks/{todo.id}').status_code == 200
    db.session.expire_all()
    assert project.progress == 100
    assert project.tasks_count == 1
    assert done.status == 'Completed'


def test_malformed_assignee_and_checklist_are_rejected(employer_client, project):
    resp = employer_client.post('/api/tasks/', json={'project_id': project.id, 'title': 'A',
                                                     'assigned_to': 'abc'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'assigned_to must be a number'

    resp = employer_client.post('/api/tasks/', json={'project_id': project.id, 'title': 'B',
                                                     'checklist': ['Draft', 5]})
    assert resp.status_code == 400
    assert Task.query.filter_by(project_id=project.id).count() == 0
