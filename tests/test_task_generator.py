import random
from datetime import date, timedelta

from models import Task
from modules.projects.service import create_project
from modules.projects.task_generator import (
    select_templates, pick_assignee, DEFAULT_CHECKLIST, MANAGEMENT_TEMPLATES,
)
from models import Employee


def _titles(templates):
    return [t.title for t in templates]


def test_default_templates_only_for_unknown_category():
    assert _titles(select_templates('Operations')) == _titles(MANAGEMENT_TEMPLATES)
    assert _titles(select_templates(None)) == _titles(MANAGEMENT_TEMPLATES)


def test_category_match_is_substring_and_cumulative():
    titles = _titles(select_templates('Web Development & Design'))
    assert len(titles) == 4 + 7 + 6
    assert 'Backend Development' in titles
    assert 'Wireframing' in titles
    assert 'Market Research' not in titles


def test_pick_assignee_prefers_matching_role():
    qa = Employee(id=1, name='Q', department='Quality Assurance', position='Tester')
    dev = Employee(id=2, name='D', department='Engineering', position='Developer')
    assert pick_assignee([dev, qa], 'Quality Assurance') is qa
    assert pick_assignee([dev], 'Marketing') is dev
    assert pick_assignee([], 'Marketing') is None


def _generate(employer, make_employee, **fields):
    dev, _ = make_employee(department='Engineering', position='Developer')
    qa, _ = make_employee(department='Quality Assurance', position='Tester')
    pm, _ = make_employee(department='Management', position='Project Manager')
    data = {
        'name': 'Portal', 'category': 'Development',
        'start_date': '2030-01-01', 'end_date': '2030-01-23',
        'priority': 'high', 'auto_assign': True,
        'team': [dev.id, qa.id, pm.id],
    }
    data.update(fields)
    project = create_project(data, employer)
    tasks = {t.title: t for t in Task.query.filter_by(project_id=project.id)}
    return project, tasks, (dev, qa, pm)


def test_generation_creates_tasks_and_updates_count(employer, make_employee):
    project, tasks, _ = _generate(employer, make_employee)
    assert len(tasks) == 11
    assert project.tasks_count == 11
    assert project.status == 'Not started'
    task = tasks['Project Setup']
    assert task.status == 'Not Started'
    assert task.priority == 'High'
    assert [item['text'] for item in task.checklist] == DEFAULT_CHECKLIST
    assert not any(item['completed'] for item in task.checklist)


def test_generation_spreads_due_dates(employer, make_employee):
    # 22 days over 11 templates -> 2 days each
    _, tasks, _ = _generate(employer, make_employee)
    start = date(2030, 1, 1)
    assert tasks['Project Planning'].due_date == start + timedelta(days=2)
    assert tasks['Resource Allocation'].due_date == start + timedelta(days=4)
    # Dependent tasks take their prerequisite's slot: Project Setup is 4, Backend 6
    assert tasks['Project Setup'].due_date == date(2030, 1, 11)
    assert tasks['Backend Development'].due_date == date(2030, 1, 11)
    assert tasks['API Integration'].due_date == date(2030, 1, 15)
    assert tasks['Frontend Development'].due_date == date(2030, 1, 11)


def test_due_dates_capped_at_project_end(employer, make_employee):
    _, tasks, _ = _generate(employer, make_employee, end_date='2030-01-05')
    assert max(t.due_date for t in tasks.values()) == date(2030, 1, 5)


def test_without_deadlines_everything_due_at_end(employer, make_employee):
    _, tasks, _ = _generate(employer, make_employee, set_deadlines=False)
    assert {t.due_date for t in tasks.values()} == {date(2030, 1, 23)}


def test_dependencies_recorded_when_requested(employer, make_employee):
    _, tasks, _ = _generate(employer, make_employee, create_dependencies=True)
    assert tasks['Backend Development'].depends_on_id == tasks['Project Setup'].id
    assert tasks['Testing'].depends_on_id == tasks['API Integration'].id
    assert tasks['Project Planning'].depends_on_id is None


def test_no_dependencies_by_default(employer, make_employee):
    _, tasks, _ = _generate(employer, make_employee)
    assert all(t.depends_on_id is None for t in tasks.values())


def test_assignment_follows_roles(employer, make_employee):
    random.seed(7)
    _, tasks, (dev, qa, pm) = _generate(employer, make_employee)
    assert tasks['Testing'].assigned_to == qa.id
    assert tasks['Project Planning'].assigned_to == pm.id
    assert tasks['Deployment'].assigned_to == dev.id


def test_no_generation_without_auto_assign(employer, make_employee):
    project, tasks, _ = _generate(employer, make_employee, auto_assign=False)
    assert tasks == {}
    assert project.tasks_count == 0


def test_no_generation_without_team(employer):
    project = create_project({'name': 'Brand', 'category': 'Design', 'auto_assign': True,
                              'start_date': '2030-01-01', 'end_date': '2030-01-21'}, employer)
    assert Task.query.filter_by(project_id=project.id).count() == 0
    assert project.tasks_count == 0
    assert project.status == 'Not started'
