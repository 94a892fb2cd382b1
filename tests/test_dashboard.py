from datetime import date, timedelta

from modules.projects.service import create_project
from modules.rewards.service import update_employee_points
from modules.tasks.service import create_task


def test_employer_dashboard(employer_client, employer, make_employee):
    worker, _ = make_employee(name='Wanda')
    project = create_project({'name': 'Q3 Goals', 'team': [worker.id]}, employer)
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    create_task({'project_id': project.id, 'title': 'Done', 'status': 'Completed',
                 'assigned_to': worker.id}, employer)
    create_task({'project_id': project.id, 'title': 'Late', 'due_date': yesterday,
                 'assigned_to': worker.id}, employer)

    dash = employer_client.get('/api/employer/dashboard').get_json()['dashboard']
    assert dash['employee_count'] == 1
    assert dash['project_count'] == 1
    assert (dash['completed_tasks'], dash['pending_tasks'], dash['overdue_tasks']) == (1, 1, 1)
    assert dash['top_performer']['name'] == 'Wanda'
    assert dash['recent_projects'][0] == {
        'id': project.id, 'name': 'Q3 Goals', 'progress': 50, 'status': 'In progress',
        'end_date': None, 'team_size': 1,
    }
    assert dash['pending_renegotiations'] == 0


def test_employee_dashboard(employee_client, employer):
    me = employee_client.employee
    project = create_project({'name': 'Mine', 'team': [me.id]}, employer)
    task = create_task({'project_id': project.id, 'title': 'Soon',
                        'due_date': (date.today() + timedelta(days=2)).isoformat(),
                        'assigned_to': me.id}, employer)
    update_employee_points(me.id, 20)
    employee_client.patch(f'/api/tasks/{task.id}', json={'status': 'In Progress'})

    dash = employee_client.get('/api/employee/dashboard').get_json()['dashboard']
    assert dash['task_counts']['In Progress'] == 1
    assert [t['title'] for t in dash['upcoming_tasks']] == ['Soon']
    assert [p['name'] for p in dash['projects']] == ['Mine']
    assert dash['points'] == 20
    assert dash['recent_activities'][0]['action'] == 'changed "Soon" to In Progress'


def test_dashboards_are_role_bound(employee_client, employer_client):
    assert employee_client.get('/api/employer/dashboard').status_code == 403
    assert employer_client.get('/api/employee/dashboard').status_code == 403
