import pytest

from modules.errors import ValidationError, PermissionDenied
from modules.projects.service import create_project
from modules.tickets.service import (
    create_ticket, list_tickets, employee_tickets, update_ticket_status, add_comment, ticket_comments,
)
from models import db, User


@pytest.fixture
def employee_user(employee):
    return db.session.get(User, employee.user_id)


def test_estimated_hours_only_for_new_task(employee_user):
    bug = create_ticket({'title': 'Crash', 'category': 'bug', 'estimated_hours': 4}, employee_user)
    task = create_ticket({'title': 'Add export', 'category': 'new-task', 'estimated_hours': '6.5'},
                         employee_user)
    assert bug.estimated_hours is None
    assert task.estimated_hours == 6.5
    assert bug.status == 'pending'
    assert bug.employer_id == employee_user.employer_id


def test_ticket_validation(employee_user):
    with pytest.raises(ValidationError):
        create_ticket({'title': 'x', 'category': 'wish'}, employee_user)
    with pytest.raises(ValidationError):
        create_ticket({'title': 'x', 'priority': 'urgent'}, employee_user)
    with pytest.raises(ValidationError):
        create_ticket({'title': ''}, employee_user)


def test_status_update_links_project(employer, employee_user):
    ticket = create_ticket({'title': 'New portal', 'category': 'project-creation'}, employee_user)
    project = create_project({'name': 'Portal'}, employer)

    update_ticket_status(ticket.id, 'converted-to-project', employer, related_project_id=project.id)
    assert ticket.status == 'converted-to-project'
    assert ticket.related_project_id == project.id
    assert ticket.resolved_by == employer.id

    with pytest.raises(ValidationError):
        update_ticket_status(ticket.id, 'done', employer)


def test_listing(employer, employee_user):
    a = create_ticket({'title': 'A'}, employee_user)
    b = create_ticket({'title': 'B', 'category': 'bug'}, employee_user)
    update_ticket_status(a.id, 'ignored', employer)

    assert [t.id for t in list_tickets(employer.id, status='pending')] == [b.id]
    assert [t.title for t in list_tickets(employer.id, category='bug')] == ['B']
    assert {t.id for t in employee_tickets(employee_user.id)} == {a.id, b.id}


def test_comments_carry_author(employer, employee_user, employee):
    employee.avatar = 'https://img.test/eve.png'
    ticket = create_ticket({'title': 'A'}, employee_user)
    add_comment(ticket.id, 'Any news?', employee_user)
    add_comment(ticket.id, 'Looking into it', employer)

    comments = ticket_comments(ticket.id)
    assert [(c.user_name, c.content) for c in comments] == [
        (employee_user.full_name, 'Any news?'), ('Bea Boss', 'Looking into it')]
    assert comments[0].user_avatar == 'https://img.test/eve.png'
    assert comments[1].user_avatar is None
    assert ticket.to_dict()['comment_count'] == 2

    with pytest.raises(ValidationError):
        add_comment(ticket.id, '   ', employer)


def test_other_employee_cannot_see_ticket(app, employee_user, make_employee):
    ticket = create_ticket({'title': 'Private'}, employee_user)
    nosy, password = make_employee(name='Nosy')
    client = app.test_client()
    client.post('/api/auth/login', json={'email': nosy.email, 'password': password})
    assert client.get(f'/api/tickets/{ticket.id}').status_code == 403


def test_employee_cannot_change_status(employee_client):
    resp = employee_client.post('/api/tickets/', json={'title': 'Dark mode', 'category': 'feature'})
    ticket_id = resp.get_json()['ticket']['id']
    assert employee_client.post(f'/api/tickets/{ticket_id}/status', json={'status': 'ignored'}).status_code == 403
    assert len(employee_client.get('/api/tickets/').get_json()['tickets']) == 1


def test_unknown_ticket_permission(other_employer, employee_user):
    ticket = create_ticket({'title': 'A'}, employee_user)
    with pytest.raises(PermissionDenied):
        update_ticket_status(ticket.id, 'ignored', other_employer)
