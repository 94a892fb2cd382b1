# modules/renegotiation/service.py
from datetime import datetime
from typing import List

from flask import current_app

from models import db, DueDateRenegotiation, Employee, Project, Task
from modules.common import parse_date, get_or_raise, check_employer
from modules.errors import ValidationError, Conflict, PermissionDenied
from modules.realtime.broker import publish

RESPONSES = ('approved', 'rejected')


def _publish(req):
    task = db.session.get(Task, req.task_id)
    project = db.session.get(Project, req.project_id)
    employer_id = project.created_by if project else None
    publish('renegotiations', f'employee:{req.employee_id}', f'project:{req.project_id}',
            f'employer:{employer_id}')
    if task is not None:
        publish('tasks', f'project:{task.project_id}', f'employee:{task.assigned_to}',
                f'employer:{employer_id}')


def create_request(data, employee: Employee) -> DueDateRenegotiation:
    """
    File a request for one of the employee's tasks. Task title, project and
    employee name are filled in from the records when not supplied.
    """
    task = get_or_raise(Task, data.get('task_id'), 'Task')
    if task.assigned_to != employee.id:
        raise PermissionDenied('This task is not assigned to you')

    requested = parse_date(data.get('requested_due_date'), 'requested_due_date', required=True)
    reason = (data.get('reason') or '').strip()
    if not reason:
        raise ValidationError('A reason is required')

    pending = DueDateRenegotiation.query.filter_by(task_id=task.id, status='pending').first()
    if pending:
        raise Conflict('This task already has a pending renegotiation request')

    project = task.project
    req = DueDateRenegotiation(
        task_id=task.id,
        employee_id=employee.id,
        employee_name=data.get('employee_name') or employee.name,
        task_title=data.get('task_title') or task.title,
        project_id=project.id,
        project_name=data.get('project_name') or project.name,
        current_due_date=task.due_date,
        requested_due_date=requested,
        reason=reason,
        status='pending',
        response_note='',
    )
    db.session.add(req)
    task.due_date_renegotiation_status = 'pending'
    db.session.commit()

    current_app.logger.info(f'Renegotiation {req.id} filed for task {task.id} by employee {employee.id}')
    _publish(req)
    return req


def respond(request_id, status, response_note='', employer_id=None) -> DueDateRenegotiation:
    """Approve (task takes the requested date) or reject a pending request"""
    if status not in RESPONSES:
        raise ValidationError(f'Status must be one of: {", ".join(RESPONSES)}')
    req = get_or_raise(DueDateRenegotiation, request_id, 'Renegotiation request')
    if employer_id is not None:
        project = get_or_raise(Project, req.project_id, 'Project')
        check_employer(project.created_by, employer_id, 'request')
    if req.status != 'pending':
        raise Conflict(f'Request is already {req.status}')

    req.status = status
    req.response_note = response_note or ''
    req.updated_at = datetime.utcnow()

    task = db.session.get(Task, req.task_id)
    if task is not None:
        if status == 'approved':
            task.due_date = req.requested_due_date
        task.due_date_renegotiation_status = status
        task.updated_at = datetime.utcnow()
    db.session.commit()

    current_app.logger.info(f'Renegotiation {req.id} {status}')
    _publish(req)
    return req


def employer_requests(user, status=None) -> List[DueDateRenegotiation]:
    """Requests on the employer's projects, newest first"""
    employer_id = user.relevant_employer_id
    if not employer_id:
        return []
    query = (DueDateRenegotiation.query
             .join(Project, Project.id == DueDateRenegotiation.project_id)
             .filter(Project.created_by == employer_id))
    if status and status != 'all':
        query = query.filter(DueDateRenegotiation.status == status)
    return query.order_by(DueDateRenegotiation.created_at.desc(), DueDateRenegotiation.id.desc()).all()


def employee_requests(employee_id) -> List[DueDateRenegotiation]:
    return (DueDateRenegotiation.query.filter_by(employee_id=employee_id)
            .order_by(DueDateRenegotiation.created_at.desc(), DueDateRenegotiation.id.desc())
            .all())


def pending_count(user) -> int:
    return len(employer_requests(user, status='pending'))
