# modules/tickets/service.py
from datetime import datetime
from typing import List, Optional

from models import db, Ticket, TicketComment, Employee, Project, Task
from models import TICKET_CATEGORIES, TICKET_STATUSES, TICKET_PRIORITIES
from modules.common import get_or_raise, check_employer
from modules.errors import ValidationError, PermissionDenied
from modules.realtime.broker import publish


def _publish(ticket):
    publish('tickets', f'employer:{ticket.employer_id}', f'user:{ticket.created_by}')


def _estimated_hours(value) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError('estimated_hours must be a number')
    if hours < 0:
        raise ValidationError('estimated_hours cannot be negative')
    return hours


def create_ticket(data, user) -> Ticket:
    title = (data.get('title') or '').strip()
    if not title:
        raise ValidationError('Ticket title is required')
    category = data.get('category') or 'feature'
    if category not in TICKET_CATEGORIES:
        raise ValidationError(f'Unknown category: {category}')
    priority = (data.get('priority') or 'medium').lower()
    if priority not in TICKET_PRIORITIES:
        raise ValidationError(f'Unknown priority: {priority}')

    ticket = Ticket(
        title=title,
        description=data.get('description') or '',
        category=category,
        priority=priority,
        # Only new-task tickets carry an estimate
        estimated_hours=_estimated_hours(data.get('estimated_hours')) if category == 'new-task' else None,
        status='pending',
        created_by=user.id,
        employer_id=user.relevant_employer_id,
    )
    db.session.add(ticket)
    db.session.commit()
    _publish(ticket)
    return ticket


def get_ticket(ticket_id, user) -> Ticket:
    """Visible to its author and to the employer side"""
    ticket = get_or_raise(Ticket, ticket_id, 'Ticket')
    if user.user_type == 'employee':
        if ticket.created_by != user.id:
            raise PermissionDenied('This ticket belongs to someone else')
    else:
        check_employer(ticket.employer_id, user.relevant_employer_id, 'ticket')
    return ticket


def list_tickets(employer_id, status=None, category=None) -> List[Ticket]:
    query = Ticket.query.filter_by(employer_id=employer_id)
    if status and status != 'all':
        query = query.filter_by(status=status)
    if category and category != 'all':
        query = query.filter_by(category=category)
    return query.order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()


def employee_tickets(user_id) -> List[Ticket]:
    return (Ticket.query.filter_by(created_by=user_id)
            .order_by(Ticket.created_at.desc(), Ticket.id.desc()).all())


def update_ticket_status(ticket_id, status, user, related_project_id=None, related_task_id=None) -> Ticket:
    if status not in TICKET_STATUSES:
        raise ValidationError(f'Unknown status: {status}')
    ticket = get_ticket(ticket_id, user)

    if related_project_id:
        project = get_or_raise(Project, int(related_project_id), 'Project')
        check_employer(project.created_by, ticket.employer_id, 'project')
        ticket.related_project_id = project.id
    if related_task_id:
        task = get_or_raise(Task, int(related_task_id), 'Task')
        check_employer(task.project.created_by, ticket.employer_id, 'task')
        ticket.related_task_id = task.id

    ticket.status = status
    ticket.resolved_by = user.id if status != 'pending' else None
    ticket.updated_at = datetime.utcnow()
    db.session.commit()
    _publish(ticket)
    return ticket


def add_comment(ticket_id, content, user) -> TicketComment:
    ticket = get_ticket(ticket_id, user)
    content = (content or '').strip()
    if not content:
        raise ValidationError('Comment cannot be empty')

    avatar = None
    if user.user_type == 'employee':
        employee = Employee.query.filter_by(user_id=user.id).first()
        avatar = employee.avatar if employee else None

    comment = TicketComment(
        ticket_id=ticket.id,
        user_id=user.id,
        user_name=user.full_name,
        user_avatar=avatar,
        content=content,
    )
    db.session.add(comment)
    ticket.updated_at = datetime.utcnow()
    db.session.commit()
    publish('ticket_comments', str(ticket.id))
    _publish(ticket)
    return comment


def ticket_comments(ticket_id) -> List[TicketComment]:
    return (TicketComment.query.filter_by(ticket_id=ticket_id)
            .order_by(TicketComment.created_at, TicketComment.id).all())
