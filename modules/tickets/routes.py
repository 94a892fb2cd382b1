# modules/tickets/routes.py
from flask import request, jsonify

from . import tickets_bp
from . import service
from models import TICKET_CATEGORIES, TICKET_STATUSES, TICKET_PRIORITIES
from modules.auth.service import current_user, login_required, role_required
from modules.common import payload


@tickets_bp.get('/')
@login_required
def index():
    """Employer side sees every ticket of the company, employees their own"""
    user = current_user()
    if user.user_type == 'employee':
        tickets = service.employee_tickets(user.id)
    else:
        tickets = service.list_tickets(user.relevant_employer_id,
                                       status=request.args.get('status'),
                                       category=request.args.get('category'))
    return jsonify(ok=True, tickets=[t.to_dict() for t in tickets])


@tickets_bp.get('/options')
@login_required
def options():
    return jsonify(ok=True, categories=TICKET_CATEGORIES, statuses=TICKET_STATUSES,
                   priorities=TICKET_PRIORITIES)


@tickets_bp.post('/')
@login_required
def create():
    ticket = service.create_ticket(payload(), current_user())
    return jsonify(ok=True, ticket=ticket.to_dict()), 201


@tickets_bp.get('/<int:ticket_id>')
@login_required
def detail(ticket_id):
    ticket = service.get_ticket(ticket_id, current_user())
    return jsonify(ok=True, ticket=ticket.to_dict(),
                   comments=[c.to_dict() for c in service.ticket_comments(ticket.id)])


@tickets_bp.post('/<int:ticket_id>/status')
@role_required('employer')
def update_status(ticket_id):
    data = payload()
    ticket = service.update_ticket_status(
        ticket_id, data.get('status'), current_user(),
        related_project_id=data.get('related_project_id'),
        related_task_id=data.get('related_task_id'),
    )
    return jsonify(ok=True, ticket=ticket.to_dict())


@tickets_bp.post('/<int:ticket_id>/comments')
@login_required
def comment(ticket_id):
    comment = service.add_comment(ticket_id, payload().get('content'), current_user())
    return jsonify(ok=True, comment=comment.to_dict()), 201
