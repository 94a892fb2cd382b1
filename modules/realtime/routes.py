# modules/realtime/routes.py
"""
SSE endpoints. Every stream starts with a full snapshot.
"""
from flask import request, jsonify, Response, current_app, stream_with_context

from . import realtime_bp
from . import listeners
from models import Employee, Project, Ticket
from modules.auth.service import current_user, current_employee, login_required, role_required
from modules.common import get_or_raise, check_employer
from modules.errors import PermissionDenied


def _stream(listener):
    config = current_app.config
    generate = listeners.event_stream(
        listener,
        heartbeat=config.get('REALTIME_HEARTBEAT_SECONDS', 15),
        maxsize=config.get('REALTIME_QUEUE_SIZE', 1000),
    )
    return Response(stream_with_context(generate), mimetype='text/event-stream',
                    headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'})


def _employee_in_scope(employee_id):
    """Employees may watch only themselves; the employer side any of its employees"""
    user = current_user()
    employee = get_or_raise(Employee, employee_id, 'Employee')
    if user.user_type == 'employee':
        me = current_employee()
        if me is None or me.id != employee.id:
            raise PermissionDenied('You can only listen to your own data')
    else:
        check_employer(employee.employer_id, user.relevant_employer_id, 'employee')
    return employee


# ==================== TASKS & PROJECTS ====================

@realtime_bp.get('/tasks')
@role_required('employer')
def tasks():
    """?project_id=N for one project, repeated for several"""
    employer_id = current_user().relevant_employer_id
    project_ids = request.args.getlist('project_id', type=int)
    for project_id in project_ids:
        project = get_or_raise(Project, project_id, 'Project')
        check_employer(project.created_by, employer_id, 'project')
    if len(project_ids) == 1:
        listener = listeners.tasks_listener(project_id=project_ids[0])
    else:
        listener = listeners.tasks_listener(project_ids=project_ids, employer_id=employer_id)
    return _stream(listener)


@realtime_bp.get('/projects')
@role_required('employer')
def projects():
    return _stream(listeners.projects_listener(current_user().relevant_employer_id))


@realtime_bp.get('/renegotiations')
@role_required('employer')
def renegotiations():
    return _stream(listeners.renegotiations_listener(current_user().relevant_employer_id))


# ==================== PER EMPLOYEE ====================

EMPLOYEE_LISTENERS = {
    'tasks': listeners.employee_tasks_listener,
    'projects': listeners.employee_projects_listener,
    'activities': listeners.employee_activities_listener,
    'performance': listeners.performance_listener,
    'rewards': listeners.employee_rewards_listener,
    'points': listeners.employee_points_listener,
}


@realtime_bp.get('/employees/<int:employee_id>/<kind>')
@login_required
def employee_stream(employee_id, kind):
    factory = EMPLOYEE_LISTENERS.get(kind)
    if factory is None:
        return jsonify(ok=False, error=f'Unknown listener: {kind}'), 404
    employee = _employee_in_scope(employee_id)
    return _stream(factory(employee.id))


# ==================== TICKETS ====================

@realtime_bp.get('/tickets')
@login_required
def tickets():
    return _stream(listeners.tickets_listener(current_user()))


@realtime_bp.get('/tickets/<int:ticket_id>/comments')
@login_required
def ticket_comments(ticket_id):
    user = current_user()
    ticket = get_or_raise(Ticket, ticket_id, 'Ticket')
    if user.user_type == 'employee':
        if ticket.created_by != user.id:
            raise PermissionDenied('This ticket belongs to someone else')
    else:
        check_employer(ticket.employer_id, user.relevant_employer_id, 'ticket')
    return _stream(listeners.ticket_comments_listener(ticket.id))
