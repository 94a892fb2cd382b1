# modules/tasks/routes.py
from datetime import date
from flask import request, jsonify

from . import tasks_bp
from . import service
from models import TASK_STATUSES, TASK_PRIORITIES
from modules.auth.service import current_user, current_employee, require_employee, login_required, role_required
from modules.common import payload


def _parse_filters():
    return {
        'q': (request.args.get('q') or '').strip(),
        'status': request.args.get('status') or 'all',      # all|Not Started|In Progress|Completed|Overdue
        'priority': request.args.get('priority') or 'all',  # all|Low|Medium|High|Critical
        'project_id': request.args.get('project_id', type=int),
        'assigned_to': request.args.get('assigned_to', type=int),
        'sort': (request.args.get('sort') or 'due_asc').lower(),  # due_asc|due_desc|prio|newest
    }


def _rows(tasks):
    f = _parse_filters()
    today = date.today()
    rows = service.filter_tasks(tasks, today=today, **f)
    return jsonify(ok=True, tasks=[t.to_dict(today) for t in rows],
                   counts=service.status_counts(tasks, today), total=len(rows), f=f)


@tasks_bp.get('/')
@role_required('employer')
def index():
    """Tasks of the employer; ?project_ids=1&project_ids=2 merges several projects"""
    project_ids = request.args.getlist('project_ids', type=int)
    if project_ids:
        tasks = [t for t in service.list_tasks(project_ids=project_ids)
                 if t.project.created_by == current_user().relevant_employer_id]
    else:
        tasks = service.list_tasks(employer_id=current_user().relevant_employer_id)
    return _rows(tasks)


@tasks_bp.get('/mine')
@role_required('employee')
def mine():
    employee = require_employee()
    return _rows(service.employee_tasks(employee.id))


@tasks_bp.get('/options')
@login_required
def options():
    return jsonify(ok=True, statuses=TASK_STATUSES, priorities=TASK_PRIORITIES)


@tasks_bp.post('/')
@role_required('employer')
def create():
    task = service.create_task(payload(), current_user())
    return jsonify(ok=True, task=task.to_dict()), 201


def _employee_for(user):
    return current_employee() if user.user_type == 'employee' else None


@tasks_bp.get('/<int:task_id>')
@login_required
def detail(task_id):
    user = current_user()
    task = service.task_for_user(task_id, user, _employee_for(user))
    return jsonify(ok=True, task=task.to_dict())


@tasks_bp.route('/<int:task_id>', methods=['PUT', 'PATCH'])
@login_required
def update(task_id):
    user = current_user()
    task = service.update_task(task_id, payload(), user, _employee_for(user))
    return jsonify(ok=True, task=task.to_dict())


@tasks_bp.post('/<int:task_id>/checklist/<item_id>/toggle')
@login_required
def toggle_checklist(task_id, item_id):
    user = current_user()
    task = service.toggle_checklist_item(task_id, item_id, user, _employee_for(user))
    return jsonify(ok=True, checklist=task.checklist)


@tasks_bp.delete('/<int:task_id>')
@role_required('employer')
def delete(task_id):
    service.delete_task(task_id, current_user())
    return jsonify(ok=True)
