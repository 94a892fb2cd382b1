# modules/projects/routes.py
from flask import request, jsonify

from . import projects_bp
from . import service
from .constants import PROJECT_CATEGORIES, PROJECT_STATUSES, PRIORITY_LEVELS
from modules.auth.service import current_user, current_employee, login_required, role_required
from modules.common import payload
from modules.errors import PermissionDenied

# ==================== PROJECTS ====================

@projects_bp.get('/')
@login_required
def index():
    """Projects visible to the caller, with status and category filters"""
    user = current_user()
    if user.user_type == 'employee':
        employee = current_employee()
        projects = service.employee_projects(employee.id) if employee else []
    else:
        projects = service.list_projects(
            user,
            status=request.args.get('status', 'all'),
            category=request.args.get('category', 'all'),
        )
    return jsonify(ok=True, projects=[p.to_dict() for p in projects])


@projects_bp.get('/options')
@login_required
def options():
    return jsonify(ok=True, categories=PROJECT_CATEGORIES,
                   statuses=PROJECT_STATUSES, priorities=PRIORITY_LEVELS)


@projects_bp.post('/')
@role_required('employer')
def create():
    project = service.create_project(payload(), current_user())
    return jsonify(ok=True, project=project.to_dict()), 201


def _visible_project(project_id):
    user = current_user()
    if user.user_type == 'employee':
        project = service.get_project(project_id)
        employee = current_employee()
        if employee is None or employee.id not in project.team:
            raise PermissionDenied('You are not on this project team')
        return project
    return service.get_project(project_id, user)


@projects_bp.get('/<int:project_id>')
@login_required
def detail(project_id):
    """Project with its tasks and activity feed"""
    project = _visible_project(project_id)
    return jsonify(
        ok=True,
        project=project.to_dict(),
        tasks=[t.to_dict() for t in project.tasks],
        members=[m.to_dict() for m in project.members],
        activities=[a.to_dict() for a in service.project_activities(project.id)],
    )


@projects_bp.route('/<int:project_id>', methods=['PUT', 'PATCH'])
@role_required('employer')
def update(project_id):
    project = service.update_project(project_id, payload(), current_user())
    return jsonify(ok=True, project=project.to_dict())


@projects_bp.delete('/<int:project_id>')
@role_required('employer')
def delete(project_id):
    service.delete_project(project_id, current_user())
    return jsonify(ok=True)


# ==================== TEAM ====================

@projects_bp.post('/<int:project_id>/team')
@role_required('employer')
def add_member(project_id):
    data = payload()
    project = service.add_team_member(project_id, data.get('employee_id'), current_user())
    return jsonify(ok=True, team=project.team)


@projects_bp.delete('/<int:project_id>/team/<int:employee_id>')
@role_required('employer')
def remove_member(project_id, employee_id):
    project = service.remove_team_member(project_id, employee_id, current_user())
    return jsonify(ok=True, team=project.team)


# ==================== PROGRESS & ACTIVITY ====================

@projects_bp.post('/<int:project_id>/recalculate')
@role_required('employer')
def recalculate(project_id):
    service.get_project(project_id, current_user())
    project = service.recalculate_project_progress(project_id)
    return jsonify(ok=True, progress=project.progress, status=project.status)


@projects_bp.post('/recalculate')
@role_required('employer')
def recalculate_all():
    result = service.recalculate_all_projects_progress(current_user().relevant_employer_id)
    return jsonify(ok=True, **result)


@projects_bp.get('/<int:project_id>/activities')
@login_required
def activities(project_id):
    project = _visible_project(project_id)
    return jsonify(ok=True, activities=[a.to_dict() for a in service.project_activities(project.id)])


@projects_bp.post('/<int:project_id>/activities')
@login_required
def add_activity(project_id):
    project = _visible_project(project_id)
    action = (payload().get('action') or '').strip()
    if not action:
        return jsonify(ok=False, error='Action required'), 400
    user = current_user()
    employee = current_employee() if user.user_type == 'employee' else None
    activity = service.create_activity(project.id, action, user=user, employee=employee)
    return jsonify(ok=True, activity=activity.to_dict()), 201
