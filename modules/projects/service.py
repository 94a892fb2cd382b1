# modules/projects/service.py
"""
Project service: CRUD scoped to the relevant employer, team membership,
progress/status roll-up from tasks and the activity feed.
"""
from datetime import datetime

from flask import current_app

from models import db, Project, Task, Activity, Employee
from modules.common import parse_date, parse_bool, round_half_up, get_or_raise, check_employer
from modules.errors import ValidationError
from modules.realtime.broker import publish
from .constants import PROJECT_STATUSES, PRIORITY_LEVELS, IN_PROGRESS_TASK_STATUSES


def publish_project(project, extra_employee_ids=()):
    keys = [f'project:{project.id}', f'employer:{project.created_by}']
    keys += [f'employee:{eid}' for eid in set(project.team) | set(extra_employee_ids)]
    publish('projects', *keys)


def _team_members(team_ids, employer_id):
    if not team_ids:
        return []
    ids = [int(i) for i in team_ids]
    members = Employee.query.filter(Employee.id.in_(ids)).all()
    if len(members) != len(set(ids)):
        raise ValidationError('Team contains unknown employees')
    for m in members:
        check_employer(m.employer_id, employer_id, 'employee')
    return members


def _apply_fields(project, data):
    if 'name' in data or 'title' in data:
        name = (data.get('name') or data.get('title') or '').strip()
        if not name:
            raise ValidationError('Project name is required')
        project.name = name
    if 'description' in data:
        project.description = data.get('description') or ''
    if 'start_date' in data:
        project.start_date = parse_date(data.get('start_date'), 'start_date')
    if 'end_date' in data:
        project.end_date = parse_date(data.get('end_date'), 'end_date')
    if 'priority' in data:
        priority = (data.get('priority') or 'medium').lower()
        if priority not in PRIORITY_LEVELS:
            raise ValidationError(f'Unknown priority: {priority}')
        project.priority = priority
    if 'status' in data and data.get('status'):
        if data['status'] not in PROJECT_STATUSES:
            raise ValidationError(f'Unknown status: {data["status"]}')
        project.status = data['status']
    if 'category' in data:
        project.category = (data.get('category') or '').strip()
    if 'progress' in data and data.get('progress') is not None:
        project.progress = max(0, min(100, int(data['progress'])))

    generation = data.get('task_generation') or {}
    for flag in ('auto_assign', 'set_deadlines', 'create_dependencies'):
        if flag in generation:
            setattr(project, flag, parse_bool(generation[flag]))
        elif flag in data:
            setattr(project, flag, parse_bool(data[flag]))

    if project.start_date and project.end_date and project.end_date < project.start_date:
        raise ValidationError('end_date must not be before start_date')


def create_project(data, user):
    """Create a project for the user's employer; generates tasks when auto_assign is on"""
    employer_id = user.relevant_employer_id
    project = Project(created_by=employer_id, status='Not started', progress=0, tasks_count=0)
    data = dict(data)
    data.setdefault('name', data.get('title'))
    _apply_fields(project, data)
    project.members = _team_members(data.get('team') or [], employer_id)
    db.session.add(project)
    db.session.flush()

    create_activity(project.id, 'created the project', user=user, commit=False)
    db.session.commit()
    publish_project(project)

    if project.auto_assign:
        from .task_generator import generate_tasks_for_project
        generate_tasks_for_project(project)

    return project


def get_project(project_id, user=None):
    project = get_or_raise(Project, project_id, 'Project')
    if user is not None and user.user_type != 'employee':
        check_employer(project.created_by, user.relevant_employer_id, 'project')
    return project


def list_projects(user=None, status=None, category=None):
    """Projects of the user's employer (all projects when no user is given)"""
    query = Project.query
    if user is not None:
        employer_id = user.relevant_employer_id
        if not employer_id:
            return []
        query = query.filter_by(created_by=employer_id)
    if status and status != 'all':
        query = query.filter_by(status=status)
    if category and category != 'all':
        query = query.filter(Project.category.ilike(category))
    return query.order_by(Project.created_at.desc(), Project.id.desc()).all()


def update_project(project_id, data, user):
    project = get_project(project_id, user)
    old_team = set(project.team)
    _apply_fields(project, data)
    if 'team' in data:
        project.members = _team_members(data.get('team') or [], project.created_by)
    project.updated_at = datetime.utcnow()
    db.session.commit()
    publish_project(project, extra_employee_ids=old_team)
    return project


def delete_project(project_id, user):
    project = get_project(project_id, user)
    team = set(project.team)
    task_assignees = {t.assigned_to for t in project.tasks if t.assigned_to}
    employer_id = project.created_by
    db.session.delete(project)
    db.session.commit()
    publish('projects', f'project:{project_id}', f'employer:{employer_id}', *[f'employee:{e}' for e in team])
    publish('tasks', f'project:{project_id}', f'employer:{employer_id}',
            *[f'employee:{e}' for e in task_assignees])
    return {'success': True}


def add_team_member(project_id, employee_id, user):
    project = get_project(project_id, user)
    employee = get_or_raise(Employee, employee_id, 'Employee')
    check_employer(employee.employer_id, project.created_by, 'employee')
    if employee not in project.members:
        project.members.append(employee)
        create_activity(project.id, f'added {employee.name} to the team', user=user, commit=False)
        db.session.commit()
        publish_project(project)
    return project


def remove_team_member(project_id, employee_id, user):
    project = get_project(project_id, user)
    employee = get_or_raise(Employee, employee_id, 'Employee')
    if employee in project.members:
        project.members.remove(employee)
        create_activity(project.id, f'removed {employee.name} from the team', user=user, commit=False)
        db.session.commit()
        publish_project(project, extra_employee_ids=[employee.id])
    return project


def employee_projects(employee_id):
    """Projects whose team contains the employee"""
    return (Project.query
            .filter(Project.members.any(Employee.id == employee_id))
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all())


# ==================== PROGRESS ====================

def recalculate_project_progress(project_id):
    """
    Roll task states up into the project's progress and status.
    No tasks -> nothing changes.
    """
    project = db.session.get(Project, project_id)
    if project is None:
        return None

    tasks = Task.query.filter_by(project_id=project_id).all()
    total = len(tasks)
    if total == 0:
        return project

    completed = sum(1 for t in tasks if t.status == 'Completed')
    in_progress = sum(1 for t in tasks if t.status in IN_PROGRESS_TASK_STATUSES)
    progress = round_half_up(completed / total * 100)

    if completed == total:
        status = 'Completed'
    elif completed > 0 or in_progress > 0:
        status = 'In progress'
    else:
        status = 'Not started'

    current_app.logger.debug(
        f'Project {project_id} recalculation: total={total} completed={completed} '
        f'in_progress={in_progress} progress={progress} status={status}'
    )

    project.progress = progress
    project.status = status
    project.updated_at = datetime.utcnow()
    db.session.commit()
    publish_project(project)
    return project


def recalculate_all_projects_progress(employer_id=None):
    query = Project.query
    if employer_id:
        query = query.filter_by(created_by=employer_id)
    projects = query.all()
    current_app.logger.info(f'Recalculating progress for {len(projects)} projects')
    for project in projects:
        recalculate_project_progress(project.id)
    return {'success': True, 'count': len(projects)}


# ==================== ACTIVITY ====================

def create_activity(project_id, action, user=None, employee=None, commit=True):
    if employee is not None:
        name, avatar, employee_id = employee.name, employee.avatar, employee.id
        user_id = employee.user_id
    elif user is not None:
        name, avatar, employee_id, user_id = user.full_name, None, None, user.id
    else:
        name, avatar, employee_id, user_id = 'System', None, None, None

    activity = Activity(
        project_id=project_id,
        user_id=user_id,
        employee_id=employee_id,
        user_name=name,
        user_avatar=avatar,
        action=action,
        timestamp=datetime.utcnow(),
    )
    db.session.add(activity)
    if commit:
        db.session.commit()
    keys = [f'project:{project_id}']
    if employee_id:
        keys.append(f'employee:{employee_id}')
    publish('activities', *keys)
    return activity


def project_activities(project_id):
    return (Activity.query.filter_by(project_id=project_id)
            .order_by(Activity.timestamp.desc(), Activity.id.desc()).all())


def employee_activities(employee_id, limit=10):
    return (Activity.query.filter_by(employee_id=employee_id)
            .order_by(Activity.timestamp.desc(), Activity.id.desc())
            .limit(limit).all())
