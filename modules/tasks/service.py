# modules/tasks/service.py
"""
Task service. Every write refreshes the owning project's progress and the
performance of the employees involved; those refreshes are logged on
failure and never undo the task write.
"""
from datetime import datetime, date
from typing import Iterable, List, Optional

from flask import current_app

from models import db, Task, Project, Employee, TASK_STATUSES, TASK_PRIORITIES
from modules.common import parse_date, parse_int, get_or_raise, check_employer
from modules.errors import ValidationError, PermissionDenied
from modules.performance.service import recalculate_quietly
from modules.projects.service import recalculate_project_progress, create_activity
from modules.realtime.broker import publish

# Fields an assignee may change on their own task
EMPLOYEE_EDITABLE = {'status', 'checklist', 'attachments', 'time_spent'}

PRIORITY_WEIGHT = {'Critical': 3, 'High': 2, 'Medium': 1, 'Low': 0}


def publish_task(project_id, *employee_ids, employer_id=None):
    keys = [f'project:{project_id}'] + [f'employee:{e}' for e in set(employee_ids) if e]
    if employer_id:
        keys.append(f'employer:{employer_id}')
    publish('tasks', *keys)


def _refresh_project(project_id):
    try:
        recalculate_project_progress(project_id)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error recalculating project {project_id} progress: {e}')


def _sync_tasks_count(project_id):
    project = db.session.get(Project, project_id)
    if project is not None:
        project.tasks_count = Task.query.filter_by(project_id=project_id).count()


def _normalize_checklist(items):
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValidationError('checklist must be a list')
    checklist = []
    for i, item in enumerate(items, start=1):
        if isinstance(item, str):
            item = {'text': item}
        elif not isinstance(item, dict):
            raise ValidationError('checklist items must be text or objects')
        text = str(item.get('text') or '').strip()
        if not text:
            continue
        checklist.append({'id': item.get('id') or i, 'text': text,
                          'completed': bool(item.get('completed'))})
    return checklist


def _apply_fields(task, data, employer_id):
    if 'title' in data:
        title = (data.get('title') or '').strip()
        if not title:
            raise ValidationError('Task title is required')
        task.title = title
    if 'description' in data:
        task.description = data.get('description') or ''
    if 'status' in data and data.get('status'):
        status = data['status']
        if status not in TASK_STATUSES:
            raise ValidationError(f'Unknown status: {status}')
        task.status = status
    if 'priority' in data and data.get('priority'):
        priority = str(data['priority']).capitalize()
        if priority not in TASK_PRIORITIES:
            raise ValidationError(f'Unknown priority: {data["priority"]}')
        task.priority = priority
    if 'due_date' in data:
        task.due_date = parse_date(data.get('due_date'), 'due_date')
    if 'assigned_to' in data:
        assignee_id = data.get('assigned_to') or None
        if assignee_id is not None:
            employee = get_or_raise(Employee, parse_int(assignee_id, 'assigned_to'), 'Employee')
            check_employer(employee.employer_id, employer_id, 'employee')
            assignee_id = employee.id
        task.assigned_to = assignee_id
    if 'checklist' in data:
        task.checklist = _normalize_checklist(data.get('checklist'))
    if 'attachments' in data:
        task.attachments = list(data.get('attachments') or [])
    for key in ('time_estimate', 'time_spent'):
        if key in data:
            setattr(task, key, data.get(key) or None)
    if 'depends_on_id' in data:
        task.depends_on_id = data.get('depends_on_id') or None


def _track_completion(task, previous_status):
    if task.status == 'Completed' and previous_status != 'Completed':
        task.completed_at = datetime.utcnow()
    elif task.status != 'Completed':
        task.completed_at = None


def create_task(data, user) -> Task:
    project = get_or_raise(Project, data.get('project_id'), 'Project')
    check_employer(project.created_by, user.relevant_employer_id, 'project')
    if not (data.get('title') or '').strip():
        raise ValidationError('Task title is required')

    task = Task(project_id=project.id, created_by=user.id, status='Not Started',
                priority='Medium', checklist=[], attachments=[])
    _apply_fields(task, data, project.created_by)
    _track_completion(task, None)
    db.session.add(task)
    db.session.flush()
    _sync_tasks_count(project.id)
    db.session.commit()

    publish_task(project.id, task.assigned_to, employer_id=project.created_by)
    _refresh_project(project.id)
    recalculate_quietly(task.assigned_to)
    return task


def get_task(task_id) -> Task:
    return get_or_raise(Task, task_id, 'Task')


def task_for_user(task_id, user, employee=None) -> Task:
    task = get_task(task_id)
    if user.user_type == 'employee':
        if employee is None or task.assigned_to != employee.id:
            raise PermissionDenied('This task is not assigned to you')
    else:
        check_employer(task.project.created_by, user.relevant_employer_id, 'task')
    return task


def update_task(task_id, data, user, employee=None) -> Task:
    """
    Update a task. Employees may only touch status, checklist, attachments
    and time spent on their own tasks.
    """
    task = task_for_user(task_id, user, employee)
    if user.user_type == 'employee':
        blocked = set(data) - EMPLOYEE_EDITABLE
        if blocked:
            raise PermissionDenied(f'Employees cannot change: {", ".join(sorted(blocked))}')

    previous_assignee = task.assigned_to
    previous_status = task.status
    _apply_fields(task, data, task.project.created_by)
    _track_completion(task, previous_status)
    task.updated_at = datetime.utcnow()
    db.session.commit()

    project_id = task.project_id
    publish_task(project_id, task.assigned_to, previous_assignee, employer_id=task.project.created_by)

    if task.status != previous_status:
        actor = employee if user.user_type == 'employee' else None
        try:
            create_activity(project_id, f'changed "{task.title}" to {task.status}',
                            user=user, employee=actor)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Error recording activity for task {task.id}: {e}')

    project = db.session.get(Project, project_id)
    if project is not None and project.status == 'Not started':
        project.status = 'In progress'
        project.updated_at = datetime.utcnow()
        db.session.commit()
        current_app.logger.info(f'Updated project {project_id} status to "In progress"')
    _refresh_project(project_id)

    # New assignee, the previous one when it changed or the task completed
    involved = [task.assigned_to]
    if previous_assignee != task.assigned_to:
        involved.append(previous_assignee)
    if task.status == 'Completed':
        involved.append(previous_assignee)
    recalculate_quietly(*involved)
    return task


def delete_task(task_id, user) -> dict:
    task = task_for_user(task_id, user)
    project_id = task.project_id
    assignee = task.assigned_to
    employer_id = task.project.created_by
    db.session.delete(task)
    db.session.flush()
    _sync_tasks_count(project_id)
    db.session.commit()

    publish_task(project_id, assignee, employer_id=employer_id)
    _refresh_project(project_id)
    recalculate_quietly(assignee)
    return {'success': True}


def toggle_checklist_item(task_id, item_id, user, employee=None) -> Task:
    task = task_for_user(task_id, user, employee)
    checklist = [dict(item) for item in (task.checklist or [])]
    for item in checklist:
        if str(item.get('id')) == str(item_id):
            item['completed'] = not item.get('completed')
            break
    else:
        raise ValidationError(f'Checklist item {item_id} not found')
    return update_task(task.id, {'checklist': checklist}, user, employee)


def list_tasks(project_id=None, project_ids: Optional[Iterable] = None, employer_id=None) -> List[Task]:
    """
    Tasks of one project, of several projects (merged, one entry per task),
    or all tasks of an employer when neither is given.
    """
    if project_ids:
        merged = {}
        for pid in project_ids:
            for task in Task.query.filter_by(project_id=int(pid)).all():
                merged[task.id] = task
        return sorted(merged.values(), key=lambda t: t.id)
    query = Task.query
    if project_id is not None:
        query = query.filter_by(project_id=int(project_id))
    elif employer_id is not None:
        query = query.join(Project).filter(Project.created_by == employer_id)
    return query.order_by(Task.id).all()


def employee_tasks(employee_id) -> List[Task]:
    return Task.query.filter_by(assigned_to=employee_id).order_by(Task.id).all()


# ==================== LIST FILTERS ====================

def filter_tasks(tasks, status=None, priority=None, project_id=None, assigned_to=None,
                 q=None, sort='due_asc', today=None) -> List[Task]:
    today = today or date.today()
    rows = list(tasks)

    if q:
        needle = q.lower()
        rows = [t for t in rows if needle in (t.title or '').lower()]
    if status and status != 'all':
        rows = [t for t in rows if t.effective_status(today).lower() == status.lower()]
    if priority and priority != 'all':
        rows = [t for t in rows if (t.priority or '').lower() == priority.lower()]
    if project_id:
        rows = [t for t in rows if t.project_id == int(project_id)]
    if assigned_to:
        rows = [t for t in rows if t.assigned_to == int(assigned_to)]

    if sort == 'due_desc':
        rows.sort(key=lambda t: (t.due_date is not None, t.due_date or date.min), reverse=True)
    elif sort == 'prio':
        rows.sort(key=lambda t: (-PRIORITY_WEIGHT.get(t.priority, 1), t.due_date or date.max))
    elif sort == 'newest':
        rows.sort(key=lambda t: (t.created_at or datetime.min, t.id), reverse=True)
    else:  # due_asc
        rows.sort(key=lambda t: (t.due_date is None, t.due_date or date.max, t.id))
    return rows


def status_counts(tasks, today=None) -> dict:
    counts = {status: 0 for status in TASK_STATUSES}
    for task in tasks:
        status = task.effective_status(today)
        counts[status] = counts.get(status, 0) + 1
    return counts
