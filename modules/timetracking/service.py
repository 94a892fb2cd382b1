# modules/timetracking/service.py
from datetime import date, datetime
from typing import Iterable, List, Optional

from models import db, TimeEntry, Employee, Project, Task
from modules.common import parse_date, parse_int, get_or_raise, check_employer
from modules.errors import ValidationError, Conflict

ENTRY_STATUSES = ('pending', 'approved', 'rejected')


def _duration_seconds(data) -> int:
    """'duration' in seconds, or 'hours' as a decimal"""
    if data.get('duration') not in (None, ''):
        seconds = parse_int(data.get('duration'), 'duration')
    elif data.get('hours') not in (None, ''):
        try:
            seconds = int(round(float(data['hours']) * 3600))
        except (TypeError, ValueError):
            raise ValidationError('hours must be a number')
    else:
        raise ValidationError('duration is required')
    if seconds <= 0:
        raise ValidationError('duration must be positive')
    if seconds > 24 * 3600:
        raise ValidationError('duration cannot exceed 24 hours')
    return seconds


def log_time(data, employee: Employee) -> TimeEntry:
    entry = TimeEntry(
        employee_id=employee.id,
        date=parse_date(data.get('date'), 'date') or date.today(),
        duration=_duration_seconds(data),
        description=(data.get('description') or '').strip(),
        status='pending',
    )
    if data.get('project_id'):
        project = get_or_raise(Project, parse_int(data['project_id'], 'project_id'), 'Project')
        check_employer(project.created_by, employee.employer_id, 'project')
        entry.project_id = project.id
    if data.get('task_id'):
        task = get_or_raise(Task, parse_int(data['task_id'], 'task_id'), 'Task')
        check_employer(task.project.created_by, employee.employer_id, 'task')
        entry.task_id = task.id
        entry.project_id = entry.project_id or task.project_id

    db.session.add(entry)
    db.session.commit()
    return entry


def employee_entries(employee_id, status=None, start=None, end=None, project_id=None) -> List[TimeEntry]:
    query = TimeEntry.query.filter_by(employee_id=employee_id)
    if status and status != 'all':
        query = query.filter_by(status=status)
    if start:
        query = query.filter(TimeEntry.date >= parse_date(start, 'start'))
    if end:
        query = query.filter(TimeEntry.date <= parse_date(end, 'end'))
    if project_id:
        query = query.filter_by(project_id=int(project_id))
    return query.order_by(TimeEntry.date.desc(), TimeEntry.id.desc()).all()


def total_hours(entries: Iterable[TimeEntry], status: Optional[str] = None) -> float:
    seconds = sum(e.duration or 0 for e in entries if status is None or e.status == status)
    return round(seconds / 3600.0, 2)


def _reviewable(entry_id, employer_id) -> TimeEntry:
    entry = get_or_raise(TimeEntry, entry_id, 'Time entry')
    employee = get_or_raise(Employee, entry.employee_id, 'Employee')
    check_employer(employee.employer_id, employer_id, 'time entry')
    if entry.status != 'pending':
        raise Conflict(f'Time entry is already {entry.status}')
    return entry


def approve(entry_id, user) -> TimeEntry:
    entry = _reviewable(entry_id, user.relevant_employer_id)
    entry.status = 'approved'
    entry.rejection_reason = None
    entry.reviewed_by = user.id
    entry.updated_at = datetime.utcnow()
    db.session.commit()
    return entry


def reject(entry_id, reason, user) -> TimeEntry:
    reason = (reason or '').strip()
    if not reason:
        raise ValidationError('A rejection reason is required')
    entry = _reviewable(entry_id, user.relevant_employer_id)
    entry.status = 'rejected'
    entry.rejection_reason = reason
    entry.reviewed_by = user.id
    entry.updated_at = datetime.utcnow()
    db.session.commit()
    return entry


def pending_for_employer(employer_id) -> List[TimeEntry]:
    return (TimeEntry.query.join(Employee, Employee.id == TimeEntry.employee_id)
            .filter(Employee.employer_id == employer_id, TimeEntry.status == 'pending')
            .order_by(TimeEntry.date, TimeEntry.id).all())
