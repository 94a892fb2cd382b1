# modules/performance/service.py
"""
Employee performance metrics.

    completion rate   = completed / assigned * 100
    on-time rate      = completed by the due date / completed * 100
    checklist rate    = checked items / all checklist items * 100
    progress score    = 0.4 * completion + 0.3 * on-time + 0.3 * checklist
"""
from datetime import datetime
from typing import List

from flask import current_app

from models import db, Employee, EmployeePerformance, Task
from modules.common import get_or_raise
from modules.realtime.broker import publish

COMPLETION_WEIGHT = 0.4
ON_TIME_WEIGHT = 0.3
CHECKLIST_WEIGHT = 0.3


def _completed_on(task):
    finished = task.completed_at or task.updated_at or datetime.utcnow()
    return finished.date()


def compute_metrics(tasks: List[Task]) -> dict:
    """Metrics for a list of tasks; all zero when the list is empty"""
    total = len(tasks)
    completed = [t for t in tasks if t.status == 'Completed']

    completion_rate = len(completed) / total * 100 if total else 0.0

    # Tasks without a due date never count as on time
    on_time = [t for t in completed if t.due_date and _completed_on(t) <= t.due_date]
    on_time_rate = len(on_time) / len(completed) * 100 if completed else 0.0

    days = []
    for t in completed:
        finished = t.completed_at or t.updated_at
        if t.created_at and finished:
            days.append((finished - t.created_at).total_seconds() / 86400)
    average_days = sum(days) / len(completed) if completed else 0.0

    checklist_total = 0
    checklist_done = 0
    for t in tasks:
        items = t.checklist or []
        checklist_total += len(items)
        checklist_done += sum(1 for item in items if item.get('completed'))
    checklist_rate = checklist_done / checklist_total * 100 if checklist_total else 0.0

    score = (completion_rate * COMPLETION_WEIGHT
             + on_time_rate * ON_TIME_WEIGHT
             + checklist_rate * CHECKLIST_WEIGHT)

    return {
        'task_completion_rate': completion_rate,
        'on_time_completion_rate': on_time_rate,
        'average_completion_time': average_days,
        'checklist_item_completion_rate': checklist_rate,
        'progress_score': score,
        'completed_tasks_count': len(completed),
        'total_tasks_count': total,
    }


def calculate_employee_performance(employee_id) -> EmployeePerformance:
    """Recompute and store the metrics for one employee"""
    tasks = Task.query.filter_by(assigned_to=employee_id).all()
    metrics = compute_metrics(tasks)

    record = db.session.get(EmployeePerformance, employee_id)
    if record is None:
        record = EmployeePerformance(employee_id=employee_id)
        db.session.add(record)
    for key, value in metrics.items():
        setattr(record, key, value)
    record.last_updated = datetime.utcnow()
    db.session.commit()

    current_app.logger.debug(f'Performance for employee {employee_id}: score={metrics["progress_score"]:.1f}')
    publish('performance', str(employee_id))
    return record


def recalculate_quietly(*employee_ids):
    """Recalculate for each id; failures are logged, never raised"""
    for employee_id in {e for e in employee_ids if e}:
        try:
            calculate_employee_performance(employee_id)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f'Performance recalculation failed for employee {employee_id}: {e}')


def get_employee_performance(employee_id) -> EmployeePerformance:
    get_or_raise(Employee, employee_id, 'Employee')
    record = db.session.get(EmployeePerformance, employee_id)
    if record is None:
        record = calculate_employee_performance(employee_id)
    return record


def employees_performance(user) -> List[dict]:
    """Performance of every employee of the user's employer, with profile fields"""
    employer_id = user.relevant_employer_id
    if not employer_id:
        return []
    rows = []
    for employee in Employee.query.filter_by(employer_id=employer_id).order_by(Employee.name).all():
        data = get_employee_performance(employee.id).to_dict()
        data.update({
            'name': employee.name,
            'email': employee.email,
            'position': employee.position or '',
            'department': employee.department or '',
            'avatar': employee.avatar,
        })
        rows.append(data)
    return rows


def top_performers(user, limit=None) -> List[dict]:
    limit = limit or current_app.config.get('TOP_PERFORMERS_LIMIT', 5)
    rows = employees_performance(user)
    rows.sort(key=lambda r: r['metrics']['progress_score'], reverse=True)
    return rows[:limit]
