# modules/dashboard/service.py
from datetime import date

from flask import current_app

from models import Employee, Project, Task
from modules.performance.service import top_performers
from modules.projects.service import employee_projects, employee_activities
from modules.renegotiation.service import pending_count
from modules.rewards.service import get_employee_points
from modules.tasks.service import employee_tasks, status_counts


def employer_dashboard(user, today=None):
    today = today or date.today()
    employer_id = user.relevant_employer_id

    tasks = Task.query.join(Project).filter(Project.created_by == employer_id).all()
    completed = sum(1 for t in tasks if t.is_completed)
    recent_limit = current_app.config.get('RECENT_ACTIVITY_LIMIT', 10)
    recent = (Project.query.filter_by(created_by=employer_id)
              .order_by(Project.created_at.desc(), Project.id.desc())
              .limit(recent_limit).all())
    best = top_performers(user, 1)

    return {
        'employee_count': Employee.query.filter_by(employer_id=employer_id).count(),
        'project_count': Project.query.filter_by(created_by=employer_id).count(),
        'completed_tasks': completed,
        'pending_tasks': len(tasks) - completed,
        'overdue_tasks': sum(1 for t in tasks if t.is_overdue(today)),
        'top_performer': best[0] if best else None,
        'recent_projects': [
            {
                'id': p.id,
                'name': p.name,
                'progress': p.progress or 0,
                'status': p.status,
                'end_date': p.end_date.isoformat() if p.end_date else None,
                'team_size': len(p.members),
            }
            for p in recent
        ],
        'pending_renegotiations': pending_count(user),
    }


def employee_dashboard(employee, today=None):
    today = today or date.today()
    tasks = employee_tasks(employee.id)
    points = get_employee_points(employee.id)
    upcoming = sorted((t for t in tasks if not t.is_completed and t.due_date),
                      key=lambda t: t.due_date)

    return {
        'employee': employee.to_dict(),
        'task_counts': status_counts(tasks, today),
        'upcoming_tasks': [t.to_dict(today) for t in upcoming[:5]],
        'projects': [p.to_dict() for p in employee_projects(employee.id)],
        'points': points.points if points else 0,
        'recent_activities': [a.to_dict() for a in employee_activities(
            employee.id, current_app.config.get('RECENT_ACTIVITY_LIMIT', 10))],
    }
