# modules/realtime/listeners.py
"""
Listener definitions and the SSE generator.

A Listener pairs the broker topics it reacts to with a snapshot function
that re-reads the documents. The stream sends one snapshot on connect and
another after every matching change; idle periods get a heartbeat comment.
"""
import json
from dataclasses import dataclass
from typing import Callable, List, Tuple

from models import db, Activity, DueDateRenegotiation, Project
from .broker import ANY, broker


@dataclass
class Listener:
    name: str
    topics: List[Tuple[str, str]]
    snapshot: Callable[[], object]


def sse(payload) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def event_stream(listener: Listener, heartbeat=15.0, maxsize=None, max_events=None):
    """
    Generator for text/event-stream responses. max_events stops the stream
    after that many snapshots.
    """
    sub = broker.subscribe(listener.topics, maxsize=maxsize)
    sent = 0
    try:
        yield sse({'type': 'snapshot', 'listener': listener.name, 'data': listener.snapshot()})
        sent += 1
        while max_events is None or sent < max_events:
            notice = sub.wait(heartbeat)
            if notice is None:
                yield ": heartbeat\n\n"
                continue
            # Drop cached rows so the snapshot sees the committed change
            db.session.rollback()
            yield sse({'type': 'snapshot', 'listener': listener.name, 'data': listener.snapshot(),
                       'change': notice['collection']})
            sent += 1
    finally:
        broker.unsubscribe(sub)


def _dicts(rows):
    return [r.to_dict() for r in rows]


# ==================== LISTENERS ====================

def tasks_listener(project_id=None, project_ids=None, employer_id=None) -> Listener:
    """All tasks of an employer, one project, or several projects merged"""
    from modules.tasks.service import list_tasks

    if project_ids:
        topics = [('tasks', f'project:{pid}') for pid in project_ids]
        return Listener('tasks', topics, lambda: _dicts(list_tasks(project_ids=project_ids)))
    if project_id:
        return Listener('tasks', [('tasks', f'project:{project_id}')],
                        lambda: _dicts(list_tasks(project_id=project_id)))
    topic = f'employer:{employer_id}' if employer_id else ANY
    return Listener('tasks', [('tasks', topic)], lambda: _dicts(list_tasks(employer_id=employer_id)))


def employee_tasks_listener(employee_id) -> Listener:
    from modules.tasks.service import employee_tasks
    return Listener('employee_tasks', [('tasks', f'employee:{employee_id}')],
                    lambda: _dicts(employee_tasks(employee_id)))


def projects_listener(employer_id) -> Listener:
    def snapshot():
        return _dicts(Project.query.filter_by(created_by=employer_id)
                      .order_by(Project.created_at.desc(), Project.id.desc()).all())
    return Listener('projects', [('projects', f'employer:{employer_id}')], snapshot)


def employee_projects_listener(employee_id) -> Listener:
    from modules.projects.service import employee_projects
    return Listener('employee_projects', [('projects', f'employee:{employee_id}')],
                    lambda: _dicts(employee_projects(employee_id)))


def employee_activities_listener(employee_id, limit=10) -> Listener:
    def snapshot():
        return _dicts(Activity.query.filter_by(employee_id=employee_id)
                      .order_by(Activity.timestamp.desc(), Activity.id.desc())
                      .limit(limit).all())
    return Listener('employee_activities', [('activities', f'employee:{employee_id}')], snapshot)


def performance_listener(employee_id) -> Listener:
    from modules.performance.service import get_employee_performance
    return Listener('performance', [('performance', str(employee_id))],
                    lambda: get_employee_performance(employee_id).to_dict())


def employee_rewards_listener(employee_id) -> Listener:
    from modules.rewards.service import employee_rewards
    return Listener('employee_rewards', [('employee_rewards', str(employee_id))],
                    lambda: _dicts(employee_rewards(employee_id)))


def employee_points_listener(employee_id) -> Listener:
    from modules.rewards.service import get_employee_points

    def snapshot():
        points = get_employee_points(employee_id)
        return points.to_dict() if points else None
    return Listener('employee_points', [('employee_points', str(employee_id))], snapshot)


def tickets_listener(user) -> Listener:
    from modules.tickets.service import list_tickets, employee_tickets

    if user.user_type == 'employee':
        user_id = user.id
        return Listener('tickets', [('tickets', f'user:{user_id}')],
                        lambda: _dicts(employee_tickets(user_id)))
    employer_id = user.relevant_employer_id
    return Listener('tickets', [('tickets', f'employer:{employer_id}')],
                    lambda: _dicts(list_tickets(employer_id)))


def ticket_comments_listener(ticket_id) -> Listener:
    from modules.tickets.service import ticket_comments
    return Listener('ticket_comments', [('ticket_comments', str(ticket_id))],
                    lambda: _dicts(ticket_comments(ticket_id)))


def renegotiations_listener(employer_id) -> Listener:
    def snapshot():
        rows = (DueDateRenegotiation.query
                .join(Project, Project.id == DueDateRenegotiation.project_id)
                .filter(Project.created_by == employer_id)
                .order_by(DueDateRenegotiation.created_at.desc(), DueDateRenegotiation.id.desc())
                .all())
        return _dicts(rows)
    return Listener('renegotiations', [('renegotiations', f'employer:{employer_id}')], snapshot)
