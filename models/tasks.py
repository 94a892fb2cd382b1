# models/tasks.py
from datetime import datetime, date
from .base import db, iso

TASK_STATUSES = ['Not Started', 'In Progress', 'Completed', 'Overdue']
TASK_PRIORITIES = ['Low', 'Medium', 'High', 'Critical']


class Task(db.Model):
    __tablename__ = 'tasks'

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), default='Not Started')
    priority = db.Column(db.String(20), default='Medium')
    due_date = db.Column(db.Date)

    # Who's responsible
    assigned_to = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='SET NULL'), index=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'))

    # Free-form extras kept as documents
    checklist = db.Column(db.JSON, default=list)  # [{id, text, completed}]
    attachments = db.Column(db.JSON, default=list)  # [{id, name, size, date}]
    time_estimate = db.Column(db.String(50))
    time_spent = db.Column(db.String(50))

    # Generated tasks may wait on another task
    depends_on_id = db.Column(db.Integer, db.ForeignKey('tasks.id', ondelete='SET NULL'))

    due_date_renegotiation_status = db.Column(db.String(20))  # pending, approved, rejected

    completed_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    assignee = db.relationship('Employee', foreign_keys=[assigned_to])

    @property
    def is_completed(self):
        return (self.status or '').lower() == 'completed'

    def is_overdue(self, today=None):
        """Past its due date and not completed"""
        if not self.due_date:
            return False
        today = today or date.today()
        return self.due_date < today and not self.is_completed

    def effective_status(self, today=None):
        if self.is_overdue(today):
            return 'Overdue'
        return self.status

    def to_dict(self, today=None):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description or '',
            'project_id': self.project_id,
            'project_name': self.project.name if self.project else None,
            'assigned_to': self.assigned_to,
            'assignee_name': self.assignee.name if self.assignee else None,
            'status': self.status,
            'effective_status': self.effective_status(today),
            'priority': self.priority,
            'due_date': iso(self.due_date),
            'created_by': self.created_by,
            'checklist': list(self.checklist or []),
            'attachments': list(self.attachments or []),
            'time_estimate': self.time_estimate,
            'time_spent': self.time_spent,
            'depends_on_id': self.depends_on_id,
            'due_date_renegotiation_status': self.due_date_renegotiation_status,
            'completed_at': iso(self.completed_at),
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Task {self.id} {self.title!r} [{self.status}]>'
