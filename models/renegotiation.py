# models/renegotiation.py
from datetime import datetime
from .base import db, iso

RENEGOTIATION_STATUSES = ('pending', 'approved', 'rejected')


class DueDateRenegotiation(db.Model):
    """Employee request to move a task's due date"""
    __tablename__ = 'due_date_renegotiations'

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False, index=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False, index=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='CASCADE'), index=True)

    # Denormalized for list views
    employee_name = db.Column(db.String(150))
    task_title = db.Column(db.String(200))
    project_name = db.Column(db.String(150))

    current_due_date = db.Column(db.Date)
    requested_due_date = db.Column(db.Date, nullable=False)
    reason = db.Column(db.Text, nullable=False)

    status = db.Column(db.String(20), default='pending', nullable=False)
    response_note = db.Column(db.Text, default='')

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'task_id': self.task_id,
            'employee_id': self.employee_id,
            'employee_name': self.employee_name,
            'task_title': self.task_title,
            'project_id': self.project_id,
            'project_name': self.project_name,
            'current_due_date': iso(self.current_due_date),
            'requested_due_date': iso(self.requested_due_date),
            'reason': self.reason,
            'status': self.status,
            'response_note': self.response_note or '',
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
