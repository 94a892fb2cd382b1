# models/time_tracking.py
from datetime import datetime, date
from .base import db, iso


class TimeEntry(db.Model):
    __tablename__ = 'time_entries'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False, index=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='SET NULL'), index=True)
    task_id = db.Column(db.Integer, db.ForeignKey('tasks.id', ondelete='SET NULL'))

    date = db.Column(db.Date, default=date.today, nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # seconds
    description = db.Column(db.Text)

    status = db.Column(db.String(20), default='pending')  # pending, approved, rejected
    rejection_reason = db.Column(db.Text)
    reviewed_by = db.Column(db.Integer, db.ForeignKey('users.id'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def hours(self):
        return round((self.duration or 0) / 3600.0, 2)

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'project_id': self.project_id,
            'task_id': self.task_id,
            'date': iso(self.date),
            'duration': self.duration,
            'hours': self.hours,
            'description': self.description or '',
            'status': self.status,
            'rejection_reason': self.rejection_reason,
            'reviewed_by': self.reviewed_by,
            'created_at': iso(self.created_at),
        }
