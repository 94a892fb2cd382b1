# models/employees.py
"""
Employee directory, managers and stored performance metrics
"""
from datetime import datetime, date
from .base import db, iso


class Employee(db.Model):
    __tablename__ = 'employees'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    position = db.Column(db.String(120))
    department = db.Column(db.String(120))
    status = db.Column(db.String(20), default='active')
    join_date = db.Column(db.Date, default=date.today)
    avatar = db.Column(db.String(500))
    whatsapp_number = db.Column(db.String(30))

    employer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'))  # login account, when one exists

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    performance = db.relationship('EmployeePerformance', backref='employee', uselist=False,
                                  cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'position': self.position or '',
            'department': self.department or '',
            'status': self.status,
            'join_date': iso(self.join_date),
            'avatar': self.avatar,
            'whatsapp_number': self.whatsapp_number,
            'employer_id': self.employer_id,
            'user_id': self.user_id,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class Manager(db.Model):
    __tablename__ = 'managers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    position = db.Column(db.String(120))
    whatsapp_number = db.Column(db.String(30))
    employer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'position': self.position or '',
            'whatsapp_number': self.whatsapp_number,
            'employer_id': self.employer_id,
            'user_id': self.user_id,
            'created_at': iso(self.created_at),
        }


class EmployeePerformance(db.Model):
    """Last calculated metrics for one employee"""
    __tablename__ = 'employee_performance'

    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), primary_key=True)

    task_completion_rate = db.Column(db.Float, default=0.0)  # % of assigned tasks completed
    on_time_completion_rate = db.Column(db.Float, default=0.0)  # % of completed tasks finished by the due date
    average_completion_time = db.Column(db.Float, default=0.0)  # days from creation to completion
    checklist_item_completion_rate = db.Column(db.Float, default=0.0)
    progress_score = db.Column(db.Float, default=0.0)  # weighted 0-100
    completed_tasks_count = db.Column(db.Integer, default=0)
    total_tasks_count = db.Column(db.Integer, default=0)

    last_updated = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'employee_id': self.employee_id,
            'metrics': {
                'task_completion_rate': self.task_completion_rate or 0.0,
                'on_time_completion_rate': self.on_time_completion_rate or 0.0,
                'average_completion_time': self.average_completion_time or 0.0,
                'checklist_item_completion_rate': self.checklist_item_completion_rate or 0.0,
                'progress_score': self.progress_score or 0.0,
                'completed_tasks_count': self.completed_tasks_count or 0,
                'total_tasks_count': self.total_tasks_count or 0,
            },
            'last_updated': iso(self.last_updated),
        }
