# models/projects.py
from datetime import datetime
from .base import db, iso

# Association table: which employees are on a project team
project_members = db.Table(
    'project_members',
    db.Column('project_id', db.Integer, db.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
    db.Column('employee_id', db.Integer, db.ForeignKey('employees.id', ondelete='CASCADE'), primary_key=True),
)


class Project(db.Model):
    __tablename__ = 'projects'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)

    # Dates
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)

    # Status and Progress
    progress = db.Column(db.Integer, default=0)  # Recalculated from tasks
    status = db.Column(db.String(30), default='Not started')  # Not started, In progress, Completed, On hold
    priority = db.Column(db.String(20), default='medium')  # low, medium, high, critical
    category = db.Column(db.String(80), default='')

    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    tasks_count = db.Column(db.Integer, default=0)

    # Task generation options
    auto_assign = db.Column(db.Boolean, default=False)
    set_deadlines = db.Column(db.Boolean, default=True)
    create_dependencies = db.Column(db.Boolean, default=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    members = db.relationship('Employee', secondary=project_members, backref='projects', order_by='Employee.id')
    tasks = db.relationship('Task', backref='project', cascade='all, delete-orphan', order_by='Task.id')
    activities = db.relationship('Activity', backref='project', cascade='all, delete-orphan')

    @property
    def team(self):
        return [m.id for m in self.members]

    @property
    def duration_days(self):
        if not (self.start_date and self.end_date):
            return 0
        return (self.end_date - self.start_date).days

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'start_date': iso(self.start_date),
            'end_date': iso(self.end_date),
            'progress': self.progress or 0,
            'status': self.status,
            'priority': self.priority,
            'category': self.category or '',
            'team': self.team,
            'created_by': self.created_by,
            'tasks_count': self.tasks_count or 0,
            'task_generation': {
                'auto_assign': bool(self.auto_assign),
                'set_deadlines': bool(self.set_deadlines),
                'create_dependencies': bool(self.create_dependencies),
            },
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class Activity(db.Model):
    """Project activity feed entry"""
    __tablename__ = 'activities'

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id', ondelete='SET NULL'), index=True)  # set when the actor is an employee
    user_name = db.Column(db.String(150), nullable=False)
    user_avatar = db.Column(db.String(500))
    action = db.Column(db.String(300), nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'project_id': self.project_id,
            'user_id': self.user_id,
            'employee_id': self.employee_id,
            'user_name': self.user_name,
            'user_avatar': self.user_avatar,
            'action': self.action,
            'timestamp': iso(self.timestamp),
        }
