# models/tickets.py
from datetime import datetime
from .base import db, iso

TICKET_CATEGORIES = ['feature', 'bug', 'improvement', 'project-creation', 'new-task', 'other']
TICKET_STATUSES = ['pending', 'ignored', 'converted-to-project', 'added-to-task']
TICKET_PRIORITIES = ['low', 'medium', 'high']


class Ticket(db.Model):
    """Employee-raised request for the employer"""
    __tablename__ = 'tickets'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(30), default='feature')
    priority = db.Column(db.String(20), default='medium')
    estimated_hours = db.Column(db.Float)  # only for new-task tickets
    status = db.Column(db.String(30), default='pending')

    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    employer_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)
    resolved_by = db.Column(db.Integer, db.ForeignKey('users.id'))
    related_project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='SET NULL'))
    related_task_id = db.Column(db.Integer, db.ForeignKey('tasks.id', ondelete='SET NULL'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    comments = db.relationship('TicketComment', backref='ticket', cascade='all, delete-orphan',
                               order_by='TicketComment.created_at')

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description or '',
            'category': self.category,
            'priority': self.priority,
            'estimated_hours': self.estimated_hours,
            'status': self.status,
            'created_by': self.created_by,
            'employer_id': self.employer_id,
            'resolved_by': self.resolved_by,
            'related_project_id': self.related_project_id,
            'related_task_id': self.related_task_id,
            'comment_count': len(self.comments),
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class TicketComment(db.Model):
    __tablename__ = 'ticket_comments'

    id = db.Column(db.Integer, primary_key=True)
    ticket_id = db.Column(db.Integer, db.ForeignKey('tickets.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    user_name = db.Column(db.String(150), nullable=False)
    user_avatar = db.Column(db.String(500))
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'ticket_id': self.ticket_id,
            'user_id': self.user_id,
            'user_name': self.user_name,
            'user_avatar': self.user_avatar,
            'content': self.content,
            'created_at': iso(self.created_at),
        }
