# models/settings.py
from datetime import datetime
from .base import db, iso

DEFAULT_COMPANY_PROFILE = {
    'name': '',
    'industry': '',
    'size': '',
    'website': '',
    'email': '',
    'phone': '',
    'address': '',
    'logo': '',
}

DEFAULT_NOTIFICATION_SETTINGS = {
    'email_notifications': True,
    'project_updates': True,
    'task_assignments': True,
    'time_approvals': True,
    'employee_activity': False,
    'reward_activity': True,
    'weekly_reports': True,
    'monthly_reports': True,
}

DEFAULT_SYSTEM_SETTINGS = {
    'time_format': '12h',
    'date_format': 'MM/DD/YYYY',
    'timezone': 'America/Los_Angeles',
    'language': 'English',
    'data_retention': '1 year',
    'auto_logout': '30 minutes',
}


class EmployerSettings(db.Model):
    __tablename__ = 'employer_settings'

    employer_id = db.Column(db.Integer, db.ForeignKey('users.id'), primary_key=True)
    company_profile = db.Column(db.JSON, default=dict)
    notifications = db.Column(db.JSON, default=dict)
    system = db.Column(db.JSON, default=dict)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'employer_id': self.employer_id,
            'company_profile': {**DEFAULT_COMPANY_PROFILE, **(self.company_profile or {})},
            'notifications': {**DEFAULT_NOTIFICATION_SETTINGS, **(self.notifications or {})},
            'system': {**DEFAULT_SYSTEM_SETTINGS, **(self.system or {})},
            'updated_at': iso(self.updated_at),
        }
