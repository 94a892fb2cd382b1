# models/users.py
"""
User accounts and roles.
Every login is a User; employers own the data, managers and employees
point back to their employer through employer_id.
"""
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .base import db, iso

USER_TYPES = ('employer', 'employee', 'manager')


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(150), nullable=False)
    user_type = db.Column(db.String(20), nullable=False, default='employer')  # employer, employee, manager
    employer_id = db.Column(db.Integer, db.ForeignKey('users.id'))  # set for managers and employees
    company_name = db.Column(db.String(150))
    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def relevant_employer_id(self):
        """Employer whose projects and people this user works with"""
        if self.user_type == 'employer':
            return self.id
        return self.employer_id

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'user_type': self.user_type,
            'employer_id': self.employer_id,
            'company_name': self.company_name,
            'created_at': iso(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.email} ({self.user_type})>'
