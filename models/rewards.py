# models/rewards.py
"""
Rewards catalogue, awarded rewards, achievements and the points ledger
"""
from datetime import datetime
from .base import db, iso

REWARD_TYPES = ['monetary', 'time-off', 'development', 'team', 'other']


class Reward(db.Model):
    __tablename__ = 'rewards'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    type = db.Column(db.String(20), default='other')
    value = db.Column(db.String(100))  # "$100", "1 day", ...
    points_cost = db.Column(db.Integer, default=0)
    criteria = db.Column(db.Text)
    status = db.Column(db.String(20), default='active')  # active, inactive
    employer_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'type': self.type,
            'value': self.value or '',
            'points_cost': self.points_cost or 0,
            'criteria': self.criteria or '',
            'status': self.status,
            'employer_id': self.employer_id,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class EmployeeReward(db.Model):
    __tablename__ = 'employee_rewards'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False, index=True)
    reward_id = db.Column(db.Integer, db.ForeignKey('rewards.id'), nullable=False)

    # Copied from the reward at award time
    reward_name = db.Column(db.String(150))
    reward_type = db.Column(db.String(20))
    reward_value = db.Column(db.String(100))

    date_awarded = db.Column(db.DateTime, default=datetime.utcnow)
    status = db.Column(db.String(20), default='pending')  # pending, approved, claimed
    claimed_date = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'reward_id': self.reward_id,
            'reward_name': self.reward_name,
            'reward_type': self.reward_type,
            'reward_value': self.reward_value,
            'date_awarded': iso(self.date_awarded),
            'status': self.status,
            'claimed_date': iso(self.claimed_date),
        }


class Achievement(db.Model):
    __tablename__ = 'achievements'

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    points_awarded = db.Column(db.Integer, default=0)
    date = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'employee_id': self.employee_id,
            'name': self.name,
            'description': self.description or '',
            'points_awarded': self.points_awarded or 0,
            'date': iso(self.date),
        }


class EmployeePoints(db.Model):
    __tablename__ = 'employee_points'

    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), primary_key=True)
    points = db.Column(db.Integer, default=0, nullable=False)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'employee_id': self.employee_id,
            'points': self.points,
            'last_updated': iso(self.last_updated),
        }
