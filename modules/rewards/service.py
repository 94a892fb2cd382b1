# modules/rewards/service.py
from datetime import datetime
from typing import List, Optional

from flask import current_app

from models import db, Reward, EmployeeReward, Achievement, EmployeePoints, Employee, REWARD_TYPES
from modules.common import parse_int, parse_date, get_or_raise, check_employer
from modules.errors import ValidationError
from modules.realtime.broker import publish

REWARD_STATUSES = ('active', 'inactive')
EMPLOYEE_REWARD_STATUSES = ('pending', 'approved', 'claimed')


def _apply_reward_fields(reward, data):
    if 'name' in data:
        reward.name = (data.get('name') or '').strip()
    if not reward.name:
        raise ValidationError('Reward name is required')
    for key in ('description', 'value', 'criteria'):
        if key in data:
            setattr(reward, key, data.get(key) or '')
    if 'type' in data:
        if data.get('type') not in REWARD_TYPES:
            raise ValidationError(f'Unknown reward type: {data.get("type")}')
        reward.type = data['type']
    if 'points_cost' in data:
        cost = parse_int(data.get('points_cost'), 'points_cost', 0)
        if cost < 0:
            raise ValidationError('points_cost cannot be negative')
        reward.points_cost = cost
    if 'status' in data:
        if data.get('status') not in REWARD_STATUSES:
            raise ValidationError(f'Unknown reward status: {data.get("status")}')
        reward.status = data['status']


# ==================== CATALOGUE ====================

def create_reward(data, employer_id) -> Reward:
    reward = Reward(employer_id=employer_id, type='other', status='active', points_cost=0)
    _apply_reward_fields(reward, data)
    db.session.add(reward)
    db.session.commit()
    return reward


def update_reward(reward_id, data, employer_id) -> Reward:
    reward = get_or_raise(Reward, reward_id, 'Reward')
    check_employer(reward.employer_id, employer_id, 'reward')
    _apply_reward_fields(reward, data)
    reward.updated_at = datetime.utcnow()
    db.session.commit()
    return reward


def list_rewards(employer_id, status=None) -> List[Reward]:
    query = Reward.query.filter_by(employer_id=employer_id)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(Reward.points_cost, Reward.name).all()


# ==================== AWARDED REWARDS ====================

def _new_employee_reward(employee_id, reward) -> EmployeeReward:
    awarded = EmployeeReward(
        employee_id=employee_id,
        reward_id=reward.id,
        reward_name=reward.name,
        reward_type=reward.type,
        reward_value=reward.value,
        date_awarded=datetime.utcnow(),
        status='pending',
    )
    db.session.add(awarded)
    return awarded


def assign_reward(employee_id, reward_id, employer_id) -> EmployeeReward:
    employee = get_or_raise(Employee, employee_id, 'Employee')
    check_employer(employee.employer_id, employer_id, 'employee')
    reward = get_or_raise(Reward, reward_id, 'Reward')
    check_employer(reward.employer_id, employer_id, 'reward')

    awarded = _new_employee_reward(employee.id, reward)
    db.session.commit()
    publish('employee_rewards', str(employee.id))
    return awarded


def employee_rewards(employee_id) -> List[EmployeeReward]:
    return (EmployeeReward.query.filter_by(employee_id=employee_id)
            .order_by(EmployeeReward.date_awarded.desc(), EmployeeReward.id.desc()).all())


def update_employee_reward_status(employee_reward_id, status, employer_id=None,
                                  claimed_date=None) -> EmployeeReward:
    """Claimed rewards record when they were claimed"""
    if status not in EMPLOYEE_REWARD_STATUSES:
        raise ValidationError(f'Unknown status: {status}')
    awarded = get_or_raise(EmployeeReward, employee_reward_id, 'Employee reward')
    if employer_id is not None:
        employee = get_or_raise(Employee, awarded.employee_id, 'Employee')
        check_employer(employee.employer_id, employer_id, 'reward')
    awarded.status = status
    if status == 'claimed':
        claimed = parse_date(claimed_date, 'claimed_date') if claimed_date else None
        awarded.claimed_date = (datetime.combine(claimed, datetime.min.time())
                                if claimed else datetime.utcnow())
    awarded.updated_at = datetime.utcnow()
    db.session.commit()
    publish('employee_rewards', str(awarded.employee_id))
    return awarded


def request_reward(employee: Employee, reward_id) -> EmployeeReward:
    """Employee redeems an active reward with points; the cost is deducted"""
    reward = get_or_raise(Reward, reward_id, 'Reward')
    check_employer(reward.employer_id, employee.employer_id, 'reward')
    if reward.status != 'active':
        raise ValidationError('This reward is not available')

    balance = db.session.get(EmployeePoints, employee.id)
    points = balance.points if balance else 0
    cost = reward.points_cost or 0
    if points < cost:
        raise ValidationError(f'Not enough points: {points} of {cost}')

    if cost:
        balance.points -= cost
        balance.last_updated = datetime.utcnow()
    awarded = _new_employee_reward(employee.id, reward)
    db.session.commit()

    current_app.logger.info(f'Employee {employee.id} requested reward {reward.id} for {cost} points')
    publish('employee_rewards', str(employee.id))
    publish('employee_points', str(employee.id))
    return awarded


# ==================== ACHIEVEMENTS & POINTS ====================

def create_achievement(data, employer_id) -> Achievement:
    """Record an achievement and credit its points"""
    employee = get_or_raise(Employee, parse_int(data.get('employee_id'), 'employee_id'), 'Employee')
    check_employer(employee.employer_id, employer_id, 'employee')
    name = (data.get('name') or '').strip()
    if not name:
        raise ValidationError('Achievement name is required')
    points = parse_int(data.get('points_awarded'), 'points_awarded', 0)

    achievement = Achievement(
        employee_id=employee.id,
        name=name,
        description=data.get('description') or '',
        points_awarded=points,
        date=datetime.utcnow(),
    )
    db.session.add(achievement)
    db.session.commit()
    update_employee_points(employee.id, points)
    return achievement


def employee_achievements(employee_id) -> List[Achievement]:
    return (Achievement.query.filter_by(employee_id=employee_id)
            .order_by(Achievement.date.desc(), Achievement.id.desc()).all())


def get_employee_points(employee_id) -> Optional[EmployeePoints]:
    """None until the employee has earned points"""
    return db.session.get(EmployeePoints, employee_id)


def update_employee_points(employee_id, points_to_add) -> EmployeePoints:
    record = db.session.get(EmployeePoints, employee_id)
    if record is None:
        record = EmployeePoints(employee_id=employee_id, points=points_to_add)
        db.session.add(record)
    else:
        record.points = (record.points or 0) + points_to_add
    record.last_updated = datetime.utcnow()
    db.session.commit()
    publish('employee_points', str(employee_id))
    return record
