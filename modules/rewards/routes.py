# modules/rewards/routes.py
from flask import request, jsonify

from . import rewards_bp
from . import service
from models import REWARD_TYPES
from modules.auth.service import current_user, require_employee, role_required
from modules.common import payload
from modules.employees.service import get_employee


def _employer_id():
    return current_user().relevant_employer_id


# ==================== CATALOGUE ====================

@rewards_bp.get('/')
@role_required('employer')
def index():
    rewards = service.list_rewards(_employer_id(), status=request.args.get('status'))
    return jsonify(ok=True, rewards=[r.to_dict() for r in rewards], types=REWARD_TYPES)


@rewards_bp.post('/')
@role_required('employer')
def create():
    reward = service.create_reward(payload(), _employer_id())
    return jsonify(ok=True, reward=reward.to_dict()), 201


@rewards_bp.route('/<int:reward_id>', methods=['PUT', 'PATCH'])
@role_required('employer')
def update(reward_id):
    reward = service.update_reward(reward_id, payload(), _employer_id())
    return jsonify(ok=True, reward=reward.to_dict())


@rewards_bp.post('/<int:reward_id>/assign')
@role_required('employer')
def assign(reward_id):
    awarded = service.assign_reward(payload().get('employee_id'), reward_id, _employer_id())
    return jsonify(ok=True, employee_reward=awarded.to_dict()), 201


@rewards_bp.post('/awarded/<int:employee_reward_id>/status')
@role_required('employer')
def awarded_status(employee_reward_id):
    data = payload()
    awarded = service.update_employee_reward_status(
        employee_reward_id, data.get('status'), employer_id=_employer_id(),
        claimed_date=data.get('claimed_date'),
    )
    return jsonify(ok=True, employee_reward=awarded.to_dict())


# ==================== PER EMPLOYEE ====================

@rewards_bp.get('/employees/<int:employee_id>')
@role_required('employer')
def employee_summary(employee_id):
    employee = get_employee(employee_id, _employer_id())
    points = service.get_employee_points(employee.id)
    return jsonify(
        ok=True,
        rewards=[r.to_dict() for r in service.employee_rewards(employee.id)],
        achievements=[a.to_dict() for a in service.employee_achievements(employee.id)],
        points=points.to_dict() if points else None,
    )


@rewards_bp.post('/achievements')
@role_required('employer')
def create_achievement():
    achievement = service.create_achievement(payload(), _employer_id())
    return jsonify(ok=True, achievement=achievement.to_dict()), 201


# ==================== EMPLOYEE SIDE ====================

@rewards_bp.get('/mine')
@role_required('employee')
def mine():
    employee = require_employee()
    points = service.get_employee_points(employee.id)
    return jsonify(
        ok=True,
        available=[r.to_dict() for r in service.list_rewards(employee.employer_id, status='active')],
        rewards=[r.to_dict() for r in service.employee_rewards(employee.id)],
        achievements=[a.to_dict() for a in service.employee_achievements(employee.id)],
        points=points.to_dict() if points else None,
    )


@rewards_bp.post('/<int:reward_id>/request')
@role_required('employee')
def request_reward(reward_id):
    awarded = service.request_reward(require_employee(), reward_id)
    return jsonify(ok=True, employee_reward=awarded.to_dict()), 201
