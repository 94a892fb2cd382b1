# modules/performance/routes.py
from flask import request, jsonify

from . import performance_bp
from .service import (
    calculate_employee_performance, get_employee_performance,
    employees_performance, top_performers,
)
from models import Employee
from modules.auth.service import current_user, require_employee, role_required
from modules.common import get_or_raise, check_employer, parse_int


@performance_bp.get('/')
@role_required('employer')
def index():
    return jsonify(ok=True, employees=employees_performance(current_user()))


@performance_bp.get('/top')
@role_required('employer')
def top():
    limit = parse_int(request.args.get('limit'), 'limit')
    return jsonify(ok=True, employees=top_performers(current_user(), limit))


def _own_employee(employee_id):
    employee = get_or_raise(Employee, employee_id, 'Employee')
    check_employer(employee.employer_id, current_user().relevant_employer_id, 'employee')
    return employee


@performance_bp.get('/<int:employee_id>')
@role_required('employer')
def employee_detail(employee_id):
    _own_employee(employee_id)
    return jsonify(ok=True, performance=get_employee_performance(employee_id).to_dict())


@performance_bp.post('/<int:employee_id>/recalculate')
@role_required('employer')
def recalculate(employee_id):
    _own_employee(employee_id)
    return jsonify(ok=True, performance=calculate_employee_performance(employee_id).to_dict())


@performance_bp.get('/me')
@role_required('employee')
def mine():
    employee = require_employee()
    return jsonify(ok=True, performance=get_employee_performance(employee.id).to_dict())
