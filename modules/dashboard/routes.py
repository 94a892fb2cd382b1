# modules/dashboard/routes.py
from flask import jsonify

from . import dashboard_bp
from .service import employer_dashboard, employee_dashboard
from modules.auth.service import current_user, require_employee, role_required


@dashboard_bp.get('/employer/dashboard')
@role_required('employer')
def employer():
    return jsonify(ok=True, dashboard=employer_dashboard(current_user()))


@dashboard_bp.get('/employee/dashboard')
@role_required('employee')
def employee():
    return jsonify(ok=True, dashboard=employee_dashboard(require_employee()))
