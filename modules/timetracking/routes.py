# modules/timetracking/routes.py
from flask import request, jsonify

from . import timetracking_bp
from . import service
from modules.auth.service import current_user, require_employee, role_required
from modules.common import payload


@timetracking_bp.get('/mine')
@role_required('employee')
def mine():
    employee = require_employee()
    entries = service.employee_entries(
        employee.id,
        status=request.args.get('status'),
        start=request.args.get('start'),
        end=request.args.get('end'),
        project_id=request.args.get('project_id', type=int),
    )
    totals = {status: service.total_hours(entries, status) for status in service.ENTRY_STATUSES}
    totals['all'] = service.total_hours(entries)
    return jsonify(ok=True, entries=[e.to_dict() for e in entries], total_hours=totals)


@timetracking_bp.post('/')
@role_required('employee')
def log():
    entry = service.log_time(payload(), require_employee())
    return jsonify(ok=True, entry=entry.to_dict()), 201


@timetracking_bp.get('/pending')
@role_required('employer')
def pending():
    entries = service.pending_for_employer(current_user().relevant_employer_id)
    return jsonify(ok=True, entries=[e.to_dict() for e in entries],
                   total_hours=service.total_hours(entries))


@timetracking_bp.post('/<int:entry_id>/approve')
@role_required('employer')
def approve(entry_id):
    entry = service.approve(entry_id, current_user())
    return jsonify(ok=True, entry=entry.to_dict())


@timetracking_bp.post('/<int:entry_id>/reject')
@role_required('employer')
def reject(entry_id):
    entry = service.reject(entry_id, payload().get('reason'), current_user())
    return jsonify(ok=True, entry=entry.to_dict())
