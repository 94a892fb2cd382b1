# modules/renegotiation/routes.py
from flask import request, jsonify

from . import renegotiation_bp
from . import service
from modules.auth.service import current_user, require_employee, role_required
from modules.common import payload


@renegotiation_bp.get('/')
@role_required('employer')
def index():
    requests = service.employer_requests(current_user(), status=request.args.get('status'))
    return jsonify(ok=True, requests=[r.to_dict() for r in requests])


@renegotiation_bp.post('/<int:request_id>/respond')
@role_required('employer')
def respond(request_id):
    data = payload()
    req = service.respond(request_id, data.get('status'), data.get('response_note') or '',
                          employer_id=current_user().relevant_employer_id)
    return jsonify(ok=True, request=req.to_dict())


@renegotiation_bp.get('/mine')
@role_required('employee')
def mine():
    employee = require_employee()
    return jsonify(ok=True, requests=[r.to_dict() for r in service.employee_requests(employee.id)])


@renegotiation_bp.post('/')
@role_required('employee')
def create():
    req = service.create_request(payload(), require_employee())
    return jsonify(ok=True, request=req.to_dict()), 201
