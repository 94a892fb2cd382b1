# modules/settings/routes.py
from flask import jsonify

from . import settings_bp
from . import service
from modules.auth.service import current_user, role_required
from modules.common import payload


def _employer_id():
    return current_user().relevant_employer_id


@settings_bp.get('/')
@role_required('employer')
def index():
    return jsonify(ok=True, settings=service.get_settings(_employer_id()))


@settings_bp.route('/', methods=['PUT', 'PATCH'])
@role_required('employer', allow_manager=False)
def update():
    return jsonify(ok=True, settings=service.update_settings(_employer_id(), payload()))


# ==================== MANAGERS ====================

@settings_bp.get('/managers')
@role_required('employer')
def managers():
    return jsonify(ok=True, managers=[m.to_dict() for m in service.list_managers(_employer_id())])


@settings_bp.post('/managers')
@role_required('employer', allow_manager=False)
def create_manager():
    manager, temp_password = service.create_manager(payload(), _employer_id())
    return jsonify(ok=True, manager=manager.to_dict(), temp_password=temp_password,
                   account_created=bool(temp_password)), 201


@settings_bp.route('/managers/<int:manager_id>', methods=['PUT', 'PATCH'])
@role_required('employer', allow_manager=False)
def update_manager(manager_id):
    manager = service.update_manager(manager_id, payload(), _employer_id())
    return jsonify(ok=True, manager=manager.to_dict())


@settings_bp.delete('/managers/<int:manager_id>')
@role_required('employer', allow_manager=False)
def delete_manager(manager_id):
    service.delete_manager(manager_id, _employer_id())
    return jsonify(ok=True)
