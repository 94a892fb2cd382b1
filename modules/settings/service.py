# modules/settings/service.py
from datetime import datetime
from typing import List, Tuple

from flask import current_app

from models import db, Manager, User, EmployerSettings
from models.settings import DEFAULT_COMPANY_PROFILE, DEFAULT_NOTIFICATION_SETTINGS, DEFAULT_SYSTEM_SETTINGS
from modules.auth.service import create_account_for, normalize_email, get_user_by_email
from modules.common import get_or_raise, check_employer, parse_bool
from modules.employees.csv_utils import is_valid_email
from modules.errors import ValidationError, Conflict

SECTIONS = {
    'company_profile': DEFAULT_COMPANY_PROFILE,
    'notifications': DEFAULT_NOTIFICATION_SETTINGS,
    'system': DEFAULT_SYSTEM_SETTINGS,
}


# ==================== MANAGERS ====================

def create_manager(data, employer_id) -> Tuple[Manager, str]:
    """Manager record plus a manager login with a temporary password"""
    name = (data.get('name') or '').strip()
    email = normalize_email(data.get('email'))
    if not name:
        raise ValidationError('Name is required')
    if not is_valid_email(email):
        raise ValidationError('Invalid email format')
    if get_user_by_email(email):
        raise Conflict(f'An account already exists for {email}')

    user, temp_password = create_account_for(email, name, 'manager', employer_id)
    manager = Manager(
        name=name,
        email=email,
        position=(data.get('position') or '').strip(),
        whatsapp_number=(data.get('whatsapp_number') or '').strip() or None,
        employer_id=employer_id,
        user_id=user.id,
    )
    db.session.add(manager)
    db.session.commit()
    current_app.logger.info(f'Created manager {manager.id} for employer {employer_id}')
    return manager, temp_password


def list_managers(employer_id) -> List[Manager]:
    return Manager.query.filter_by(employer_id=employer_id).order_by(Manager.name).all()


def update_manager(manager_id, data, employer_id) -> Manager:
    manager = get_or_raise(Manager, manager_id, 'Manager')
    check_employer(manager.employer_id, employer_id, 'manager')
    for key in ('name', 'position', 'whatsapp_number'):
        if key in data:
            setattr(manager, key, (data.get(key) or '').strip())
    if not manager.name:
        raise ValidationError('Name is required')
    manager.updated_at = datetime.utcnow()

    user = db.session.get(User, manager.user_id) if manager.user_id else None
    if user is not None:
        user.full_name = manager.name
    db.session.commit()
    return manager


def delete_manager(manager_id, employer_id) -> dict:
    """Removes the record and its login"""
    manager = get_or_raise(Manager, manager_id, 'Manager')
    check_employer(manager.employer_id, employer_id, 'manager')
    user = db.session.get(User, manager.user_id) if manager.user_id else None
    db.session.delete(manager)
    if user is not None and user.user_type == 'manager':
        db.session.delete(user)
    db.session.commit()
    return {'success': True}


# ==================== SETTINGS ====================

def get_settings(employer_id) -> dict:
    record = db.session.get(EmployerSettings, employer_id)
    if record is None:
        return EmployerSettings(employer_id=employer_id).to_dict()
    return record.to_dict()


def update_settings(employer_id, data) -> dict:
    """Merge the given sections into the stored settings; unknown keys are rejected"""
    record = db.session.get(EmployerSettings, employer_id)
    if record is None:
        record = EmployerSettings(employer_id=employer_id, company_profile={}, notifications={}, system={})
        db.session.add(record)

    for section, defaults in SECTIONS.items():
        values = data.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValidationError(f'{section} must be an object')
        unknown = set(values) - set(defaults)
        if unknown:
            raise ValidationError(f'Unknown {section} settings: {", ".join(sorted(unknown))}')
        if section == 'notifications':
            values = {k: parse_bool(v) for k, v in values.items()}
        merged = dict(getattr(record, section) or {})
        merged.update(values)
        setattr(record, section, merged)

    record.updated_at = datetime.utcnow()
    db.session.commit()
    return record.to_dict()
