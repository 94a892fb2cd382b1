# modules/common.py
"""
Small helpers shared by the blueprints: request payloads, dates, ownership checks
"""
import math
from datetime import datetime, date
from typing import Optional

from flask import request

from models import db
from modules.errors import ValidationError, NotFound, PermissionDenied

DATE_FORMATS = ('%Y-%m-%d', '%m/%d/%Y', '%Y/%m/%d')


def payload() -> dict:
    """JSON body, falling back to form fields"""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def parse_date(value, field='date', required=False) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value = (value or '').strip() if isinstance(value, str) else value
    if not value:
        if required:
            raise ValidationError(f'{field} is required')
        return None
    # Accept full ISO timestamps too ("2024-05-01T00:00:00Z")
    text = str(value)[:10] if 'T' in str(value) else str(value)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            pass
    raise ValidationError(f'{field} must be a date (YYYY-MM-DD)')


def parse_int(value, field='value', default=None) -> Optional[int]:
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a number')


def parse_bool(value, default=False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def get_or_raise(model, obj_id, label=None):
    obj = db.session.get(model, obj_id) if obj_id is not None else None
    if obj is None:
        raise NotFound(f'{label or model.__name__} not found')
    return obj


def check_employer(obj_employer_id, employer_id, label='record'):
    if obj_employer_id != employer_id:
        raise PermissionDenied(f'This {label} belongs to another employer')
