# modules/auth/routes.py
from flask import jsonify

from . import auth_bp
from .service import (
    register_user, authenticate, login_user, logout_user,
    current_user, login_required, dashboard_path,
)
from models import db
from modules.common import payload
from modules.errors import ValidationError


@auth_bp.post('/signup')
def signup():
    """Public sign-up creates employer accounts"""
    data = payload()
    user = register_user(
        email=data.get('email'),
        password=data.get('password'),
        full_name=data.get('full_name') or data.get('fullName'),
        user_type='employer',
        company_name=data.get('company_name') or data.get('companyName'),
    )
    login_user(user)
    return jsonify(ok=True, user=user.to_dict(), dashboard=dashboard_path(user)), 201


@auth_bp.post('/login')
def login():
    data = payload()
    user = authenticate(data.get('email'), data.get('password'))
    login_user(user)
    return jsonify(ok=True, user=user.to_dict(), dashboard=dashboard_path(user))


@auth_bp.post('/logout')
def logout():
    logout_user()
    return jsonify(ok=True)


@auth_bp.get('/me')
@login_required
def me():
    user = current_user()
    return jsonify(ok=True, user=user.to_dict(), dashboard=dashboard_path(user))


@auth_bp.post('/password')
@login_required
def change_password():
    """Replace the temporary password handed out with new accounts"""
    data = payload()
    user = current_user()
    if not user.check_password(data.get('current_password') or ''):
        raise ValidationError('Current password is incorrect')
    new_password = data.get('new_password') or ''
    if len(new_password) < 6:
        raise ValidationError('Password must be at least 6 characters')
    user.set_password(new_password)
    db.session.commit()
    return jsonify(ok=True)
