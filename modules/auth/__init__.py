# modules/auth/__init__.py
"""
Auth Module
Sign-up, login/logout and the role checks used by every other blueprint
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from . import routes  # noqa: E402, F401
