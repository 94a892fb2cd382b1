# modules/settings/__init__.py
"""
Settings Module
Employer settings and the managers who act for the employer
"""

from flask import Blueprint

settings_bp = Blueprint('settings', __name__)

from . import routes  # noqa: E402, F401
