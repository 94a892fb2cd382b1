# modules/dashboard/__init__.py
"""
Dashboard Module
Summary views for the employer side and for employees
"""

from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__)

from . import routes  # noqa: E402, F401
