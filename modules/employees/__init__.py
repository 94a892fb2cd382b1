# modules/employees/__init__.py
"""
Employees Module
Employee directory, login accounts, CSV bulk upload and WhatsApp invites
"""

from flask import Blueprint

employees_bp = Blueprint('employees', __name__)

from . import routes  # noqa: E402, F401
