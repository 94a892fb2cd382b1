# modules/renegotiation/__init__.py
"""
Renegotiation Module
Employees ask to move a task's due date; employers approve or reject
"""

from flask import Blueprint

renegotiation_bp = Blueprint('renegotiation', __name__)

from . import routes  # noqa: E402, F401
