# modules/tickets/__init__.py
"""
Tickets Module
Employee requests (features, bugs, new projects or tasks) and their comments
"""

from flask import Blueprint

tickets_bp = Blueprint('tickets', __name__)

from . import routes  # noqa: E402, F401
