# modules/performance/__init__.py
"""
Performance Module
Per-employee metrics derived from assigned tasks
"""

from flask import Blueprint

performance_bp = Blueprint('performance', __name__)

from . import routes  # noqa: E402, F401
