# modules/timetracking/__init__.py
"""
Time Tracking Module
Employees log time; employers approve or reject it
"""

from flask import Blueprint

timetracking_bp = Blueprint('timetracking', __name__)

from . import routes  # noqa: E402, F401
