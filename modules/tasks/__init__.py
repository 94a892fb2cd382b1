# modules/tasks/__init__.py
"""
Tasks Module
Project tasks: assignment, status, checklists and list filters
"""

from flask import Blueprint

tasks_bp = Blueprint('tasks', __name__)

from . import routes  # noqa: E402, F401
