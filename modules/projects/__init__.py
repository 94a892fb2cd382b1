# modules/projects/__init__.py
"""
Projects Module
Project CRUD, team membership, progress roll-up and activity feed
"""

from flask import Blueprint

projects_bp = Blueprint('projects', __name__)

from . import routes  # noqa: E402, F401
