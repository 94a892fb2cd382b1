# modules/realtime/__init__.py
"""
Realtime Module
Server-Sent Event listeners: a snapshot first, a fresh snapshot after every change
"""

from flask import Blueprint

realtime_bp = Blueprint('realtime', __name__)

from . import routes  # noqa: E402, F401
