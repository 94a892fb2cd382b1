# modules/rewards/__init__.py
"""
Rewards Module
Reward catalogue, awarded rewards, achievements and points
"""

from flask import Blueprint

rewards_bp = Blueprint('rewards', __name__)

from . import routes  # noqa: E402, F401
