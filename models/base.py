# models/base.py
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def iso(value):
    """Date/datetime -> ISO string for JSON documents (None stays None)"""
    return value.isoformat() if value else None
