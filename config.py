import os
import tempfile
from datetime import timedelta

class Config:
    # Basic Flask config
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI', 'sqlite:///workforce.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session
    SESSION_TYPE = 'filesystem'
    SESSION_FILE_DIR = os.environ.get('SESSION_FILE_DIR', 'flask_session')
    SESSION_PERMANENT = False
    SESSION_USE_SIGNER = True
    SESSION_KEY_PREFIX = 'workforce:'
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # App settings
    APP_NAME = os.environ.get('APP_NAME', 'Workforce Planner')
    APP_URL = os.environ.get('APP_URL', 'http://localhost:5000')
    ITEMS_PER_PAGE = int(os.environ.get('ITEMS_PER_PAGE', 50))

    # Dashboards
    TOP_PERFORMERS_LIMIT = int(os.environ.get('TOP_PERFORMERS_LIMIT', 5))
    RECENT_ACTIVITY_LIMIT = int(os.environ.get('RECENT_ACTIVITY_LIMIT', 10))

    # Employee CSV import
    CSV_MAX_ROWS = int(os.environ.get('CSV_MAX_ROWS', 500))
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 2 * 1024 * 1024))  # 2MB

    # Realtime listeners (Server-Sent Events)
    REALTIME_HEARTBEAT_SECONDS = float(os.environ.get('REALTIME_HEARTBEAT_SECONDS', 15))
    REALTIME_QUEUE_SIZE = int(os.environ.get('REALTIME_QUEUE_SIZE', 1000))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SESSION_FILE_DIR = os.path.join(tempfile.gettempdir(), 'workforce_test_sessions')
    LOG_LEVEL = 'WARNING'
    REALTIME_HEARTBEAT_SECONDS = 0.05
