# app.py
"""
Workforce Planner - Application Factory
Projects, tasks, employees, rewards and realtime listeners behind a JSON API
"""
import os
from flask import Flask, request, jsonify
from flask_session import Session
from werkzeug.exceptions import HTTPException
from config import Config
from models.base import db
from modules.errors import ServiceError


def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Logging
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Sessions
    os.makedirs(app.config['SESSION_FILE_DIR'], exist_ok=True)
    Session(app)

    # Database
    db.init_app(app)

    # --- Blueprints ---
    register_blueprints(app)

    # --- Errors as JSON ---
    register_error_handlers(app)

    # --- Root route ---
    @app.route('/')
    def index():
        from modules.auth.service import current_user, dashboard_path
        user = current_user()
        return jsonify(
            ok=True,
            app=app.config['APP_NAME'],
            user=user.to_dict() if user else None,
            dashboard=dashboard_path(user) if user else None,
        )

    # --- DB tables ---
    with app.app_context():
        db.create_all()

    return app


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        if e.status_code >= 500:
            app.logger.error(f'{request.method} {request.path} failed: {e.message}')
        return jsonify(ok=False, error=e.message), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if not request.path.startswith('/api') and request.path != '/':
            return e
        return jsonify(ok=False, error=e.description or e.name), e.code


def register_blueprints(app):
    """Register all module blueprints"""
    from modules.auth import auth_bp
    from modules.projects import projects_bp
    from modules.tasks import tasks_bp
    from modules.employees import employees_bp
    from modules.performance import performance_bp
    from modules.renegotiation import renegotiation_bp
    from modules.settings import settings_bp
    from modules.rewards import rewards_bp
    from modules.tickets import tickets_bp
    from modules.timetracking import timetracking_bp
    from modules.dashboard import dashboard_bp
    from modules.realtime import realtime_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(projects_bp, url_prefix='/api/projects')
    app.register_blueprint(tasks_bp, url_prefix='/api/tasks')
    app.register_blueprint(employees_bp, url_prefix='/api/employees')
    app.register_blueprint(performance_bp, url_prefix='/api/performance')
    app.register_blueprint(renegotiation_bp, url_prefix='/api/renegotiations')
    app.register_blueprint(settings_bp, url_prefix='/api/settings')
    app.register_blueprint(rewards_bp, url_prefix='/api/rewards')
    app.register_blueprint(tickets_bp, url_prefix='/api/tickets')
    app.register_blueprint(timetracking_bp, url_prefix='/api/time')
    app.register_blueprint(dashboard_bp, url_prefix='/api')
    app.register_blueprint(realtime_bp, url_prefix='/api/live')


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='0.0.0.0', port=5000)
