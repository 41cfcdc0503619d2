from flask import Flask
from werkzeug.exceptions import HTTPException, InternalServerError
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite:///repairdesk.db')
    app.config['DEFAULT_USER_NAME'] = os.getenv('DEFAULT_USER_NAME', 'Front Desk')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')
    app.config['TICKET_PAGE_SIZE'] = int(os.getenv('TICKET_PAGE_SIZE', '25'))

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    from .models.ticket import Base
    from .models import technician  # noqa: F401  register table before create_all
    Base.metadata.create_all(db_engine)

    @app.teardown_appcontext
    def remove_session(exc=None):
        SessionLocal.remove()

    jwt.init_app(app)

    # Templates: one rendering unit per page, built once
    from .utils.rendering import TemplateRegistry, register_filters
    register_filters(app.jinja_env)
    app.extensions['repairdesk.templates'] = TemplateRegistry.build(app.jinja_env)
    app.logger.info('Loaded %d page templates', len(app.extensions['repairdesk.templates'].units))

    from .routes.dashboard import dash_bp
    from .routes.tickets import tickets_bp
    from .routes.technicians import tech_bp
    from .routes.api import api_bp
    app.register_blueprint(dash_bp)
    app.register_blueprint(tickets_bp, url_prefix='/tickets')
    app.register_blueprint(tech_bp, url_prefix='/technician')
    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handler; plain text so htmx targets never receive markup from a failure
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            if isinstance(e, InternalServerError):
                return 'Internal server error', 500, {'Content-Type': 'text/plain; charset=utf-8'}
            return e.description or e.name, e.code, {'Content-Type': 'text/plain; charset=utf-8'}
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return 'Internal server error', 500, {'Content-Type': 'text/plain; charset=utf-8'}

    return app


def get_db():
    return SessionLocal()
