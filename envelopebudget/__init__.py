import logging

from flask import Flask, jsonify
from .extensions import db, migrate, login_manager
from .config import Config
from .errors import Unauthenticated, register_error_handlers

from .blueprints.auth.routes import auth_bp
from .blueprints.budgets.routes import budgets_bp
from .blueprints.collaborators.routes import collaborators_bp
from .blueprints.dashboard.routes import dashboard_bp
from .blueprints.envelopes.routes import envelopes_bp
from .blueprints.transactions.routes import transactions_bp


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).setLevel(level)
    app.logger.setLevel(level)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        raise Unauthenticated()

    # Ensure tables exist for a smooth first run
    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()

    register_error_handlers(app)

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(budgets_bp)
    app.register_blueprint(envelopes_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(collaborators_bp)
    app.register_blueprint(dashboard_bp)

    @app.route("/")
    def root():
        return jsonify({"ok": True, "service": "envelopebudget"})

    return app
