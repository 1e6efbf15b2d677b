# backend/navguard/__init__.py
from flask import Flask, jsonify, request

from .config import Config
from .extensions import db, migrate
from .navigation import ROUTES, validate_route_table
from .permissions import get_all_permission_slugs


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Route declarations must only reference catalog slugs; fail at startup, not at render.
    if app.config.get("ROUTE_TABLE") is None:
        app.config["ROUTE_TABLE"] = ROUTES
    validate_route_table(app.config["ROUTE_TABLE"], get_all_permission_slugs())

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.auth import auth_bp
    from .routes.navigation import navigation_bp
    from .routes.permissions import permissions_bp
    from .routes.roles import roles_bp
    from .routes.users import users_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(navigation_bp)
    app.register_blueprint(permissions_bp)
    app.register_blueprint(roles_bp)
    app.register_blueprint(users_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ALLOWED_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    @app.errorhandler(500)
    def internal_error(e):
        # Flask has already logged the traceback.
        return jsonify({"error": "Internal server error"}), 500

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
