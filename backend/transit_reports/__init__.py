import logging

import pymysql
pymysql.install_as_MySQLdb()
from flask import Flask, send_from_directory
from flask_cors import CORS

from .config import DevConfig
from .extensions import db, migrate, jwt, ma, bcrypt
from .utils.errors import register_error_handlers, register_jwt_handlers
from .services.storage_service import init_upload_folder
from .commands import register_commands
from .api import auth_routes, incident_routes


def create_app(config_class=DevConfig) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Local file store for incident photos
    init_upload_folder(app)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}},
        supports_credentials=True,
    )

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)
    bcrypt.init_app(app)

    # Make sure every model is registered with SQLAlchemy
    from . import models  # noqa: F401

    # Blueprints
    app.register_blueprint(auth_routes.bp, url_prefix="/api/auth")
    app.register_blueprint(incident_routes.bp, url_prefix="/api/incidents")

    # Error handlers
    register_error_handlers(app)
    register_jwt_handlers(jwt)

    register_commands(app)

    @app.get("/api/health")
    def health_check():
        return {"status": "ok", "service": "transit-reports-backend"}

    @app.get("/uploads/<path:filename>")
    def serve_upload(filename: str):
        return send_from_directory(app.config["UPLOAD_FOLDER"], filename)

    return app
