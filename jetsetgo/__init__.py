import logging
from flask import Flask
from werkzeug.exceptions import HTTPException
from jetsetgo.extensions import db, migrate, jwt, cors
from jetsetgo.utils.api_response import APIResponse
from config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": _cors_origins(app.config.get('CORS_ORIGINS'))}})

    register_jwt_callbacks()
    register_error_handlers(app)

    # Register Blueprints
    from jetsetgo.api import register_blueprints
    register_blueprints(app)

    from jetsetgo.db_init.cli import register_commands
    register_commands(app)

    return app


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    app.logger.setLevel(level)


def _cors_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def register_jwt_callbacks():
    from jetsetgo.models.revoked_tokens import RevokedToken

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return RevokedToken.is_revoked(jwt_payload['jti'])

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return APIResponse.unauthorized('Token has been revoked')

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return APIResponse.unauthorized('Token has expired')

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return APIResponse.unauthorized(f'Invalid token: {reason}')

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return APIResponse.unauthorized('Authorization token is required')


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return APIResponse.error(e.description or e.name, status_code=e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e):
        app.logger.exception("Unhandled error")
        db.session.rollback()
        return APIResponse.error('An unexpected error occurred. Please try again later.', status_code=500)
