from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage
from models.profile_store import ProfileStore
from models.session_store import SessionStore
from utils.exceptions import ConfigurationError
from utils.media import HttpMediaUploader
from utils.security import build_password_hasher
from utils.sessions import AuthSessionManager, TokenSettings

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "User Accounts API",
        "version": "1.0.0",
        "description": "Registration, login, token refresh, logout and password change.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

REQUIRED_SECRETS = ("ACCESS_TOKEN_SECRET", "REFRESH_TOKEN_SECRET")


def _check_config(config):
    missing = [key for key in REQUIRED_SECRETS if not config.get(key)]
    if missing:
        raise ConfigurationError(f"Missing signing configuration: {', '.join(missing)}")


def create_app(config_name: str | None = None, media_uploader=None, clock=None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Refuses to build (ConfigurationError) when a signing secret is absent.
    `media_uploader` and `clock` can be injected, mainly for tests.
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    _check_config(app.config)

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}}, supports_credentials=True)
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)
    register_error_handlers(app)

    storage.reload(app.config.get("DATABASE_URL"))

    hasher = build_password_hasher(
        time_cost=app.config["PASSWORD_HASH_TIME_COST"],
        memory_cost=app.config["PASSWORD_HASH_MEMORY_COST"],
        parallelism=app.config["PASSWORD_HASH_PARALLELISM"],
    )
    profiles = ProfileStore(storage)
    manager_kwargs = {"clock": clock} if clock else {}
    app.extensions["password_hasher"] = hasher
    app.extensions["profile_store"] = profiles
    app.extensions["auth_manager"] = AuthSessionManager(
        profiles,
        SessionStore(storage),
        hasher,
        TokenSettings.from_config(app.config),
        **manager_kwargs,
    )
    app.extensions["media_uploader"] = media_uploader or HttpMediaUploader.from_config(app.config)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp, url_prefix="/api/v1/users")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to User Accounts API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
