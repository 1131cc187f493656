"""
Environment-aware configuration.
Secrets, token lifetimes, password hashing cost, database and media host
settings all come from the environment (.env is read if present).
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _seconds(name: str, default: int) -> timedelta:
    return timedelta(seconds=int(os.getenv(name, str(default))))


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY")
    DEBUG = False
    TESTING = False
    # CORS: comma-separated list of origins in env; cookies need credentials
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "prod")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DATABASE_URL = os.getenv("DATABASE_URL")

    # Token signing; access and refresh tokens use separate secrets
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
    ACCESS_TOKEN_EXPIRES = _seconds("ACCESS_TOKEN_EXPIRES_SECONDS", 86400)
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
    REFRESH_TOKEN_EXPIRES = _seconds("REFRESH_TOKEN_EXPIRES_SECONDS", 864000)
    COOKIE_SECURE = _flag("COOKIE_SECURE", "true")

    # argon2 work factors
    PASSWORD_HASH_TIME_COST = int(os.getenv("PASSWORD_HASH_TIME_COST", "3"))
    PASSWORD_HASH_MEMORY_COST = int(os.getenv("PASSWORD_HASH_MEMORY_COST", "65536"))
    PASSWORD_HASH_PARALLELISM = int(os.getenv("PASSWORD_HASH_PARALLELISM", "4"))

    # Registration images are staged here before being relayed to the media host
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(os.getcwd(), "public", "temp"))
    MEDIA_UPLOAD_URL = os.getenv("MEDIA_UPLOAD_URL")
    MEDIA_UPLOAD_PRESET = os.getenv("MEDIA_UPLOAD_PRESET")
    MEDIA_API_KEY = os.getenv("MEDIA_API_KEY")
    MEDIA_UPLOAD_TIMEOUT = int(os.getenv("MEDIA_UPLOAD_TIMEOUT", "30"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = BaseConfig.SECRET_KEY or "dev-secret-key"
    DATABASE_URL = BaseConfig.DATABASE_URL or "sqlite:///user-accounts.db"
    ACCESS_TOKEN_SECRET = BaseConfig.ACCESS_TOKEN_SECRET or "dev-access-secret-change-me"
    REFRESH_TOKEN_SECRET = BaseConfig.REFRESH_TOKEN_SECRET or "dev-refresh-secret-change-me"


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    DATABASE_URL = "sqlite://"
    ACCESS_TOKEN_SECRET = "test-access-secret"
    REFRESH_TOKEN_SECRET = "test-refresh-secret"
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES = timedelta(days=10)
    # cheap hashing keeps the suite fast
    PASSWORD_HASH_TIME_COST = 1
    PASSWORD_HASH_MEMORY_COST = 1024
    PASSWORD_HASH_PARALLELISM = 1
    MEDIA_UPLOAD_URL = None


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    Anything unrecognised, including an unset APP_ENV, gets ProductionConfig.
    """
    env = (name or os.getenv("APP_ENV", "prod")).lower()
    if env in ["dev", "development"]:
        return DevelopmentConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return ProductionConfig
