import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
DEV_JWT_SECRET = "dev-jwt-secret"
load_dotenv(BASE_DIR / ".env")


def _flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    APP_ENV = os.getenv("APP_ENV", "development")
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'expensetracker.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET", DEV_JWT_SECRET)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    JWT_TOKEN_LOCATION = ["headers"]

    PORT = int(os.getenv("PORT", "5000"))
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    AUTO_CREATE_TABLES = _flag("AUTO_CREATE_TABLES", True)


class TestingConfig(Config):
    APP_ENV = "testing"
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    AUTO_CREATE_TABLES = True
    LOG_LEVEL = "WARNING"


class ProductionConfig(Config):
    APP_ENV = "production"
    AUTO_CREATE_TABLES = _flag("AUTO_CREATE_TABLES", False)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET")
