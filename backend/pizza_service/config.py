# backend/pizza_service/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Signing key for bearer tokens (falls back to SECRET_KEY)
    JWT_SECRET = os.environ.get("JWT_SECRET", SECRET_KEY)
    TOKEN_TTL_SECONDS = int(os.environ.get("TOKEN_TTL_SECONDS", str(24 * 60 * 60)))

    # SQLite DB stored in backend/instance/pizza.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///pizza.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # bcrypt cost factor; tests lower this to keep hashing fast
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # External pizza factory
    FACTORY_URL = os.environ.get("FACTORY_URL", "https://pizza-factory.cs329.click")
    FACTORY_API_KEY = os.environ.get("FACTORY_API_KEY", "")
    FACTORY_TIMEOUT_SECONDS = float(os.environ.get("FACTORY_TIMEOUT_SECONDS", "10"))

    # Seeded by `flask system init`
    DEFAULT_ADMIN_NAME = os.environ.get("DEFAULT_ADMIN_NAME", "pizza admin")
    DEFAULT_ADMIN_EMAIL = os.environ.get("DEFAULT_ADMIN_EMAIL", "a@jwt.com")
    DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin")

    API_VERSION = "1.0.0"
