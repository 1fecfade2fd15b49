"""Application configuration classes."""

import os

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool


load_dotenv()


class Config:
    """Base configuration."""

    # Flask
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8080"))

    # Database: DATABASE_URL takes precedence over the individual fields
    DATABASE_URL = os.getenv("DATABASE_URL")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = int(os.getenv("DB_PORT", "5432"))
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_NAME = os.getenv("DB_NAME", "postgres")
    DB_SSLMODE = os.getenv("DB_SSLMODE", "disable")
    DB_PASSWORD = os.getenv("DB_PASSWORD")
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }


class TestConfig(Config):
    """Test configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_URL = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
