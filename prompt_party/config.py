"""Application configuration classes."""
import os


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration."""

    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///prompt_party.db")
    SQLALCHEMY_DATABASE_URI: str = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    CORS_ORIGINS: str = os.environ.get("CORS_ORIGINS", "*")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    SOCKETIO_ASYNC_MODE: str = os.environ.get("SOCKETIO_ASYNC_MODE", "eventlet")

    # Game rules
    DEFAULT_MAX_ROUNDS: int = int(os.environ.get("DEFAULT_MAX_ROUNDS", "3"))
    ROUND_DURATION: int = int(os.environ.get("ROUND_DURATION", "60"))
    VOTING_DURATION: int = int(os.environ.get("VOTING_DURATION", "30"))
    ENFORCE_DEADLINES: bool = _env_flag("ENFORCE_DEADLINES", True)
    VALIDATE_PROMPT_CONTENT: bool = _env_flag("VALIDATE_PROMPT_CONTENT", True)

    # Image generation
    OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY", "")
    IMAGE_API_BASE_URL: str = os.environ.get("IMAGE_API_BASE_URL", "https://api.openai.com")
    IMAGE_MODEL: str = os.environ.get("IMAGE_MODEL", "dall-e-3")
    IMAGE_SIZE: str = os.environ.get("IMAGE_SIZE", "1024x1024")
    IMAGE_API_TIMEOUT: float = float(os.environ.get("IMAGE_API_TIMEOUT", "60"))


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG: bool = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG: bool = False


class TestingConfig(Config):
    """Test configuration: in-memory database, no eventlet."""

    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = "sqlite://"
    SOCKETIO_ASYNC_MODE: str = "threading"
    LOG_LEVEL: str = "WARNING"
    OPENAI_API_KEY: str = "test-key"


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
