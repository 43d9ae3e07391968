# app/core/config.py
import logging
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.logger import setup_logger


class Settings(BaseSettings):
    APP_NAME: str = "Artisan Bakery API"
    ENV: str = "dev"

    # DB
    DATABASE_URL: str = Field(default="sqlite:///./bakery.db")

    # Auth / security
    SECRET_KEY: str = "change-me"
    JWT_ALGO: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    ADMIN_EMAILS: list[str] = []

    # Order intake
    RATE_LIMIT_MAX: int = 5
    RATE_LIMIT_WINDOW_MINUTES: int = 60

    # WhatsApp hand-off after the quotation survey
    BAKERY_WHATSAPP_NUMBER: str = "27000000000"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

_level = logging.getLevelName(settings.LOG_LEVEL.upper())
if not isinstance(_level, int):
    _level = logging.INFO

# One logger per component, each with its own file
app_logger = setup_logger(
    name="app_logger",
    log_file=os.path.join(settings.LOG_DIR, "app.log"),
    level=_level,
)
intake_logger = setup_logger(
    name="intake_logger",
    log_file=os.path.join(settings.LOG_DIR, "intake.log"),
    level=_level,
)
rate_limit_logger = setup_logger(
    name="rate_limit_logger",
    log_file=os.path.join(settings.LOG_DIR, "rate_limit.log"),
    level=_level,
)
auth_logger = setup_logger(
    name="auth_logger",
    log_file=os.path.join(settings.LOG_DIR, "auth.log"),
    level=_level,
)
dashboard_logger = setup_logger(
    name="dashboard_logger",
    log_file=os.path.join(settings.LOG_DIR, "dashboard.log"),
    level=_level,
)
