# preference_center/core/settings.py
from enum import Enum

from pydantic_settings import BaseSettings


class LogLevel(str, Enum):
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


class Region(str, Enum):
    US = "us"
    EU = "eu"


class Settings(BaseSettings):
    PROJECT_NAME: str = "Email Preference Center"
    PROJECT_VERSION: str = "0.1.0"

    # General App Settings
    LOG_LEVEL: LogLevel = LogLevel.INFO
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    # Base URL customers reach the form on; used to build preference links
    PUBLIC_BASE_URL: str = "http://localhost:3000"
    # Where the Streamlit front-end finds this service
    PREFERENCES_API_URL: str = "http://localhost:3000"

    # Customer.io settings
    CUSTOMERIO_APP_API_KEY: str = ""
    CUSTOMERIO_CDP_API_KEY: str = ""
    CUSTOMERIO_REGION: Region = Region.US
    CUSTOMERIO_TIMEOUT_SECONDS: float = 30.0

    class Config:
        case_sensitive = True
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


_settings_instance = None


def get_settings() -> Settings:
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
