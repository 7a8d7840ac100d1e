import os
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../'))
load_dotenv(os.path.join(BASE_DIR, '.env'))


class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv('PROJECT_NAME', 'HealthSync API')
    SECRET_KEY: str = os.getenv('SECRET_KEY', 'change-me-healthsync-secret-key-32b')
    API_PREFIX: str = '/api'
    BACKEND_CORS_ORIGINS: list = ['*']
    DATABASE_URL: str = Field(os.getenv('SQL_DATABASE_URL', 'sqlite:///./healthsync.db'),
                              validation_alias='SQL_DATABASE_URL')
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 60 * 60 * 24 * 7  # Token expired after 7 days
    SECURITY_ALGORITHM: str = 'HS256'
    LOGGING_CONFIG_FILE: str = os.path.join(BASE_DIR, 'logging.ini')

    # Pairing is only used for discovery unless these are switched on
    REQUIRE_PAIRING_FOR_MESSAGES: bool = os.getenv('REQUIRE_PAIRING_FOR_MESSAGES', 'false').lower() == 'true'
    REQUIRE_PAIRING_FOR_CHECKUPS: bool = os.getenv('REQUIRE_PAIRING_FOR_CHECKUPS', 'false').lower() == 'true'
    # 'reject' or 'ignore'
    CHECKUP_TERMINAL_TRANSITION: str = os.getenv('CHECKUP_TERMINAL_TRANSITION', 'reject')
    DASHBOARD_HISTORY_LIMIT: int = int(os.getenv('DASHBOARD_HISTORY_LIMIT', '7'))


settings = Settings()
