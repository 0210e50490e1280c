import os
import pathlib
from typing import Dict, List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Project root (config.py lives in campusvault/core/)
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    # App
    APP_NAME: str = Field(default='CampusVault', description='Application name')
    APP_VERSION: str = Field(default='1.0.0', description='Application version')
    ENVIRONMENT: Literal['development', 'staging', 'production', 'test'] = Field(default='development', description='Runtime environment')
    DEBUG: bool = Field(default=False, description='Debug mode')

    # Server
    HOST: str = Field(default='0.0.0.0', description='Server host')
    PORT: int = Field(default=5000, description='Server port')

    # Database
    DATABASE_URL: str = Field(default='sqlite:///./campusvault.db', description='Database connection URL')
    DATABASE_POOL_SIZE: int = Field(default=20, description='Connection pool size (non-SQLite only)')
    DATABASE_MAX_OVERFLOW: int = Field(default=10, description='Connection pool overflow (non-SQLite only)')

    # Session
    SECRET_KEY: str = Field(default="your-secret-key-change-in-production", description='Session token signing key')
    ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    SESSION_COOKIE_NAME: str = "campusvault_session"

    API_PREFIX: str = Field("/api", description="API path prefix")

    # Uploads
    UPLOAD_DIR: pathlib.Path = Field(default=BASE_DIR / 'uploads', description='Directory holding uploaded files')
    MAX_UPLOAD_SIZE: int = Field(default=10 * 1024 * 1024, description='Upload size limit in bytes')
    ALLOWED_EXTENSIONS: List[str] = Field(default=['.pdf', '.doc', '.docx', '.ppt', '.pptx'])
    UPLOAD_ADMIN_ONLY: bool = Field(default=True, description='Only admins may upload resources')

    # Branches
    DEFAULT_BRANCH: str = Field(default='CSE', description='Branch used when a request does not name one')
    BRANCH_ALIASES: Dict[str, str] = Field(
        default={'Computer Science': 'CSE', 'MAE': 'CSE'},
        description='Legacy branch names and the canonical branch they map to'
    )
    NORMALIZE_BRANCHES_ON_STARTUP: bool = False

    # Backups
    BACKUP_DIR: pathlib.Path = Field(default=BASE_DIR / 'backups', description='Backup destination directory')
    BACKUP_SCHEDULE_ENABLED: bool = False
    BACKUP_INTERVAL_HOURS: int = 24
    BACKUP_KEEP: int = Field(default=7, description='Number of scheduled backups to keep')

    # Logging
    LOG_DIR: str = 'logs'
    LOG_LEVEL: str = 'INFO'
    LOG_JSON_FORMAT: bool = False
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', case_sensitive=True, extra='ignore')

    @property
    def BASE_DIR(self) -> pathlib.Path:
        return BASE_DIR

    @property
    def is_development(self) -> bool:
        """Development environment?"""
        return self.ENVIRONMENT == 'development'

    @property
    def is_production(self) -> bool:
        """Production environment?"""
        return self.ENVIRONMENT == 'production'

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith('sqlite')


def get_settings() -> Settings:
    """Load settings from the env file matching ENVIRONMENT"""
    env = os.getenv('ENVIRONMENT', 'development')

    env_file_map = {
        'development': BASE_DIR / '.env.dev',
        'staging': BASE_DIR / '.env.staging',
        'production': BASE_DIR / '.env.prod',
    }
    env_file = env_file_map.get(env, BASE_DIR / '.env')

    return Settings(_env_file=env_file)


# Global settings instance
settings = get_settings()
