import logging
from typing import Annotated, List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="Grammar Up")
    app_description: str = Field(default="English grammar lessons and exercises")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)

    # Database Configuration
    # database_url wins over the individual parts when set
    database_url: Optional[str] = Field(default=None)
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="grammar-up")
    db_username: str = Field(default="postgres")
    db_password: str = Field(default="postgres")

    # Security Settings
    # Comma-separated in the environment
    cors_allowed_origins: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:3000"]
    )

    # JWT Configuration (tokens are issued by the identity provider)
    jwt_secret: str = Field(default="your-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_user_expiration: int = Field(default=7)
    jwt_issuer: Optional[str] = Field(default=None)

    # Redis / rate limiting
    redis_url: str = Field(default="redis://localhost:6379")
    rate_limit_storage_uri: Optional[str] = Field(default=None)
    redis_rate_limit: str = Field(default="100/minute")
    ai_tutor_rate_limit: str = Field(default="3/day")

    # AI Service
    ai_api_key: str = Field(default="")
    ai_api_endpoint: str = Field(default="")
    ai_model: str = Field(default="gpt-4o-mini")
    translation_check_timeout: float = Field(default=20.0)

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # Attempt history
    attempts_page_size: int = Field(default=10)
    session_window_seconds: int = Field(default=3600)

    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:3000"])

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    @property
    def limiter_storage_uri(self) -> str:
        return self.rate_limit_storage_uri or self.redis_url

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        return Settings()
    except ValidationError as e:
        logger.error(f"Invalid settings: {e}")
        raise


settings = load_settings()
