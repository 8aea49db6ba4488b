from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    
    ADMIN_PASSWORD has no default: building Settings without it fails.
    """
    
    # Environment
    environment: str = "development"
    debug: bool = False
    
    # Application
    app_name: str = "Shortlinks"
    app_version: str = "1.0.0"
    
    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    
    # Admin access
    admin_password: SecretStr
    auth_realm: str = "Admin Area"
    
    # Redirects
    fallback_url: str = "https://google.com"  # Target for requests to "/"
    
    # Link store
    store_backend: str = "sql"  # Options: "sql", "redis", "memory"
    database_url: str = "sqlite:///./shortlinks.db"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "link:"
    redis_index_key: str = "links:index"
    store_list_limit: int = 1000  # One page of keys per list call
    
    # Logging
    log_level: str = "INFO"
    
    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("admin_password")
    @classmethod
    def admin_password_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("ADMIN_PASSWORD must not be empty")
        return value

    @field_validator("store_list_limit")
    @classmethod
    def list_limit_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("STORE_LIST_LIMIT must be at least 1")
        return value


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings instance (singleton).
    
    Raises pydantic.ValidationError if required settings are missing.
    """
    return Settings()
