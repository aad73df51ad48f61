"""
Configuration management using Pydantic settings.
Handles database URL, JWT secrets, storage and identity options from environment variables.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache
import os


DEVELOPMENT_JWT_SECRET = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings with Docker environment variable support."""
    
    # Application configuration
    app_name: str = "Room Rental API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False
    log_level: str = "INFO"
    
    # Database configuration
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/room_rental"
    auto_create_tables: bool = True
    
    # Store adapter: whether the owner-profile join can be served in one request
    store_relational_joins: bool = True
    
    # JWT configuration
    jwt_secret_key: str = DEVELOPMENT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    jwt_refresh_token_expire_days: int = 7
    
    # Identity provider
    password_hash_rounds: int = 12
    require_email_confirmation: bool = True
    confirmation_code_expire_hours: int = 24
    app_url: str = "http://localhost:8000"
    session_cookie_name: str = "access_token"
    session_cookie_secure: bool = False
    
    # Object storage - Docker volume compatible
    storage_dir: str = "./storage"
    storage_bucket: str = "room-images"
    storage_public_path: str = "/storage"
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    allowed_file_types: List[str] = ["image/jpeg", "image/png", "image/webp"]
    
    # API configuration
    api_prefix: str = "/api"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    
    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    
    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure an async driver is used."""
        if not v:
            raise ValueError("DATABASE_URL is required")
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v
    
    @field_validator("jwt_secret_key", mode="before")
    @classmethod
    def validate_jwt_secret_key(cls, v):
        """Validate JWT secret key strength."""
        if not v:
            raise ValueError("JWT_SECRET_KEY is required")
        if len(v) < 32 and v != DEVELOPMENT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v
    
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v
    
    @field_validator("password_hash_rounds")
    @classmethod
    def validate_password_hash_rounds(cls, v):
        """bcrypt accepts cost factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31")
        return v
    
    @field_validator("storage_dir", mode="before")
    @classmethod
    def create_storage_directory(cls, v):
        """Ensure the storage directory exists."""
        if v and not os.path.exists(v):
            os.makedirs(v, exist_ok=True)
        return v
    
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"
    
    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing" or self.testing
    
    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
    
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Read once at process start and handed to create_app.
    """
    return Settings()
