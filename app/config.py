"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="MealPrep Agent", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, ge=1, le=65535, description="Server port")

    # Database settings - Supabase / Neon PostgreSQL
    postgres_db_url: str = Field(
        default="postgresql+psycopg2://postgres@localhost:5432/mealprep",
        description="PostgreSQL connection URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=5, ge=1, description="Database connection check attempts at startup"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB connection attempts"
    )

    # Supabase Auth
    supabase_url: str = Field(
        default="http://localhost:54321", description="Supabase project URL"
    )
    supabase_anon_key: str = Field(default="", description="Supabase anon API key")
    auth_timeout_sec: float = Field(
        default=10.0, gt=0, description="Timeout for Supabase Auth requests"
    )
    auth_callback_delays_sec: list[float] = Field(
        default=[0.5, 1.0, 2.0],
        description="Backoff delays while waiting for an OAuth session to be established",
    )
    default_role: str = Field(default="user", description="Role given to new profiles")

    # OpenRouter
    openrouter_api_key: Optional[str] = Field(
        default=None, description="OpenRouter API key"
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter API base URL"
    )
    openrouter_referer: str = Field(
        default="http://localhost:5173", description="HTTP-Referer sent to OpenRouter"
    )
    openrouter_title: str = Field(
        default="MealPrep Agent", description="X-Title sent to OpenRouter"
    )
    openrouter_timeout_sec: float = Field(default=60.0, gt=0)
    chat_model: str = Field(default="qwen/qwen-3-8b")
    text_model: str = Field(default="qwen/qwen-2.5-7b-instruct")
    vision_model: str = Field(default="qwen/qwen-2.5-vl-7b-instruct")
    embedding_model: str = Field(default="openai/text-embedding-ada-002")
    embeddings_enabled: bool = Field(
        default=False, description="Store recipe embeddings on create/update"
    )

    # n8n
    n8n_webhook_url: Optional[str] = Field(
        default=None, description="n8n webhook receiving application events"
    )
    webhook_enabled: bool = Field(default=False, description="Send n8n events")
    webhook_timeout_sec: float = Field(default=10.0, gt=0)
    n8n_rag_webhook_url: Optional[str] = Field(
        default=None, description="n8n webhook running the recipe RAG workflow"
    )
    rag_timeout_sec: float = Field(default=30.0, gt=0)

    # Rate limiting (requests per window, per client)
    rate_limit_window_sec: int = Field(default=900, ge=1)
    rate_limit_api: int = Field(default=100, ge=1)
    rate_limit_recipe_create: int = Field(default=10, ge=1)
    rate_limit_chat: int = Field(default=50, ge=1)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        description="Allowed HTTP methods",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="/api", description="API route prefix")
    api_title: str = Field(
        default="MealPrep Agent API", description="API documentation title"
    )
    api_description: str = Field(
        default="Family meal planning backed by Supabase, n8n and OpenRouter",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("openrouter_api_key", "n8n_webhook_url", "n8n_rag_webhook_url", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
