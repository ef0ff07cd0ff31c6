"""
Configuration: Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Missing required fields (`SECRET_KEY`, `API_KEY`) raise a validation error at import time.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from refugeeconnect.database.config.config import settings

db_host = settings.DB_HOST
openai_model = settings.OPEN_AI_MODEL

Security
--------
- Never commit secrets or the `.env` file to source control.
- Prefer runtime environment variables in production.
"""


from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DB_DRIVER_NAME: str = Field("postgresql+psycopg2", description="SQLAlchemy driver (e.g., `postgresql+psycopg2`, `sqlite`).")
    DB_USERNAME: str | None = Field(None, description="Database username credential.")
    DB_PASSWORD: str | None = Field(None, description="Database password credential.")
    DB_HOST: str | None = Field("localhost", description="Hostname or IP address of the database server.")
    DB_PORT: int | None = Field(None, description="Database port; driver default when unset.")
    DB_DATABASE_NAME: str = Field("refugeeconnect", description="Database name (file path for sqlite).")

    # Session / JWT
    SECRET_KEY: str = Field(..., description="Secret key for signing session tokens.")
    ALGORITHM: str = Field("HS256", description="JWT signing algorithm.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(24 * 60, description="Session lifetime in minutes.")
    COOKIE_SECURE: bool = Field(False, description="Send the session cookie over HTTPS only.")

    # Completion service
    API_KEY: str = Field(..., description="OpenAI API key used by the AI assistant.")
    OPEN_AI_MODEL: str = Field("gpt-3.5-turbo", description="Chat model identifier.")
    OPEN_AI_TEMPERATURE: float = Field(0.7, description="Sampling temperature for completions.")
    OPEN_AI_MAX_TOKENS: int = Field(500, description="Upper bound on generated tokens per reply.")
    OPEN_AI_TIMEOUT: float = Field(30.0, description="Request timeout (seconds) for the completion call.")

    # Relevance search
    AI_SEARCH_LIMIT: int = Field(3, description="Number of information records handed to the prompt.")
    AI_SEARCH_INCLUDE_INACTIVE: bool = Field(False, description="Let retired (is_active=False) records reach the AI prompt.")

    # Rate limiting (per client address, rolling window)
    AI_RATE_LIMIT: int = Field(15, description="AI requests allowed per window.")
    AI_RATE_WINDOW_SECONDS: int = Field(60, description="AI limiter window in seconds.")
    API_RATE_LIMIT: int = Field(100, description="API requests allowed per window.")
    API_RATE_WINDOW_SECONDS: int = Field(15 * 60, description="API limiter window in seconds.")

    # Uploads
    UPLOAD_DIR: str = Field("uploads/information", description="Directory receiving information media uploads.")
    MAX_UPLOAD_BYTES: int = Field(10 * 1024 * 1024, description="Per-file upload size limit.")
    MAX_UPLOAD_FILES: int = Field(5, description="Maximum media files per request.")

    # Application
    FRONTEND_URL: str = Field("http://localhost:5000", description="Allowed CORS origin.")
    INIT_MODE: str = Field("runtime", description="`runtime` creates tables and seeds defaults on startup.")

# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the .env file"""
