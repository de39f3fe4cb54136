"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default=["GET", "POST", "DELETE", "OPTIONS"])
    allow_headers: list[str] = Field(default=["*"])


class AuthConfig(BaseModel):
    """Bearer token validation configuration."""

    required: bool = Field(
        default=False, description="Reject book requests that carry no bearer token"
    )
    signing_secret: str | None = Field(
        default=None, description="HMAC secret used to sign and verify bearer tokens"
    )
    issuer: str = Field(
        default="book-catalog", description="Issuer written to and expected in tokens"
    )
    audiences: list[str] = Field(
        default_factory=lambda: ["book-catalog-api"],
        description="Audiences this API accepts",
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256", "HS384", "HS512"],
        description="JWT algorithms allowed for token validation",
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    token_ttl_seconds: int = Field(
        default=3600, description="Lifetime of tokens minted by issue-token"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./book_catalog.db",
        description="Database connection URL",
    )
    create_tables: bool = Field(
        default=True, description="Create missing tables when the API starts"
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    environment_mode: str = Field(
        default="development", description="Environment mode: development or production"
    )
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @computed_field
    @property
    def password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. In development or test mode, the password (if any) is part of the URL
        2. In production mode, read from the secrets file specified by
           `password_file` or the environment variable named by `password_env_var`
        """
        if self.environment_mode in ("development", "test"):
            from sqlalchemy.engine import make_url

            return make_url(self.url).password

        if self.environment_mode != "production":
            raise ValueError(
                "Invalid environment_mode; must be 'development', 'production', or 'test'"
            )

        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return password
        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if base_url.password and self.environment_mode == "production":
            logger.warning(
                "Database URL contains a password in production mode; "
                "consider using a secrets file or environment variable."
            )

        resolved_password = self.password
        if resolved_password and resolved_password != base_url.password:
            base_url = base_url.set(password=resolved_password)

        return base_url.render_as_string(hide_password=False)


class ClientConfig(BaseModel):
    """Settings used by the terminal client."""

    api_base_url: str = Field(
        default="http://localhost:8000/api", description="Base URL of the books API"
    )
    token_file: str = Field(
        default="~/.book_catalog/token",
        description="File holding the bearer token sent with every request",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Bearer token configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    client: ClientConfig = Field(
        default_factory=ClientConfig, description="Terminal client configuration"
    )
