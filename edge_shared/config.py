"""
Shared configuration management for flag-edge services.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="EDGE_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Frontend gateway
    frontend_api_prefix: str = Field(default="/api/frontend")
    frontend_api_origins: List[str] = Field(default_factory=list)
    frontend_api_tokens: List[str] = Field(default_factory=list)
    trust_proxy_headers: bool = Field(default=False)

    # Upstream services
    evaluation_service_url: str = Field(default="http://localhost:4242")
    metrics_service_url: str = Field(default="http://localhost:4242")
    upstream_timeout_seconds: float = Field(default=10.0)

    # Settings persistence (in-memory when unset)
    settings_dsn: Optional[str] = Field(default=None)

    @field_validator("frontend_api_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int = 8000
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
