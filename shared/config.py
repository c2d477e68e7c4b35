"""
Shared configuration management for the Breed Image Gateway.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias="GATEWAY_ENV")
    log_level: str = Field(default="info", validation_alias="GATEWAY_LOG_LEVEL")
    debug: bool = Field(default=False, validation_alias="DOG_CEO_DEBUG")

    # Host identity, used to pick the cache TTL
    server_name: str = Field(default="localhost", validation_alias="SERVER_NAME")
    canonical_host: str = Field(
        default="dog.ceo",
        validation_alias="GATEWAY_CANONICAL_HOST",
    )
    production_ttl_minutes: int = Field(
        default=2 * 7 * 24 * 60,
        validation_alias="GATEWAY_PRODUCTION_TTL_MINUTES",
    )
    default_ttl_minutes: int = Field(
        default=1,
        validation_alias="GATEWAY_DEFAULT_TTL_MINUTES",
    )

    # External services
    upstream_base_url: str = Field(
        default="https://dog.ceo/api/",
        validation_alias="DOG_CEO_GATEWAY",
    )
    upstream_timeout: float = Field(
        default=10.0,
        validation_alias="GATEWAY_UPSTREAM_TIMEOUT",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias="GATEWAY_REDIS_URL",
    )

    # Gateway behaviour
    max_random_images: int = Field(
        default=50,
        ge=1,
        validation_alias="GATEWAY_MAX_RANDOM_IMAGES",
    )
    docs_url: str = Field(
        default="https://dog.ceo/dog-api",
        validation_alias="GATEWAY_DOCS_URL",
    )

    def cache_ttl_minutes(self) -> int:
        """Cache lifetime for this deployment: long on the canonical host, short elsewhere."""
        if self.server_name == self.canonical_host:
            return self.production_ttl_minutes
        return self.default_ttl_minutes


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
