"""Application configuration using Pydantic Settings."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ClockTrack settings, read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    mongodb_url: str
    mongodb_db_name: str = "clocktrack"

    # Tokens
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 60 * 24 * 7

    # HTTP
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_prefix: str = "/api"
    cors_origins: str = "http://localhost:3000"

    debug: bool = False
    log_level: str = "INFO"

    @field_validator("api_prefix")
    @classmethod
    def normalize_prefix(cls, value: str) -> str:
        """Routers are mounted under "/<prefix>" with no trailing slash."""
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def effective_log_level(self) -> str:
        """DEBUG overrides the configured log level."""
        return "DEBUG" if self.debug else self.log_level.upper()


settings = Settings()
