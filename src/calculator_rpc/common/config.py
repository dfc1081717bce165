"""Runtime settings, read from CALCULATOR_RPC_* environment variables."""
from functools import lru_cache

from pydantic import Field, IPvAnyAddress
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server and client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CALCULATOR_RPC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=9000, ge=1, le=65535, description="Server TCP port")
    log_level: str = Field(default="INFO", description="Logging level name")
    timeout: float = Field(default=5.0, gt=0, description="Client request timeout in seconds")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
