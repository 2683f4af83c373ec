"""Application settings for backend runtime and tests."""

from __future__ import annotations

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    bank_app_host: str = "127.0.0.1"
    bank_app_port: int = Field(default=8000, ge=1)
    bank_cors_allow_origins: str = "*"
    bank_log_level: str = "INFO"

    bank_default_total_rounds: int = Field(default=20, ge=1)
    bank_settlement_delay_seconds: float = Field(default=2.0, ge=0)
    bank_history_limit: int = Field(default=10, ge=1)
    bank_room_code_length: int = Field(default=4, ge=4)

    bank_heartbeat_interval_seconds: float = Field(default=30.0, gt=0)
    bank_heartbeat_pong_timeout_seconds: float = Field(default=10.0, gt=0)

    @model_validator(mode="after")
    def validate_heartbeat_window(self) -> "Settings":
        """Ensure a pong can arrive before the next ping is due."""
        if self.bank_heartbeat_pong_timeout_seconds >= self.bank_heartbeat_interval_seconds:
            raise ValueError(
                "BANK_HEARTBEAT_PONG_TIMEOUT_SECONDS must be less than "
                "BANK_HEARTBEAT_INTERVAL_SECONDS"
            )
        return self

    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.bank_cors_allow_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
