"""
Gateway settings read from environment variables.

Every variable is optional; defaults give a working local setup with
simulated providers. Values are validated when the settings are loaded,
so a bad variable fails at startup, not on the first send.

    GATEWAY_EMAIL_PROVIDER / GATEWAY_EMAIL_API_KEY / GATEWAY_EMAIL_FAIL_RATE
    GATEWAY_SMS_PROVIDER / GATEWAY_SMS_ACCOUNT_SID / GATEWAY_SMS_FAIL_RATE
    GATEWAY_PUSH_PROVIDER / GATEWAY_PUSH_SERVER_KEY / GATEWAY_PUSH_FAIL_RATE
    GATEWAY_RETRY_ATTEMPTS     attempts per notification, first try included (2)
    GATEWAY_RETRY_BACKOFF_MS   fixed wait between attempts (1000)
    GATEWAY_MAX_WORKERS        SDK worker threads per channel (8)
    GATEWAY_STICKY_TERMINAL_STATES  reject writes over COMPLETED/FAILED (false)
    GATEWAY_LOG_LEVEL          DEBUG|INFO|WARNING|ERROR|CRITICAL (INFO)

The *_FAIL_RATE variables (0.0 to 1.0) make the simulated providers fail
at random, to try the FAILED paths from the demo or a running server.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.models import Channel

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ChannelSettings(BaseModel):
    """Provider name, credential and simulated failure rate for one channel."""

    provider: str
    credential: str
    fail_rate: float = 0.0

    model_config = ConfigDict(frozen=True)


class GatewaySettings(BaseSettings):
    """
    All gateway settings.

    Environment variables use the GATEWAY_ prefix.
    Example: GATEWAY_RETRY_ATTEMPTS=3, GATEWAY_LOG_LEVEL=debug
    """

    # Providers
    email_provider: str = Field(default="sendgrid", min_length=1)
    email_api_key: str = Field(default="SG_demo_key")
    email_fail_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    sms_provider: str = Field(default="twilio", min_length=1)
    sms_account_sid: str = Field(default="AC_demo_sid")
    sms_fail_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    push_provider: str = Field(default="firebase", min_length=1)
    push_server_key: str = Field(default="FK_demo_key")
    push_fail_rate: float = Field(default=0.0, ge=0.0, le=1.0)

    # Delivery
    retry_attempts: int = Field(default=2, ge=1, description="Attempts per notification, first try included")
    retry_backoff_ms: int = Field(default=1000, ge=0, description="Fixed wait between attempts")
    max_workers: int = Field(default=8, ge=1, description="SDK worker threads per channel")

    # Status store
    sticky_terminal_states: bool = Field(
        default=False,
        description="Reject writes for ids already COMPLETED or FAILED",
    )

    log_level: LogLevel = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    def for_channel(self, channel: Channel) -> ChannelSettings:
        """Provider settings for one channel."""
        if channel is Channel.EMAIL:
            return ChannelSettings(
                provider=self.email_provider, credential=self.email_api_key, fail_rate=self.email_fail_rate,
            )
        if channel is Channel.SMS:
            return ChannelSettings(
                provider=self.sms_provider, credential=self.sms_account_sid, fail_rate=self.sms_fail_rate,
            )
        return ChannelSettings(
            provider=self.push_provider, credential=self.push_server_key, fail_rate=self.push_fail_rate,
        )


def load_settings() -> GatewaySettings:
    """Build settings from the current environment (uncached)."""
    return GatewaySettings()


@lru_cache(maxsize=1)
def get_settings() -> GatewaySettings:
    """Settings for this process, read once."""
    return load_settings()
