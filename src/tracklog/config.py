from os import environ
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    aurora_host: str
    aurora_port: int
    aurora_database: str
    aurora_user: str
    aurora_password: str
    aurora_secret_arn: str | None = None
    environment: str
    event_window_limit: int = Field(default=200, ge=1)
    reference_search_limit: int = Field(default=10, ge=1)
    sequence_retry_attempts: int = Field(default=3, ge=1)
    display_timezone: str = "UTC"

    @field_validator("display_timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value!r}") from e
        return value


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config. Used by tests and by alembic after credentials are loaded."""
    global _cached_config
    _cached_config = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    _cached_config = Config(
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        aurora_host=environ.get("AURORA_HOST", "localhost"),
        aurora_port=int(environ.get("AURORA_PORT", "5432")),
        aurora_database=environ.get("AURORA_DATABASE", "tracklog"),
        aurora_user=environ.get("AURORA_USER", "tracklog"),
        aurora_password=environ.get("AURORA_PASSWORD", "localdev"),
        aurora_secret_arn=environ.get("AURORA_SECRET_ARN"),
        environment=environ.get("ENVIRONMENT", "local"),
        event_window_limit=int(environ.get("EVENT_WINDOW_LIMIT", "200")),
        reference_search_limit=int(environ.get("REFERENCE_SEARCH_LIMIT", "10")),
        sequence_retry_attempts=int(environ.get("SEQUENCE_RETRY_ATTEMPTS", "3")),
        display_timezone=environ.get("DISPLAY_TIMEZONE", "UTC"),
    )
    return _cached_config
