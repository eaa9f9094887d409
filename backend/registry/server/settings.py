"""Registry server configuration via environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from registry.health.probe import DEFAULT_PROBE_TIMEOUT_SECONDS


class RegistryServerSettings(BaseSettings):
    model_config = {"env_prefix": "REGISTRY_"}

    beacon_host: str = "0.0.0.0"  # noqa: S104
    beacon_port: int = Field(default=8080, ge=1, le=65535)
    probe_timeout_seconds: float = Field(default=DEFAULT_PROBE_TIMEOUT_SECONDS, gt=0)
    # "package.module:callable" taking (source_ip, payload) and returning a BeaconReport.
    # Unset means no beacon listener is opened.
    beacon_parser: str | None = None

    @field_validator("beacon_parser", mode="before")
    @classmethod
    def validate_beacon_parser(cls, v: str | None) -> str | None:
        if v is None:
            return None
        stripped = v.strip()
        if not stripped:
            return None
        module, sep, attr = stripped.partition(":")
        if not sep or not module or not attr:
            raise ValueError(f"beacon_parser must look like 'module:attribute', got {v!r}")
        return stripped
