from typing import Protocol

from pydantic import BaseModel, Field


class BeaconParseError(ValueError):
    """Raised by a beacon parser for a payload it cannot understand."""


class BeaconReport(BaseModel):
    """The fields of a parsed beacon the registry cares about."""

    server_name: str
    ip_address: str
    port: int = Field(ge=1, le=65535)
    current_mode: str = ""


class BeaconParser(Protocol):
    def __call__(self, source_ip: str, payload: bytes) -> BeaconReport: ...
