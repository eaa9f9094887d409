"""Builders and fakes shared by registry tests."""

from __future__ import annotations

from registry.beacon.types import BeaconParseError, BeaconReport
from registry.directory.types import ServerEntry
from registry.health.probe import ProbeError


def make_entry(
    name: str = "Alpha",
    ip: str = "10.0.0.1",
    port: int = 7777,
    game_mode: str = "adv",
    **internal: object,
) -> ServerEntry:
    return ServerEntry(name=name, ip=ip, port=port, game_mode=game_mode, **internal)


class FakeProbe:
    """Probe whose answer is set per (ip, port); unknown addresses fail."""

    def __init__(self) -> None:
        self.up: set[tuple[str, int]] = set()
        self.calls: list[tuple[str, int]] = []

    async def __call__(self, ip: str, port: int) -> bytes:
        self.calls.append((ip, port))
        if (ip, port) not in self.up:
            msg = f"no reply from {ip}:{port}"
            raise ProbeError(msg)
        return b"report"


def key_value_parser(source_ip: str, payload: bytes) -> BeaconReport:
    """Parse test payloads like b"name=Alpha;port=7777;mode=RGM_BombAdvMode".

    An optional ip= field overrides the datagram source address.
    """
    try:
        fields = dict(part.split("=", 1) for part in payload.decode().split(";") if part)
        return BeaconReport(
            server_name=fields["name"],
            ip_address=fields.get("ip", source_ip),
            port=int(fields["port"]),
            current_mode=fields.get("mode", ""),
        )
    except (KeyError, UnicodeDecodeError) as e:
        msg = f"bad beacon from {source_ip}"
        raise BeaconParseError(msg) from e
