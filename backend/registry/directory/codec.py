"""Plain-text server list served to game clients.

The format is a header line followed by one ``name,ip,port,mode`` record
per server. Fields are not quoted or escaped; game clients split on commas.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

from registry.directory.store import hostport_key
from registry.directory.types import ServerEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

HEADER = "name,ip,port,mode"
FIELD_COUNT = 4
_PORT_PATTERN = re.compile(r"[+-]?[0-9]+")

logger = structlog.get_logger()


class ServerListDecodeError(ValueError):
    """Raised when a server list cannot be decoded."""


def encode_servers(entries: Iterable[ServerEntry]) -> str:
    """Render entries as the client server list.

    Records starting with a letter come first, everything else after; each
    group is sorted by code point on the whole line.
    """
    alpha: list[str] = []
    non_alpha: list[str] = []
    for entry in entries:
        if "," in entry.name or "\n" in entry.name:
            logger.warning("server name breaks list format", name=entry.name, ip=entry.ip, port=entry.port)
        line = entry.record_line()
        if line[0].isalpha():
            alpha.append(line)
        else:
            non_alpha.append(line)

    return HEADER + "\n" + "\n".join(sorted(alpha) + sorted(non_alpha))


def decode_servers(text: str) -> dict[str, ServerEntry]:
    """Parse a server list back into fresh, healthy entries keyed by ip:port.

    Only public fields survive the trip; health history is not part of the
    format. Loopback servers are keyed by ip:port here as well, so two local
    servers sharing a port collapse into one entry.
    """
    servers: dict[str, ServerEntry] = {}
    for lineno, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        if lineno == 1 and line == HEADER:
            continue

        fields = line.split(",")
        if len(fields) != FIELD_COUNT:
            msg = f"line {lineno}: expected {FIELD_COUNT} fields, got {len(fields)}: {line!r}"
            raise ServerListDecodeError(msg)

        name, ip, raw_port, game_mode = fields
        if not _PORT_PATTERN.fullmatch(raw_port):
            msg = f"line {lineno}: invalid port {raw_port!r}"
            raise ServerListDecodeError(msg)
        port = int(raw_port)

        servers[hostport_key(ip, port)] = ServerEntry(name=name, ip=ip, port=port, game_mode=game_mode)
    return servers
