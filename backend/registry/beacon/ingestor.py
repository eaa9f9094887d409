"""Turn beacon datagrams into directory registrations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from registry.beacon.types import BeaconParseError
from registry.directory.modes import classify_mode
from registry.directory.store import derive_key
from registry.directory.types import ServerEntry

if TYPE_CHECKING:
    from registry.beacon.types import BeaconParser
    from registry.directory.store import ServerDirectory

logger = structlog.get_logger()


class BeaconIngestor:
    def __init__(self, directory: ServerDirectory, parser: BeaconParser) -> None:
        self._directory = directory
        self._parser = parser

    async def ingest(self, source_ip: str, payload: bytes) -> str | None:
        """Register the server behind a beacon and return its directory key.

        Unparseable beacons are logged and dropped; servers repeat them
        often enough that a retry is never needed.
        """
        try:
            report = self._parser(source_ip, payload)
        except (BeaconParseError, ValueError) as e:
            logger.warning("failed to parse beacon", source_ip=source_ip, error=str(e))
            return None
        except Exception:
            logger.exception("beacon parser crashed", source_ip=source_ip)
            return None

        key = derive_key(report.ip_address, report.port, report.server_name)
        entry = ServerEntry(
            name=report.server_name,
            ip=report.ip_address,
            port=report.port,
            game_mode=classify_mode(report.current_mode),
        )
        await self._directory.upsert(key, entry)
        logger.debug("registered server", key=key, servers=await self._directory.count())
        return key
