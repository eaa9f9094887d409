"""UDP endpoint receiving beacons from game servers."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from registry.beacon.ingestor import BeaconIngestor

logger = structlog.get_logger()


class BeaconProtocol(asyncio.DatagramProtocol):
    """Hand every datagram to the ingestor as its own task."""

    def __init__(self, ingestor: BeaconIngestor) -> None:
        self._ingestor = ingestor
        self._pending: set[asyncio.Task[str | None]] = set()

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        task = asyncio.get_running_loop().create_task(self._ingestor.ingest(addr[0], data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def error_received(self, exc: Exception) -> None:
        logger.warning("beacon socket error", error=str(exc))


async def open_beacon_endpoint(
    ingestor: BeaconIngestor,
    host: str,
    port: int,
) -> asyncio.DatagramTransport:
    loop = asyncio.get_running_loop()
    transport, _ = await loop.create_datagram_endpoint(
        lambda: BeaconProtocol(ingestor),
        local_addr=(host, port),
    )
    logger.info("beacon listener started", host=host, port=port)
    return transport
