"""In-memory server directory shared by the ingestor, tracker and HTTP readers."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from registry.health.state import CheckOutcome, apply_check

if TYPE_CHECKING:
    from collections.abc import Mapping

    from registry.directory.types import ServerEntry

LOOPBACK_IP = "127.0.0.1"

logger = structlog.get_logger()


def hostport_key(ip: str, port: int) -> str:
    return f"{ip}:{port}"


def derive_key(ip: str, port: int, name: str) -> str:
    """Key used for beacon registrations.

    Servers reporting the loopback address are keyed by name so several
    local test servers sharing 127.0.0.1 and a port stay distinct.
    """
    if ip == LOOPBACK_IP:
        return name
    return hostport_key(ip, port)


class ServerDirectory:
    """Key -> ServerEntry mapping guarded by a single asyncio.Lock.

    Entries never leave this class by reference: every read returns a
    copy taken under the lock, so callers cannot observe a half-applied
    update or mutate stored state behind the lock's back.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ServerEntry] = {}
        self._lock = asyncio.Lock()

    async def upsert(self, key: str, entry: ServerEntry) -> None:
        """Store entry at key, keeping the health history of an existing entry."""
        async with self._lock:
            existing = self._entries.get(key)
            if existing is None:
                self._entries[key] = entry.model_copy()
                return
            existing.name = entry.name
            existing.ip = entry.ip
            existing.port = entry.port
            existing.game_mode = entry.game_mode

    async def restore(self, entries: Mapping[str, ServerEntry]) -> None:
        """Load a decoded snapshot, replacing whatever is stored at those keys."""
        async with self._lock:
            for key, entry in entries.items():
                self._entries[key] = entry.model_copy()
        logger.info("restored servers", restored=len(entries), total=len(self._entries))

    async def get(self, key: str) -> ServerEntry | None:
        async with self._lock:
            entry = self._entries.get(key)
            return entry.model_copy() if entry is not None else None

    async def snapshot(self) -> list[ServerEntry]:
        """Copies of every entry currently shown to clients."""
        async with self._lock:
            return [entry.model_copy() for entry in self._entries.values() if entry.healthy]

    async def count(self) -> int:
        async with self._lock:
            return len(self._entries)

    async def healthy_count(self) -> int:
        async with self._lock:
            return sum(1 for entry in self._entries.values() if entry.healthy)

    async def probe_targets(self) -> list[tuple[str, str, int]]:
        """(key, ip, port) for every entry, so probing can happen outside the lock."""
        async with self._lock:
            return [(key, entry.ip, entry.port) for key, entry in self._entries.items()]

    async def record_check(
        self,
        key: str,
        *,
        passed: bool,
        address: tuple[str, int] | None = None,
    ) -> CheckOutcome | None:
        """Apply one probe result to the stored entry.

        address is the (ip, port) that was probed. The result is dropped,
        returning None, when the key has gone away or now points at a
        different address than the one probed. An EXPIRED outcome deletes
        the entry.
        """
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if address is not None and address != (entry.ip, entry.port):
                return None
            outcome = apply_check(entry, passed=passed)
            if outcome is CheckOutcome.EXPIRED:
                del self._entries[key]

        if outcome is not CheckOutcome.UNCHANGED:
            logger.info("server health changed", key=key, outcome=outcome, failed_checks=entry.failed_checks)
        return outcome
