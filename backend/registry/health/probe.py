"""Outbound liveness probe against a game server's report port."""

from __future__ import annotations

import asyncio
from typing import Protocol

REPORT_REQUEST = b"REPORT"
DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0


class ProbeError(Exception):
    """Raised when a server did not answer a probe."""


class Probe(Protocol):
    async def __call__(self, ip: str, port: int) -> bytes: ...


class _ReplyProtocol(asyncio.DatagramProtocol):
    def __init__(self, reply: asyncio.Future[bytes]) -> None:
        self._reply = reply

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:  # noqa: ARG002
        if not self._reply.done():
            self._reply.set_result(data)

    def error_received(self, exc: Exception) -> None:
        if not self._reply.done():
            self._reply.set_exception(exc)


class UdpReportProbe:
    """Send a report request over UDP and wait for any reply.

    The reply payload is returned untouched; only its arrival matters to
    the health tracker.
    """

    def __init__(self, timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    async def __call__(self, ip: str, port: int) -> bytes:
        loop = asyncio.get_running_loop()
        reply: asyncio.Future[bytes] = loop.create_future()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _ReplyProtocol(reply),
                remote_addr=(ip, port),
            )
        except (OSError, OverflowError, ValueError) as e:
            msg = f"cannot reach {ip}:{port}: {e}"
            raise ProbeError(msg) from e

        try:
            transport.sendto(REPORT_REQUEST)
            async with asyncio.timeout(self._timeout):
                return await reply
        except TimeoutError as e:
            msg = f"no reply from {ip}:{port} within {self._timeout}s"
            raise ProbeError(msg) from e
        except OSError as e:
            msg = f"probe to {ip}:{port} failed: {e}"
            raise ProbeError(msg) from e
        finally:
            transport.close()
