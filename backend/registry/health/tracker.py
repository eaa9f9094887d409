"""Periodic health sweep over every directory entry."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from registry.health.probe import ProbeError
from registry.health.state import HEALTH_CHECK_INTERVAL_SECONDS, HEALTH_PORT_OFFSET, CheckOutcome

if TYPE_CHECKING:
    from registry.directory.store import ServerDirectory
    from registry.health.probe import Probe

logger = structlog.get_logger()


@dataclass(frozen=True)
class SweepResult:
    probed: int = 0
    passed: int = 0
    failed: int = 0
    hidden: int = 0
    shown: int = 0
    pruned: int = 0


class HealthTracker:
    """Probe every registered server once per interval.

    Probes run concurrently and without the directory lock held; only the
    resulting pass/fail is applied under the lock.
    Call start() on app startup and stop() on shutdown.
    """

    def __init__(
        self,
        directory: ServerDirectory,
        probe: Probe,
        interval: float = HEALTH_CHECK_INTERVAL_SECONDS,
    ) -> None:
        self._directory = directory
        self._probe = probe
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    async def _check(self, ip: str, port: int) -> bool:
        try:
            await self._probe(ip, port + HEALTH_PORT_OFFSET)
        except (ProbeError, OSError, TimeoutError) as e:
            logger.debug("healthcheck failed", ip=ip, port=port, error=str(e))
            return False
        except Exception:
            logger.exception("healthcheck raised unexpectedly", ip=ip, port=port)
            return False
        return True

    async def sweep(self) -> SweepResult:
        targets = await self._directory.probe_targets()
        results = await asyncio.gather(*(self._check(ip, port) for _, ip, port in targets))

        outcomes: list[CheckOutcome] = []
        for (key, ip, port), passed in zip(targets, results, strict=True):
            outcome = await self._directory.record_check(key, passed=passed, address=(ip, port))
            if outcome is not None:
                outcomes.append(outcome)

        result = SweepResult(
            probed=len(targets),
            passed=sum(results),
            failed=len(results) - sum(results),
            hidden=outcomes.count(CheckOutcome.HIDDEN),
            shown=outcomes.count(CheckOutcome.SHOWN),
            pruned=outcomes.count(CheckOutcome.EXPIRED),
        )
        if result.probed:
            logger.info(
                "healthcheck sweep finished",
                probed=result.probed,
                failed=result.failed,
                hidden=result.hidden,
                shown=result.shown,
                pruned=result.pruned,
            )
        return result

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.sweep()
