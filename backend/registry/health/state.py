"""Health state machine for a single directory entry.

An entry is shown to clients while healthy. It is hidden after
FAILED_CHECK_THRESHOLD consecutive failed probes, shown again after
PASSED_CHECK_THRESHOLD consecutive passed probes, and dropped from the
directory entirely once it has failed MAX_FAILED_CHECKS probes in a row.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from registry.directory.types import ServerEntry

HEALTH_CHECK_INTERVAL_SECONDS = 60
FAILED_CHECK_THRESHOLD = 15  # hide after ~15 minutes down
PASSED_CHECK_THRESHOLD = 2
MAX_FAILED_CHECKS = 10080  # prune after 7 days of one-minute checks
HEALTH_PORT_OFFSET = 1000


class CheckOutcome(Enum):
    UNCHANGED = "unchanged"
    HIDDEN = "hidden"
    SHOWN = "shown"
    EXPIRED = "expired"


def apply_check(entry: ServerEntry, *, passed: bool) -> CheckOutcome:
    """Fold one probe result into the entry's streak counters, in place."""
    if passed:
        entry.passed_checks += 1
        entry.failed_checks = 0
        if not entry.healthy and entry.passed_checks >= PASSED_CHECK_THRESHOLD:
            entry.healthy = True
            return CheckOutcome.SHOWN
        return CheckOutcome.UNCHANGED

    entry.passed_checks = 0
    entry.failed_checks += 1
    if entry.failed_checks >= MAX_FAILED_CHECKS:
        entry.healthy = False
        return CheckOutcome.EXPIRED
    if entry.healthy and entry.failed_checks >= FAILED_CHECK_THRESHOLD:
        entry.healthy = False
        return CheckOutcome.HIDDEN
    return CheckOutcome.UNCHANGED
