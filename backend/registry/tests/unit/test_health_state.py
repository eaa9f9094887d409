from registry.health.state import (
    FAILED_CHECK_THRESHOLD,
    MAX_FAILED_CHECKS,
    PASSED_CHECK_THRESHOLD,
    CheckOutcome,
    apply_check,
)
from registry.tests.helpers import make_entry


def _fail(entry, times):
    return [apply_check(entry, passed=False) for _ in range(times)]


class TestThresholds:
    def test_constants(self):
        assert FAILED_CHECK_THRESHOLD == 15
        assert PASSED_CHECK_THRESHOLD == 2
        assert MAX_FAILED_CHECKS == 10080


class TestFailedChecks:
    def test_new_entry_starts_healthy_with_no_streaks(self):
        entry = make_entry()
        assert entry.healthy is True
        assert entry.passed_checks == 0
        assert entry.failed_checks == 0

    def test_fourteen_failures_stay_healthy(self):
        entry = make_entry()
        outcomes = _fail(entry, 14)
        assert entry.healthy is True
        assert entry.failed_checks == 14
        assert set(outcomes) == {CheckOutcome.UNCHANGED}

    def test_fifteenth_failure_hides(self):
        entry = make_entry()
        _fail(entry, 14)
        assert apply_check(entry, passed=False) is CheckOutcome.HIDDEN
        assert entry.healthy is False

    def test_further_failures_do_not_hide_again(self):
        entry = make_entry()
        _fail(entry, 15)
        assert apply_check(entry, passed=False) is CheckOutcome.UNCHANGED
        assert entry.healthy is False

    def test_failure_resets_pass_streak(self):
        entry = make_entry(passed_checks=5)
        apply_check(entry, passed=False)
        assert entry.passed_checks == 0
        assert entry.failed_checks == 1

    def test_reaching_max_failures_expires(self):
        entry = make_entry(healthy=False, failed_checks=MAX_FAILED_CHECKS - 1)
        assert apply_check(entry, passed=False) is CheckOutcome.EXPIRED
        assert entry.failed_checks == MAX_FAILED_CHECKS


class TestPassedChecks:
    def test_success_resets_failure_streak_below_threshold(self):
        entry = make_entry()
        _fail(entry, 10)
        assert apply_check(entry, passed=True) is CheckOutcome.UNCHANGED
        assert entry.failed_checks == 0
        assert entry.passed_checks == 1
        assert entry.healthy is True

    def test_single_success_does_not_restore(self):
        entry = make_entry()
        _fail(entry, 15)
        assert apply_check(entry, passed=True) is CheckOutcome.UNCHANGED
        assert entry.healthy is False

    def test_second_consecutive_success_restores(self):
        entry = make_entry()
        _fail(entry, 15)
        apply_check(entry, passed=True)
        assert apply_check(entry, passed=True) is CheckOutcome.SHOWN
        assert entry.healthy is True

    def test_interrupted_recovery_starts_over(self):
        entry = make_entry(healthy=False, failed_checks=20)
        apply_check(entry, passed=True)
        apply_check(entry, passed=False)
        apply_check(entry, passed=True)
        assert entry.healthy is False
        assert entry.passed_checks == 1

    def test_successes_on_healthy_entry_are_unchanged(self):
        entry = make_entry()
        outcomes = [apply_check(entry, passed=True) for _ in range(3)]
        assert set(outcomes) == {CheckOutcome.UNCHANGED}
        assert entry.passed_checks == 3
