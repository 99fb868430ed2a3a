"""Hysteresis-based hog detection."""

from collections.abc import Iterable

from hogwatch.models import ProcessObservation
from hogwatch.policy import PROMOTE_AFTER, IgnoreLedger, should_ignore


class HogDetector:
    """
    Turns noisy per-cycle CPU samples into a debounced hog decision.

    Two counters are kept per pid. The hog streak counts consecutive samples
    above ``cpu_threshold``; a process is reported once the streak exceeds
    ``hogs_threshold``, i.e. after ``hogs_threshold + 1`` samples in a row.
    The timeout streak counts unanswered notifications and tells the caller
    when to convert them into a permanent ignore.

    Counters for pids that disappear are dropped by ``prune``. A pid reused
    by an unrelated process within one poll interval inherits the counters.
    """

    def __init__(
        self,
        ledger: IgnoreLedger,
        cpu_threshold: float = 85.0,
        hogs_threshold: int = 2,
        timeouts_threshold: int = 2,
        promote_after: int = PROMOTE_AFTER,
    ) -> None:
        """
        Initialize the HogDetector.

        Args:
            ledger: Ignore ledger consulted on every observation. Shared, not copied.
            cpu_threshold: CPU percent a sample must exceed to count.
            hogs_threshold: Streak that must be exceeded before reporting.
            timeouts_threshold: Unanswered notifications before escalation.
            promote_after: Ignored command lines that exempt a whole executable.
        """
        self._ledger = ledger
        self.cpu_threshold = cpu_threshold
        self.hogs_threshold = hogs_threshold
        self.timeouts_threshold = timeouts_threshold
        self.promote_after = promote_after
        self._hog_streaks: dict[int, int] = {}
        self._timeout_streaks: dict[int, int] = {}

    def hog_streak(self, pid: int) -> int:
        return self._hog_streaks.get(pid, 0)

    def timeout_streak(self, pid: int) -> int:
        return self._timeout_streaks.get(pid, 0)

    def is_ignored(self, observation: ProcessObservation) -> bool:
        return should_ignore(self._ledger, observation.identity, self.promote_after)

    def observe(self, observation: ProcessObservation) -> bool:
        """Feed one sample. Returns True when the process is a confirmed hog."""
        pid = observation.pid

        if self.is_ignored(observation):
            self._hog_streaks[pid] = 0
            return False

        if observation.cpu_percent <= self.cpu_threshold:
            self._hog_streaks[pid] = 0
            return False

        streak = self._hog_streaks.get(pid, 0) + 1
        if streak > self.hogs_threshold:
            # Start a fresh window after every report
            self._hog_streaks[pid] = 0
            return True

        self._hog_streaks[pid] = streak
        return False

    def record_timeout(self, pid: int) -> bool:
        """
        Count an unanswered notification for ``pid``.

        Returns True when the timeouts reached ``timeouts_threshold``; the
        counter is reset and the caller is expected to ignore the process.
        """
        streak = self._timeout_streaks.get(pid, 0) + 1
        if streak >= self.timeouts_threshold:
            self._timeout_streaks[pid] = 0
            return True

        self._timeout_streaks[pid] = streak
        return False

    def prune(self, live_pids: Iterable[int]) -> None:
        """Forget counters of pids that are no longer running."""
        live = set(live_pids)
        for counters in (self._hog_streaks, self._timeout_streaks):
            for pid in counters.keys() - live:
                del counters[pid]
