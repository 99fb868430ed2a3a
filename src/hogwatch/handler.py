"""Turning a notification outcome into kills and ignores."""

import logging
from collections.abc import Callable

from hogwatch.cache import CacheStore
from hogwatch.detector import HogDetector
from hogwatch.models import NotificationOutcome, Outcome, ProcessObservation
from hogwatch.monitor import kill_process
from hogwatch.policy import IgnoreLedger, record_ignore

log = logging.getLogger(__name__)


class ResponseHandler:
    """
    Applies the user's answer to a hog notification.

    This is the only writer of the ignore ledger, and every write is followed
    by a full save so the cache on disk never lags behind memory.
    """

    def __init__(
        self,
        ledger: IgnoreLedger,
        cache: CacheStore,
        detector: HogDetector,
        kill: Callable[[int], bool] = kill_process,
    ) -> None:
        self._ledger = ledger
        self._cache = cache
        self._detector = detector
        self._kill = kill

    def handle(self, observation: ProcessObservation, response: NotificationOutcome) -> None:
        outcome = response.outcome

        if outcome is Outcome.KILL:
            log.info("Killing %s (pid %d)", observation.display_name, observation.pid)
            self._kill(observation.pid)
        elif outcome is Outcome.DISMISSED:
            self._ignore(observation)
        elif outcome is Outcome.TIMED_OUT:
            if self._detector.record_timeout(observation.pid):
                log.info(
                    "%s (pid %d) timed out %d times in a row",
                    observation.display_name,
                    observation.pid,
                    self._detector.timeouts_threshold,
                )
                self._ignore(observation)
        else:
            log.debug(
                "Ignoring unknown notifier response %r/%r for pid %d",
                response.activation_type,
                response.activation_value,
                observation.pid,
            )

    def _ignore(self, observation: ProcessObservation) -> None:
        identity = observation.identity
        if record_ignore(self._ledger, identity):
            log.info("Ignoring %s: %s", identity.executable_path, identity.command_line)
        self._cache.save(self._ledger)
