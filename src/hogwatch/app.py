"""hogwatch - Resident CPU hog watcher."""

import logging
import signal
import sys
import threading
from collections.abc import Callable

from hogwatch.cache import CacheStore
from hogwatch.config import Settings, load_settings
from hogwatch.detector import HogDetector
from hogwatch.errors import HogwatchError
from hogwatch.handler import ResponseHandler
from hogwatch.logging_ import setup_logging
from hogwatch.monitor import ProcessSampler, SnapshotProvider, kill_process
from hogwatch.notifier import AlerterNotifier, Notifier

log = logging.getLogger(__name__)


class HogWatcher:
    """
    Periodic loop that samples processes and asks about the hogs it finds.

    Everything runs on the calling thread. A notification blocks the loop
    until the user answers or it times out, so at most one is shown at a time
    and hogs found meanwhile wait for the next turn.
    """

    def __init__(
        self,
        settings: Settings,
        sampler: SnapshotProvider,
        notifier: Notifier,
        cache: CacheStore,
        kill: Callable[[int], bool] = kill_process,
    ) -> None:
        """
        Initialize the HogWatcher.

        Args:
            settings: Thresholds and poll interval.
            sampler: Source of process observations, called once per cycle.
            notifier: Shows the hog alert and returns the user's response.
            cache: Store the ignore ledger is loaded from and saved to.
            kill: Signal sender used when the user picks Kill.
        """
        self._settings = settings
        self._sampler = sampler
        self._notifier = notifier
        self._stop_event = threading.Event()
        self.ledger = cache.load()
        self.detector = HogDetector(self.ledger, **settings.to_detector_config())
        self.handler = ResponseHandler(self.ledger, cache, self.detector, kill=kill)

    @property
    def poll_seconds(self) -> float:
        return self._settings.poll_seconds

    def run_cycle(self) -> int:
        """Run one detection pass. Returns the number of hogs reported."""
        observations = self._sampler.snapshot()
        reported = 0

        for observation in observations:
            if not self.detector.observe(observation):
                continue

            reported += 1
            log.info(
                "%s (pid %d) is a hog at %.1f%% CPU",
                observation.display_name,
                observation.pid,
                observation.cpu_percent,
            )
            response = self._notifier.notify(observation)
            self.handler.handle(observation, response)

        self.detector.prune(obs.pid for obs in observations)
        return reported

    def watch(self) -> None:
        """Run cycles every poll_seconds until stop() is called."""
        self._stop_event.clear()
        while not self._stop_event.is_set():
            self.run_cycle()
            # Wait for poll_seconds or until stop is requested
            self._stop_event.wait(timeout=self.poll_seconds)

    def stop(self) -> None:
        self._stop_event.set()


def build_watcher(settings: Settings) -> HogWatcher:
    cache = CacheStore(settings.cache_path)
    cache.open()

    sampler = ProcessSampler()
    sampler.prime()

    notifier = AlerterNotifier(
        alerter_path=settings.alerter_path,
        timeout=settings.notification_timeout,
        group=settings.notification_group,
        icon=settings.notification_icon,
    )
    return HogWatcher(settings, sampler, notifier, cache)


def main() -> None:
    """Entry point for the hogwatch daemon."""
    try:
        settings = load_settings()
        setup_logging(settings.log_level, settings.log_file)
        watcher = build_watcher(settings)
    except (HogwatchError, OSError) as e:
        logging.basicConfig()
        log.critical("hogwatch cannot start: %s", e)
        sys.exit(1)

    def signal_handler(sig, frame):
        log.info("Received signal %d, shutting down", sig)
        watcher.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    log.info(
        "Watching for processes above %.1f%% CPU every %.1fs",
        settings.cpu_threshold,
        settings.poll_seconds,
    )
    try:
        watcher.watch()
    except HogwatchError:
        log.exception("hogwatch stopped on a fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
