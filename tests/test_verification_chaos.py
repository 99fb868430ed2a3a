"""Verification Test: Chaos Monkey - Random process termination resilience.

The watch loop runs against the live process table while dummy processes are
spawned and terminated underneath it. Processes that die mid-scan must be
skipped without NoSuchProcess escaping, and detector counters for dead pids
must not pile up.
"""

import multiprocessing
import random
import time

from conftest import RecordingCache, ScriptedNotifier

from hogwatch.app import HogWatcher
from hogwatch.config import Settings
from hogwatch.monitor import ProcessSampler


def dummy_worker(duration: float = 60.0) -> None:
    """A dummy worker process that sleeps for a given duration."""
    try:
        time.sleep(duration)
    except (KeyboardInterrupt, SystemExit):
        pass


def make_watcher(kills) -> HogWatcher:
    # Report every process with any CPU use so notify and handle run on real pids
    settings = Settings(cpu_threshold=0.01, hogs_threshold=0)
    return HogWatcher(settings, ProcessSampler(), ScriptedNotifier(), RecordingCache(), kill=kills)


class TestChaosMonkey:
    """Chaos Monkey verification suite tests."""

    def test_watcher_survives_process_termination(self, kills):
        """Test cycles keep running while processes die mid-poll."""
        processes = []
        for _ in range(30):
            p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
            p.start()
            processes.append(p)

        watcher = make_watcher(kills)

        try:
            watcher.run_cycle()

            for p in random.sample(processes, 15):
                p.terminate()
                watcher.run_cycle()

            for _ in range(3):
                watcher.run_cycle()

            assert kills.pids == []
        finally:
            for p in processes:
                if p.is_alive():
                    p.terminate()
            for p in processes:
                p.join(timeout=1.0)

    def test_counters_track_only_live_pids(self, kills):
        """Test detector state for terminated processes is dropped."""
        processes = []
        watcher = make_watcher(kills)

        try:
            start_time = time.time()
            while time.time() - start_time < 2.0:
                for _ in range(5):
                    p = multiprocessing.Process(target=dummy_worker, args=(10.0,))
                    p.start()
                    processes.append(p)

                alive = [p for p in processes if p.is_alive()]
                for p in random.sample(alive, min(3, len(alive))):
                    p.terminate()

                watcher.run_cycle()

            for p in processes:
                if p.is_alive():
                    p.terminate()
            for p in processes:
                p.join(timeout=1.0)

            watcher.run_cycle()
            dead = {p.pid for p in processes}
            tracked = set(watcher.detector._hog_streaks) | set(watcher.detector._timeout_streaks)

            assert not (tracked & dead)
        finally:
            for p in processes:
                if p.is_alive():
                    p.terminate()
