"""Process sampling and signalling for hogwatch."""

import logging
from typing import Protocol

import psutil

from hogwatch.models import ProcessIdentity, ProcessObservation

log = logging.getLogger(__name__)


class SnapshotProvider(Protocol):
    def snapshot(self) -> list[ProcessObservation]:
        ...


class ProcessSampler:
    """
    Process snapshot provider backed by psutil.

    psutil.process_iter() caches Process objects between calls, so each
    cpu_percent value covers the interval since the previous snapshot.
    Handles AccessDenied and ZombieProcess errors gracefully.
    """

    # Attributes to fetch in oneshot
    ATTRS = ["pid", "name", "exe", "cmdline", "cpu_percent"]

    def prime(self) -> None:
        """
        Take a throwaway snapshot.

        The first cpu_percent call for a process always returns 0.0, so the
        first real cycle would otherwise see every process as idle.
        """
        self.snapshot()

    def snapshot(self) -> list[ProcessObservation]:
        """
        Collect observations of all running processes.

        Uses psutil.process_iter() with oneshot() context manager for efficiency.
        Processes that die mid-scan, deny access or are zombies are skipped.
        """
        observations: list[ProcessObservation] = []

        for proc in psutil.process_iter(attrs=self.ATTRS):
            try:
                with proc.oneshot():
                    info = proc.info
                    observation = self._to_observation(info)
                    if observation is not None:
                        observations.append(observation)
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

        return observations

    @staticmethod
    def _to_observation(info: dict) -> ProcessObservation | None:
        pid = info.get("pid")
        if not pid:  # kernel idle task
            return None

        name = info.get("name") or ""
        # exe is None when access is denied, e.g. for other users' processes
        executable_path = info.get("exe") or name
        cmdline = info.get("cmdline") or []
        command_line = " ".join(cmdline) if cmdline else executable_path

        return ProcessObservation(
            pid=pid,
            identity=ProcessIdentity(
                executable_path=executable_path,
                command_line=command_line,
            ),
            display_name=name or executable_path,
            cpu_percent=info.get("cpu_percent") or 0.0,
        )


def kill_process(pid: int) -> bool:
    """
    Forcefully terminate a process.

    Returns False instead of raising when the process is already gone or
    cannot be signalled; the watch loop carries on either way.
    """
    try:
        psutil.Process(pid).kill()
    except psutil.NoSuchProcess:
        log.warning("Process %d exited before it could be killed", pid)
        return False
    except psutil.AccessDenied:
        log.warning("Not permitted to kill process %d", pid)
        return False

    log.info("Killed process %d", pid)
    return True
