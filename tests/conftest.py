"""Shared fakes for hogwatch tests."""

import pytest

from hogwatch.models import NotificationOutcome, Outcome, ProcessIdentity, ProcessObservation


def make_observation(
    pid: int = 100,
    cpu: float = 99.0,
    exe: str = "/usr/bin/busy",
    cmd: str = "busy --loop",
    name: str = "busy",
) -> ProcessObservation:
    return ProcessObservation(
        pid=pid,
        identity=ProcessIdentity(executable_path=exe, command_line=cmd),
        display_name=name,
        cpu_percent=cpu,
    )


class RecordingCache:
    """CacheStore stand-in that remembers every save."""

    def __init__(self, ledger: dict[str, set[str]] | None = None) -> None:
        self._ledger = ledger or {}
        self.saves: list[dict[str, set[str]]] = []

    def load(self) -> dict[str, set[str]]:
        return self._ledger

    def save(self, ledger: dict[str, set[str]]) -> None:
        self.saves.append({exe: set(cmds) for exe, cmds in ledger.items()})


class ScriptedSampler:
    """Snapshot provider that replays a list of cycles."""

    def __init__(self, cycles: list[list[ProcessObservation]]) -> None:
        self._cycles = list(cycles)
        self.calls = 0

    def snapshot(self) -> list[ProcessObservation]:
        self.calls += 1
        if not self._cycles:
            return []
        return self._cycles.pop(0)


class ScriptedNotifier:
    """Notifier that answers with a fixed sequence of outcomes."""

    def __init__(self, *outcomes: Outcome) -> None:
        self._outcomes = list(outcomes)
        self.shown: list[ProcessObservation] = []

    def notify(self, observation: ProcessObservation) -> NotificationOutcome:
        self.shown.append(observation)
        outcome = self._outcomes.pop(0) if self._outcomes else Outcome.UNKNOWN
        return NotificationOutcome(outcome)


class KillRecorder:
    def __init__(self, result: bool = True) -> None:
        self.pids: list[int] = []
        self._result = result

    def __call__(self, pid: int) -> bool:
        self.pids.append(pid)
        return self._result


@pytest.fixture
def kills() -> KillRecorder:
    return KillRecorder()
