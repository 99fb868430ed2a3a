"""Data models for hogwatch."""

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class ProcessIdentity:
    """What a process is, for the purpose of ignoring it."""

    executable_path: str
    command_line: str  # argv joined by single spaces


@dataclass(slots=True, frozen=True)
class ProcessObservation:
    """Immutable sample of a process taken during one poll cycle."""

    pid: int
    identity: ProcessIdentity
    display_name: str
    cpu_percent: float  # 0.0 - 100.0 * core_count


class Outcome(Enum):
    """How the user resolved a hog notification."""

    KILL = "kill"
    DISMISSED = "dismissed"
    TIMED_OUT = "timed_out"
    UNKNOWN = "unknown"


@dataclass(slots=True, frozen=True)
class NotificationOutcome:
    """Outcome of a notification plus what the notifier actually reported."""

    outcome: Outcome
    activation_type: str = ""
    activation_value: str | None = None
