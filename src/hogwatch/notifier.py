"""Desktop notifications that ask the user what to do with a hog."""

import json
import logging
import subprocess
from typing import Protocol

from hogwatch.errors import NotifierError
from hogwatch.models import NotificationOutcome, Outcome, ProcessObservation

log = logging.getLogger(__name__)

KILL = "Kill"
IGNORE = "Ignore"
ACTION_CLICKED = "actionClicked"
CLOSED = "closed"
TIMEOUT = "timeout"

# Extra seconds alerter gets past its own timeout before we give up on it
GRACE_SECONDS = 5


class Notifier(Protocol):
    def notify(self, observation: ProcessObservation) -> NotificationOutcome:
        ...


def format_notification(observation: ProcessObservation) -> tuple[str, str]:
    title = f"{observation.display_name} is a hog"
    message = f"This process is using {observation.cpu_percent:.2f}% of your CPU"
    return title, message


def parse_response(output: str) -> NotificationOutcome:
    """
    Map alerter's ``-json`` output onto an outcome.

    Anything that is not a recognised activation, including output that is
    not JSON at all, becomes Outcome.UNKNOWN.
    """
    try:
        data = json.loads(output)
    except ValueError:
        log.debug("Unparseable notifier output: %r", output)
        return NotificationOutcome(Outcome.UNKNOWN)

    if not isinstance(data, dict):
        return NotificationOutcome(Outcome.UNKNOWN)

    activation_type = data.get("activationType") or ""
    activation_value = data.get("activationValue")

    if activation_type == ACTION_CLICKED and activation_value == KILL:
        outcome = Outcome.KILL
    elif activation_type == CLOSED:
        outcome = Outcome.DISMISSED
    elif activation_type == TIMEOUT:
        outcome = Outcome.TIMED_OUT
    else:
        outcome = Outcome.UNKNOWN

    return NotificationOutcome(outcome, activation_type, activation_value)


class AlerterNotifier:
    """
    Notifier that shells out to the ``alerter`` command-line tool.

    The call blocks until the user responds or the notification times out.
    """

    def __init__(
        self,
        alerter_path: str = "/usr/local/bin/alerter",
        timeout: int = 10,
        group: str = "hog_detector",
        icon: str | None = None,
    ) -> None:
        self._alerter_path = alerter_path
        self._timeout = timeout
        self._group = group
        self._icon = icon

    def build_command(self, observation: ProcessObservation) -> list[str]:
        title, message = format_notification(observation)
        command = [
            self._alerter_path,
            "-title", title,
            "-message", message,
            "-actions", KILL,
            "-group", self._group,
            "-closeLabel", IGNORE,
        ]
        if self._icon:
            command += ["-appIcon", self._icon]
        command += ["-json", "-timeout", str(self._timeout)]
        return command

    def notify(self, observation: ProcessObservation) -> NotificationOutcome:
        command = self.build_command(observation)
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout + GRACE_SECONDS,
            )
        except subprocess.TimeoutExpired:
            log.warning("Notifier did not return in time for pid %d", observation.pid)
            return NotificationOutcome(Outcome.TIMED_OUT, TIMEOUT)
        except OSError as e:
            raise NotifierError(f"Failed to post notification with {self._alerter_path}: {e}") from e

        if result.returncode != 0:
            log.warning(
                "Notifier exited with status %d: %s", result.returncode, result.stderr.strip()
            )
        return parse_response(result.stdout)
