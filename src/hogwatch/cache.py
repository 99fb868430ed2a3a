"""On-disk persistence of the ignore ledger."""

import logging
import os
from pathlib import Path

import msgpack

from hogwatch.errors import CacheError
from hogwatch.policy import IgnoreLedger

log = logging.getLogger(__name__)


class CacheStore:
    """
    Loads and saves the ignore ledger as a MessagePack map.

    The file holds ``{executable_path: [command_line, ...]}``. An empty or
    missing file is an empty ledger; anything else that fails to decode is
    treated as corruption and raises CacheError rather than being dropped.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        """Create the cache directory and file if they do not exist yet."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.touch(exist_ok=True)
        except OSError as e:
            raise CacheError(f"Can't create cache file {self._path}: {e}") from e

    def load(self) -> IgnoreLedger:
        try:
            contents = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise CacheError(f"Can't read cache file {self._path}: {e}") from e

        if not contents:
            return {}

        try:
            data = msgpack.unpackb(contents, raw=False)
        except (msgpack.UnpackException, ValueError, TypeError) as e:
            raise CacheError(f"Cache file {self._path} is corrupt: {e}") from e

        ledger = self._to_ledger(data)
        log.info(
            "Loaded %d ignored executables from %s", len(ledger), self._path
        )
        return ledger

    def save(self, ledger: IgnoreLedger) -> None:
        """Overwrite the cache file with the full ledger and sync it to disk."""
        payload = msgpack.packb(
            {exe: sorted(commands) for exe, commands in ledger.items()},
            use_bin_type=True,
        )
        try:
            with open(self._path, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise CacheError(f"Couldn't write cache file {self._path}: {e}") from e

    def _to_ledger(self, data: object) -> IgnoreLedger:
        if not isinstance(data, dict):
            raise CacheError(f"Cache file {self._path} is corrupt: expected a map")

        ledger: IgnoreLedger = {}
        for exe, commands in data.items():
            if not isinstance(exe, str) or not isinstance(commands, list):
                raise CacheError(f"Cache file {self._path} is corrupt: bad entry {exe!r}")
            if not all(isinstance(cmd, str) for cmd in commands):
                raise CacheError(f"Cache file {self._path} is corrupt: bad command in {exe!r}")
            ledger[exe] = set(commands)
        return ledger
