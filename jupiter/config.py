"""System configuration loaded from a YAML file, with change notification.

A :class:`Config` reads its YAML document from a file on disk. Whenever a new document
has been loaded, all :class:`ChangeNotifier` instances obtained via
:meth:`Config.notifier` are woken up, so that users of the config can re-process it.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any

import yaml

__all__ = ["ConfigError", "ChangeNotifier", "Handle", "Config"]

_log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration cannot be read, parsed or written."""


class _Broadcast:
    """Counts change events and wakes up everyone waiting for one."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._condition:
            return self._generation

    def send(self) -> None:
        with self._condition:
            self._generation += 1
            self._condition.notify_all()

    def wait_beyond(self, seen: int, timeout: float | None) -> int | None:
        with self._condition:
            if self._condition.wait_for(lambda: self._generation > seen, timeout):
                return self._generation
            return None


class ChangeNotifier:
    """Receives a signal whenever the configuration has been (re-)loaded.

    Only changes which happen after the notifier was created are reported. Several
    changes which happen before :meth:`recv` is called are reported as one.
    """

    def __init__(self, broadcast: _Broadcast) -> None:
        self._broadcast = broadcast
        self._seen = broadcast.generation

    def recv(self, timeout: float | None = None) -> bool:
        """Waits for a config change.

        Returns True once a change has been observed, or False if the timeout (in
        seconds) elapsed first. A timeout of None waits indefinitely.
        """
        generation = self._broadcast.wait_beyond(self._seen, timeout)
        if generation is None:
            return False
        self._seen = generation
        return True


@dataclass(frozen=True)
class _Snapshot:
    document: Any
    last_modified: float | None


class Handle:
    """A snapshot of the configuration as it was when the handle was obtained.

    A handle is not updated once a new configuration is loaded, so it should not be
    kept around for long.
    """

    def __init__(self, snapshot: _Snapshot) -> None:
        self._snapshot = snapshot

    def config(self) -> Any:
        """Returns the loaded YAML document (None if nothing has been loaded)."""
        return self._snapshot.document


class Config:
    """Provides access to the configuration stored in a YAML file."""

    def __init__(self, filename: str | os.PathLike[str]) -> None:
        self.filename = os.fspath(filename)
        self._broadcast = _Broadcast()
        self._lock = threading.Lock()
        self._snapshot = _Snapshot(None, None)

    def notifier(self) -> ChangeNotifier:
        """Returns a listener which is signalled once the config changes."""
        return ChangeNotifier(self._broadcast)

    def current(self) -> Handle:
        """Returns a handle to the currently loaded configuration."""
        with self._lock:
            return Handle(self._snapshot)

    def last_modified(self) -> float | None:
        """Returns the modification time of the config file, or None.

        None is returned if the file is missing or is not a regular file (an unmounted
        volume shows up as a directory).
        """
        try:
            info = os.stat(self.filename)
        except OSError:
            return None
        if not os.path.isfile(self.filename):
            return None
        return info.st_mtime

    def load(self) -> None:
        """Reads and parses the config file, replacing the current configuration.

        If the path exists but is not a regular file, loading is skipped.
        Raises ConfigError if the file cannot be read or parsed.
        """
        _log.info("Loading config file %s...", self.filename)

        if os.path.exists(self.filename) and not os.path.isfile(self.filename):
            _log.info(
                "Config file doesn't exist or is an unmounted docker volume - "
                "skipping config load."
            )
            return

        try:
            with open(self.filename, encoding="utf-8") as file:
                data = file.read()
        except OSError as error:
            raise ConfigError(
                f"Cannot load config file {self.filename}: {error}"
            ) from error

        try:
            last_modified: float | None = os.stat(self.filename).st_mtime
        except OSError:
            last_modified = None

        self.load_from_string(data, last_modified)

    def store(self, config: str) -> None:
        """Validates the given YAML text and writes it into the config file.

        The new content is picked up by the next load. Raises ConfigError if the text
        is not valid YAML (leaving the file untouched) or if writing fails.
        """
        _log.info("Programmatically updating the config file %s...", self.filename)
        try:
            list(yaml.safe_load_all(config))
        except yaml.YAMLError as error:
            raise ConfigError(f"Cannot parse config data: {error}") from error

        try:
            with open(self.filename, "w", encoding="utf-8") as file:
                file.write(config)
        except OSError as error:
            raise ConfigError("Failed to write to config file!") from error
        _log.info("Config has been updated successfully!")

    def load_from_string(self, data: str, last_modified: float | None = None) -> None:
        """Parses the given YAML text and installs its first document as configuration.

        All change notifiers are signalled afterwards. Raises ConfigError if the text
        cannot be parsed, in which case the previous configuration is kept.
        """
        try:
            documents = list(yaml.safe_load_all(data))
        except yaml.YAMLError as error:
            raise ConfigError(
                f"Cannot parse config file {self.filename}: {error}"
            ) from error

        document = documents[0] if documents else None
        with self._lock:
            self._snapshot = _Snapshot(document, last_modified)

        self._broadcast.send()

    def reload_if_changed(self) -> bool:
        """Reloads the file if it is newer than the loaded one (or nothing was loaded).

        Returns True if the configuration was re-loaded successfully. Load errors are
        logged and reported as False.
        """
        last_modified = self.last_modified()
        with self._lock:
            last_loaded = self._snapshot.last_modified

        if last_modified is None:
            return False
        if last_loaded is not None and last_modified <= last_loaded:
            return False

        try:
            self.load()
        except ConfigError as error:
            _log.error("Failed to re-load system config: %s", error)
            return False
        _log.info("System configuration was re-loaded.")
        return True