"""On-device JSON storage used when the remote service is unreachable."""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from wellness_tracker.domain.errors import LocalStorageError

_logger = logging.getLogger(__name__)


class Namespace(str, Enum):
    """One local record per data domain."""

    MOOD = "wellness_mood"
    MEALS = "wellness_meals"
    HYDRATION = "wellness_hydration"
    STATS = "wellness_stats"
    ACHIEVEMENTS = "wellness_achievements"


class LocalStore(Protocol):
    """Best-effort key-mapped storage; never raises to callers."""

    def read(self, namespace: Namespace, key: str, default: object = None) -> object:
        """Return the stored value or ``default``."""

    def write(self, namespace: Namespace, key: str, value: object) -> bool:
        """Store a value and report whether it was persisted."""


@dataclass
class JsonFileLocalStore(LocalStore):
    """Stores each namespace as a JSON object in its own file.

    ``write`` returns False when nothing was persisted so callers can log it;
    the domain services still report the operation as successful.
    """

    directory: Path

    def read(self, namespace: Namespace, key: str, default: object = None) -> object:
        """Return the value under ``key`` or ``default`` when missing or unreadable."""
        try:
            records = self._load(namespace)
        except LocalStorageError as exc:
            _logger.warning(
                "Local read failed: namespace=%s key=%s error=%s",
                namespace.value,
                key,
                exc,
            )
            return default
        value = records.get(key)
        return default if value is None else value

    def write(self, namespace: Namespace, key: str, value: object) -> bool:
        """Store ``value`` under ``key``; failures are logged and swallowed."""
        try:
            try:
                records = self._load(namespace)
            except LocalStorageError as exc:
                _logger.warning(
                    "Discarding unreadable local namespace %s: %s",
                    namespace.value,
                    exc,
                )
                records = {}
            records[key] = value
            self._save(namespace, records)
        except LocalStorageError as exc:
            _logger.warning(
                "Local write failed: namespace=%s key=%s error=%s",
                namespace.value,
                key,
                exc,
            )
            return False
        return True

    def _path(self, namespace: Namespace) -> Path:
        return self.directory / f"{namespace.value}.json"

    def _load(self, namespace: Namespace) -> dict[str, object]:
        path = self._path(namespace)
        try:
            if not path.exists():
                return {}
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise LocalStorageError(str(exc)) from exc
        if not isinstance(payload, dict):
            raise LocalStorageError(f"expected an object in {path.name}")
        return payload

    def _save(self, namespace: Namespace, records: dict[str, object]) -> None:
        path = self._path(namespace)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(records), encoding="utf-8")
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            raise LocalStorageError(str(exc)) from exc
