"""Building blocks for the remote-first, local-fallback flow."""

import logging
from datetime import date, datetime
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from wellness_tracker.adapters.local_store import LocalStore, Namespace
from wellness_tracker.adapters.remote_store import (
    FetchFailure,
    FetchOk,
    FetchResult,
    RemoteInvalidPayload,
)
from wellness_tracker.domain.days import resolve_day
from wellness_tracker.domain.errors import ValidationError

_logger = logging.getLogger(__name__)

ValueT = TypeVar("ValueT")
ModelT = TypeVar("ModelT", bound=BaseModel)


def decode(result: FetchResult, adapter: TypeAdapter) -> FetchResult:
    """Validate a successful body, turning schema mismatches into failures."""
    if isinstance(result, FetchFailure):
        return result
    try:
        return FetchOk(adapter.validate_python(result.value))
    except PydanticValidationError as exc:
        return RemoteInvalidPayload(f"{exc.error_count()} schema error(s)")


def read_day(day: date | str | None, now: datetime, operation: str) -> str | None:
    """Return the day key for a read, or None when ``day`` is not a calendar day."""
    try:
        return resolve_day(day, now)
    except ValidationError as exc:
        _logger.warning("Returning empty result for %s: %s", operation, exc)
        return None


def log_fallback(operation: str, failure: FetchFailure) -> None:
    """Record that the local store is answering for ``operation``."""
    _logger.info("Using local store for %s: %s", operation, failure.describe())


def read_local(
    store: LocalStore,
    namespace: Namespace,
    key: str,
    adapter: TypeAdapter,
    default: ValueT,
) -> ValueT:
    """Return the validated local record, or ``default`` when absent or invalid."""
    raw = store.read(namespace, key)
    if raw is None:
        return default
    try:
        return adapter.validate_python(raw)
    except PydanticValidationError as exc:
        _logger.warning(
            "Ignoring invalid local record: namespace=%s key=%s errors=%s",
            namespace.value,
            key,
            exc.error_count(),
        )
        return default


def validate_input(model: type[ModelT], value: ModelT | dict[str, object]) -> ModelT:
    """Coerce caller input into ``model`` or raise ``ValidationError``."""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc
