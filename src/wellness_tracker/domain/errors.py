"""Error taxonomy shared by the client core and the backend service."""


class ValidationError(ValueError):
    """Raised when a write is missing required fields or carries invalid values."""


class LocalStorageError(Exception):
    """Raised by the local store when a read or write cannot be completed."""


class KeyValueStoreError(Exception):
    """Raised by the backend key/value store when a storage call fails."""
