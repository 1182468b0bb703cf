"""
Environment Exceptions
======================

Error taxonomy surfaced by environment construction and bulk upserts.

Driver exceptions are re-raised as one of these, with the original error
chained as ``__cause__``, so callers can tell configuration problems,
network problems and write conflicts apart without inspecting pymongo types.
"""
from typing import Any, Iterable, List, Optional


class DatabaseEnvironmentError(Exception):
    """Base exception for all database environment errors."""


class ConfigurationError(DatabaseEnvironmentError):
    """
    A required property is missing, unparsable or semantically invalid.

    Attributes:
        key: Properties key (or settings variable) that caused the failure, when known
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        self.key = key
        if key:
            message = f"{message} (property '{key}')"
        super().__init__(message)


class ConnectivityError(DatabaseEnvironmentError):
    """Network or authentication failure while establishing the connection."""

    def __init__(self, message: str, host: Optional[str] = None, port: Optional[int] = None) -> None:
        self.host = host
        self.port = port
        if host:
            message = f"{message} [{host}:{port}]"
        super().__init__(message)


class WriteConflictError(DatabaseEnvironmentError):
    """
    Uniqueness violation while inserting a bulk upsert batch.

    Raised when another writer inserted one of the candidate ids between the
    existence check and the insert. Not retried; the caller decides.

    Attributes:
        collection: Target collection name
        conflicting_ids: Ids rejected by the unique index
        inserted_count: Documents of the batch that were inserted anyway
    """

    def __init__(self, collection: str, conflicting_ids: Iterable[Any], inserted_count: int = 0) -> None:
        self.collection = collection
        self.conflicting_ids: List[Any] = list(conflicting_ids)
        self.inserted_count = inserted_count
        super().__init__(
            f"Duplicate ids in '{collection}': {self.conflicting_ids} "
            f"({inserted_count} other documents inserted)"
        )


class MappingError(DatabaseEnvironmentError):
    """A stored value could not be converted to its declared field type."""

    def __init__(self, field: str, value: Any, target_type: type) -> None:
        self.field = field
        self.value = value
        self.target_type = target_type
        super().__init__(
            f"Cannot convert {value!r} to {target_type.__name__} for field '{field}'"
        )
