"""Domain-level exceptions.

All failures surfaced by the catalog are subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from collections.abc import Mapping


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """One or more input fields are malformed or out of range.

    ``fields`` maps every offending field name to a short description of
    what is wrong with it.
    """

    def __init__(self, message: str, fields: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.fields = dict(fields or {})


class ConstraintError(DomainException):
    """A uniqueness constraint was violated (e.g. duplicate slug)."""


class NotFoundError(DomainException):
    """The targeted product does not exist or has been soft-deleted."""


class StorageError(DomainException):
    """The underlying persistence call failed."""
