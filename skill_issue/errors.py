"""Exceptions raised at the persistence boundary."""
from __future__ import annotations


class SaveError(Exception):
    """Base class for save payload failures."""


class CorruptSaveError(SaveError):
    """Raised when a payload cannot be parsed into any known schema."""


class MigrationError(SaveError):
    """Raised when a payload cannot be brought to the current version."""

    def __init__(self, version: object, message: str) -> None:
        self.version = version
        super().__init__(message)
