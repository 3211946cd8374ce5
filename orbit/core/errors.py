from __future__ import annotations


class InvalidTransition(RuntimeError):
    """Raised when the session cannot move into the requested state."""


class InvalidConfig(ValueError):
    """Raised for a duration that is missing, non-numeric or out of range."""


class PersistenceUnavailable(RuntimeError):
    """Raised when the settings store cannot be read or written."""
