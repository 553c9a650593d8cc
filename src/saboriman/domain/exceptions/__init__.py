"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is kept as an attribute so handlers can log it without
    # parsing str(exception). Always raise a specific subclass, never this one.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ValidationException(DomainException):
    """Raised when entity validation fails."""

    pass


class ConfigurationError(DomainException):
    """Application misconfiguration.

    HTTP Status: 503 (Service Unavailable)

    Example:
        raise ConfigurationError("No music library configured")
    """

    pass


# =============================================================================
# Library scan exceptions
# Hey future me - the scanner has THREE error classes with different blast radius:
# - TagReadError: file keeps going with empty tags (recorded, not fatal)
# - ProbeError: file is SKIPPED (no duration = no track row)
# - ScanAbortedError: whole scan transaction is rolled back
# Only ScanAbortedError (or an unexpected exception) ever leaves the walk!
# =============================================================================


class LibraryScanError(DomainException):
    """Base class for library scan failures."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class TagReadError(LibraryScanError):
    """Embedded tags could not be parsed. The file is still imported."""

    pass


class ProbeError(LibraryScanError):
    """Audio stream probing failed. The file is skipped."""

    pass


class ScanAbortedError(LibraryScanError):
    """A fatal scan failure. The enclosing transaction is rolled back."""

    pass


class ScanInProgressError(DomainException):
    """A scan of the same library root is already running.

    HTTP Status: 409
    """

    def __init__(self, library_root: str) -> None:
        super().__init__(f"A scan of {library_root} is already running")
        self.library_root = library_root


__all__ = [
    "ConfigurationError",
    "DomainException",
    "EntityNotFoundException",
    "LibraryScanError",
    "ProbeError",
    "ScanAbortedError",
    "ScanInProgressError",
    "TagReadError",
    "ValidationException",
]
