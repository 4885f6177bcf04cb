"""Custom exception types for the scholarly integrity engine.

This module defines the hierarchy of exceptions raised by the engine.
Only caller misuse (bad configuration, registry misuse, malformed drafts)
is raised; domain findings such as risk tiers, sequence violations and
paradigm conflicts are always recorded in the report instead.
"""

from typing import Any


class IntegrityEngineError(Exception):
    """Base exception for all integrity engine errors.

    Attributes:
        message: Human-readable error description
        details: Additional error context
        recoverable: Whether a validation run can continue past this error
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
    ):
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(IntegrityEngineError):
    """Malformed validation configuration.

    Raised before a run starts; a run never begins with an invalid config.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]  # Truncate
        super().__init__(message, details, recoverable=False)
        self.field = field


# =============================================================================
# Registry Errors
# =============================================================================


class RegistryError(IntegrityEngineError):
    """Misuse of the source registry.

    Base class for registry errors. These indicate a caller bug and are
    never recovered inside a run.
    """

    def __init__(
        self,
        message: str,
        source_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if source_id is not None:
            details["source_id"] = source_id
        super().__init__(message, details, recoverable=False)
        self.source_id = source_id


class DuplicateIdError(RegistryError):
    """A source with the same id is already registered."""

    def __init__(self, source_id: str):
        super().__init__(
            f"Source '{source_id}' is already registered",
            source_id=source_id,
        )


class NotFoundError(RegistryError):
    """No source is registered under the requested id."""

    def __init__(self, source_id: str):
        super().__init__(
            f"Source '{source_id}' is not registered",
            source_id=source_id,
        )


class RegistryFrozenError(RegistryError):
    """Registration attempted while a validation run is active."""

    def __init__(self, source_id: str | None = None):
        super().__init__(
            "Sources cannot be registered while a validation run is active",
            source_id=source_id,
            details={"phase": "validating"},
        )


# =============================================================================
# Draft Errors
# =============================================================================


class InvalidDraftError(IntegrityEngineError):
    """Draft sections supplied by the caller are structurally invalid.

    Raised for duplicate section ids or empty section identifiers.
    """

    def __init__(
        self,
        message: str,
        section_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if section_id is not None:
            details["section_id"] = section_id
        super().__init__(message, details, recoverable=False)
        self.section_id = section_id


# =============================================================================
# External Lookup Errors
# =============================================================================


class SourceLookupError(IntegrityEngineError):
    """Failure of an external source lookup.

    Always recoverable: the affected claim is downgraded to a risk finding
    and the run continues.

    Attributes:
        service: Name of the lookup collaborator (if known)
        transient: Whether a retry might succeed
    """

    def __init__(
        self,
        message: str,
        service: str | None = None,
        query: str | None = None,
        transient: bool = True,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if service:
            details["service"] = service
        if query:
            details["query"] = query[:200]  # Truncate
        details["transient"] = transient
        super().__init__(message, details, recoverable=True)
        self.service = service
        self.query = query
        self.transient = transient
