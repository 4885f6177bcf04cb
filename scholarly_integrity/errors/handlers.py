"""Error handlers for graceful error management.

Turns exceptions into structured responses, logged context, and the
human-readable notes that end up in an integrity report.
"""

import asyncio
import logging
import traceback
from typing import Any

from scholarly_integrity.errors.exceptions import (
    IntegrityEngineError,
    ConfigurationError,
    RegistryError,
    InvalidDraftError,
    SourceLookupError,
)

logger = logging.getLogger(__name__)


LOOKUP_UNAVAILABLE_NOTE = "source lookup unavailable"


# =============================================================================
# Error Response Creation
# =============================================================================


def create_error_response(
    error: Exception,
    stage: str | None = None,
    include_traceback: bool = False,
) -> dict[str, Any]:
    """Create a standardized error response dictionary.

    Args:
        error: The exception that occurred
        stage: Workflow stage where the error occurred
        include_traceback: Whether to include full traceback

    Returns:
        Standardized error response dictionary
    """
    if isinstance(error, IntegrityEngineError):
        response = {
            "error_type": error.__class__.__name__,
            "category": detect_error_category(error),
            "message": error.message,
            "details": error.details,
            "recoverable": error.recoverable,
        }
    else:
        response = {
            "error_type": error.__class__.__name__,
            "category": detect_error_category(error),
            "message": str(error),
            "details": {},
            "recoverable": False,
        }

    if stage:
        response["stage"] = stage

    if include_traceback:
        response["traceback"] = traceback.format_exc()

    return response


def detect_error_category(error: Exception) -> str:
    """Detect error category from exception type.

    Args:
        error: The exception

    Returns:
        Category string
    """
    if isinstance(error, ConfigurationError):
        return "configuration_error"
    elif isinstance(error, RegistryError):
        return "registry_error"
    elif isinstance(error, InvalidDraftError):
        return "draft_error"
    elif isinstance(error, SourceLookupError):
        return "lookup_error"
    elif isinstance(error, IntegrityEngineError):
        return "engine_error"
    elif isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return "timeout"
    elif isinstance(error, ConnectionError):
        return "connection_error"
    else:
        return "unknown_error"


# =============================================================================
# Error Logging
# =============================================================================


def log_error_with_context(
    error: Exception,
    stage: str | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with full context.

    Args:
        error: The exception that occurred
        stage: Workflow stage where the error occurred
        context: Additional context to log
        level: Logging level (default: ERROR)
    """
    parts = [f"Error: {error.__class__.__name__}: {error}"]

    if stage:
        parts.append(f"Stage: {stage}")

    if isinstance(error, IntegrityEngineError):
        if error.details:
            parts.append(f"Details: {error.details}")
        parts.append(f"Recoverable: {error.recoverable}")

    if context:
        parts.append(f"Context: {context}")

    logger.log(level, " | ".join(parts))


# =============================================================================
# Lookup Failure Handling
# =============================================================================


def describe_lookup_failure(
    error: BaseException,
    claim_id: str,
    timeout_ms: int | None = None,
) -> str:
    """Convert an external lookup failure into a report note.

    The failure is logged at warning level and never propagated.

    Args:
        error: The exception raised by (or on behalf of) the lookup
        claim_id: Claim whose corroboration was being looked up
        timeout_ms: Deadline that applied, for timeout messages

    Returns:
        Note text starting with the canonical unavailability marker
    """
    if isinstance(error, Exception):
        log_error_with_context(
            error,
            stage="corroboration",
            context={"claim_id": claim_id},
            level=logging.WARNING,
        )

    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        if timeout_ms is not None:
            return f"{LOOKUP_UNAVAILABLE_NOTE}: no response within {timeout_ms} ms"
        return f"{LOOKUP_UNAVAILABLE_NOTE}: deadline exceeded"

    if isinstance(error, SourceLookupError):
        service = f" ({error.service})" if error.service else ""
        return f"{LOOKUP_UNAVAILABLE_NOTE}{service}: {error.message}"

    if isinstance(error, ConnectionError):
        return f"{LOOKUP_UNAVAILABLE_NOTE}: connection failed"

    return f"{LOOKUP_UNAVAILABLE_NOTE}: {str(error)[:100]}"
