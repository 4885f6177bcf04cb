"""Error handling for the scholarly integrity engine.

This module provides:
- Custom exception types for caller misuse
- RetryPolicy configurations for external lookups
- Error handlers that turn lookup failures into report notes
"""

from scholarly_integrity.errors.exceptions import (
    IntegrityEngineError,
    ConfigurationError,
    RegistryError,
    DuplicateIdError,
    NotFoundError,
    RegistryFrozenError,
    InvalidDraftError,
    SourceLookupError,
)
from scholarly_integrity.errors.policies import (
    RetryPolicy,
    create_lookup_retry_policy,
    NO_RETRY_POLICY,
)
from scholarly_integrity.errors.handlers import (
    LOOKUP_UNAVAILABLE_NOTE,
    create_error_response,
    detect_error_category,
    describe_lookup_failure,
    log_error_with_context,
)

__all__ = [
    # Exceptions
    "IntegrityEngineError",
    "ConfigurationError",
    "RegistryError",
    "DuplicateIdError",
    "NotFoundError",
    "RegistryFrozenError",
    "InvalidDraftError",
    "SourceLookupError",
    # Policies
    "RetryPolicy",
    "create_lookup_retry_policy",
    "NO_RETRY_POLICY",
    # Handlers
    "LOOKUP_UNAVAILABLE_NOTE",
    "create_error_response",
    "detect_error_category",
    "describe_lookup_failure",
    "log_error_with_context",
]
