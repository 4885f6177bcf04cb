"""Tests for error handling.

This module tests:
- Custom exception types
- RetryPolicy configurations
- Lookup failure notes and error responses
"""

import asyncio

import pytest

from scholarly_integrity.errors import (
    LOOKUP_UNAVAILABLE_NOTE,
    NO_RETRY_POLICY,
    ConfigurationError,
    DuplicateIdError,
    IntegrityEngineError,
    InvalidDraftError,
    NotFoundError,
    RegistryError,
    RegistryFrozenError,
    RetryPolicy,
    SourceLookupError,
    create_error_response,
    create_lookup_retry_policy,
    describe_lookup_failure,
    detect_error_category,
)


# =============================================================================
# Exception Tests
# =============================================================================


class TestExceptions:
    """Tests for custom exception types."""

    def test_base_error(self):
        """Test IntegrityEngineError basics."""
        error = IntegrityEngineError("Test error", details={"key": "value"})

        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.details == {"key": "value"}
        assert error.recoverable is False

    def test_to_dict(self):
        """Test error serialization."""
        error = ConfigurationError("bad floor", field="support_score_floor", value=1.5)
        data = error.to_dict()

        assert data["type"] == "ConfigurationError"
        assert data["message"] == "bad floor"
        assert data["details"] == {"field": "support_score_floor", "value": "1.5"}
        assert data["recoverable"] is False

    def test_registry_hierarchy(self):
        """Test registry errors share a base class."""
        for error in (DuplicateIdError("x"), NotFoundError("x"), RegistryFrozenError("x")):
            assert isinstance(error, RegistryError)
            assert isinstance(error, IntegrityEngineError)
            assert error.source_id == "x"

    def test_frozen_error_phase(self):
        """Test RegistryFrozenError records the active phase."""
        assert RegistryFrozenError().details["phase"] == "validating"

    def test_invalid_draft_error(self):
        """Test InvalidDraftError keeps the section id."""
        error = InvalidDraftError("Duplicate section id 'intro'", section_id="intro")
        assert error.section_id == "intro"
        assert error.details["section_id"] == "intro"

    def test_source_lookup_error(self):
        """Test SourceLookupError is recoverable and truncates its query."""
        error = SourceLookupError("busy", service="index", query="q" * 500)

        assert error.recoverable is True
        assert error.transient is True
        assert len(error.details["query"]) == 200
        assert error.details["service"] == "index"


# =============================================================================
# Retry Policy Tests
# =============================================================================


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_exponential_delays(self):
        """Test delays grow by the backoff factor up to the cap."""
        policy = RetryPolicy(initial_interval=0.1, backoff_factor=2.0, max_interval=0.3)

        assert policy.get_delay(0) == pytest.approx(0.1)
        assert policy.get_delay(1) == pytest.approx(0.2)
        assert policy.get_delay(2) == pytest.approx(0.3)

    def test_jitter_bounds(self):
        """Test jitter adds at most half the delay."""
        policy = RetryPolicy(initial_interval=0.1, jitter=True)
        for _ in range(20):
            assert 0.1 <= policy.get_delay(0) <= 0.15

    def test_delay_capped_by_deadline(self):
        """Test a delay never outlasts the time left before the deadline."""
        policy = RetryPolicy(initial_interval=0.5)

        assert policy.get_delay(0, remaining=0.2) == pytest.approx(0.2)
        assert policy.get_delay(0, remaining=-0.1) == 0.0

    def test_max_attempts(self):
        """Test no retry once attempts are exhausted."""
        policy = RetryPolicy(max_attempts=3)

        assert policy.should_attempt_retry(ConnectionError(), 0)
        assert policy.should_attempt_retry(ConnectionError(), 1)
        assert not policy.should_attempt_retry(ConnectionError(), 2)

    def test_custom_retryable_types(self):
        """Test the retryable types are configurable."""
        policy = RetryPolicy(retryable=(ValueError,))

        assert policy.should_attempt_retry(ValueError(), 0)
        assert not policy.should_attempt_retry(ConnectionError(), 0)

    def test_no_retry_policy(self):
        """Test the single-attempt policy never retries."""
        assert not NO_RETRY_POLICY.should_attempt_retry(ConnectionError(), 0)

    def test_lookup_policy(self):
        """Test the lookup policy retries only transient failures."""
        policy = create_lookup_retry_policy()

        assert policy.should_attempt_retry(SourceLookupError("busy"), 0)
        assert policy.should_attempt_retry(ConnectionError(), 0)
        assert not policy.should_attempt_retry(SourceLookupError("bad", transient=False), 0)
        assert not policy.should_attempt_retry(ValueError(), 0)


# =============================================================================
# Handler Tests
# =============================================================================


class TestHandlers:
    """Tests for error handlers."""

    def test_timeout_note(self):
        """Test timeouts produce an unavailability note with the deadline."""
        note = describe_lookup_failure(asyncio.TimeoutError(), "intro-c001", 250)
        assert note == f"{LOOKUP_UNAVAILABLE_NOTE}: no response within 250 ms"

    def test_lookup_error_note(self):
        """Test lookup errors name their service."""
        note = describe_lookup_failure(SourceLookupError("rate limited", service="crossref"), "c")
        assert note == f"{LOOKUP_UNAVAILABLE_NOTE} (crossref): rate limited"

    def test_connection_note(self):
        """Test connection failures get a fixed note."""
        note = describe_lookup_failure(ConnectionError("reset"), "c")
        assert note == f"{LOOKUP_UNAVAILABLE_NOTE}: connection failed"

    def test_other_error_note(self):
        """Test other errors are truncated into the note."""
        note = describe_lookup_failure(RuntimeError("x" * 300), "c")
        assert note.startswith(LOOKUP_UNAVAILABLE_NOTE)
        assert len(note) <= len(LOOKUP_UNAVAILABLE_NOTE) + 102

    def test_error_categories(self):
        """Test category detection by exception type."""
        assert detect_error_category(ConfigurationError("x")) == "configuration_error"
        assert detect_error_category(DuplicateIdError("x")) == "registry_error"
        assert detect_error_category(InvalidDraftError("x")) == "draft_error"
        assert detect_error_category(SourceLookupError("x")) == "lookup_error"
        assert detect_error_category(asyncio.TimeoutError()) == "timeout"
        assert detect_error_category(ValueError()) == "unknown_error"

    def test_error_response(self):
        """Test standardized error responses."""
        response = create_error_response(NotFoundError("fama1970"), stage="assess_claims")

        assert response["error_type"] == "NotFoundError"
        assert response["category"] == "registry_error"
        assert response["details"] == {"source_id": "fama1970"}
        assert response["stage"] == "assess_claims"
        assert "traceback" not in response
