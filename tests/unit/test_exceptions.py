"""Unit tests for custom exceptions."""

import pytest

from tiermem.core.exceptions import (
    ConsolidationError,
    DomainError,
    InvariantViolationError,
    NotFoundError,
    TierMemError,
    ValidationError,
)


class TestTierMemError:
    """Tests for the base exception."""

    def test_raise_base_error(self):
        with pytest.raises(TierMemError) as exc_info:
            raise TierMemError("Test error")
        assert str(exc_info.value) == "Test error"

    def test_all_inherit_from_base(self):
        """Test that all domain errors inherit from TierMemError."""
        for exc_class in [
            DomainError,
            ValidationError,
            NotFoundError,
            InvariantViolationError,
            ConsolidationError,
        ]:
            assert issubclass(exc_class, TierMemError)
            assert issubclass(exc_class, DomainError)


class TestErrorCodes:
    """Tests for machine-readable codes."""

    def test_validation_error(self):
        error = ValidationError("bad input")
        assert error.code == "VALIDATION_ERROR"
        assert error.message == "bad input"
        assert str(error) == "bad input"

    def test_code_override(self):
        error = DomainError("custom", code="CUSTOM")
        assert error.code == "CUSTOM"
        assert DomainError.code == "DOMAIN_ERROR"

    def test_invariant_violation(self):
        assert InvariantViolationError("broken").code == "INVARIANT_VIOLATION"

    def test_repr(self):
        assert repr(ValidationError("x")) == "ValidationError(code='VALIDATION_ERROR', message='x')"


class TestNotFoundError:
    """Tests for NotFoundError messages."""

    def test_with_id(self):
        error = NotFoundError("Episode", "ep-1-abcde")
        assert error.code == "NOT_FOUND"
        assert error.message == "Episode with id ep-1-abcde not found"
        assert error.entity == "Episode"
        assert error.entity_id == "ep-1-abcde"

    def test_without_id(self):
        assert NotFoundError("CompanyProfile").message == "CompanyProfile not found"


class TestConsolidationError:
    """Tests for ConsolidationError."""

    def test_names_phase(self):
        error = ConsolidationError("pruning", "boom")
        assert error.code == "CONSOLIDATION_ERROR"
        assert error.phase == "pruning"
        assert error.message == "Consolidation phase 'pruning' failed: boom"
