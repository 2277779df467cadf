"""Unit tests for the error types."""

from __future__ import annotations

from reserved_dal import DalError, ErrorKind


class TestDalError:
    """Test DalError construction."""

    def test_defaults_to_provider_kind(self):
        """Errors without a kind are provider errors."""
        error = DalError("failed")

        assert error.kind is ErrorKind.PROVIDER
        assert error.message == "failed"
        assert error.source is None

    def test_keeps_source(self):
        """The underlying exception is kept for inspection."""
        cause = TimeoutError("slow")
        error = DalError("timed out", kind=ErrorKind.TIMEOUT, source=cause)

        assert error.source is cause
        assert str(error) == "timed out"

    def test_repr(self):
        """repr shows message and kind."""
        assert repr(DalError("x", kind=ErrorKind.NOT_FOUND)) == (
            "DalError('x', kind=<ErrorKind.NOT_FOUND: 'not_found'>)"
        )
