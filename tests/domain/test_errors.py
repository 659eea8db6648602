"""Tests for the invocation error taxonomy."""

from __future__ import annotations

import pytest

from bumpbot.domain.errors import ErrorAlreadyReported, InvocationError


class TestInvocationError:
    def test_plain_error_is_not_reported(self) -> None:
        err = InvocationError("boom")
        assert err.message == "boom"
        assert err.already_reported is False
        assert err.cause is None

    def test_already_reported_flag(self) -> None:
        err = ErrorAlreadyReported("told them")
        assert err.already_reported is True
        assert isinstance(err, InvocationError)
        assert str(err) == "told them"

    def test_cause_is_kept(self) -> None:
        cause = OSError("disk")
        err = ErrorAlreadyReported("copy failed", cause)
        assert err.cause is cause

    def test_raises_as_exception(self) -> None:
        with pytest.raises(InvocationError, match="nope"):
            raise ErrorAlreadyReported("nope")
