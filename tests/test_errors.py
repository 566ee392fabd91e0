"""Tests for vrf_lottery.errors."""

from vrf_lottery.errors import (
    InvalidAmountError,
    LotteryError,
    NoParticipantsError,
    UnauthorizedError,
    WindowClosedError,
    WindowStillOpenError,
)


class TestLotteryError:
    def test_base_error(self) -> None:
        err = LotteryError(code=9002, reason="boom")
        assert err.code == 9002
        assert err.reason == "boom"
        assert str(err) == "boom"
        assert isinstance(err, Exception)


class TestSpecificErrors:
    def test_invalid_amount(self) -> None:
        err = InvalidAmountError(expected=10, paid=20)
        assert err.code == 1001
        assert err.reason == "Incorrect amount"
        assert (err.expected, err.paid) == (10, 20)

    def test_window_closed(self) -> None:
        err = WindowClosedError()
        assert err.code == 2001
        assert err.reason == "Window closed"

    def test_window_still_open(self) -> None:
        assert "1234" in WindowStillOpenError(1234).reason

    def test_unauthorized(self) -> None:
        err = UnauthorizedError("abc", role="oracle")
        assert err.code == 3001
        assert err.caller == "abc"
        assert "oracle" in err.reason

    def test_no_participants(self) -> None:
        assert NoParticipantsError().code == 4003
