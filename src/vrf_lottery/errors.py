"""Error codes and exceptions raised by the contracts.

Error code ranges:
  1xxx: Input validation
  2xxx: Temporal (action outside its window)
  3xxx: Authorization
  4xxx: State conflict
  5xxx: Range / funds
  9xxx: External (oracle, beacon)
"""


class LotteryError(Exception):
    """Base contract error. ``reason`` is what a reverted call reports."""

    def __init__(self, code: int, reason: str) -> None:
        self.code = code
        self.reason = reason
        super().__init__(reason)


# --- 1xxx: Input validation ---

class InvalidAmountError(LotteryError):
    def __init__(self, expected: int, paid: int) -> None:
        super().__init__(1001, "Incorrect amount")
        self.expected = expected
        self.paid = paid


class InvalidAddressError(LotteryError):
    def __init__(self, value: object) -> None:
        super().__init__(1002, f"Invalid address: {value!r}")


class InvalidFeeError(LotteryError):
    def __init__(self, fee: int) -> None:
        super().__init__(1003, f"Fee must be positive: {fee}")


# --- 2xxx: Temporal ---

class WindowClosedError(LotteryError):
    def __init__(self) -> None:
        super().__init__(2001, "Window closed")


class WindowStillOpenError(LotteryError):
    def __init__(self, closes_at: int) -> None:
        super().__init__(2002, f"Window still open until {closes_at}")


class PaymentNotDueError(LotteryError):
    def __init__(self, due_at: int) -> None:
        super().__init__(2003, f"Payment not due until {due_at}")


# --- 3xxx: Authorization ---

class UnauthorizedError(LotteryError):
    def __init__(self, caller: str, role: str = "operator") -> None:
        super().__init__(3001, f"Unauthorized account {caller}: {role} only")
        self.caller = caller


# --- 4xxx: State conflict ---

class RequestAlreadyOutstandingError(LotteryError):
    def __init__(self, request_id: str) -> None:
        super().__init__(4001, f"Randomness request already outstanding: {request_id}")


class AlreadySettledError(LotteryError):
    def __init__(self, request_id: str) -> None:
        super().__init__(4002, f"Request already settled: {request_id}")


class NoParticipantsError(LotteryError):
    def __init__(self) -> None:
        super().__init__(4003, "No participants")


class UnknownRequestError(LotteryError):
    def __init__(self, request_id: str) -> None:
        super().__init__(4004, f"Unknown randomness request: {request_id}")


class AlreadySubscribedError(LotteryError):
    def __init__(self) -> None:
        super().__init__(4005, "Already subscribed")


class NotSubscribedError(LotteryError):
    def __init__(self) -> None:
        super().__init__(4006, "Not subscribed")


class UserPausedError(LotteryError):
    def __init__(self, user: str) -> None:
        super().__init__(4007, f"User is paused: {user}")


# --- 5xxx: Range / funds ---

class IndexOutOfRangeError(LotteryError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(5001, f"Index {index} out of range (size {size})")


class InsufficientFundsError(LotteryError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            5002,
            f"Insufficient funds: required {required}, available {available}",
        )


# --- 9xxx: External ---

class OracleError(LotteryError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, f"Oracle error: {detail}")
