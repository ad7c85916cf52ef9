"""Exception types for the exchange engine.

Every `ExchangeError` aborts the operation that raised it with no state
change. `InvariantViolation` is different: it signals an arithmetic bug and is
never part of the caller-facing error surface.
"""

from __future__ import annotations


class ExchangeError(Exception):
    """Base class for caller-facing exchange errors."""


class InvalidAmount(ExchangeError):
    """Raised when an amount is zero or negative where a positive value is required."""


class InvalidAddress(ExchangeError):
    """Raised when an exchange is created without a token address."""


class InsufficientLiquidity(ExchangeError):
    """Raised when quoting or swapping against empty reserves."""


class RatioMismatch(ExchangeError):
    """Raised when a deposit does not match the current reserve ratio."""

    def __init__(self, supplied: int, required: int) -> None:
        self.supplied = supplied
        self.required = required
        super().__init__(f"insufficient token amount: supplied {supplied} < required {required}")


class InsufficientShares(ExchangeError):
    """Raised when a provider burns more shares than they hold."""


class SlippageExceeded(ExchangeError):
    """Raised when a swap output falls below the caller's minimum."""

    def __init__(self, output: int, min_output: int) -> None:
        self.output = output
        self.min_output = min_output
        super().__init__(f"insufficient output amount: {output} < {min_output}")


class TransferFailed(ExchangeError):
    """Raised when a ledger rejects a transfer."""


class ReentrantCall(ExchangeError):
    """Raised when a mutating operation starts while another one is still in progress."""


class InvariantViolation(AssertionError):
    """Raised when a post-state violates one or more pool invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
