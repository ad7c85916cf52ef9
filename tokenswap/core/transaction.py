"""
All-or-nothing scope for exchange operations.

A `Transaction` captures the engine's own state on entry and collects a
compensating action for every ledger transfer that completes inside it. If the
body raises, compensations run in reverse order, the captured state is
restored, and the original exception propagates.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class TransactionError(Exception):
    """Raised when a rollback cannot be completed."""


class Transaction:
    def __init__(
        self,
        name: str,
        *,
        snapshot: Callable[[], Any],
        restore: Callable[[Any], None],
    ) -> None:
        self.name = name
        self._snapshot = snapshot
        self._restore = restore
        self._saved: Optional[Any] = None
        self._compensations: List[Callable[[], None]] = []

    def __enter__(self) -> "Transaction":
        self._saved = self._snapshot()
        self._compensations = []
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            logger.warning("rolling back %s: %s: %s", self.name, exc_type.__name__, exc)
            self._rollback()
        return False  # re-raise

    def add_compensation(self, fn: Callable[[], None]) -> None:
        """Register an action that undoes a completed external effect."""
        self._compensations.append(fn)

    def _rollback(self) -> None:
        try:
            for fn in reversed(self._compensations):
                fn()
        finally:
            self._restore(self._saved)
            self._compensations = []
