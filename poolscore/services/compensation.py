"""Best-effort rollback for multi-step writes against a store without transactions.

Every write that succeeds registers the action that undoes it. If a later step raises, the registered actions run in
reverse order and the original exception continues to propagate. Failures while compensating are logged, never raised,
so the caller only ever sees the error that aborted the operation.

Usage:

    with CompensationLog("create game") as undo:
        game = store.insert_game(...)
        undo.record(f"delete game {game.id}", lambda: store.delete_game(game.id))
        ...
"""

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class UndoAction:
    description: str
    action: Callable[[], Any]


class CompensationLog:
    """Ordered list of undo actions for one logical operation."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self._actions: list[UndoAction] = []

    def __enter__(self) -> "CompensationLog":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> bool:
        if exc is not None:
            logger.warning("%s failed (%s), compensating %d step(s)", self.operation, exc, len(self._actions))
            self.rollback()
        return False

    def __len__(self) -> int:
        return len(self._actions)

    def record(self, description: str, action: Callable[[], Any]) -> None:
        """Register how to undo a write that just succeeded."""
        self._actions.append(UndoAction(description, action))

    def rollback(self) -> list[str]:
        """Run every recorded action, newest first. Returns the descriptions of the actions that failed."""
        failed: list[str] = []
        while self._actions:
            step = self._actions.pop()
            try:
                step.action()
            except Exception:
                logger.exception("Compensation step %r of %s failed", step.description, self.operation)
                failed.append(step.description)
            else:
                logger.info("Compensated %s: %s", self.operation, step.description)
        if failed:
            logger.error("%s left the store inconsistent, %d compensation step(s) failed", self.operation, len(failed))
        return failed
