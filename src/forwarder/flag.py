"""Per-bot "needs recovery" flag."""
import logging
from typing import Optional


class RecoveryFlag:
    """Signals that items may be sitting in the inventory un-sent.

    Starts set so the first recovery tick always scans. Clearing it is a
    liveness hint, not a proof that every item left the inventory.
    """

    def __init__(self, initial: bool = True, logger: Optional[logging.LoggerAdapter] = None) -> None:
        self._value = initial
        self._logger = logger

    @property
    def is_set(self) -> bool:
        return self._value

    def set(self, reason: str = "") -> None:
        if not self._value and self._logger is not None:
            self._logger.debug("Recovery needed%s", f": {reason}" if reason else "")
        self._value = True

    def clear(self) -> None:
        self._value = False

    def __bool__(self) -> bool:
        return self._value

    def __repr__(self) -> str:
        return f"RecoveryFlag({self._value})"
