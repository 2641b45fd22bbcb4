"""
Monotonic counter used to mint verification identifiers.
"""

import structlog

logger = structlog.get_logger(module=__name__)


class IdentifierCounter:
    """Process-wide counter; advances once per successful verification."""

    def __init__(self, initial_value: int = 0):
        if initial_value < 0:
            raise ValueError("Counter value cannot be negative")
        self._value = initial_value

    @property
    def value(self) -> int:
        return self._value

    def next(self) -> int:
        """Advance the counter and return the new value."""
        self._value += 1
        return self._value

    def restore(self, value: int) -> None:
        """
        Reset the counter to a persisted value.

        Only used while recovering state; moving the counter backwards would
        allow an identifier to be minted twice.
        """
        if value < 0:
            raise ValueError("Counter value cannot be negative")
        if value < self._value:
            logger.warning(
                "Counter restored below current value",
                current_value=self._value,
                restored_value=value
            )
        self._value = value
