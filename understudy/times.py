"""
Call-count constraints used by verification.

A ``Times`` value is an inclusive ``[minimum, maximum]`` range over the
number of matching calls, where ``maximum`` may be unbounded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from understudy.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Times:
    """
    Inclusive range of acceptable call counts.

    Attributes:
        minimum: Smallest acceptable count.
        maximum: Largest acceptable count, or None for no upper bound.
    """

    minimum: int
    maximum: int | None

    def __post_init__(self) -> None:
        if self.minimum < 0:
            logger.warning(f"Rejected negative call count {self.minimum}")
            raise ConfigurationError("Call counts cannot be negative")
        if self.maximum is not None and self.maximum < self.minimum:
            logger.warning(f"Rejected inverted range {self.minimum}..{self.maximum}")
            raise ConfigurationError(
                f"Upper bound {self.maximum} is below lower bound {self.minimum}"
            )

    @classmethod
    def never(cls) -> Times:
        return cls(0, 0)

    @classmethod
    def once(cls) -> Times:
        return cls(1, 1)

    @classmethod
    def exactly(cls, count: int) -> Times:
        return cls(count, count)

    @classmethod
    def at_least(cls, count: int) -> Times:
        return cls(count, None)

    @classmethod
    def at_least_once(cls) -> Times:
        return cls(1, None)

    @classmethod
    def at_most(cls, count: int) -> Times:
        return cls(0, count)

    @classmethod
    def at_most_once(cls) -> Times:
        return cls(0, 1)

    @classmethod
    def between(cls, minimum: int, maximum: int) -> Times:
        """Accept any count from ``minimum`` to ``maximum``, both inclusive."""
        return cls(minimum, maximum)

    def verify(self, count: int) -> bool:
        """Return True if ``count`` lies within this range."""
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum

    def describe(self) -> str:
        """Human-readable form used in verification messages."""
        if self.maximum is None:
            if self.minimum == 1:
                return "at least once"
            return f"at least {_plural(self.minimum)}"
        if self.minimum == self.maximum:
            if self.minimum == 0:
                return "never"
            if self.minimum == 1:
                return "once"
            return f"exactly {_plural(self.minimum)}"
        if self.minimum == 0:
            return f"at most {_plural(self.maximum)}"
        return f"between {self.minimum} and {self.maximum} times"

    def __str__(self) -> str:
        return self.describe()


def _plural(count: int) -> str:
    return f"{count} time" if count == 1 else f"{count} times"
