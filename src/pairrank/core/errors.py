"""Exception types raised by pairrank."""

from __future__ import annotations

from typing import Iterable


class PairRankError(Exception):
    """Base class for errors raised by pairrank itself."""


class DuplicateItemsError(PairRankError, ValueError):
    """Raised when the items to rank contain repeated identifiers.

    The check always happens before the comparator is consulted, so the
    caller can fix the input and retry without losing any decisions.
    """

    def __init__(self, duplicates: Iterable[object]) -> None:
        self.duplicates = sorted({str(d) for d in duplicates})
        super().__init__(
            "No duplicates allowed in items to be ranked (repeated: "
            + ", ".join(repr(d) for d in self.duplicates)
            + ")"
        )


class InvalidArgumentError(PairRankError, ValueError):
    """Raised for arguments outside the accepted domain."""
