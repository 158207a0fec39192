"""Comparator contract and a few ready-made comparators.

A comparator receives an ordered pair ``(a, b)`` of distinct items and
returns ``0`` when ``a`` wins or ``1`` when ``b`` wins.  "Winning" means
being preferred, so rankings ascend from the least to the most preferred
item.  Comparators may be coroutine functions (a human or a remote model can
take arbitrarily long to decide) or plain callables.
"""

from __future__ import annotations

import inspect
from typing import (
    Any,
    Awaitable,
    Callable,
    Hashable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    Union,
)

from ..core.errors import InvalidArgumentError

Outcome = int
Comparator = Callable[[Tuple[Any, Any]], Union[Outcome, Awaitable[Outcome]]]


async def call_comparator(comparator: Comparator, pair: Tuple[Any, Any]) -> Outcome:
    """Invoke ``comparator`` on ``pair`` and return the validated outcome."""

    outcome = comparator(pair)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    if outcome is True or outcome is False:
        return int(outcome)
    if outcome not in (0, 1):
        raise InvalidArgumentError(
            f"Comparator must return 0 or 1, got {outcome!r} for {pair!r}"
        )
    return int(outcome)


def order_comparator(order: Sequence[Hashable]) -> Comparator:
    """Return a comparator where the item appearing later in ``order`` wins."""

    positions = {item: idx for idx, item in enumerate(order)}

    async def compare(pair: Tuple[Any, Any]) -> Outcome:
        a, b = pair
        return 0 if positions[a] > positions[b] else 1

    return compare


def mapping_comparator(outcomes: Mapping[Tuple[Any, Any], Outcome]) -> Comparator:
    """Return a comparator answering from a fixed table of decisions.

    ``outcomes`` is keyed by ``(a, b)`` with ``a < b``; asking for the
    swapped pair inverts the stored answer.  Pairs missing from the table
    raise :class:`KeyError`, which makes this handy for non-transitive
    scenarios such as rock-paper-scissors.
    """

    table = dict(outcomes)

    async def compare(pair: Tuple[Any, Any]) -> Outcome:
        a, b = pair
        if a > b:
            return 0 if table[(b, a)] else 1
        return table[(a, b)]

    return compare


class CheckedComparator:
    """Wrap a comparator and police the comparator contract.

    Calls with two equal items, repeated unordered pairs and, when
    ``max_calls`` is given, calls beyond that budget raise ``ValueError``.
    Every call is counted in :attr:`calls` and optionally appended to
    ``log``.
    """

    def __init__(
        self,
        inner: Comparator,
        max_calls: Optional[int] = None,
        log: Optional[List[Tuple[Any, Any]]] = None,
    ) -> None:
        self.inner = inner
        self.max_calls = max_calls
        self.log = log
        self.calls = 0
        self._seen: Set[frozenset] = set()

    def reset(self) -> None:
        self.calls = 0
        self._seen.clear()
        if self.log is not None:
            self.log.clear()

    async def __call__(self, pair: Tuple[Any, Any]) -> Outcome:
        a, b = pair
        if a == b:
            raise ValueError(f"a and b may not be equal ({a!r})")
        key = frozenset((a, b))
        if key in self._seen:
            raise ValueError(f"duplicate comparison of {a!r} and {b!r}")
        self._seen.add(key)
        self.calls += 1
        if self.max_calls is not None and self.calls > self.max_calls:
            raise ValueError(f"too many Comparator calls ({self.calls})")
        if self.log is not None:
            self.log.append((a, b))
        return await call_comparator(self.inner, pair)


class CountingComparator:
    """Count calls and notify ``on_call`` after each decision."""

    def __init__(
        self,
        inner: Comparator,
        on_call: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.inner = inner
        self.on_call = on_call
        self.calls = 0

    async def __call__(self, pair: Tuple[Any, Any]) -> Outcome:
        outcome = await call_comparator(self.inner, pair)
        self.calls += 1
        if self.on_call is not None:
            self.on_call(self.calls)
        return outcome


__all__: List[str] = [
    "Comparator",
    "Outcome",
    "call_comparator",
    "order_comparator",
    "mapping_comparator",
    "CheckedComparator",
    "CountingComparator",
]

