"""Terminal interaction: a human comparator and yes/no prompts."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, List, Optional, Tuple

_CHOICES = {"1": 0, "a": 0, "2": 1, "b": 1}
_YES = {"y", "yes"}
_NO = {"n", "no", ""}


def parse_items(lines: Iterable[str]) -> List[str]:
    """Strip every line and drop the blank ones."""
    return [s for s in (line.strip() for line in lines) if s]


class ConsoleComparator:
    """Ask a person at the terminal which of two items they prefer.

    ``input_func`` runs in a worker thread so the event loop stays free while
    waiting.  Calls are serialised with a lock: tie groups are re-ranked
    concurrently, but there is only one person answering.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], Any] = print,
    ) -> None:
        self.input_func = input_func
        self.output = output
        self.asked = 0
        self._lock: Optional[asyncio.Lock] = None

    async def _ask(self, prompt: str) -> str:
        return await asyncio.to_thread(self.input_func, prompt)

    async def __call__(self, pair: Tuple[Any, Any]) -> int:
        if self._lock is None:
            self._lock = asyncio.Lock()
        a, b = pair
        async with self._lock:
            self.asked += 1
            self.output(f"\nMake your choice ({self.asked}):")
            self.output(f"  [1] {a}")
            self.output(f"  [2] {b}")
            while True:
                answer = (await self._ask("Choice [1/2]: ")).strip().lower()
                if answer in _CHOICES:
                    return _CHOICES[answer]
                self.output("Please answer 1 (or a) or 2 (or b).")


async def ask_yes_no(
    question: str,
    input_func: Callable[[str], str] = input,
    output: Callable[[str], Any] = print,
) -> bool:
    """Ask ``question`` until the answer is yes or no; empty means no."""
    while True:
        answer = (await asyncio.to_thread(input_func, f"{question} [y/N]: ")).strip().lower()
        if answer in _YES:
            return True
        if answer in _NO:
            return False
        output("Please answer y or n.")
