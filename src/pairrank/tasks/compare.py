from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..core.prompt_template import PromptTemplate, resolve_template
from ..utils.logging import get_logger
from ..utils.openai_utils import get_response
from ..utils.parsing import safe_json

logger = get_logger(__name__)

_WINNER_LABELS = {"circle": 0, "square": 1}


@dataclass
class CompareConfig:
    """Configuration for :class:`LLMComparator`.

    Parameters
    ----------
    model:
        Name of the language model passed to ``get_response``.
    criterion:
        What "better" means for the items being ranked, e.g. ``"clarity"``.
        When ``None`` the model judges overall quality.
    additional_instructions:
        Extra, user-supplied instructions appended to the prompt.
    circle_first:
        Fix which entry is shown first.  ``None`` randomises the
        presentation order for every comparison to reduce position bias.
    use_dummy:
        Decide without calling the API.  The dummy verdict compares stable
        hashes of the two items, so it is a consistent total order.
    max_timeout:
        Seconds to wait for a single response before retrying.
    max_retries:
        How many times transient API failures are retried.
    """

    model: str = "gpt-5-mini"
    criterion: Optional[str] = None
    additional_instructions: Optional[str] = None
    circle_first: Optional[bool] = None
    use_dummy: bool = False
    max_timeout: Optional[float] = None
    max_retries: int = 3
    reasoning_effort: Optional[str] = None
    base_url: Optional[str] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.additional_instructions is not None:
            cleaned = str(self.additional_instructions).strip()
            self.additional_instructions = cleaned or None
        if self.criterion is not None:
            cleaned = str(self.criterion).strip()
            self.criterion = cleaned or None
        if self.max_retries < 0:
            raise ValueError("max_retries must be zero or more")


class LLMComparator:
    """Comparator that asks a language model which of two items is better.

    Instances are async callables following the comparator contract: given
    ``(a, b)`` they return ``0`` if the model prefers ``a`` and ``1`` if it
    prefers ``b``.  An unusable answer raises ``ValueError``, which aborts
    the ranking that asked.
    """

    def __init__(
        self,
        cfg: Optional[CompareConfig] = None,
        template: Optional[PromptTemplate] = None,
        template_path: Optional[str] = None,
    ) -> None:
        self.cfg = cfg or CompareConfig()
        self.template = resolve_template(
            template=template,
            template_path=template_path,
            reference_filename="comparison_prompt.jinja2",
        )
        self._rng = random.Random(self.cfg.seed)
        self.history: Dict[Tuple[str, str], Dict[str, Any]] = {}

    def build_prompt(self, circle: Any, square: Any, circle_first: bool) -> str:
        return self.template.render(
            entry_circle=str(circle),
            entry_square=str(square),
            criterion=self.cfg.criterion or "",
            additional_instructions=self.cfg.additional_instructions or "",
            circle_first=circle_first,
        )

    @staticmethod
    def _dummy_outcome(a: Any, b: Any) -> int:
        digest_a = hashlib.sha1(str(a).encode()).hexdigest()
        digest_b = hashlib.sha1(str(b).encode()).hexdigest()
        return 1 if (digest_b, str(b)) > (digest_a, str(a)) else 0

    @staticmethod
    def _parse_winner(raw: Any) -> Tuple[int, str]:
        obj = safe_json(raw)
        if not isinstance(obj, dict):
            raise ValueError(f"Could not parse a JSON verdict from the model: {raw!r}")
        winner = str(obj.get("winner", "")).strip().lower()
        if winner not in _WINNER_LABELS:
            raise ValueError(f"Model did not name a winner (got {obj.get('winner')!r})")
        return _WINNER_LABELS[winner], str(obj.get("explanation", "") or "")

    async def __call__(self, pair: Tuple[Any, Any]) -> int:
        a, b = pair
        circle_first = (
            self.cfg.circle_first
            if self.cfg.circle_first is not None
            else self._rng.random() < 0.5
        )
        prompt = self.build_prompt(a, b, circle_first)
        if self.cfg.use_dummy:
            outcome, explanation = self._dummy_outcome(a, b), "dummy verdict"
        else:
            raw = await get_response(
                prompt,
                model=self.cfg.model,
                json_mode=True,
                reasoning_effort=self.cfg.reasoning_effort,
                max_timeout=self.cfg.max_timeout,
                max_retries=self.cfg.max_retries,
                base_url=self.cfg.base_url,
            )
            outcome, explanation = self._parse_winner(raw)
        logger.debug("Compared %r vs %r -> %s", a, b, "circle" if outcome == 0 else "square")
        self.history[(str(a), str(b))] = {
            "winner": b if outcome else a,
            "circle_first": circle_first,
            "explanation": explanation,
        }
        return outcome
