"""Lenient JSON parsing for model responses."""

from __future__ import annotations

import json
import re
from typing import Any, Optional

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def safe_json(raw: Any) -> Optional[Any]:
    """Best-effort conversion of ``raw`` into a JSON object.

    Dictionaries pass through untouched.  Strings are tried as JSON, then
    with surrounding Markdown code fences stripped, then by extracting the
    outermost ``{...}`` block.  ``None`` is returned when nothing parses.
    """

    if raw is None:
        return None
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, list):
        raw = raw[0] if raw else ""
    text = str(raw).strip()
    if not text:
        return None
    candidates = [text]
    fence = _FENCE_RE.search(text)
    if fence:
        candidates.append(fence.group(1).strip())
    obj = _OBJECT_RE.search(text)
    if obj:
        candidates.append(obj.group(0))
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
    return None
