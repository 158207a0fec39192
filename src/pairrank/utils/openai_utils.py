"""Thin asynchronous wrapper around the OpenAI Responses API.

Only what the LLM comparator needs is exposed: a cached client per base URL,
``get_response`` with an optional timeout, and retries with exponential
backoff for transient API failures.  Use ``use_dummy=True`` to exercise the
surrounding code without network access.
"""

from __future__ import annotations

import asyncio
import os
import random
from typing import Any, Dict, Optional

import openai

from .logging import get_logger

logger = get_logger(__name__)

# single connection pool per process, keyed by base URL and created lazily
_clients_async: Dict[Optional[str], openai.AsyncOpenAI] = {}

_TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.RateLimitError,
    openai.InternalServerError,
)


def _require_api_key() -> None:
    if not os.getenv("OPENAI_API_KEY"):
        raise RuntimeError(
            "OPENAI_API_KEY is not set. Export your key or use use_dummy=True."
        )


def _get_client(base_url: Optional[str] = None) -> openai.AsyncOpenAI:
    """Return a cached ``AsyncOpenAI`` client for ``base_url``.

    When ``base_url`` is ``None`` the ``OPENAI_BASE_URL`` environment variable
    or the default endpoint is used.
    """

    url = base_url or os.getenv("OPENAI_BASE_URL")
    client = _clients_async.get(url)
    if client is None:
        kwargs: Dict[str, Any] = {}
        if url:
            kwargs["base_url"] = url
        client = openai.AsyncOpenAI(**kwargs)
        _clients_async[url] = client
    return client


def _build_params(
    *,
    model: str,
    prompt: str,
    system_instruction: Optional[str],
    json_mode: bool,
    reasoning_effort: Optional[str],
) -> Dict[str, Any]:
    messages = []
    if system_instruction:
        messages.append({"role": "system", "content": system_instruction})
    messages.append({"role": "user", "content": prompt})
    params: Dict[str, Any] = {"model": model, "input": messages}
    if json_mode:
        params["text"] = {"format": {"type": "json_object"}}
    if reasoning_effort:
        params["reasoning"] = {"effort": reasoning_effort}
    return params


async def get_response(
    prompt: str,
    *,
    model: str = "gpt-5-mini",
    system_instruction: Optional[str] = None,
    json_mode: bool = True,
    reasoning_effort: Optional[str] = None,
    max_timeout: Optional[float] = None,
    max_retries: int = 3,
    base_url: Optional[str] = None,
    use_dummy: bool = False,
) -> str:
    """Return the text of a single model response to ``prompt``.

    Transient failures (connection problems, timeouts, rate limits and 5xx
    errors) are retried up to ``max_retries`` times.  Other errors, and the
    last transient one, propagate to the caller.
    """

    if use_dummy:
        return f"DUMMY {prompt}"
    _require_api_key()
    client = _get_client(base_url)
    params = _build_params(
        model=model,
        prompt=prompt,
        system_instruction=system_instruction,
        json_mode=json_mode,
        reasoning_effort=reasoning_effort,
    )
    attempt = 0
    while True:
        try:
            call = client.responses.create(**params)
            if max_timeout is not None:
                response = await asyncio.wait_for(call, timeout=max_timeout)
            else:
                response = await call
            return response.output_text
        except (asyncio.TimeoutError, *_TRANSIENT_ERRORS) as exc:
            attempt += 1
            if attempt > max_retries:
                raise
            delay = min(30.0, 2 ** (attempt - 1)) * (1 + random.random() / 2)
            logger.warning(
                "Model call failed (%s); retrying in %.1fs (%d/%d)",
                exc.__class__.__name__,
                delay,
                attempt,
                max_retries,
            )
            await asyncio.sleep(delay)
