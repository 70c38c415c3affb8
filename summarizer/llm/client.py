"""Language-model client used for summaries.

Generation providers
--------------------
``ollama`` (default)
    Calls the local Ollama REST API at ``/api/generate``.
    Configure via ``OLLAMA_BASE_URL`` and ``OLLAMA_CHAT_MODEL``.

``openai``
    Calls the OpenAI chat completions API.
    Requires ``OPENAI_API_KEY`` to be set.
    Configure via ``OPENAI_CHAT_MODEL``.

``gemini``
    Calls the Google Generative Language ``generateContent`` API.
    Requires ``GOOGLE_API_KEY`` to be set.
    Configure via ``GEMINI_CHAT_MODEL``.

Set ``LLM_PROVIDER`` in your ``.env`` to switch providers.  HTTP failures
are translated into the pipeline's error taxonomy so the retry executor can
tell transient trouble (429, 5xx, timeouts) from permanent rejections.
"""

from __future__ import annotations

import os

import httpx

from summarizer.config import settings
from summarizer.errors import PermanentRequestError, TransientError

_OPENAI_URL = "https://api.openai.com/v1/chat/completions"
_GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def _require_key(name: str, provider: str) -> str:
    api_key = os.environ.get(name, "")
    if not api_key:
        raise PermanentRequestError(
            f"{name} environment variable is not set. "
            f"Set it or switch LLM_PROVIDER away from {provider!r}.",
            code="LLM_CONFIG",
        )
    return api_key


# ---------------------------------------------------------------------------
# Provider implementations
# ---------------------------------------------------------------------------

async def _generate_ollama(client: httpx.AsyncClient, prompt: str) -> str:
    """Call Ollama ``/api/generate`` and return the completion text."""
    response = await client.post(
        f"{settings.ollama_base_url}/api/generate",
        json={"model": settings.ollama_chat_model, "prompt": prompt, "stream": False},
    )
    response.raise_for_status()
    return response.json().get("response", "")


async def _generate_openai(client: httpx.AsyncClient, prompt: str) -> str:
    """Call OpenAI chat completions and return the first choice's content."""
    api_key = _require_key("OPENAI_API_KEY", "openai")
    response = await client.post(
        _OPENAI_URL,
        headers={"Authorization": f"Bearer {api_key}"},
        json={
            "model": settings.openai_chat_model,
            "messages": [{"role": "user", "content": prompt}],
        },
    )
    response.raise_for_status()
    choices = response.json().get("choices") or []
    if not choices:
        return ""
    return choices[0].get("message", {}).get("content") or ""


async def _generate_gemini(client: httpx.AsyncClient, prompt: str) -> str:
    """Call Gemini ``generateContent`` and join the first candidate's parts."""
    api_key = _require_key("GOOGLE_API_KEY", "gemini")
    response = await client.post(
        _GEMINI_URL.format(model=settings.gemini_chat_model),
        params={"key": api_key},
        json={"contents": [{"parts": [{"text": prompt}]}]},
    )
    response.raise_for_status()
    candidates = response.json().get("candidates") or []
    if not candidates:
        return ""
    parts = candidates[0].get("content", {}).get("parts", [])
    return "".join(part.get("text", "") for part in parts)


_PROVIDERS = {
    "ollama": _generate_ollama,
    "openai": _generate_openai,
    "gemini": _generate_gemini,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def generate(prompt: str) -> str:
    """Return the model's completion for *prompt*.

    The active provider is determined by ``settings.llm_provider``.

    Raises:
        TransientError: HTTP 429 / 5xx responses, timeouts and connection
            failures.
        PermanentRequestError: other HTTP 4xx responses, an unknown provider
            or a missing API key.
    """
    provider = _PROVIDERS.get(settings.llm_provider)
    if provider is None:
        raise PermanentRequestError(
            f"Unknown LLM_PROVIDER {settings.llm_provider!r}. "
            f"Use one of: {', '.join(sorted(_PROVIDERS))}",
            code="LLM_CONFIG",
        )

    try:
        async with httpx.AsyncClient(timeout=settings.llm_timeout) as client:
            return await provider(client, prompt)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status == 429:
            raise TransientError("Language model rate limited", code="RATE_LIMITED") from exc
        if status >= 500:
            raise TransientError(
                f"Language model server error {status}", code="SERVER_ERROR"
            ) from exc
        raise PermanentRequestError(
            f"Language model rejected the request ({status})", code="HTTP_ERROR"
        ) from exc
    except httpx.TimeoutException as exc:
        raise TransientError("Language model request timed out", code="TIMEOUT") from exc
    except httpx.TransportError as exc:
        raise TransientError(
            f"Language model unavailable: {exc}", code="LLM_UNAVAILABLE"
        ) from exc
