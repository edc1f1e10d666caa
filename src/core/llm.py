"""
ChorePlan Assistant — LLM Provider Abstraction.

Single public function `complete()` that routes to the configured provider.
Provider is selected at first call via the LLM_PROVIDER env var.
Supports: anthropic (default), gemini, openai, cohere.

HTTP failures from any provider are re-raised as CompletionError so callers
can show status, status text and the service's own message.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

# Type alias for provider implementations
_ProviderFn = Callable[[str, str, str, str, int], Awaitable[str]]


class CompletionError(Exception):
    """Raised when the completion service answers with an HTTP error."""

    def __init__(self, provider: str, status: int, message: str) -> None:
        self.provider = provider
        self.status = status
        self.message = message or "Unknown error"
        super().__init__(f"{status} {self.status_text} - {self.message}")

    @property
    def status_text(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return ""


def _error_message(body: object, fallback: str) -> str:
    """Dig the service-provided message out of an error body."""
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
        if body.get("message"):
            return str(body["message"])
    return fallback


# ---------------------------------------------------------------------------
# Provider implementations
# ---------------------------------------------------------------------------


async def _complete_anthropic(api_key: str, model: str, system: str, user_message: str, max_tokens: int) -> str:
    import anthropic

    client = anthropic.AsyncAnthropic(api_key=api_key)
    try:
        response = await client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=system,
            messages=[{"role": "user", "content": user_message}],
        )
    except anthropic.APIStatusError as exc:
        raise CompletionError(
            "Claude", exc.status_code, _error_message(exc.body, exc.message)
        ) from exc

    if not response.content or response.content[0].type != "text":
        return ""
    return response.content[0].text


async def _complete_gemini(api_key: str, model: str, system: str, user_message: str, max_tokens: int) -> str:
    import google.generativeai as genai
    from google.api_core import exceptions as google_exceptions

    genai.configure(api_key=api_key)
    gm = genai.GenerativeModel(
        model_name=model,
        system_instruction=system,
    )
    try:
        response = await gm.generate_content_async(
            user_message,
            generation_config=genai.types.GenerationConfig(max_output_tokens=max_tokens),
        )
    except google_exceptions.GoogleAPICallError as exc:
        raise CompletionError("Gemini", int(exc.code or 500), exc.message) from exc

    try:
        return response.text
    except ValueError:
        # Blocked or empty candidates
        return ""


async def _complete_openai(api_key: str, model: str, system: str, user_message: str, max_tokens: int) -> str:
    import openai

    client = openai.AsyncOpenAI(api_key=api_key)
    try:
        response = await client.chat.completions.create(
            model=model,
            max_tokens=max_tokens,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
        )
    except openai.APIStatusError as exc:
        raise CompletionError(
            "OpenAI", exc.status_code, _error_message(exc.body, exc.message)
        ) from exc

    if not response.choices:
        return ""
    return response.choices[0].message.content or ""


async def _complete_cohere(api_key: str, model: str, system: str, user_message: str, max_tokens: int) -> str:
    import cohere
    from cohere.core.api_error import ApiError

    client = cohere.AsyncClientV2(api_key=api_key)
    try:
        response = await client.chat(
            model=model,
            max_tokens=max_tokens,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user_message},
            ],
        )
    except ApiError as exc:
        raise CompletionError(
            "Cohere", int(exc.status_code or 500), _error_message(exc.body, str(exc.body))
        ) from exc

    if not response.message.content:
        return ""
    return response.message.content[0].text


# ---------------------------------------------------------------------------
# Provider selection (runs once at first call)
# ---------------------------------------------------------------------------

_PROVIDERS: dict[str, tuple[_ProviderFn, str]] = {
    "anthropic": (_complete_anthropic, "claude-3-7-sonnet-latest"),
    "gemini":    (_complete_gemini,    "gemini-2.0-flash"),
    "openai":    (_complete_openai,    "gpt-4o-mini"),
    "cohere":    (_complete_cohere,    "command-a-03-2025"),
}


def _select_provider() -> tuple[_ProviderFn, str]:
    """Read settings and return (provider_fn, model)."""
    from src.config import settings

    provider_name = settings.LLM_PROVIDER.lower()
    if provider_name not in _PROVIDERS:
        raise ValueError(
            f"Unknown LLM_PROVIDER={provider_name!r}. "
            f"Supported: {', '.join(_PROVIDERS)}"
        )

    fn, default_model = _PROVIDERS[provider_name]
    model = settings.LLM_MODEL or default_model

    logger.info("LLM provider: %s, model: %s", provider_name, model)
    return fn, model


# Lazy singleton — populated on first call to complete()
_provider_fn: _ProviderFn | None = None
_model: str = ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def complete(
    system: str,
    user_message: str,
    max_tokens: int = 256,
    api_key: str | None = None,
) -> str:
    """Send a prompt to the configured LLM provider and return the response text.

    `api_key` overrides the LLM_API_KEY setting. Returns "" when the service
    answered without any text. Raises CompletionError on HTTP errors and
    lets anything else propagate — callers should handle exceptions.
    """
    global _provider_fn, _model

    if _provider_fn is None:
        _provider_fn, _model = _select_provider()

    if api_key is None:
        from src.config import settings
        api_key = settings.LLM_API_KEY

    return await _provider_fn(api_key, _model, system, user_message, max_tokens)
