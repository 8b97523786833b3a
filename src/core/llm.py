"""
Household Hub — Chat-completion client.

Single public function `complete()` that sends one request to an
OpenAI-compatible chat-completions endpoint and returns the text of the
first choice. One attempt per call: no retries, no backoff.
"""

from __future__ import annotations

import logging

from openai import APIStatusError, AsyncOpenAI, OpenAIError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TIMEOUT_SECONDS = 30.0


class UpstreamError(Exception):
    """Raised when the chat-completion endpoint fails or returns no usable choice.

    `status_code` is None when the request never got an HTTP response.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


async def complete(
    system: str,
    user_message: str,
    *,
    api_key: str,
    base_url: str = DEFAULT_API_URL,
    model: str = DEFAULT_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Send a system prompt plus user text and return the first completion's text.

    Raises UpstreamError on transport failures, non-success statuses, and
    responses without choices. The caller is responsible for checking that
    `api_key` is configured.
    """
    try:
        async with AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or DEFAULT_API_URL,
            timeout=timeout,
            max_retries=0,
        ) as client:
            response = await client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user_message},
                ],
            )
    except APIStatusError as exc:
        body = exc.response.text
        logger.error("Chat completion API error: %s - %s", exc.status_code, body)
        raise UpstreamError(
            f"Chat completion API returned {exc.status_code}",
            status_code=exc.status_code,
            body=body,
        ) from exc
    except OpenAIError as exc:
        logger.error("Chat completion request failed: %s", exc)
        raise UpstreamError(f"Error contacting chat completion API: {exc}", body=str(exc)) from exc

    choices = getattr(response, "choices", None)
    if not choices:
        raise UpstreamError("No choices in chat completion response")

    content = choices[0].message.content
    return content if isinstance(content, str) else ""
