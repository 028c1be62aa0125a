"""Outgoing chat-completion payload adaptation.

Gemini's OpenAI-compatible endpoint does not understand
``max_completion_tokens``; it expects the older ``max_tokens`` name.
"""

from typing import Any, TypedDict


class ChatCompletionPayload(TypedDict, total=False):
    """OpenAI-style chat completion request body."""

    model: str
    messages: list[dict[str, Any]]
    temperature: float
    top_p: float
    stream: bool
    stop: str | list[str]
    max_tokens: int
    max_completion_tokens: int | None


def adapt_request(payload: ChatCompletionPayload) -> ChatCompletionPayload:
    """Return a copy of ``payload`` with max_completion_tokens renamed to max_tokens.

    A zero/None budget is dropped entirely. All other fields are kept as-is.
    """
    rest = payload.copy()
    if "max_completion_tokens" not in rest:
        return rest

    budget = rest.pop("max_completion_tokens")
    if not budget:
        return rest

    adapted: ChatCompletionPayload = {"max_tokens": budget}
    # An explicit max_tokens in the payload takes precedence.
    adapted.update(rest)
    return adapted
