"""Shared OpenAI-compatible chat transport.

The provider adapts payloads and hands them to a ``ChatTransport``.
``OpenAICompatibleTransport`` is the default implementation: a thin httpx
wrapper with bounded retries and caller-driven cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import TYPE_CHECKING, Protocol

import httpx

from gemini_catalog.exceptions import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    RequestCancelledError,
)
from gemini_catalog.request_adapter import ChatCompletionPayload

if TYPE_CHECKING:
    from gemini_catalog.catalog import Model

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(timeout=60.0, connect=5.0)
DEFAULT_MAX_RETRIES = 2

_RETRY_STATUS_CODES = frozenset({408, 409, 429, 500, 502, 503, 504})


class ChatTransport(Protocol):
    """Protocol for the transport that performs chat/completion calls."""

    async def send(
        self,
        *,
        action: str,
        url: str,
        api_key: str,
        model: "Model",
        payload: ChatCompletionPayload,
        cancellation: asyncio.Event | None = None,
    ) -> httpx.Response:
        """POST ``payload`` to ``url`` and return the successful response.

        Raises:
            APIStatusError: Backend answered with a 4xx/5xx status.
            APIConnectionError: Backend could not be reached.
            RequestCancelledError: ``cancellation`` was set before completion.
        """
        ...


class OpenAICompatibleTransport:
    """Async transport for OpenAI-compatible /chat/completions endpoints.

    Usage::

        async with OpenAICompatibleTransport() as transport:
            response = await transport.send(
                action="explain",
                url="https://.../chat/completions",
                api_key=key,
                model=model,
                payload={"messages": [...]},
            )
    """

    def __init__(
        self,
        *,
        timeout: float | httpx.Timeout | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = 0.5,
        retry_multiplier: float = 2.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._retry_multiplier = retry_multiplier

        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            self._client = httpx.AsyncClient(
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            )
            self._owns_client = True

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> OpenAICompatibleTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def send(
        self,
        *,
        action: str,
        url: str,
        api_key: str,
        model: "Model",
        payload: ChatCompletionPayload,
        cancellation: asyncio.Event | None = None,
    ) -> httpx.Response:
        request = self._client.build_request(
            "POST",
            url,
            json={"model": model.id, **payload},
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

        last_exc: APIError | None = None
        retry_delay = self._retry_delay
        for attempt in range(1 + self._max_retries):
            if attempt:
                await self._sleep(retry_delay, cancellation)
                retry_delay *= self._retry_multiplier

            _raise_if_cancelled(cancellation, action, model)
            logger.debug(
                "Sending %s request for model %s (attempt %d/%d)",
                action,
                model.id,
                attempt + 1,
                1 + self._max_retries,
            )

            try:
                response = await self._send_cancellable(request, cancellation, action, model)
            except httpx.TimeoutException:
                last_exc = APITimeoutError(request)
                logger.warning("Timeout on %s request for model %s", action, model.id)
                continue
            except httpx.ConnectError as exc:
                last_exc = APIConnectionError(message=str(exc), request=request)
                logger.warning("Connection error on %s request for model %s: %s", action, model.id, exc)
                continue

            if response.status_code >= 400:
                if response.status_code in _RETRY_STATUS_CODES and attempt < self._max_retries:
                    logger.warning(
                        "Attempt %d for model %s failed with HTTP %d, retrying",
                        attempt + 1,
                        model.id,
                        response.status_code,
                    )
                    continue
                raise APIStatusError.from_response(response)

            return response

        logger.error("All %d attempts failed for model %s", 1 + self._max_retries, model.id)
        raise last_exc  # type: ignore[misc]

    async def _send_cancellable(
        self,
        request: httpx.Request,
        cancellation: asyncio.Event | None,
        action: str,
        model: "Model",
    ) -> httpx.Response:
        if cancellation is None:
            return await self._client.send(request)

        send_task = asyncio.ensure_future(self._client.send(request))
        cancel_task = asyncio.ensure_future(cancellation.wait())
        try:
            done, _ = await asyncio.wait(
                {send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancel_task.cancel()
            if not send_task.done():
                send_task.cancel()

        if send_task in done:
            return send_task.result()
        logger.info("Cancelled %s request for model %s", action, model.id)
        raise RequestCancelledError(f"{action} request for {model.id} was cancelled")

    async def _sleep(self, delay: float, cancellation: asyncio.Event | None) -> None:
        if delay <= 0:
            return
        if cancellation is None:
            await asyncio.sleep(delay)
            return
        try:
            await asyncio.wait_for(cancellation.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass


def _raise_if_cancelled(cancellation: asyncio.Event | None, action: str, model: "Model") -> None:
    if cancellation is not None and cancellation.is_set():
        raise RequestCancelledError(f"{action} request for {model.id} was cancelled")
