"""Gemini provider: cached model discovery with static fallback.

``GeminiProvider.get_models`` never raises. It returns, in order of preference:

1. The cached discovery result, while it is fresh.
2. A fresh discovery result (which then replaces the cache).
3. The curated static catalog, for any failure. The cache is left as-is so
   the next call retries discovery.

Requests are shaped by ``adapt_request`` before being handed to the shared
``ChatTransport``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from types import TracebackType

import httpx

from gemini_catalog.catalog import (
    GEMINI_PROVIDER,
    STATIC_MODELS,
    Model,
    ProviderDescriptor,
    get_static_default,
)
from gemini_catalog.config import DEFAULT_API_BASE, Settings, get_settings
from gemini_catalog.discovery.base import DiscoveryOutcome, ModelSource
from gemini_catalog.discovery.google_ai_studio import GeminiModelSource
from gemini_catalog.discovery.selector import select_models
from gemini_catalog.exceptions import FailureKind
from gemini_catalog.request_adapter import ChatCompletionPayload, adapt_request
from gemini_catalog.transport import DEFAULT_MAX_RETRIES, ChatTransport, OpenAICompatibleTransport

logger = logging.getLogger(__name__)

CredentialProvider = Callable[[], Awaitable[str | None]]
Clock = Callable[[], float]

DEFAULT_CACHE_TTL_SECONDS = 15 * 60


@dataclass(frozen=True)
class CacheEntry:
    """Last successful discovery result and when it stops being usable."""

    models: tuple[Model, ...]
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return bool(self.models) and self.expires_at > now


class GeminiProvider:
    """Model catalog and request entry point for the Gemini API."""

    descriptor: ProviderDescriptor = GEMINI_PROVIDER

    def __init__(
        self,
        credential_provider: CredentialProvider,
        *,
        source: ModelSource | None = None,
        transport: ChatTransport | None = None,
        api_base: str = DEFAULT_API_BASE,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        request_timeout: float | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize the provider.

        Args:
            credential_provider: Async callable returning the API key, or None.
            source: Discovery source. Defaults to GeminiModelSource.
            transport: Transport for completion requests. Defaults to
                OpenAICompatibleTransport, owned and closed by this provider.
            api_base: Base URL of the Gemini API.
            cache_ttl: Seconds a successful discovery result is reused.
            request_timeout: Timeout of the default transport, in seconds.
            max_retries: Retry count of the default transport.
            clock: Returns the current time in seconds.
        """
        self._credential_provider = credential_provider
        self._api_base = api_base.rstrip("/")
        self._source: ModelSource = source or GeminiModelSource(api_base=self._api_base)
        self._owns_transport = transport is None
        self._transport: ChatTransport = transport or OpenAICompatibleTransport(
            timeout=request_timeout,
            max_retries=max_retries,
        )
        self._cache_ttl = cache_ttl
        self._clock = clock

        self._cache: CacheEntry | None = None
        self._inflight: asyncio.Future[tuple[Model, ...]] | None = None

    @property
    def id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def key_url(self) -> str:
        return self.descriptor.key_url

    @property
    def cached_models(self) -> tuple[Model, ...] | None:
        return self._cache.models if self._cache is not None else None

    @property
    def cache_expires_at(self) -> float | None:
        return self._cache.expires_at if self._cache is not None else None

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self._transport, OpenAICompatibleTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> GeminiProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Model catalog
    # ------------------------------------------------------------------

    async def get_models(self) -> tuple[Model, ...]:
        """Return the current model catalog. Never raises."""
        now = self._clock()
        if self._cache is not None and self._cache.is_fresh(now):
            logger.debug("Using cached Gemini models (%d)", len(self._cache.models))
            return self._cache.models

        # Concurrent callers share the discovery already in flight.
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh(now))
        return await asyncio.shield(self._inflight)

    async def get_model(self, model_id: str) -> Model | None:
        for model in await self.get_models():
            if model.id == model_id:
                return model
        return None

    async def get_default_model(self) -> Model:
        for model in await self.get_models():
            if model.default:
                return model
        # A discovered catalog might not list the default model at all.
        return get_static_default()

    async def _refresh(self, now: float) -> tuple[Model, ...]:
        try:
            try:
                outcome = await self._discover()
            except Exception:
                logger.exception("Unexpected error during Gemini model discovery")
                outcome = DiscoveryOutcome.failed(FailureKind.TRANSPORT_FAILURE)

            failure = outcome.failure
            if failure is None:
                self._cache = CacheEntry(models=outcome.items, expires_at=now + self._cache_ttl)
                logger.info(
                    "Cached %d Gemini models for %.0f seconds",
                    len(outcome.items),
                    self._cache_ttl,
                )
                return outcome.items

            if failure is FailureKind.MISSING_CREDENTIAL:
                logger.warning("No Gemini API key available, using static model catalog")
            else:
                logger.info(
                    "Gemini model discovery failed (%s), using static model catalog",
                    failure.value,
                )
            return STATIC_MODELS
        finally:
            self._inflight = None

    async def _discover(self) -> DiscoveryOutcome[Model]:
        credential = await self._get_credential()
        if not credential:
            return DiscoveryOutcome.failed(FailureKind.MISSING_CREDENTIAL)

        listing = await self._source.fetch(credential)
        if listing.failure is not None:
            return DiscoveryOutcome.failed(listing.failure)
        return select_models(listing.items)

    async def _get_credential(self) -> str | None:
        try:
            return await self._credential_provider()
        except Exception as e:
            logger.error("Failed to obtain Gemini API key: %s", str(e))
            return None

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def resolve_endpoint_url(self, model: Model) -> str:
        return f"{self._api_base}/chat/completions"

    async def build_request(
        self,
        action: str,
        model: Model,
        credential: str,
        payload: ChatCompletionPayload,
        cancellation: asyncio.Event | None = None,
    ) -> httpx.Response:
        """Adapt ``payload`` for Gemini and send it through the transport.

        Transport errors propagate unchanged.
        """
        return await self._transport.send(
            action=action,
            url=self.resolve_endpoint_url(model),
            api_key=credential,
            model=model,
            payload=adapt_request(payload),
            cancellation=cancellation,
        )


def settings_credential_provider(settings: Settings) -> CredentialProvider:
    """Credential provider that reads GEMINI_CATALOG_API_KEY."""

    async def provide() -> str | None:
        return settings.api_key or None

    return provide


def create_provider(
    settings: Settings | None = None,
    credential_provider: CredentialProvider | None = None,
) -> GeminiProvider:
    """Build a GeminiProvider wired from settings.

    Args:
        settings: Settings to use. Defaults to get_settings().
        credential_provider: Overrides the settings-based API key lookup.
    """
    settings = settings or get_settings()
    return GeminiProvider(
        credential_provider or settings_credential_provider(settings),
        source=GeminiModelSource(api_base=settings.api_base, timeout=settings.discovery_timeout),
        api_base=settings.api_base,
        cache_ttl=settings.cache_ttl_seconds,
        request_timeout=settings.request_timeout,
        max_retries=settings.max_retries,
    )
