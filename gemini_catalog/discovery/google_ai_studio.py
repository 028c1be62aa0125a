"""Google AI Studio (Gemini API) model source adapter.

Discovers models via Google's /v1beta/models API endpoint.
Ref: https://ai.google.dev/api/models
"""

import logging

import httpx

from gemini_catalog.config import DEFAULT_API_BASE
from gemini_catalog.discovery.base import DiscoveryOutcome, ModelListResponse, RawDiscoveryRecord
from gemini_catalog.exceptions import FailureKind

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class GeminiModelSource:
    """Model source for Google AI Studio (Gemini API).

    Calls /v1beta/models endpoint to discover available Gemini models.
    The API key is passed as the ``key`` query parameter.
    """

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize Gemini model source.

        Args:
            api_base: Base URL of the Gemini API, without trailing slash.
            timeout: HTTP request timeout in seconds.
            http_client: Optional shared client; it is never closed by this source.
        """
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    @property
    def models_url(self) -> str:
        return f"{self.api_base}/models"

    async def fetch(self, credential: str) -> DiscoveryOutcome[RawDiscoveryRecord]:
        """Fetch the raw model listing from /v1beta/models.

        Args:
            credential: Gemini API key.

        Returns:
            Outcome with the raw records in listing order, or the failure kind.
            Never raises (errors are logged).
        """
        try:
            if self._http_client is not None:
                response = await self._get(self._http_client, credential)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._get(client, credential)
            response.raise_for_status()

            listing = ModelListResponse.model_validate(response.json())

            logger.info("Discovered %d models from Gemini API", len(listing.models))
            return DiscoveryOutcome.success(listing.models)

        except httpx.HTTPStatusError as e:
            logger.error(
                "HTTP error discovering Gemini models: %s %s",
                e.response.status_code,
                e.response.text[:200] if e.response.text else "",
            )
            return DiscoveryOutcome.failed(FailureKind.TRANSPORT_FAILURE)
        except httpx.RequestError as e:
            logger.error("Request error discovering Gemini models: %s", str(e))
            return DiscoveryOutcome.failed(FailureKind.TRANSPORT_FAILURE)
        except ValueError as e:
            # Covers both invalid JSON and pydantic.ValidationError.
            logger.error("Malformed model listing from Gemini API: %s", str(e)[:200])
            return DiscoveryOutcome.failed(FailureKind.MALFORMED_RESPONSE)
        except Exception as e:
            logger.exception("Unexpected error discovering Gemini models: %s", str(e))
            return DiscoveryOutcome.failed(FailureKind.TRANSPORT_FAILURE)

    async def _get(self, client: httpx.AsyncClient, credential: str) -> httpx.Response:
        return await client.get(
            self.models_url,
            params={"key": credential},
            headers=JSON_HEADERS,
        )
