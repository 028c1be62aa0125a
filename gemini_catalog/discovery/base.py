"""Base protocol and types for model discovery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from gemini_catalog.exceptions import FailureKind

T = TypeVar("T")


class RawDiscoveryRecord(BaseModel):
    """One entry of the provider's model listing, in wire shape."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str  # Namespaced identifier (e.g., "models/gemini-2.5-pro")
    display_name: str | None = Field(default=None, alias="displayName")
    input_token_limit: int | None = Field(default=None, alias="inputTokenLimit")
    output_token_limit: int | None = Field(default=None, alias="outputTokenLimit")
    supported_generation_methods: list[str] | None = Field(
        default=None, alias="supportedGenerationMethods"
    )


class ModelListResponse(BaseModel):
    """Body of GET /v1beta/models."""

    model_config = ConfigDict(extra="ignore")

    models: list[RawDiscoveryRecord]


@dataclass(frozen=True)
class DiscoveryOutcome(Generic[T]):
    """Result of a discovery stage: either items or the reason there are none."""

    items: tuple[T, ...] = ()
    failure: FailureKind | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, items: tuple[T, ...] | list[T]) -> DiscoveryOutcome[T]:
        return cls(items=tuple(items))

    @classmethod
    def failed(cls, kind: FailureKind) -> DiscoveryOutcome[T]:
        return cls(failure=kind)


class ModelSource(Protocol):
    """Protocol for model discovery adapters."""

    async def fetch(self, credential: str) -> DiscoveryOutcome[RawDiscoveryRecord]:
        """Return the raw model listing for this credential.

        Args:
            credential: Provider API key.

        Returns:
            Outcome holding the raw records, or the failure kind.
            Never raises; errors are logged internally.
        """
        ...
