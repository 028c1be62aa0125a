"""gemini-catalog: Gemini model discovery with caching and static fallback."""

from gemini_catalog.catalog import (
    DEFAULT_MODEL_ID,
    GEMINI_PROVIDER,
    STATIC_MODELS,
    Model,
    ProviderDescriptor,
)
from gemini_catalog.config import Settings, get_settings
from gemini_catalog.exceptions import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    FailureKind,
    GeminiCatalogError,
    InternalServerError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    RequestCancelledError,
    UnprocessableEntityError,
)
from gemini_catalog.provider import (
    CacheEntry,
    GeminiProvider,
    create_provider,
    settings_credential_provider,
)
from gemini_catalog.request_adapter import ChatCompletionPayload, adapt_request
from gemini_catalog.transport import ChatTransport, OpenAICompatibleTransport

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DEFAULT_MODEL_ID",
    "GEMINI_PROVIDER",
    "STATIC_MODELS",
    "Model",
    "ProviderDescriptor",
    "Settings",
    "get_settings",
    "CacheEntry",
    "GeminiProvider",
    "create_provider",
    "settings_credential_provider",
    "ChatCompletionPayload",
    "adapt_request",
    "ChatTransport",
    "OpenAICompatibleTransport",
    "FailureKind",
    "GeminiCatalogError",
    "APIError",
    "APIStatusError",
    "APIConnectionError",
    "APITimeoutError",
    "AuthenticationError",
    "BadRequestError",
    "ConflictError",
    "InternalServerError",
    "NotFoundError",
    "PermissionDeniedError",
    "RateLimitError",
    "RequestCancelledError",
    "UnprocessableEntityError",
]
