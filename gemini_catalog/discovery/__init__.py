"""Live Gemini model discovery.

- GeminiModelSource reads the provider's /v1beta/models listing
- selector reduces the listing to one model per family
"""

from gemini_catalog.discovery.base import (
    DiscoveryOutcome,
    ModelListResponse,
    ModelSource,
    RawDiscoveryRecord,
)
from gemini_catalog.discovery.google_ai_studio import GeminiModelSource
from gemini_catalog.discovery.selector import (
    base_family_name,
    filter_models,
    group_models,
    pick_representatives,
    select_models,
)

__all__ = [
    "DiscoveryOutcome",
    "ModelListResponse",
    "ModelSource",
    "RawDiscoveryRecord",
    "GeminiModelSource",
    "base_family_name",
    "filter_models",
    "group_models",
    "pick_representatives",
    "select_models",
]
