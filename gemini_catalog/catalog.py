"""Curated Gemini model catalog.

Used whenever live discovery is unavailable: no API key, an unreachable or
misbehaving listing endpoint, or a listing with nothing usable in it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static identity of the model provider."""

    id: str
    name: str
    key_url: str


@dataclass(frozen=True)
class Model:
    """A chat model offered by the provider."""

    id: str  # Model identifier without the "models/" namespace (e.g., "gemini-2.5-pro")
    name: str  # Human readable display name
    max_input_tokens: int
    max_output_tokens: int
    provider: ProviderDescriptor
    default: bool = False


GEMINI_PROVIDER = ProviderDescriptor(
    id="gemini",
    name="Google",
    key_url="https://aistudio.google.com/app/apikey",
)

DEFAULT_MODEL_ID = "gemini-2.5-flash"
DEFAULT_MAX_INPUT_TOKENS = 1_048_576
DEFAULT_MAX_OUTPUT_TOKENS = 65_536

STATIC_MODELS: tuple[Model, ...] = (
    Model(
        id="gemini-2.5-pro",
        name="Gemini 2.5 Pro",
        max_input_tokens=DEFAULT_MAX_INPUT_TOKENS,
        max_output_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        provider=GEMINI_PROVIDER,
    ),
    Model(
        id="gemini-2.5-flash",
        name="Gemini 2.5 Flash",
        max_input_tokens=DEFAULT_MAX_INPUT_TOKENS,
        max_output_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        provider=GEMINI_PROVIDER,
        default=True,
    ),
    Model(
        id="gemini-2.5-flash-lite",
        name="Gemini 2.5 Flash-Lite",
        max_input_tokens=DEFAULT_MAX_INPUT_TOKENS,
        max_output_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        provider=GEMINI_PROVIDER,
    ),
)


def get_static_default() -> Model:
    """Return the single default model of the curated catalog."""
    return next(model for model in STATIC_MODELS if model.default)


def _check_static_catalog(models: tuple[Model, ...]) -> None:
    if not models:
        raise RuntimeError("Static Gemini catalog must not be empty")
    defaults = [model.id for model in models if model.default]
    if len(defaults) != 1:
        raise RuntimeError(
            f"Static Gemini catalog must have exactly one default model, found {defaults}"
        )


_check_static_catalog(STATIC_MODELS)
