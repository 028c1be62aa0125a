"""Reduce a raw Gemini model listing to one model per family.

The listing contains many variants of the same logical model, e.g.
``gemini-2.5-pro`` next to ``gemini-2.5-pro-preview-03-25`` and
``gemini-2.5-pro-preview-05-06``. Selection runs in two stages:

1. Filter: keep chat-capable Gemini 2.5+ models, drop TTS models.
2. Group and rank: bucket models by base family name and keep the best
   member of each bucket (stable before preview, then by id).

Groups are emitted in the order they were first seen in the listing.
"""

import logging
import re
from collections.abc import Iterable

from gemini_catalog.catalog import (
    DEFAULT_MAX_INPUT_TOKENS,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MODEL_ID,
    GEMINI_PROVIDER,
    Model,
)
from gemini_catalog.discovery.base import DiscoveryOutcome, RawDiscoveryRecord
from gemini_catalog.exceptions import FailureKind

logger = logging.getLogger(__name__)

MODEL_NAMESPACE = "models/"
MODEL_NAME_PREFIX = f"{MODEL_NAMESPACE}gemini-"
GENERATE_CONTENT = "generateContent"
ACCEPTED_VERSION_TOKENS: tuple[str, ...] = ("2.5", "3.", "4.", "5.")

_PREVIEW_SUFFIX = re.compile(r"-preview.*$")
_DATE_SUFFIX = re.compile(r"-\d{2}-\d{2}$")


def is_supported(record: RawDiscoveryRecord) -> bool:
    """Return True if the record is a chat-capable Gemini 2.5+ non-TTS model."""
    name = record.name
    return (
        name.startswith(MODEL_NAME_PREFIX)
        and GENERATE_CONTENT in (record.supported_generation_methods or ())
        and any(token in name for token in ACCEPTED_VERSION_TOKENS)
        and "tts" not in name.lower()
    )


def to_model(record: RawDiscoveryRecord) -> Model:
    """Map a raw listing record to a catalog Model."""
    model_id = record.name.removeprefix(MODEL_NAMESPACE)
    return Model(
        id=model_id,
        name=record.display_name or model_id,
        max_input_tokens=record.input_token_limit or DEFAULT_MAX_INPUT_TOKENS,
        max_output_tokens=record.output_token_limit or DEFAULT_MAX_OUTPUT_TOKENS,
        provider=GEMINI_PROVIDER,
        default=model_id == DEFAULT_MODEL_ID,
    )


def filter_models(records: Iterable[RawDiscoveryRecord]) -> list[Model]:
    """Keep supported records and convert them to Models, preserving order."""
    return [to_model(record) for record in records if is_supported(record)]


def base_family_name(model_id: str) -> str:
    """Strip preview and date suffixes from a model id.

    >>> base_family_name("gemini-2.5-pro-preview-03-25")
    'gemini-2.5-pro'
    >>> base_family_name("gemini-2.0-flash-001-12-05")
    'gemini-2.0-flash-001'
    >>> base_family_name("gemini-2.5-flash-lite")
    'gemini-2.5-flash-lite'
    """
    base = _PREVIEW_SUFFIX.sub("", model_id)
    # A trailing "-lite" is a distinct family and is left alone.
    return _DATE_SUFFIX.sub("", base)


def is_stable(model: Model) -> bool:
    return "preview" not in model.id


def _rank_key(model: Model) -> tuple[bool, str]:
    return (not is_stable(model), model.id)


def group_models(models: Iterable[Model]) -> dict[str, list[Model]]:
    """Group models by base family name in first-seen order."""
    groups: dict[str, list[Model]] = {}
    for model in models:
        groups.setdefault(base_family_name(model.id), []).append(model)
    return groups


def pick_representatives(models: Iterable[Model]) -> list[Model]:
    """Return the best model of each family, in first-seen family order."""
    return [min(members, key=_rank_key) for members in group_models(models).values()]


def select_models(records: Iterable[RawDiscoveryRecord]) -> DiscoveryOutcome[Model]:
    """Filter, group and rank raw records into the discovered catalog."""
    records = list(records)
    candidates = filter_models(records)
    selected = pick_representatives(candidates)

    if not selected:
        logger.info(
            "No usable Gemini models among %d listed (%d passed filtering)",
            len(records),
            len(candidates),
        )
        return DiscoveryOutcome.failed(FailureKind.EMPTY_AFTER_FILTER)

    logger.debug(
        "Selected %d of %d Gemini models: %s",
        len(selected),
        len(records),
        ", ".join(model.id for model in selected),
    )
    return DiscoveryOutcome.success(selected)
