"""Tests for filtering, grouping and ranking of discovered models."""

import pytest

from gemini_catalog.catalog import GEMINI_PROVIDER, Model
from gemini_catalog.discovery.base import RawDiscoveryRecord
from gemini_catalog.discovery.selector import (
    base_family_name,
    filter_models,
    group_models,
    is_supported,
    pick_representatives,
    select_models,
    to_model,
)
from gemini_catalog.exceptions import FailureKind


def record(
    name: str,
    display_name: str | None = None,
    methods: list[str] | None = None,
    input_limit: int | None = 1048576,
    output_limit: int | None = 65536,
) -> RawDiscoveryRecord:
    return RawDiscoveryRecord(
        name=name,
        display_name=display_name,
        input_token_limit=input_limit,
        output_token_limit=output_limit,
        supported_generation_methods=["generateContent"] if methods is None else methods,
    )


def model(model_id: str) -> Model:
    return Model(
        id=model_id,
        name=model_id,
        max_input_tokens=1,
        max_output_tokens=1,
        provider=GEMINI_PROVIDER,
    )


# ============================================================================
# Filter Stage
# ============================================================================


class TestFilter:
    """Tests for the record filter and record-to-model mapping."""

    def test_accepts_gemini_25(self):
        assert is_supported(record("models/gemini-2.5-pro"))

    @pytest.mark.parametrize(
        "name",
        [
            "models/gemini-3.0-pro",
            "models/gemini-4.1-flash",
            "models/gemini-5.0-ultra",
        ],
    )
    def test_accepts_future_major_versions(self, name):
        assert is_supported(record(name))

    @pytest.mark.parametrize(
        "name",
        [
            "models/gemini-1.5-pro",
            "models/gemini-2.0-flash",
            "models/gemini-pro",
        ],
    )
    def test_rejects_old_versions(self, name):
        assert not is_supported(record(name))

    def test_rejects_other_families(self):
        assert not is_supported(record("models/gemma-3.0-27b-it"))
        assert not is_supported(record("models/text-embedding-004"))

    def test_requires_namespace(self):
        assert not is_supported(record("gemini-2.5-pro"))

    def test_requires_generate_content(self):
        assert not is_supported(record("models/gemini-2.5-pro", methods=["embedContent"]))

    def test_missing_capabilities_rejected(self):
        raw = RawDiscoveryRecord(name="models/gemini-2.5-pro")
        assert not is_supported(raw)

    @pytest.mark.parametrize(
        "name",
        [
            "models/gemini-2.5-flash-preview-tts",
            "models/gemini-2.5-pro-TTS",
            "models/gemini-2.5-flash-Tts-preview",
        ],
    )
    def test_rejects_tts_any_case(self, name):
        assert not is_supported(record(name))

    def test_to_model_strips_namespace(self):
        result = to_model(record("models/gemini-2.5-pro", display_name="Gemini 2.5 Pro"))

        assert result.id == "gemini-2.5-pro"
        assert result.name == "Gemini 2.5 Pro"
        assert result.provider == GEMINI_PROVIDER
        assert result.default is False

    def test_to_model_display_name_falls_back_to_id(self):
        assert to_model(record("models/gemini-2.5-pro")).name == "gemini-2.5-pro"
        assert to_model(record("models/gemini-2.5-pro", display_name="")).name == "gemini-2.5-pro"

    def test_to_model_token_limits(self):
        result = to_model(record("models/gemini-2.5-pro", input_limit=32768, output_limit=8192))
        assert result.max_input_tokens == 32768
        assert result.max_output_tokens == 8192

    def test_to_model_zero_or_missing_limits_use_defaults(self):
        zero = to_model(record("models/gemini-2.5-pro", input_limit=0, output_limit=0))
        missing = to_model(record("models/gemini-2.5-pro", input_limit=None, output_limit=None))

        for result in (zero, missing):
            assert result.max_input_tokens == 1048576
            assert result.max_output_tokens == 65536

    def test_to_model_default_only_for_exact_sentinel(self):
        assert to_model(record("models/gemini-2.5-flash")).default is True
        assert to_model(record("models/gemini-2.5-flash-lite")).default is False
        assert to_model(record("models/gemini-2.5-flash-preview-05-20")).default is False

    def test_filter_models_preserves_order(self):
        models = filter_models(
            [
                record("models/gemini-2.5-pro"),
                record("models/gemini-1.5-pro"),
                record("models/gemini-2.5-flash"),
                record("models/gemini-2.5-flash-preview-tts"),
            ]
        )
        assert [m.id for m in models] == ["gemini-2.5-pro", "gemini-2.5-flash"]


# ============================================================================
# Group-and-Rank Stage
# ============================================================================


class TestBaseFamilyName:
    """Tests for base family name derivation."""

    @pytest.mark.parametrize(
        ("model_id", "expected"),
        [
            ("gemini-2.5-pro", "gemini-2.5-pro"),
            ("gemini-2.5-pro-preview-03-25", "gemini-2.5-pro"),
            ("gemini-2.5-pro-preview", "gemini-2.5-pro"),
            ("gemini-2.5-flash-preview-05-20", "gemini-2.5-flash"),
            ("gemini-2.5-flash-lite", "gemini-2.5-flash-lite"),
            ("gemini-2.5-flash-lite-preview-06-17", "gemini-2.5-flash-lite"),
            ("gemini-2.5-flash-image-06-17", "gemini-2.5-flash-image"),
            ("gemini-3.0-pro-001", "gemini-3.0-pro-001"),
        ],
    )
    def test_base_family_name(self, model_id, expected):
        assert base_family_name(model_id) == expected


class TestGrouping:
    """Tests for grouping and representative selection."""

    def test_groups_keep_first_seen_order(self):
        groups = group_models(
            [
                model("gemini-2.5-flash-preview-05-20"),
                model("gemini-2.5-pro"),
                model("gemini-2.5-flash"),
                model("gemini-2.5-pro-preview-03-25"),
            ]
        )

        assert list(groups) == ["gemini-2.5-flash", "gemini-2.5-pro"]
        assert [m.id for m in groups["gemini-2.5-flash"]] == [
            "gemini-2.5-flash-preview-05-20",
            "gemini-2.5-flash",
        ]

    def test_stable_beats_preview(self):
        selected = pick_representatives(
            [model("gemini-2.5-pro-preview-03-25"), model("gemini-2.5-pro")]
        )
        assert [m.id for m in selected] == ["gemini-2.5-pro"]

    def test_two_stable_pick_lexicographically_smaller(self):
        selected = pick_representatives(
            [model("gemini-2.5-flash-image-06-17"), model("gemini-2.5-flash-image")]
        )
        assert [m.id for m in selected] == ["gemini-2.5-flash-image"]

        selected = pick_representatives(
            [model("gemini-3.0-pro-12-01"), model("gemini-3.0-pro-11-15")]
        )
        assert [m.id for m in selected] == ["gemini-3.0-pro-11-15"]

    def test_only_previews_pick_lexicographically_smaller(self):
        selected = pick_representatives(
            [
                model("gemini-2.5-pro-preview-06-05"),
                model("gemini-2.5-pro-preview-03-25"),
            ]
        )
        assert [m.id for m in selected] == ["gemini-2.5-pro-preview-03-25"]

    def test_lite_is_its_own_family(self):
        selected = pick_representatives(
            [model("gemini-2.5-flash"), model("gemini-2.5-flash-lite")]
        )
        assert [m.id for m in selected] == ["gemini-2.5-flash", "gemini-2.5-flash-lite"]


class TestSelectModels:
    """Tests for the full filter-group-rank pipeline."""

    def test_realistic_listing(self):
        records = [
            record("models/embedding-gecko-001", methods=["embedText"]),
            record("models/gemini-2.0-flash"),
            record("models/gemini-2.5-pro-preview-03-25", display_name="Gemini 2.5 Pro Preview 03-25"),
            record("models/gemini-2.5-flash-preview-05-20", display_name="Gemini 2.5 Flash Preview"),
            record("models/gemini-2.5-flash", display_name="Gemini 2.5 Flash"),
            record("models/gemini-2.5-pro", display_name="Gemini 2.5 Pro"),
            record("models/gemini-2.5-flash-lite-preview-06-17"),
            record("models/gemini-2.5-flash-lite", display_name="Gemini 2.5 Flash-Lite"),
            record("models/gemini-2.5-flash-preview-tts"),
            record("models/gemini-2.5-pro-preview-tts"),
        ]

        outcome = select_models(records)

        assert outcome.ok
        assert [m.id for m in outcome.items] == [
            "gemini-2.5-pro",
            "gemini-2.5-flash",
            "gemini-2.5-flash-lite",
        ]
        assert [m.default for m in outcome.items] == [False, True, False]
        assert outcome.items[0].name == "Gemini 2.5 Pro"

    def test_nothing_survives_filtering(self):
        outcome = select_models(
            [
                record("models/gemini-1.5-pro"),
                record("models/gemini-2.5-flash-preview-tts"),
            ]
        )

        assert outcome.failure is FailureKind.EMPTY_AFTER_FILTER
        assert outcome.items == ()

    def test_empty_listing(self):
        assert select_models([]).failure is FailureKind.EMPTY_AFTER_FILTER
