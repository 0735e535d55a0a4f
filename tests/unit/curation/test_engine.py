import math
from datetime import UTC, datetime

from modelcurator.curation.engine import curate, relaxed_floor, supports_text
from modelcurator.curation.types import (
    InsufficientContext,
    MissingPricing,
    MissingQualityScore,
    NonTextModality,
    PriceSource,
    PricingThreshold,
    QualityThreshold,
    Tunables,
    UnmatchedModel,
)


def _free_pricing(make_pricing, slug, **kwargs):
    return make_pricing(slug, prompt=0.0, completion=0.0, **kwargs)


def test_free_tier_is_score_ordered_and_truncated(make_pricing, make_quality):
    pricing = [
        _free_pricing(make_pricing, f"free-{i}", name=f"Free Model {i}") for i in range(5)
    ]
    quality = [
        make_quality(f"Free Model {i}", score=score, raw_slug=f"free-{i}")
        for i, score in enumerate([50, 55, 60, 65, 70])
    ]

    result = curate(quality, pricing, {}, Tunables(min_free_quality=50.0))

    assert [entry.slug for entry in result.free] == ["free-4", "free-3", "free-2"]
    assert [entry.quality_score for entry in result.free] == [70.0, 65.0, 60.0]


def test_cheap_entry_is_priced_from_the_pricing_catalog(make_pricing, make_quality):
    pricing = [make_pricing("openai/gpt-4o-mini", prompt=1.0, completion=5.0, context=128_000)]
    quality = [make_quality("Cheap Model", score=70.0, raw_slug="openai/gpt-4o-mini")]

    result = curate(quality, pricing, {})

    (entry,) = result.cheap
    assert entry.slug == "openai/gpt-4o-mini"
    assert entry.price_source is PriceSource.PRICING
    assert entry.price_in == 1.0
    assert entry.price_out == 5.0
    assert entry.match_strategy == "provided-slug"
    assert entry.provider == "openai"


def test_openai_slot_falls_back_to_a_mini_in_the_pricing_catalog(make_pricing, make_quality):
    pricing = [
        make_pricing("openai/gpt-5", "OpenAI: GPT-5", prompt=1.25, completion=10.0),
        make_pricing("openai/gpt-5-mini", "OpenAI: GPT-5 Mini", prompt=0.25, completion=2.0),
    ]
    quality = [make_quality("GPT-5", score=80.0, raw_slug="openai/gpt-5")]

    result = curate(quality, pricing, {})

    (entry,) = result.cheap
    assert entry.slug == "openai/gpt-5-mini"
    assert entry.quality_score == 0.0
    assert entry.match_strategy == "provider-line:openai:mini"
    assert [(d.slug, d.reason) for d in result.discarded] == [
        (
            "openai/gpt-5",
            PricingThreshold(max_in=1.5, max_out=6.0, actual_in=1.25, actual_out=10.0),
        )
    ]


def test_cheap_tier_selects_from_rejected_entries(make_pricing, make_quality):
    pricing = [
        make_pricing("openai/gpt-4o-mini", prompt=0.15, completion=0.6),
        make_pricing("openai/gpt-5-mini", prompt=0.25, completion=2.0),
    ]
    quality = [
        make_quality("GPT-4o mini", score=50.0, raw_slug="openai/gpt-4o-mini"),
        make_quality("GPT-5 mini", score=75.0, raw_slug="openai/gpt-5-mini"),
    ]

    result = curate(quality, pricing, {})

    (entry,) = result.cheap
    assert entry.slug == "openai/gpt-4o-mini"
    assert entry.quality_score == 50.0
    assert entry.match_strategy == "provided-slug"
    assert result.discarded == ()


def test_cheap_tier_has_one_entry_per_provider_in_priority_order(make_pricing, make_quality):
    rows = [
        ("mistralai/mistral-medium", 0.4, 2.0, 70.0),
        ("x-ai/grok-4-fast", 0.2, 0.5, 66.0),
        ("google/gemini-2.5-flash", 0.3, 2.5, 70.0),
        ("anthropic/claude-3-5-haiku", 0.8, 4.0, 68.0),
        ("openai/gpt-5-mini", 0.25, 2.0, 75.0),
        ("anthropic/claude-haiku-4.5", 1.0, 5.0, 72.0),
        ("openai/gpt-4o-mini", 0.15, 0.6, 70.0),
    ]
    pricing = [make_pricing(slug, prompt=p_in, completion=p_out) for slug, p_in, p_out, _ in rows]
    quality = [make_quality(slug, score=score, raw_slug=slug) for slug, _, _, score in rows]

    result = curate(quality, pricing, {})

    slugs = [entry.slug for entry in result.cheap]
    assert slugs == [
        "openai/gpt-4o-mini",
        "anthropic/claude-haiku-4.5",
        "google/gemini-2.5-flash",
        "x-ai/grok-4-fast",
    ]
    assert len(set(slugs)) == len(slugs)


def test_provider_without_candidates_takes_first_catalog_entry(make_pricing):
    pricing = [
        make_pricing("anthropic/claude-opus-4"),
        make_pricing("anthropic/claude-sonnet-4", prompt=3.0, completion=15.0),
    ]

    result = curate([], pricing, {})

    (entry,) = result.cheap
    assert entry.slug == "anthropic/claude-opus-4"
    assert entry.match_strategy == "provider-first:anthropic"


def test_provider_without_rule_uses_price_order(make_pricing, make_quality):
    pricing = [
        make_pricing("mistralai/mistral-large", prompt=2.0, completion=6.0),
        make_pricing("mistralai/mistral-small", prompt=0.2, completion=0.6),
    ]
    quality = [
        make_quality("Mistral Large", score=80.0, raw_slug="mistralai/mistral-large"),
        make_quality("Mistral Small", score=66.0, raw_slug="mistralai/mistral-small"),
    ]

    result = curate(quality, pricing, {}, Tunables(priority_providers=("mistralai",)))

    assert [entry.slug for entry in result.cheap] == ["mistralai/mistral-small"]


def test_near_rejects_are_promoted_before_far_ones(make_pricing, make_quality):
    rows = [("lab/top", 70.0), ("lab/near-high", 58.0), ("lab/far", 45.0), ("lab/near-low", 52.0)]
    pricing = [_free_pricing(make_pricing, slug) for slug, _ in rows]
    quality = [make_quality(slug, score=score, raw_slug=slug) for slug, score in rows]

    result = curate(quality, pricing, {})

    assert [entry.slug for entry in result.free] == ["lab/top", "lab/near-high", "lab/near-low"]
    assert [(d.slug, d.reason) for d in result.discarded] == [
        ("lab/far", QualityThreshold(minimum=60.0, actual=45.0))
    ]


def test_far_rejects_fill_when_near_ones_run_out(make_pricing, make_quality):
    rows = [("lab/top", 70.0), ("lab/far", 45.0)]
    pricing = [_free_pricing(make_pricing, slug) for slug, _ in rows]
    quality = [make_quality(slug, score=score, raw_slug=slug) for slug, score in rows]

    result = curate(quality, pricing, {})

    assert [entry.slug for entry in result.free] == ["lab/top", "lab/far"]
    assert result.discarded == ()


def test_series_fallback_covers_missing_families(make_pricing, make_quality):
    pricing = [
        _free_pricing(make_pricing, "lab/alpha", name="Alpha"),
        _free_pricing(
            make_pricing,
            "qwen/qwen-2.5-72b-instruct:free",
            created=datetime(2024, 9, 19, tzinfo=UTC),
        ),
        _free_pricing(
            make_pricing,
            "qwen/qwen3-32b-instruct:free",
            created=datetime(2025, 4, 28, tzinfo=UTC),
        ),
        _free_pricing(
            make_pricing, "qwen/qwen-2.5-7b:free", created=datetime(2025, 6, 1, tzinfo=UTC)
        ),
        _free_pricing(make_pricing, "meta-llama/llama-3.3-70b-instruct:free"),
        make_pricing("deepseek/deepseek-chat", prompt=0.3, completion=1.2),
    ]
    quality = [make_quality("Alpha", score=70.0, raw_slug="lab/alpha")]

    result = curate(quality, pricing, {})

    assert [(entry.slug, entry.match_strategy) for entry in result.free] == [
        ("lab/alpha", "provided-slug"),
        ("meta-llama/llama-3.3-70b-instruct:free", "manual-series:llama"),
        ("qwen/qwen3-32b-instruct:free", "manual-series:qwen"),
    ]
    assert all(entry.quality_score == 0.0 for entry in result.free[1:])


def test_series_fallback_prefers_dated_entries_then_lower_slugs(make_pricing):
    pricing = [
        _free_pricing(make_pricing, "google/gemma-2-9b-it:free"),
        _free_pricing(
            make_pricing, "google/gemma-3-27b-it:free", created=datetime(2025, 3, 12, tzinfo=UTC)
        ),
        _free_pricing(make_pricing, "mistralai/mistral-nemo-instruct:free"),
        _free_pricing(make_pricing, "mistralai/mistral-7b-instruct:free"),
    ]

    result = curate([], pricing, {})

    assert [(entry.slug, entry.match_strategy) for entry in result.free] == [
        ("google/gemma-3-27b-it:free", "manual-series:gemma"),
        ("mistralai/mistral-7b-instruct:free", "manual-series:mistral"),
    ]


def test_duplicate_resolutions_keep_the_higher_score(make_pricing, make_quality):
    pricing = [_free_pricing(make_pricing, "lab/a", name="Lab: Model A")]
    quality = [
        make_quality("Model A", score=70.0, raw_slug="lab/a", context=8_192),
        make_quality("Model A v2", score=80.0, raw_slug="lab/a", context=65_536),
        make_quality("Model A old", score=75.0, raw_slug="lab/a", context=16_384),
    ]

    result = curate(quality, pricing, {})

    (entry,) = result.free
    assert entry.quality_score == 80.0
    assert entry.context_length == 65_536
    assert entry.display_name == "Lab: Model A"


def test_curated_names_come_from_the_pricing_catalog(make_pricing, make_quality):
    pricing = [
        make_pricing("openai/gpt-4o-mini", "OpenAI: GPT-4o mini", prompt=0.15, completion=0.6),
        _free_pricing(make_pricing, "lab/free", name="Lab: Free Model"),
    ]
    quality = [
        make_quality("GPT-4o mini (AA)", score=70.0, raw_slug="openai/gpt-4o-mini"),
        make_quality("Free Model (AA)", score=70.0, raw_slug="lab/free"),
    ]

    result = curate(quality, pricing, {})

    assert [entry.display_name for entry in result.cheap] == ["OpenAI: GPT-4o mini"]
    assert [entry.display_name for entry in result.free] == ["Lab: Free Model"]


def test_admission_discards_and_unmatched_are_logged_in_input_order(make_pricing, make_quality):
    pricing = [
        _free_pricing(make_pricing, "lab/vision"),
        _free_pricing(make_pricing, "lab/unscored"),
        _free_pricing(make_pricing, "lab/short", context=4096),
        _free_pricing(make_pricing, "lab/no-context", context=None),
        make_pricing("lab/unpriced"),
        _free_pricing(make_pricing, "lab/nan"),
    ]
    quality = [
        make_quality("Vision", raw_slug="lab/vision", modalities=("image", "video")),
        make_quality("Mystery Model", raw_slug="mystery", provider="nobody"),
        make_quality("Unscored", score=None, raw_slug="lab/unscored"),
        make_quality("Short", raw_slug="lab/short"),
        make_quality("No Context", raw_slug="lab/no-context"),
        make_quality("Unpriced", raw_slug="lab/unpriced"),
        make_quality("NaN", score=math.nan, raw_slug="lab/nan"),
    ]

    result = curate(quality, pricing, {})

    assert result.unmatched == (UnmatchedModel(name="Mystery Model", provider="nobody", slug="mystery"),)
    assert [(d.slug, d.reason) for d in result.discarded] == [
        ("lab/vision", NonTextModality()),
        ("lab/unscored", MissingQualityScore()),
        ("lab/short", InsufficientContext(min_required=8192, actual=4096)),
        ("lab/no-context", InsufficientContext(min_required=8192, actual=None)),
        ("lab/unpriced", MissingPricing()),
        ("lab/nan", MissingQualityScore()),
    ]
    assert result.free == ()


def test_quality_context_takes_precedence_over_pricing_context(make_pricing, make_quality):
    pricing = [_free_pricing(make_pricing, "lab/small-window", context=4096)]
    quality = [make_quality("Small", raw_slug="lab/small-window", context=16_384)]

    result = curate(quality, pricing, {})

    assert result.free[0].context_length == 16_384


def test_chat_modality_counts_as_text():
    assert supports_text(())
    assert supports_text(("Image", "CHAT"))
    assert supports_text(("text->image",))
    assert not supports_text(("image", "audio"))


def test_relaxed_floor_is_clamped():
    assert relaxed_floor(65.0) == 55.0
    assert relaxed_floor(60.0) == 50.0
    assert relaxed_floor(45.0) == 40.0


def test_fuzzy_floor_leaves_different_names_unmatched(make_pricing, make_quality):
    pricing = [make_pricing("openai/gpt-5", "OpenAI: GPT-5", prompt=1.25, completion=10.0)]

    result = curate([make_quality("GPT-5 (high)")], pricing, {})

    assert result.unmatched == (UnmatchedModel(name="GPT-5 (high)"),)


def test_curation_is_deterministic(make_pricing, make_quality):
    pricing = [
        _free_pricing(make_pricing, "lab/b"),
        _free_pricing(make_pricing, "lab/a"),
        make_pricing("openai/gpt-4o-mini", prompt=0.15, completion=0.6),
    ]
    quality = [
        make_quality("B", score=65.0, raw_slug="lab/b"),
        make_quality("A", score=65.0, raw_slug="lab/a"),
        make_quality("Mini", score=70.0, raw_slug="openai/gpt-4o-mini"),
    ]

    first = curate(quality, pricing, {})
    second = curate(list(quality), list(pricing), {})

    assert first == second
    assert [entry.slug for entry in first.free] == ["lab/a", "lab/b"]
