import json
from datetime import UTC, datetime

import pytest

from modelcurator.curation.types import (
    CuratedEntry,
    CurationResult,
    DiscardedModel,
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
from modelcurator.snapshot.schema import SnapshotSources
from modelcurator.snapshot.writer import (
    describe_discard,
    materialize_snapshot,
    render_snapshot,
    write_snapshot,
)

GENERATED_AT = datetime(2025, 1, 1, tzinfo=UTC)


def _result() -> CurationResult:
    free = CuratedEntry(
        slug="meta-llama/llama-3.3-70b-instruct:free",
        display_name="Llama 3.3 70B",
        provider="meta-llama",
        quality_score=61.5,
        price_in=0.0,
        price_out=0.0,
        price_source=PriceSource.PRICING,
        context_length=131_072,
        modalities=("text",),
    )
    cheap = CuratedEntry(
        slug="openai/gpt-4o-mini",
        display_name="GPT-4o mini",
        provider="openai",
        quality_score=66.0,
        price_in=0.15,
        price_out=None,
        price_source=PriceSource.PRICING,
        context_length=None,
        match_strategy="alias:GPT-4o mini",
        quality_last_updated=datetime(2024, 12, 1, tzinfo=UTC),
        pricing_created_at=datetime(2024, 7, 18, tzinfo=UTC),
    )
    return CurationResult(
        free=(free,),
        cheap=(cheap,),
        unmatched=(UnmatchedModel(name="Mystery"), UnmatchedModel(name="Other", provider="acme")),
        discarded=(DiscardedModel(slug="lab/unpriced", reason=MissingPricing()),),
    )


@pytest.mark.parametrize(
    ("reason", "code"),
    [
        (MissingQualityScore(), "missing-aaii"),
        (NonTextModality(), "non-text-modalities"),
        (InsufficientContext(min_required=8192, actual=4096), "insufficient-context:min=8192,actual=4096"),
        (InsufficientContext(min_required=8192, actual=None), "insufficient-context:min=8192,actual=unknown"),
        (MissingPricing(), "missing-pricing"),
        (QualityThreshold(minimum=65.0, actual=58.5), "aaii-threshold:min=65.00,actual=58.50"),
        (
            PricingThreshold(max_in=1.5, max_out=6.0, actual_in=2.0, actual_out=None),
            "pricing-threshold:prompt<= 1.50,completion<= 6.00,actual=(2.00,n/a)",
        ),
    ],
)
def test_describe_discard_codes(reason, code):
    assert describe_discard(reason) == code


def test_materialize_snapshot_records_metadata():
    snapshot = materialize_snapshot(
        _result(),
        Tunables(min_free_quality=55.0),
        SnapshotSources(openrouter_models_url="https://example.test/models"),
        generated_at=GENERATED_AT,
    )

    assert snapshot.schema_version == 2
    assert snapshot.metadata.thresholds.min_free_aaii == 55.0
    assert snapshot.metadata.thresholds.min_context_length == 8192
    assert snapshot.metadata.sources.openrouter_models_url == "https://example.test/models"
    counts = snapshot.metadata.counts
    assert (counts.curated_free, counts.curated_cheap, counts.unmatched, counts.discarded) == (1, 1, 2, 1)
    assert snapshot.discarded[0].reason == "missing-pricing"


def test_render_snapshot_omits_absent_optional_fields():
    text = render_snapshot(materialize_snapshot(_result(), Tunables(), generated_at=GENERATED_AT))

    assert text.endswith("}\n")
    document = json.loads(text)
    assert document["generated_at"].startswith("2025-01-01T00:00:00")

    free = document["free"][0]
    assert free["aaii"] == 61.5
    assert free["price_source"] == "openrouter"
    assert free["modalities"] == ["text"]
    assert "match_strategy" not in free
    assert "aa_last_updated" not in free
    assert "openrouter_created_at" not in free

    cheap = document["cheap"][0]
    assert cheap["price_out_per_million"] is None
    assert cheap["context_length"] is None
    assert cheap["match_strategy"] == "alias:GPT-4o mini"
    assert cheap["openrouter_created_at"].startswith("2024-07-18")

    assert document["unmatched"] == [{"name": "Mystery"}, {"name": "Other", "provider": "acme"}]
    assert document["discarded"] == [{"slug": "lab/unpriced", "reason": "missing-pricing"}]


def test_render_snapshot_is_stable():
    first = render_snapshot(materialize_snapshot(_result(), Tunables(), generated_at=GENERATED_AT))
    second = render_snapshot(materialize_snapshot(_result(), Tunables(), generated_at=GENERATED_AT))

    assert first == second


def test_write_snapshot_replaces_target(tmp_path):
    target = tmp_path / "snapshot.json"
    target.write_text("stale", encoding="utf-8")
    snapshot = materialize_snapshot(_result(), Tunables(), generated_at=GENERATED_AT)

    write_snapshot(target, snapshot)

    assert target.read_text(encoding="utf-8") == render_snapshot(snapshot)
    assert not (tmp_path / "snapshot.json.tmp").exists()
