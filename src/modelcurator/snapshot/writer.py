"""Materialize a curation result into a snapshot document and write it out."""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Optional

from modelcurator.curation.types import (
    CuratedEntry,
    CurationResult,
    DiscardReason,
    InsufficientContext,
    MissingPricing,
    MissingQualityScore,
    NonTextModality,
    PricingThreshold,
    QualityThreshold,
    Tunables,
)
from modelcurator.snapshot.schema import (
    OPTIONAL_ENTRY_KEYS,
    OPTIONAL_UNMATCHED_KEYS,
    SNAPSHOT_SCHEMA_VERSION,
    DiscardRecord,
    SnapshotCounts,
    SnapshotEntry,
    SnapshotFile,
    SnapshotMetadata,
    SnapshotSources,
    SnapshotThresholds,
    UnmatchedRecord,
)

logger = logging.getLogger(__name__)


def _format_price(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def describe_discard(reason: DiscardReason) -> str:
    """Render a discard reason as its compact snapshot code.

    Examples:
        >>> describe_discard(QualityThreshold(minimum=65.0, actual=58.5))
        'aaii-threshold:min=65.00,actual=58.50'
        >>> describe_discard(InsufficientContext(min_required=8192, actual=None))
        'insufficient-context:min=8192,actual=unknown'
    """
    if isinstance(reason, MissingQualityScore):
        return "missing-aaii"
    if isinstance(reason, NonTextModality):
        return "non-text-modalities"
    if isinstance(reason, InsufficientContext):
        actual = "unknown" if reason.actual is None else str(reason.actual)
        return f"insufficient-context:min={reason.min_required},actual={actual}"
    if isinstance(reason, MissingPricing):
        return "missing-pricing"
    if isinstance(reason, QualityThreshold):
        return f"aaii-threshold:min={reason.minimum:.2f},actual={reason.actual:.2f}"
    if isinstance(reason, PricingThreshold):
        return (
            f"pricing-threshold:prompt<= {reason.max_in:.2f},completion<= {reason.max_out:.2f},"
            f"actual=({_format_price(reason.actual_in)},{_format_price(reason.actual_out)})"
        )
    raise TypeError(f"Unknown discard reason: {reason!r}")


def _snapshot_entry(entry: CuratedEntry) -> SnapshotEntry:
    return SnapshotEntry(
        slug=entry.slug,
        display_name=entry.display_name,
        provider=entry.provider,
        aaii=entry.quality_score,
        price_in_per_million=entry.price_in,
        price_out_per_million=entry.price_out,
        price_source=entry.price_source,
        context_length=entry.context_length,
        modalities=list(entry.modalities),
        match_strategy=entry.match_strategy,
        aa_last_updated=entry.quality_last_updated,
        openrouter_created_at=entry.pricing_created_at,
    )


def materialize_snapshot(
    result: CurationResult,
    tunables: Tunables,
    sources: Optional[SnapshotSources] = None,
    generated_at: Optional[datetime] = None,
) -> SnapshotFile:
    """Build the snapshot document for a curation result.

    Args:
        result: Output of :func:`~modelcurator.curation.engine.curate`.
        tunables: Thresholds recorded in the metadata block.
        sources: Listing URLs recorded in the metadata block.
        generated_at: Timestamp to stamp; the current UTC time when omitted.

    Returns:
        A validated :class:`SnapshotFile`.
    """
    metadata = SnapshotMetadata(
        thresholds=SnapshotThresholds(
            min_free_aaii=tunables.min_free_quality,
            min_paid_aaii=tunables.min_paid_quality,
            cheap_in_max=tunables.cheap_in_max,
            cheap_out_max=tunables.cheap_out_max,
            min_context_length=tunables.min_context_length,
            fuzzy_match_threshold=tunables.fuzzy_match_threshold,
        ),
        sources=sources or SnapshotSources(),
        counts=SnapshotCounts(
            curated_free=len(result.free),
            curated_cheap=len(result.cheap),
            unmatched=len(result.unmatched),
            discarded=len(result.discarded),
        ),
    )
    return SnapshotFile(
        schema_version=SNAPSHOT_SCHEMA_VERSION,
        generated_at=generated_at or datetime.now(UTC),
        metadata=metadata,
        free=[_snapshot_entry(entry) for entry in result.free],
        cheap=[_snapshot_entry(entry) for entry in result.cheap],
        unmatched=[
            UnmatchedRecord(name=model.name, provider=model.provider, slug=model.slug)
            for model in result.unmatched
        ],
        discarded=[
            DiscardRecord(slug=model.slug, reason=describe_discard(model.reason))
            for model in result.discarded
        ],
    )


def _drop_absent(record: dict[str, Any], keys: tuple[str, ...]) -> dict[str, Any]:
    return {key: value for key, value in record.items() if not (key in keys and value is None)}


def render_snapshot(snapshot: SnapshotFile) -> str:
    """Serialize a snapshot as indented JSON with a trailing newline.

    Optional entry fields are omitted when absent; prices and context lengths
    stay present as ``null``.
    """
    document = snapshot.model_dump(mode="json")
    for tier in ("free", "cheap"):
        document[tier] = [_drop_absent(entry, OPTIONAL_ENTRY_KEYS) for entry in document[tier]]
    document["unmatched"] = [
        _drop_absent(entry, OPTIONAL_UNMATCHED_KEYS) for entry in document["unmatched"]
    ]
    return json.dumps(document, indent=2) + "\n"


def write_snapshot(path: Path, snapshot: SnapshotFile) -> None:
    """Write a snapshot atomically through a sibling temporary file."""

    path = Path(path)
    temp_path = path.with_name(path.name + ".tmp")
    temp_path.write_text(render_snapshot(snapshot), encoding="utf-8")
    os.replace(temp_path, path)
    logger.info("Wrote snapshot to %s", path)


__all__ = [
    "describe_discard",
    "materialize_snapshot",
    "render_snapshot",
    "write_snapshot",
]
