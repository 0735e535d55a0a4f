"""Turn the two catalogs into curated free and cheap tiers.

:func:`curate` is a pure function of its inputs: it performs no I/O and every
ordering decision falls through to the slug, so identical inputs always
produce an identical :class:`~modelcurator.curation.types.CurationResult`.

Examples:
    >>> from modelcurator.catalog.types import PricingCatalogEntry, QualityCatalogEntry
    >>> result = curate(
    ...     [QualityCatalogEntry("Gemma", raw_slug="google/gemma-3", quality_score=70.0)],
    ...     [PricingCatalogEntry("google/gemma-3", "Gemma", 32768, 0.0, 0.0)],
    ...     {},
    ... )
    >>> [entry.slug for entry in result.free]
    ['google/gemma-3']
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional, Sequence

from modelcurator.catalog.normalize import provider_from_slug
from modelcurator.catalog.types import PricingCatalogEntry, QualityCatalogEntry
from modelcurator.curation.finalize import build_discard_log, finalize_free
from modelcurator.curation.heuristics import (
    is_free_model,
    meets_pricing_thresholds,
    sanitize_price,
)
from modelcurator.curation.promotion import (
    Rejection,
    apply_series_fallback,
    keep_best,
    promote_rejects,
    select_priority_providers,
)
from modelcurator.curation.types import (
    CuratedEntry,
    CurationResult,
    DiscardedModel,
    DiscardReason,
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
from modelcurator.resolution.resolver import IdentityResolver

logger = logging.getLogger(__name__)

RELAXED_MARGIN = 10.0
RELAXED_FLOOR = 40.0

_TEXT_MODALITY_MARKERS = ("text", "chat")


def relaxed_floor(minimum: float) -> float:
    """Score separating near-miss rejects from far ones.

    Examples:
        >>> relaxed_floor(65.0)
        55.0
        >>> relaxed_floor(45.0)
        40.0
    """
    return max(minimum - RELAXED_MARGIN, RELAXED_FLOOR)


def supports_text(modalities: Sequence[str]) -> bool:
    """True when modalities are unknown or any of them mentions text or chat."""

    if not modalities:
        return True
    return any(
        marker in modality.lower() for modality in modalities for marker in _TEXT_MODALITY_MARKERS
    )


class _TierState:
    """Accepted entries and near/far reject buckets for one tier."""

    def __init__(self, name: str, minimum: float) -> None:
        self.name = name
        self.floor = relaxed_floor(minimum)
        self.accepted: dict[str, CuratedEntry] = {}
        self.near: dict[str, Rejection] = {}
        self.far: dict[str, Rejection] = {}

    def accept(self, entry: CuratedEntry) -> None:
        keep_best(self.accepted, entry)

    def reject(self, entry: CuratedEntry, reason: DiscardReason, position: int) -> None:
        bucket = self.near if entry.quality_score >= self.floor else self.far
        existing = self.near.get(entry.slug) or self.far.get(entry.slug)
        if existing is not None:
            if entry.quality_score <= existing.entry.quality_score:
                return
            self.near.pop(entry.slug, None)
            self.far.pop(entry.slug, None)
            position = existing.position
        logger.debug("Rejected %s from %s tier: %s", entry.slug, self.name, reason)
        bucket[entry.slug] = Rejection(entry=entry, reason=reason, position=position)

    def rejections(self) -> list[Rejection]:
        return [*self.near.values(), *self.far.values()]


def curate(
    quality_catalog: Sequence[QualityCatalogEntry],
    pricing_catalog: Sequence[PricingCatalogEntry],
    aliases: Mapping[str, str],
    tunables: Optional[Tunables] = None,
) -> CurationResult:
    """Resolve, filter, rank and back-fill the free and cheap tiers.

    Args:
        quality_catalog: Scored entries, processed in order.
        pricing_catalog: Authoritative slugs, prices and context limits.
        aliases: Normalized display name to pricing slug.
        tunables: Thresholds and targets; defaults when omitted.

    Returns:
        The curated tiers plus the unmatched and discard logs.
    """
    tunables = tunables or Tunables()
    resolver = IdentityResolver(pricing_catalog, aliases, tunables.fuzzy_match_threshold)

    free = _TierState("free", tunables.min_free_quality)
    cheap = _TierState("cheap", tunables.min_paid_quality)
    unmatched: list[UnmatchedModel] = []
    admission_discards: list[tuple[int, DiscardedModel]] = []

    def discard(position: int, slug: str, reason: DiscardReason) -> None:
        logger.debug("Discarded %s: %s", slug, reason)
        admission_discards.append((position, DiscardedModel(slug=slug, reason=reason)))

    for position, quality in enumerate(quality_catalog):
        match = resolver.resolve(quality)
        if not match.matched:
            logger.info("No pricing match for %r", quality.display_name)
            unmatched.append(
                UnmatchedModel(
                    name=quality.display_name,
                    provider=quality.provider_hint,
                    slug=quality.raw_slug,
                )
            )
            continue

        pricing = resolver.get_model(match.slug)
        if pricing is None:
            logger.info("Resolved %r to unknown slug %s", quality.display_name, match.slug)
            unmatched.append(
                UnmatchedModel(
                    name=quality.display_name,
                    provider=quality.provider_hint,
                    slug=match.slug,
                )
            )
            continue
        slug = pricing.slug

        if not supports_text(quality.modalities):
            discard(position, slug, NonTextModality())
            continue

        score = quality.quality_score
        if score is None or not math.isfinite(score):
            discard(position, slug, MissingQualityScore())
            continue

        context_length = quality.context_length or pricing.context_length
        if context_length is None or context_length < tunables.min_context_length:
            discard(
                position,
                slug,
                InsufficientContext(min_required=tunables.min_context_length, actual=context_length),
            )
            continue

        price_in = sanitize_price(pricing.prompt_price)
        price_out = sanitize_price(pricing.completion_price)
        if price_in is None and price_out is None:
            discard(position, slug, MissingPricing())
            continue

        entry = CuratedEntry(
            slug=slug,
            display_name=pricing.display_name,
            provider=provider_from_slug(slug),
            quality_score=float(score),
            price_in=price_in,
            price_out=price_out,
            price_source=PriceSource.PRICING,
            context_length=context_length,
            modalities=tuple(quality.modalities),
            match_strategy=match.strategy_label(),
            quality_last_updated=quality.last_updated,
            pricing_created_at=pricing.created_at,
        )

        if is_free_model(price_in, price_out):
            if entry.quality_score < tunables.min_free_quality:
                free.reject(
                    entry,
                    QualityThreshold(minimum=tunables.min_free_quality, actual=entry.quality_score),
                    position,
                )
            else:
                free.accept(entry)
            continue

        if entry.quality_score < tunables.min_paid_quality:
            cheap.reject(
                entry,
                QualityThreshold(minimum=tunables.min_paid_quality, actual=entry.quality_score),
                position,
            )
        elif not meets_pricing_thresholds(
            price_in, price_out, tunables.cheap_in_max, tunables.cheap_out_max
        ):
            cheap.reject(
                entry,
                PricingThreshold(
                    max_in=tunables.cheap_in_max,
                    max_out=tunables.cheap_out_max,
                    actual_in=price_in,
                    actual_out=price_out,
                ),
                position,
            )
        else:
            cheap.accept(entry)

    free_entries = promote_rejects(
        list(free.accepted.values()),
        free.near.values(),
        free.far.values(),
        tunables.free_target,
        label="free",
    )
    free_entries = apply_series_fallback(free_entries, pricing_catalog, tunables.free_target)
    final_free = finalize_free(free_entries, tunables.free_target)

    # Provider rules choose among accepted and rejected paid entries alike.
    cheap_candidates = [
        *cheap.accepted.values(),
        *(rejection.entry for rejection in cheap.rejections()),
    ]
    final_cheap = tuple(
        select_priority_providers(cheap_candidates, pricing_catalog, tunables.priority_providers)
    )

    kept = {entry.slug for entry in final_free} | {entry.slug for entry in final_cheap}
    discarded = build_discard_log(
        admission_discards,
        [*free.rejections(), *cheap.rejections()],
        kept,
    )

    logger.info(
        "Curated %d free and %d cheap models (%d unmatched, %d discarded)",
        len(final_free),
        len(final_cheap),
        len(unmatched),
        len(discarded),
    )
    return CurationResult(
        free=final_free,
        cheap=final_cheap,
        unmatched=tuple(unmatched),
        discarded=discarded,
    )


__all__ = [
    "RELAXED_FLOOR",
    "RELAXED_MARGIN",
    "curate",
    "relaxed_floor",
    "supports_text",
]
