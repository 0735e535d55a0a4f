"""Back-fill tiers that the strict admission pass left short.

Three mechanisms run after admission, in this order:

  1. reject promotion into the free tier, near misses first
  2. free-tier family coverage from the raw pricing catalog
  3. one cheap entry per priority provider, chosen by provider rule
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from modelcurator.catalog.normalize import provider_from_slug
from modelcurator.catalog.types import PricingCatalogEntry
from modelcurator.curation.heuristics import (
    FREE_SERIES,
    PROVIDER_RULES,
    SeriesSpec,
    has_valid_price,
    is_free_model,
    on_line,
    pick_by_rule,
    price_order_key,
    sanitize_price,
)
from modelcurator.curation.types import CuratedEntry, DiscardReason, PriceSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejection:
    """An entry that failed a tier threshold but may still be promoted.

    ``position`` is the index of the quality entry that first produced the
    slug, used to keep the discard log in input order.
    """

    entry: CuratedEntry
    reason: DiscardReason
    position: int


def keep_best(store: dict[str, CuratedEntry], entry: CuratedEntry) -> None:
    """Insert ``entry`` unless the same slug is already there with a same-or-better score.

    The first entry for a slug wins; a later one replaces it only with a
    strictly higher quality score. Insertion order is preserved.
    """
    existing = store.get(entry.slug)
    if existing is None or entry.quality_score > existing.quality_score:
        store[entry.slug] = entry


def _score_order(rejection: Rejection) -> tuple[float, str]:
    return (-rejection.entry.quality_score, rejection.entry.slug)


def synthesize_entry(pricing: PricingCatalogEntry, strategy: str) -> CuratedEntry:
    """Build a score-0 entry straight from the pricing catalog."""

    return CuratedEntry(
        slug=pricing.slug,
        display_name=pricing.display_name,
        provider=provider_from_slug(pricing.slug),
        quality_score=0.0,
        price_in=sanitize_price(pricing.prompt_price),
        price_out=sanitize_price(pricing.completion_price),
        price_source=PriceSource.PRICING,
        context_length=pricing.context_length,
        match_strategy=strategy,
        pricing_created_at=pricing.created_at,
    )


# ---------------------------------------------------------------------------
# Reject promotion
# ---------------------------------------------------------------------------
def promote_rejects(
    tier: list[CuratedEntry],
    near: Iterable[Rejection],
    far: Iterable[Rejection],
    target: int,
    *,
    label: str = "tier",
) -> list[CuratedEntry]:
    """Top a tier up to ``target`` from its reject buckets.

    Near misses are tried before far ones; within a bucket the highest
    score goes first and slugs break ties.

    Returns:
        A new list: the original entries followed by the promoted ones.
    """
    promoted = list(tier)
    present = {entry.slug for entry in promoted}
    for bucket in (near, far):
        for rejection in sorted(bucket, key=_score_order):
            if len(promoted) >= target:
                return promoted
            if rejection.entry.slug in present:
                continue
            logger.debug(
                "Promoting %s into %s (score %.2f)",
                rejection.entry.slug,
                label,
                rejection.entry.quality_score,
            )
            promoted.append(rejection.entry)
            present.add(rejection.entry.slug)
    return promoted


# ---------------------------------------------------------------------------
# Free-tier family coverage
# ---------------------------------------------------------------------------
def _series_candidate(
    series: SeriesSpec, pricing_catalog: Sequence[PricingCatalogEntry]
) -> Optional[PricingCatalogEntry]:
    matches = []
    for pricing in pricing_catalog:
        price_in = sanitize_price(pricing.prompt_price)
        price_out = sanitize_price(pricing.completion_price)
        if price_in is None and price_out is None:
            continue
        if not is_free_model(price_in, price_out):
            continue
        if series.matches(pricing.slug, pricing.display_name):
            matches.append(pricing)
    if not matches:
        return None

    if series.prefer_instruct:
        instruct = [p for p in matches if "instruct" in f"{p.slug} {p.display_name}".lower()]
        if instruct:
            matches = instruct

    return min(matches, key=_newest_first)


def _newest_first(pricing: PricingCatalogEntry) -> tuple[bool, float, str]:
    created = pricing.created_at
    if created is None:
        return (True, 0.0, pricing.slug)
    return (False, -created.timestamp(), pricing.slug)


def apply_series_fallback(
    free: list[CuratedEntry],
    pricing_catalog: Sequence[PricingCatalogEntry],
    target: int,
    series_specs: Sequence[SeriesSpec] = FREE_SERIES,
) -> list[CuratedEntry]:
    """Add one free model per uncovered family while the tier is short."""

    result = list(free)
    present = {entry.slug for entry in result}
    for series in series_specs:
        if len(result) >= target:
            break
        if any(series.matches(entry.slug, entry.display_name) for entry in result):
            continue
        found = _series_candidate(series, pricing_catalog)
        if found is None or found.slug in present:
            continue
        logger.debug("Adding %s to the free tier for family %s", found.slug, series.key)
        result.append(synthesize_entry(found, f"manual-series:{series.key}"))
        present.add(found.slug)
    return result


# ---------------------------------------------------------------------------
# Cheap-tier provider priority
# ---------------------------------------------------------------------------
def _gather(provider: str, candidates: Iterable[CuratedEntry]) -> list[CuratedEntry]:
    gathered: dict[str, CuratedEntry] = {}
    for entry in candidates:
        if provider_from_slug(entry.slug) != provider:
            continue
        keep_best(gathered, entry)
    return list(gathered.values())


def select_for_provider(
    provider: str,
    candidates: Sequence[CuratedEntry],
    pricing_catalog: Sequence[PricingCatalogEntry],
) -> Optional[CuratedEntry]:
    """Choose the cheap-tier representative of one provider.

    Args:
        provider: Slug prefix, e.g. ``"openai"``.
        candidates: Accepted and rejected paid entries of any provider.
        pricing_catalog: Raw catalog, scanned when no candidate fits.

    Returns:
        The chosen entry, or None when the provider has nothing at all.
    """
    gathered = _gather(provider, candidates)
    rule = PROVIDER_RULES.get(provider)

    if rule is not None:
        chosen = pick_by_rule(rule, [entry for entry in gathered if on_line(entry, rule.line)])
        if chosen is not None:
            return chosen

        raw_line = [
            synthesize_entry(pricing, f"provider-line:{provider}:{rule.line}")
            for pricing in pricing_catalog
            if provider_from_slug(pricing.slug) == provider
        ]
        chosen = pick_by_rule(
            rule,
            [entry for entry in raw_line if on_line(entry, rule.line) and has_valid_price(entry)],
        )
        if chosen is not None:
            logger.debug("Filled %s from the pricing catalog: %s", provider, chosen.slug)
            return chosen

    if gathered:
        return min(gathered, key=price_order_key)

    for pricing in pricing_catalog:
        if provider_from_slug(pricing.slug) == provider:
            logger.debug("Falling back to first catalog entry for %s: %s", provider, pricing.slug)
            return synthesize_entry(pricing, f"provider-first:{provider}")

    logger.debug("No cheap-tier candidate for provider %s", provider)
    return None


def select_priority_providers(
    candidates: Sequence[CuratedEntry],
    pricing_catalog: Sequence[PricingCatalogEntry],
    providers: Sequence[str],
) -> list[CuratedEntry]:
    """Build the cheap tier: at most one entry per provider, in priority order."""

    selected: list[CuratedEntry] = []
    seen: set[str] = set()
    for provider in providers:
        chosen = select_for_provider(provider, candidates, pricing_catalog)
        if chosen is None or chosen.slug in seen:
            continue
        selected.append(chosen)
        seen.add(chosen.slug)
    return selected


__all__ = [
    "Rejection",
    "apply_series_fallback",
    "keep_best",
    "promote_rejects",
    "select_for_provider",
    "select_priority_providers",
    "synthesize_entry",
]
