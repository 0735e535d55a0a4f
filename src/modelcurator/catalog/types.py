"""Shared dataclasses describing the two input catalogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence


@dataclass(frozen=True)
class PricingCatalogEntry:
    """One model from the pricing/capability listing.

    Prices are quoted in USD per 1,000,000 tokens and may be present or
    absent independently of each other.
    """

    slug: str
    display_name: str
    context_length: Optional[int] = None
    prompt_price: Optional[float] = None
    completion_price: Optional[float] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class QualityCatalogEntry:
    """One model from the quality-scoring listing.

    ``price_in``/``price_out`` are kept as reported by the quality source; the
    curation engine always prices entries from the pricing catalog.
    """

    display_name: str
    raw_slug: Optional[str] = None
    known_pricing_slug: Optional[str] = None
    provider_hint: Optional[str] = None
    modalities: Sequence[str] = field(default_factory=tuple)
    context_length: Optional[int] = None
    quality_score: Optional[float] = None
    price_in: Optional[float] = None
    price_out: Optional[float] = None
    last_updated: Optional[datetime] = None


AliasDictionary = dict[str, str]


__all__ = ["AliasDictionary", "PricingCatalogEntry", "QualityCatalogEntry"]
