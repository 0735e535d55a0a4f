"""Dataclasses flowing through the curation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class Tunables:
    """Thresholds and targets for one curation run.

    Prices are USD per 1,000,000 tokens. Quality scores use the quality
    source's index scale.
    """

    min_free_quality: float = 60.0
    min_paid_quality: float = 65.0
    cheap_in_max: float = 1.5
    cheap_out_max: float = 6.0
    min_context_length: int = 8_192
    fuzzy_match_threshold: float = 0.94
    free_target: int = 3
    priority_providers: tuple[str, ...] = ("openai", "anthropic", "google", "x-ai")


class PriceSource(str, Enum):
    """Which listing supplied an entry's prices."""

    QUALITY = "aa"
    PRICING = "openrouter"


@dataclass(frozen=True)
class CuratedEntry:
    """A model admitted to (or considered for) one of the output tiers."""

    slug: str
    display_name: str
    provider: str
    quality_score: float
    price_in: Optional[float]
    price_out: Optional[float]
    price_source: PriceSource
    context_length: Optional[int]
    modalities: tuple[str, ...] = field(default_factory=tuple)
    match_strategy: Optional[str] = None
    quality_last_updated: Optional[datetime] = None
    pricing_created_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Discard reasons (closed union)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class MissingQualityScore:
    kind: Literal["missing-quality-score"] = "missing-quality-score"


@dataclass(frozen=True)
class NonTextModality:
    kind: Literal["non-text-modality"] = "non-text-modality"


@dataclass(frozen=True)
class InsufficientContext:
    min_required: int
    actual: Optional[int]
    kind: Literal["insufficient-context"] = "insufficient-context"


@dataclass(frozen=True)
class MissingPricing:
    kind: Literal["missing-pricing"] = "missing-pricing"


@dataclass(frozen=True)
class QualityThreshold:
    minimum: float
    actual: float
    kind: Literal["quality-threshold"] = "quality-threshold"


@dataclass(frozen=True)
class PricingThreshold:
    max_in: float
    max_out: float
    actual_in: Optional[float]
    actual_out: Optional[float]
    kind: Literal["pricing-threshold"] = "pricing-threshold"


DiscardReason = Union[
    MissingQualityScore,
    NonTextModality,
    InsufficientContext,
    MissingPricing,
    QualityThreshold,
    PricingThreshold,
]


@dataclass(frozen=True)
class UnmatchedModel:
    """A quality entry that could not be tied to a pricing slug."""

    name: str
    provider: Optional[str] = None
    slug: Optional[str] = None


@dataclass(frozen=True)
class DiscardedModel:
    slug: str
    reason: DiscardReason


@dataclass(frozen=True)
class CurationResult:
    """Everything one curation run produces; the serializer's only input."""

    free: tuple[CuratedEntry, ...] = ()
    cheap: tuple[CuratedEntry, ...] = ()
    unmatched: tuple[UnmatchedModel, ...] = ()
    discarded: tuple[DiscardedModel, ...] = ()


__all__ = [
    "CuratedEntry",
    "CurationResult",
    "DiscardReason",
    "DiscardedModel",
    "InsufficientContext",
    "MissingPricing",
    "MissingQualityScore",
    "NonTextModality",
    "PriceSource",
    "PricingThreshold",
    "QualityThreshold",
    "Tunables",
    "UnmatchedModel",
]
