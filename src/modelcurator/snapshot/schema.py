"""Pydantic models for the on-disk snapshot document.

The same models are used to write and to read a snapshot, so every field a
reader depends on is declared exactly once.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from modelcurator.curation.types import PriceSource

SNAPSHOT_SCHEMA_VERSION = 2


class SnapshotThresholds(BaseModel):
    """Tunables the snapshot was produced with."""

    min_free_aaii: float
    min_paid_aaii: float
    cheap_in_max: float
    cheap_out_max: float
    min_context_length: int
    fuzzy_match_threshold: float


class SnapshotSources(BaseModel):
    """Where the two listings were fetched from."""

    openrouter_models_url: str = "https://openrouter.ai/api/v1/models"
    aa_models_url: str = "https://artificialanalysis.ai/api/v2/data/llms/models"


class SnapshotCounts(BaseModel):
    curated_free: int = 0
    curated_cheap: int = 0
    unmatched: int = 0
    discarded: int = 0


class SnapshotMetadata(BaseModel):
    thresholds: SnapshotThresholds
    sources: SnapshotSources
    counts: SnapshotCounts = Field(default_factory=SnapshotCounts)


class SnapshotEntry(BaseModel):
    """One curated model as written to disk.

    Attributes:
        aaii: Quality score on the quality source's index scale.
        price_in_per_million: Prompt price in USD per 1M tokens, if known.
        price_out_per_million: Completion price in USD per 1M tokens, if known.
        match_strategy: How the entry was tied to its pricing slug.
    """

    slug: str
    display_name: str
    provider: str
    aaii: float
    price_in_per_million: Optional[float] = None
    price_out_per_million: Optional[float] = None
    price_source: PriceSource
    context_length: Optional[int] = None
    modalities: List[str] = Field(default_factory=list)
    match_strategy: Optional[str] = None
    aa_last_updated: Optional[datetime] = None
    openrouter_created_at: Optional[datetime] = None


class UnmatchedRecord(BaseModel):
    name: str
    provider: Optional[str] = None
    slug: Optional[str] = None


class DiscardRecord(BaseModel):
    slug: str
    reason: str


class SnapshotFile(BaseModel):
    """Top-level snapshot document."""

    schema_version: int
    generated_at: datetime
    metadata: SnapshotMetadata
    free: List[SnapshotEntry] = Field(default_factory=list)
    cheap: List[SnapshotEntry] = Field(default_factory=list)
    unmatched: List[UnmatchedRecord] = Field(default_factory=list)
    discarded: List[DiscardRecord] = Field(default_factory=list)


# Keys dropped from the rendered document when their value is null.
OPTIONAL_ENTRY_KEYS = ("match_strategy", "aa_last_updated", "openrouter_created_at")
OPTIONAL_UNMATCHED_KEYS = ("provider", "slug")


__all__ = [
    "DiscardRecord",
    "OPTIONAL_ENTRY_KEYS",
    "OPTIONAL_UNMATCHED_KEYS",
    "SNAPSHOT_SCHEMA_VERSION",
    "SnapshotCounts",
    "SnapshotEntry",
    "SnapshotFile",
    "SnapshotMetadata",
    "SnapshotSources",
    "SnapshotThresholds",
    "UnmatchedRecord",
]
