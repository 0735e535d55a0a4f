"""Read a snapshot back and pick models from it.

Examples:
    >>> ModelPreference.parse(" Auto ").is_auto
    True
    >>> ModelPreference.parse("openai/gpt-5-mini").as_str()
    'openai/gpt-5-mini'
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from modelcurator._internal.exceptions import SnapshotError, SnapshotSchemaError
from modelcurator.snapshot.schema import (
    SNAPSHOT_SCHEMA_VERSION,
    SnapshotEntry,
    SnapshotFile,
    SnapshotMetadata,
)

logger = logging.getLogger(__name__)

AUTO_SENTINEL = "auto"


class CuratedTier(str, Enum):
    FREE = "free"
    CHEAP = "cheap"


@dataclass(frozen=True)
class CuratedModelSummary:
    """A curated entry flattened together with the tier it came from."""

    slug: str
    display_name: str
    provider: str
    tier: CuratedTier
    aaii: float
    price_in_per_million: Optional[float]
    price_out_per_million: Optional[float]
    context_length: Optional[int]
    price_source: str
    match_strategy: Optional[str] = None
    openrouter_created_at: Optional[datetime] = None


@dataclass(frozen=True)
class CuratedCatalog:
    """The two tiers of a snapshot, ready for model selection."""

    free: tuple[SnapshotEntry, ...]
    cheap: tuple[SnapshotEntry, ...]
    generated_at: datetime
    metadata: SnapshotMetadata

    def find(self, slug: str) -> Optional[SnapshotEntry]:
        """Return the first entry in either tier whose slug matches, ignoring case."""

        wanted = slug.strip().lower()
        for entry in (*self.free, *self.cheap):
            if entry.slug.lower() == wanted:
                return entry
        return None

    def summaries(self) -> list[CuratedModelSummary]:
        """Free entries first, then cheap ones, each tagged with its tier."""

        summaries: list[CuratedModelSummary] = []
        for tier, entries in ((CuratedTier.FREE, self.free), (CuratedTier.CHEAP, self.cheap)):
            for entry in entries:
                summaries.append(
                    CuratedModelSummary(
                        slug=entry.slug,
                        display_name=entry.display_name,
                        provider=entry.provider,
                        tier=tier,
                        aaii=entry.aaii,
                        price_in_per_million=entry.price_in_per_million,
                        price_out_per_million=entry.price_out_per_million,
                        context_length=entry.context_length,
                        price_source=entry.price_source.value,
                        match_strategy=entry.match_strategy,
                        openrouter_created_at=entry.openrouter_created_at,
                    )
                )
        return summaries


@dataclass(frozen=True)
class ModelPreference:
    """Either automatic selection or one explicit slug.

    ``slug`` is None for automatic selection.
    """

    slug: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> "ModelPreference":
        trimmed = value.strip()
        if trimmed.lower() == AUTO_SENTINEL:
            return cls()
        return cls(slug=trimmed)

    @property
    def is_auto(self) -> bool:
        return self.slug is None

    def as_str(self) -> str:
        return AUTO_SENTINEL if self.slug is None else self.slug


def parse_snapshot(raw: Union[str, bytes]) -> CuratedCatalog:
    """Validate a serialized snapshot and convert it to a catalog.

    Raises:
        SnapshotSchemaError: If the document declares another schema version.
        SnapshotError: If the document is not valid snapshot JSON.
    """
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"snapshot JSON error: {exc}") from exc
    if not isinstance(document, dict):
        raise SnapshotError("snapshot must be a JSON object")

    version = document.get("schema_version")
    if not isinstance(version, int) or isinstance(version, bool):
        raise SnapshotError("snapshot missing required fields: schema_version")
    if version != SNAPSHOT_SCHEMA_VERSION:
        raise SnapshotSchemaError(expected=SNAPSHOT_SCHEMA_VERSION, found=version)

    try:
        snapshot = SnapshotFile.model_validate(document)
    except ValidationError as exc:
        raise SnapshotError(f"snapshot missing required fields: {exc}") from exc

    for entry in (*snapshot.free, *snapshot.cheap):
        if not entry.slug.strip():
            raise SnapshotError("snapshot missing required fields: curated entry missing slug")

    return CuratedCatalog(
        free=tuple(snapshot.free),
        cheap=tuple(snapshot.cheap),
        generated_at=snapshot.generated_at,
        metadata=snapshot.metadata,
    )


def load_snapshot(path: Path) -> CuratedCatalog:
    """Read and parse a snapshot file.

    Raises:
        SnapshotError: If the file cannot be read or parsed.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"failed to read snapshot: {exc}") from exc
    catalog = parse_snapshot(raw)
    logger.debug(
        "Loaded snapshot %s: %d free, %d cheap", path, len(catalog.free), len(catalog.cheap)
    )
    return catalog


def select_auto(catalog: CuratedCatalog, free_only: bool = False) -> Optional[SnapshotEntry]:
    """Pick the default model: the head of the preferred tier, else the other tier's."""

    preferred, fallback = (
        (catalog.free, catalog.cheap) if free_only else (catalog.cheap, catalog.free)
    )
    if preferred:
        return preferred[0]
    if fallback:
        return fallback[0]
    return None


def resolve_preference(
    catalog: CuratedCatalog, preference: ModelPreference, free_only: bool = False
) -> Optional[SnapshotEntry]:
    """Apply a preference to a catalog; None when nothing matches."""

    if preference.is_auto:
        return select_auto(catalog, free_only)
    return catalog.find(preference.as_str())


__all__ = [
    "AUTO_SENTINEL",
    "CuratedCatalog",
    "CuratedModelSummary",
    "CuratedTier",
    "ModelPreference",
    "load_snapshot",
    "parse_snapshot",
    "resolve_preference",
    "select_auto",
]
