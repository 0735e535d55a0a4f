"""Final ordering of the tiers and assembly of the discard log."""

from __future__ import annotations

from typing import Iterable, Sequence

from modelcurator.curation.promotion import Rejection
from modelcurator.curation.types import CuratedEntry, DiscardedModel


def finalize_free(entries: Iterable[CuratedEntry], target: int) -> tuple[CuratedEntry, ...]:
    """Sort by score descending, slug ascending, and keep the first ``target``."""

    ordered = sorted(entries, key=lambda entry: (-entry.quality_score, entry.slug))
    return tuple(ordered[:target])


def build_discard_log(
    admission: Sequence[tuple[int, DiscardedModel]],
    rejections: Iterable[Rejection],
    kept_slugs: set[str],
) -> tuple[DiscardedModel, ...]:
    """Merge admission discards with rejects that never made it into a tier.

    Both inputs carry the quality-entry position they came from; the log is
    ordered by it.
    """
    events = list(admission)
    events.extend(
        (rejection.position, DiscardedModel(slug=rejection.entry.slug, reason=rejection.reason))
        for rejection in rejections
        if rejection.entry.slug not in kept_slugs
    )
    events.sort(key=lambda event: event[0])
    return tuple(discarded for _, discarded in events)


__all__ = ["build_discard_log", "finalize_free"]
