"""Resolve quality-catalog entries onto pricing-catalog slugs.

The resolver holds a read-only view of the pricing catalog for one curation
run and tries, strictest first:

  1. the pricing slug the quality source already claims
  2. the quality source's own slug, looked up directly
  3. the quality slug as a suffix of exactly one pricing slug (provider hint
     breaks ties, ambiguity is a miss)
  4. identifiers derived from the entry, directly or through the alias map
  5. Jaro-Winkler similarity over normalized names and slugs

Examples:
    >>> from modelcurator.catalog.types import PricingCatalogEntry, QualityCatalogEntry
    >>> resolver = IdentityResolver([PricingCatalogEntry("openai/gpt-4o", "GPT-4o")], {})
    >>> resolver.resolve(QualityCatalogEntry("GPT-4o", raw_slug="gpt-4o")).slug
    'openai/gpt-4o'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from rapidfuzz.distance import JaroWinkler

from modelcurator.catalog.normalize import normalize, provider_from_slug, slug_suffix
from modelcurator.catalog.types import PricingCatalogEntry, QualityCatalogEntry
from modelcurator.resolution.providers import providers_equivalent
from modelcurator.resolution.types import MatchResult

logger = logging.getLogger(__name__)

SCORE_EPSILON = 1e-6


@dataclass(frozen=True)
class _FuzzyCandidate:
    slug: str
    name: str
    normalized_name: str
    normalized_slug: str


class IdentityResolver:
    """Index a pricing catalog and resolve quality entries against it.

    Attributes:
        threshold: Minimum Jaro-Winkler similarity accepted by the fuzzy step.
    """

    def __init__(
        self,
        pricing_catalog: Sequence[PricingCatalogEntry],
        aliases: Mapping[str, str],
        threshold: float = 0.94,
    ) -> None:
        self.threshold = threshold
        self._aliases = dict(aliases)
        self._by_slug: dict[str, PricingCatalogEntry] = {}
        self._by_lower_slug: dict[str, PricingCatalogEntry] = {}
        self._by_suffix: dict[str, list[PricingCatalogEntry]] = {}
        self._fuzzy_candidates: list[_FuzzyCandidate] = []

        for entry in pricing_catalog:
            if entry.slug in self._by_slug:
                logger.warning("Duplicate pricing slug %s; keeping the first entry", entry.slug)
                continue
            self._by_slug[entry.slug] = entry
            self._by_lower_slug.setdefault(entry.slug.lower(), entry)
            self._by_suffix.setdefault(slug_suffix(entry.slug), []).append(entry)
            self._fuzzy_candidates.append(
                _FuzzyCandidate(
                    slug=entry.slug,
                    name=entry.display_name,
                    normalized_name=normalize(entry.display_name),
                    normalized_slug=normalize(entry.slug),
                )
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_model(self, slug: str) -> Optional[PricingCatalogEntry]:
        """Return the pricing entry for an exact slug."""

        return self._by_slug.get(slug)

    def lookup(self, slug: str) -> Optional[PricingCatalogEntry]:
        """Return the pricing entry for a slug, matching exactly or case-insensitively."""

        found = self._by_slug.get(slug)
        if found is None:
            found = self._by_lower_slug.get(slug.lower())
        return found

    def resolve(self, entry: QualityCatalogEntry) -> MatchResult:
        """Run the resolution cascade for one quality entry.

        Returns:
            The first successful match, or ``MatchResult.none()``.
        """
        if entry.known_pricing_slug:
            found = self.lookup(entry.known_pricing_slug)
            if found is not None:
                return MatchResult.direct(found.slug)

        if entry.raw_slug:
            found = self.lookup(entry.raw_slug)
            if found is not None:
                return MatchResult.direct(found.slug)

            suffix_match = self._resolve_suffix(entry.raw_slug, entry.provider_hint)
            if suffix_match is not None:
                return suffix_match

        for candidate in self._derived_candidates(entry):
            found = self.lookup(candidate)
            if found is not None:
                return MatchResult.derived(found.slug, candidate)
            target = self._aliases.get(normalize(candidate))
            if target is None:
                continue
            found = self.lookup(target)
            if found is not None:
                return MatchResult.alias(found.slug, candidate)
            logger.warning("Alias %r points at unknown slug %s", candidate, target)

        return self._resolve_fuzzy(entry.display_name)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve_suffix(self, raw_slug: str, provider_hint: Optional[str]) -> Optional[MatchResult]:
        candidates = self._by_suffix.get(raw_slug.strip().lower(), [])
        if not candidates:
            return None
        source = f"suffix:{raw_slug}"
        if len(candidates) == 1:
            return MatchResult.derived(candidates[0].slug, source)
        if not provider_hint:
            logger.debug("Suffix %s is ambiguous across %d slugs", raw_slug, len(candidates))
            return None

        matching = [
            candidate
            for candidate in candidates
            if providers_equivalent(provider_hint, provider_from_slug(candidate.slug))
        ]
        if len(matching) == 1:
            return MatchResult.derived(matching[0].slug, source)
        logger.debug(
            "Suffix %s with provider %s matched %d slugs; not guessing",
            raw_slug,
            provider_hint,
            len(matching),
        )
        return None

    @staticmethod
    def _derived_candidates(entry: QualityCatalogEntry) -> list[str]:
        raw: list[Optional[str]] = [entry.display_name, entry.raw_slug]
        if entry.provider_hint:
            raw.append(f"{entry.provider_hint}/{entry.display_name}")
            if entry.raw_slug:
                raw.append(f"{entry.provider_hint}/{entry.raw_slug}")

        candidates: list[str] = []
        for value in raw:
            if value and value not in candidates:
                candidates.append(value)
        return candidates

    def _resolve_fuzzy(self, display_name: str) -> MatchResult:
        target = normalize(display_name)
        if not target:
            return MatchResult.none()

        best: Optional[tuple[float, _FuzzyCandidate]] = None
        for candidate in self._fuzzy_candidates:
            score = max(
                similarity(target, candidate.normalized_name),
                similarity(target, candidate.normalized_slug),
            )
            if score < self.threshold:
                continue
            if best is None:
                best = (score, candidate)
                continue
            best_score, best_candidate = best
            if score > best_score + SCORE_EPSILON or (
                abs(score - best_score) <= SCORE_EPSILON and candidate.slug < best_candidate.slug
            ):
                best = (score, candidate)

        if best is None:
            return MatchResult.none()
        score, candidate = best
        return MatchResult.fuzzy(candidate.slug, candidate.name, score)


def similarity(left: str, right: str) -> float:
    """Jaro-Winkler similarity of two strings after normalization."""

    return JaroWinkler.similarity(normalize(left), normalize(right))


__all__ = ["IdentityResolver", "SCORE_EPSILON", "similarity"]
