"""Model-line heuristics used when a tier has to be back-filled.

Everything here is pattern matching on slugs and display names. The tables
are data: adding a family or a provider rule should not need new logic.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Final, Literal, Optional

from modelcurator.catalog.normalize import normalize, slug_suffix
from modelcurator.curation.types import CuratedEntry

FREE_PRICE_EPSILON: Final[float] = 1e-9

_VERSION_PATTERN = re.compile(r"(?<!\d)(\d{1,2})(?:[.-](\d{1,2}))?(?!\d)")
_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


# ---------------------------------------------------------------------------
# Free-tier families
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SeriesSpec:
    """An open-weight model family the free tier should try to cover."""

    key: str
    needles: tuple[str, ...]
    prefer_instruct: bool = False

    def matches(self, slug: str, name: str) -> bool:
        haystacks = (normalize(slug), normalize(name))
        return any(needle in hay for needle in self.needles for hay in haystacks)


FREE_SERIES: Final[tuple[SeriesSpec, ...]] = (
    SeriesSpec("qwen", ("qwen",), prefer_instruct=True),
    SeriesSpec("llama", ("llama",), prefer_instruct=True),
    SeriesSpec("deepseek", ("deepseek",)),
    SeriesSpec("mistral", ("mistral",), prefer_instruct=True),
    SeriesSpec("gemma", ("gemma",), prefer_instruct=True),
)


# ---------------------------------------------------------------------------
# Cheap-tier provider rules
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ProviderRule:
    """Which model line stands in for a provider, and how to pick within it.

    ``pick`` is ``"cheapest"`` (lowest price order) or ``"latest"``
    (highest extracted version, price order breaking ties).
    """

    provider: str
    line: str
    pick: Literal["cheapest", "latest"]


PROVIDER_RULES: Final[dict[str, ProviderRule]] = {
    "openai": ProviderRule("openai", "mini", "cheapest"),
    "anthropic": ProviderRule("anthropic", "haiku", "latest"),
    "google": ProviderRule("google", "flash", "latest"),
    "x-ai": ProviderRule("x-ai", "fast", "latest"),
}


def line_tokens(slug: str, display_name: str) -> frozenset[str]:
    """Word tokens of the slug's model part and the display name."""

    text = f"{slug_suffix(slug)} {display_name.lower()}"
    return frozenset(token for token in _TOKEN_SPLIT.split(text) if token)


def on_line(entry: CuratedEntry, line: str) -> bool:
    return line in line_tokens(entry.slug, entry.display_name)


# ---------------------------------------------------------------------------
# Prices, versions and ordering
# ---------------------------------------------------------------------------
def sanitize_price(value: Optional[float]) -> Optional[float]:
    """Return the price when finite and non-negative, else None."""

    if value is None or not math.isfinite(value) or value < 0:
        return None
    return value


def has_valid_price(entry: CuratedEntry) -> bool:
    return sanitize_price(entry.price_in) is not None or sanitize_price(entry.price_out) is not None


def is_free_model(price_in: Optional[float], price_out: Optional[float]) -> bool:
    """True when neither price shows a non-zero charge.

    Examples:
        >>> is_free_model(0.0, None)
        True
        >>> is_free_model(0.0, 0.5)
        False
    """
    return all(price is None or price <= FREE_PRICE_EPSILON for price in (price_in, price_out))


def meets_pricing_thresholds(
    price_in: Optional[float],
    price_out: Optional[float],
    max_in: float,
    max_out: float,
) -> bool:
    """Check the present prices against their maxima; no prices never qualifies."""

    if price_in is None and price_out is None:
        return False
    if price_in is not None and price_in > max_in:
        return False
    if price_out is not None and price_out > max_out:
        return False
    return True


def extract_version(slug: str, display_name: str = "") -> Optional[tuple[int, ...]]:
    """Pull the first ``N``, ``N.M`` or ``N-M`` version out of a model id.

    The slug's model part is searched first, then the display name.

    Examples:
        >>> extract_version("anthropic/claude-3-5-haiku")
        (3, 5)
        >>> extract_version("google/gemini-2.5-flash")
        (2, 5)
        >>> extract_version("x-ai/grok-fast") is None
        True
    """
    for text in (slug_suffix(slug), display_name.lower()):
        found = _VERSION_PATTERN.search(text)
        if found is None:
            continue
        major, minor = found.groups()
        if minor is None:
            return (int(major),)
        return (int(major), int(minor))
    return None


def price_order_key(entry: CuratedEntry) -> tuple[float, float, float, int, float, str]:
    """Total order for "cheapest" choices.

    Total price, prompt, completion (absent sorts as infinite), then newest
    creation time first with absent last, then slug.
    """
    price_in = sanitize_price(entry.price_in)
    price_out = sanitize_price(entry.price_out)
    if price_in is None and price_out is None:
        total = math.inf
    else:
        total = (price_in or 0.0) + (price_out or 0.0)
    created = entry.pricing_created_at
    return (
        total,
        math.inf if price_in is None else price_in,
        math.inf if price_out is None else price_out,
        1 if created is None else 0,
        0.0 if created is None else -created.timestamp(),
        entry.slug,
    )


def pick_by_rule(rule: ProviderRule, candidates: list[CuratedEntry]) -> Optional[CuratedEntry]:
    """Apply a provider rule to candidates already known to be on its line."""

    priced = sorted((c for c in candidates if has_valid_price(c)), key=price_order_key)
    if not priced:
        return None
    if rule.pick == "cheapest":
        return priced[0]

    versioned = [
        (version, entry)
        for entry in priced
        if (version := extract_version(entry.slug, entry.display_name)) is not None
    ]
    if not versioned:
        return priced[0]
    best_version = max(version for version, _ in versioned)
    return next(entry for version, entry in versioned if version == best_version)


__all__ = [
    "FREE_PRICE_EPSILON",
    "FREE_SERIES",
    "PROVIDER_RULES",
    "ProviderRule",
    "SeriesSpec",
    "extract_version",
    "has_valid_price",
    "is_free_model",
    "line_tokens",
    "meets_pricing_thresholds",
    "on_line",
    "pick_by_rule",
    "price_order_key",
    "sanitize_price",
]
