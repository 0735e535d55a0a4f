"""Convert decoded listing payloads into catalog entries.

Both listings arrive as JSON that has drifted over time. The helpers here
accept every historical spelling we have seen and reduce malformed values to
``None`` rather than raising; only a payload whose top level is neither a list
nor an object wrapping one is rejected.

Examples:
    >>> entries = parse_pricing_listing(
    ...     {"data": [{"id": "openai/gpt-4o-mini", "pricing": {"prompt": "0.00000015"}}]}
    ... )
    >>> entries[0].prompt_price
    0.15
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional, Sequence

from modelcurator._internal.exceptions import DatasetFormatError
from modelcurator.catalog.types import PricingCatalogEntry, QualityCatalogEntry

logger = logging.getLogger(__name__)

PER_MILLION = 1_000_000

_SCORE_KEYS: tuple[str, ...] = (
    "aaii",
    "AAII",
    "artificial_analysis_intelligence_index",
    "intelligence_score",
    "quality_index",
)
_PRICE_OBJECT_KEYS: tuple[str, ...] = (
    "value",
    "price",
    "usdPer1M",
    "usd_per_1m_tokens",
    "usd_per_1m",
)


# ---------------------------------------------------------------------------
# Scalar coercion
# ---------------------------------------------------------------------------
def _parse_decimal(value: object) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return Decimal(str(value))
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        try:
            parsed = Decimal(trimmed)
        except InvalidOperation:
            return None
        if not parsed.is_finite():
            return None
        return parsed
    return None


def parse_price(value: object, *, scale: int = 1) -> Optional[float]:
    """Parse a price given as number or numeric string.

    Args:
        value: Raw price.
        scale: Multiplier applied before converting to float, used to turn
            per-token prices into per-million prices without float drift.

    Returns:
        Non-negative finite price, or None when the value is unusable.
    """
    parsed = _parse_decimal(value)
    if parsed is None or parsed < 0:
        return None
    result = float(parsed * scale)
    if not math.isfinite(result):
        return None
    return result


def _parse_float(value: object) -> Optional[float]:
    parsed = _parse_decimal(value)
    if parsed is None:
        return None
    return float(parsed)


def _parse_positive_int(value: object) -> Optional[int]:
    parsed = _parse_decimal(value)
    if parsed is None or parsed <= 0:
        return None
    return int(parsed.to_integral_value())


def _parse_created(value: object) -> Optional[datetime]:
    seconds = _parse_decimal(value)
    if seconds is None or seconds <= 0:
        return None
    try:
        return datetime.fromtimestamp(float(seconds), tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(value: object) -> Optional[datetime]:
    """Parse RFC 3339 timestamps or bare ``YYYY-MM-DD`` dates as UTC."""

    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            day = date.fromisoformat(text)
        except ValueError:
            return None
        return datetime(day.year, day.month, day.day, tzinfo=UTC)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _clean_str(value: object) -> Optional[str]:
    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed:
            return trimmed
    return None


def _first_str(payload: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        found = _clean_str(payload.get(key))
        if found is not None:
            return found
    return None


def _unwrap_list(payload: Any, keys: Sequence[str], label: str) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in keys:
            wrapped = payload.get(key)
            if isinstance(wrapped, list):
                return wrapped
    raise DatasetFormatError(
        f"{label} payload must be a list or an object wrapping one under "
        f"{', '.join(repr(k) for k in keys)}; got {type(payload).__name__}"
    )


# ---------------------------------------------------------------------------
# Pricing listing
# ---------------------------------------------------------------------------
def parse_pricing_listing(
    payload: Any,
    *,
    price_scale: int = PER_MILLION,
) -> list[PricingCatalogEntry]:
    """Build pricing entries from a ``models`` listing.

    Args:
        payload: Decoded JSON; a list or ``{"data": [...]}``.
        price_scale: Factor converting listed prices to USD per 1M tokens.
            The listing quotes per-token prices, hence the default.

    Returns:
        Entries in listing order. Entries without an identifier are skipped.

    Raises:
        DatasetFormatError: If the payload has no recognisable list.
    """
    items = _unwrap_list(payload, ("data", "models"), "Pricing listing")
    entries: list[PricingCatalogEntry] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            logger.warning("Skipping pricing entry %d: expected an object", index)
            continue
        slug = _first_str(item, ("id", "slug"))
        if slug is None:
            logger.warning("Skipping pricing entry %d: missing id", index)
            continue

        pricing = item.get("pricing")
        if not isinstance(pricing, Mapping):
            pricing = {}

        context_length = _parse_positive_int(item.get("context_length"))
        if context_length is None:
            top_provider = item.get("top_provider")
            if isinstance(top_provider, Mapping):
                context_length = _parse_positive_int(top_provider.get("context_length"))

        entries.append(
            PricingCatalogEntry(
                slug=slug,
                display_name=_clean_str(item.get("name")) or slug,
                context_length=context_length,
                prompt_price=parse_price(pricing.get("prompt"), scale=price_scale),
                completion_price=parse_price(pricing.get("completion"), scale=price_scale),
                created_at=_parse_created(item.get("created")),
            )
        )

    logger.debug("Parsed %d pricing entries", len(entries))
    return entries


# ---------------------------------------------------------------------------
# Quality listing
# ---------------------------------------------------------------------------
def _provider_slug(value: object) -> Optional[str]:
    if isinstance(value, Mapping):
        return _first_str(value, ("slug", "id"))
    return _clean_str(value)


def _context_length(item: Mapping[str, Any]) -> Optional[int]:
    context = item.get("context")
    if isinstance(context, Mapping):
        for key in ("max", "maxTokens"):
            found = _parse_positive_int(context.get(key))
            if found is not None:
                return found
    return _parse_positive_int(item.get("contextTokens"))


def _score(item: Mapping[str, Any]) -> Optional[float]:
    for group in ("scores", "metrics", "evaluations"):
        scores = item.get(group)
        if not isinstance(scores, Mapping):
            continue
        for key in _SCORE_KEYS:
            found = _parse_float(scores.get(key))
            if found is not None:
                return found
    return None


def _price_value(value: object) -> Optional[float]:
    if isinstance(value, Mapping):
        for key in _PRICE_OBJECT_KEYS:
            found = _parse_float(value.get(key))
            if found is not None:
                return found
        return None
    return _parse_float(value)


def _quality_price(
    pricing: Mapping[str, Any],
    primary: Sequence[str],
    per_million_key: str,
) -> Optional[float]:
    for key in primary:
        if key in pricing and pricing[key] is not None:
            found = _price_value(pricing[key])
            if found is not None:
                return found
            break
    for key in (per_million_key, "price_1m_blended_3_to_1"):
        found = _parse_float(pricing.get(key))
        if found is not None:
            return found
    return None


def _merge_modalities(*groups: object) -> tuple[str, ...]:
    seen: dict[str, str] = {}
    for group in groups:
        if not isinstance(group, list):
            continue
        for modality in group:
            if not isinstance(modality, str):
                continue
            seen.setdefault(modality.lower(), modality)
    return tuple(seen[key] for key in sorted(seen))


def parse_quality_entry(item: Mapping[str, Any]) -> QualityCatalogEntry:
    """Build a single quality entry from one listing object."""

    pricing = item.get("pricing")
    if not isinstance(pricing, Mapping):
        pricing = {}

    provider_hint = _provider_slug(item.get("provider")) or _provider_slug(
        item.get("model_creator")
    )

    return QualityCatalogEntry(
        display_name=_clean_str(item.get("name")) or "unknown",
        raw_slug=_first_str(item, ("slug", "modelSlug")),
        known_pricing_slug=_first_str(item, ("openrouterSlug", "openrouter_slug")),
        provider_hint=provider_hint,
        modalities=_merge_modalities(item.get("modalities"), item.get("tags")),
        context_length=_context_length(item),
        quality_score=_score(item),
        price_in=_quality_price(pricing, ("prompt", "input"), "price_1m_input_tokens"),
        price_out=_quality_price(pricing, ("completion", "output"), "price_1m_output_tokens"),
        last_updated=parse_timestamp(item.get("lastUpdatedAt"))
        or parse_timestamp(item.get("releaseDate")),
    )


def parse_quality_listing(payload: Any) -> list[QualityCatalogEntry]:
    """Build quality entries from a bare list or ``{"models"|"data": [...]}``.

    Raises:
        DatasetFormatError: If the payload has no recognisable list.
    """
    items = _unwrap_list(payload, ("models", "data"), "Quality listing")
    entries: list[QualityCatalogEntry] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            logger.warning("Skipping quality entry %d: expected an object", index)
            continue
        entries.append(parse_quality_entry(item))
    logger.debug("Parsed %d quality entries", len(entries))
    return entries


__all__ = [
    "PER_MILLION",
    "parse_price",
    "parse_pricing_listing",
    "parse_quality_entry",
    "parse_quality_listing",
    "parse_timestamp",
]
