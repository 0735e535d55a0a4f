"""Provider-name equivalence used to disambiguate suffix matches.

The quality source names providers by company (``"meta"``, ``"xai"``,
``"alibaba"``) while pricing slugs use their own prefixes (``"meta-llama"``,
``"x-ai"``, ``"qwen"``). The synonym table is data, keyed by the hint as the
quality source spells it. It is one-directional: a key lists the
slug prefixes it may stand for, and a prefix does not automatically map back.
"""

from __future__ import annotations

from typing import Final, Mapping

PROVIDER_SYNONYMS: Final[Mapping[str, tuple[str, ...]]] = {
    "alibaba": ("qwen",),
    "amazon": ("amazon-nova",),
    "google": ("google-ai", "gemini"),
    "meta": ("meta-llama",),
    "mistral": ("mistralai",),
    "moonshot": ("moonshotai",),
    "nvidia": ("nvidia-nim",),
    "xai": ("x-ai",),
    "x-ai": ("xai",),
    "zhipu": ("z-ai", "thudm"),
    "z-ai": ("zhipu",),
}


def _clean(value: str) -> str:
    return value.strip().lower()


def providers_equivalent(hint: str, slug_prefix: str) -> bool:
    """Return True when a provider hint refers to a slug prefix.

    Checks, in order: exact match, prefix containment in either direction,
    then :data:`PROVIDER_SYNONYMS` keyed by the hint.

    Examples:
        >>> providers_equivalent("meta", "meta-llama")
        True
        >>> providers_equivalent("alibaba", "qwen")
        True
        >>> providers_equivalent("qwen", "alibaba")
        False
    """
    left = _clean(hint)
    right = _clean(slug_prefix)
    if not left or not right:
        return False
    if left == right:
        return True
    if left.startswith(right) or right.startswith(left):
        return True
    return right in PROVIDER_SYNONYMS.get(left, ())


__all__ = ["PROVIDER_SYNONYMS", "providers_equivalent"]
