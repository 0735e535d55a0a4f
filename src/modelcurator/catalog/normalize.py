"""Identifier normalization shared by every matching strategy.

Examples:
    >>> normalize("  OpenAI:  GPT-4o   mini ")
    'openai gpt-4o mini'
    >>> normalize(normalize("Qwen2.5 72B (Instruct)")) == normalize("Qwen2.5 72B (Instruct)")
    True
"""

from __future__ import annotations

_KEPT_PUNCTUATION = frozenset("/-_.")
_WHITESPACE = frozenset(" \t\n\r\x0c")


def normalize(value: str) -> str:
    """Canonicalize a free-form model name or slug for comparison.

    ASCII letters are lowercased, ASCII alphanumerics and ``/ - _ .`` are kept,
    runs of whitespace collapse to one space, and every other character
    (non-ASCII included) is dropped. The result is trimmed.

    Args:
        value: Display name, slug, or alias key.

    Returns:
        Normalized text; idempotent under repeated application.
    """
    chars: list[str] = []
    prev_was_space = False
    for ch in value:
        if not ch.isascii():
            continue
        ch = ch.lower()
        if ch.isalnum() or ch in _KEPT_PUNCTUATION:
            chars.append(ch)
            prev_was_space = False
        elif ch in _WHITESPACE:
            if not prev_was_space:
                chars.append(" ")
                prev_was_space = True
    return "".join(chars).strip()


def provider_from_slug(slug: str) -> str:
    """Return the text before the first ``/`` of a slug, or ``"unknown"`` when empty."""

    provider = slug.split("/", 1)[0]
    return provider or "unknown"


def slug_suffix(slug: str) -> str:
    """Return the part of a slug after its last ``/``, lowercased."""

    return slug.rsplit("/", 1)[-1].lower()


__all__ = ["normalize", "provider_from_slug", "slug_suffix"]
