"""Alias dictionary loading.

The alias file is a flat JSON object mapping display names (as the quality
source spells them) onto pricing-catalog slugs::

    {"GPT-5 (high)": "openai/gpt-5", "Claude 4.5 Haiku": "anthropic/claude-haiku-4.5"}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from modelcurator._internal.exceptions import DatasetFormatError
from modelcurator.catalog.normalize import normalize
from modelcurator.catalog.types import AliasDictionary

logger = logging.getLogger(__name__)


def build_alias_map(raw: Mapping[Any, Any]) -> AliasDictionary:
    """Normalize keys and drop blank keys or values.

    Args:
        raw: Mapping as decoded from the alias file.

    Returns:
        Mapping from normalized display name to slug.
    """
    aliases: AliasDictionary = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not isinstance(value, str):
            continue
        normalized_key = normalize(key)
        slug = value.strip()
        if normalized_key and slug:
            aliases[normalized_key] = slug
    return aliases


def load_alias_map(path: Path) -> AliasDictionary:
    """Read the alias file; a missing or blank file yields an empty mapping.

    Raises:
        DatasetFormatError: If the file is not a JSON object.
    """
    if not path.exists():
        logger.debug("Alias file %s not found; using no aliases", path)
        return {}

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetFormatError(f"Alias file {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise DatasetFormatError(f"Alias file {path} must contain a JSON object at the top level")

    aliases = build_alias_map(raw)
    logger.debug("Loaded %d aliases from %s", len(aliases), path)
    return aliases


__all__ = ["build_alias_map", "load_alias_map"]
