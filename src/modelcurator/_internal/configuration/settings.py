"""Curator settings: environment, ``.env`` and an optional YAML file.

Environment variable names match the field names case-insensitively, e.g.
``MIN_FREE_AAII=55`` or ``CURATOR_PRIORITY_PROVIDERS=openai,google``. A YAML
file may carry the same keys under a top-level ``curator:`` mapping and wins
over the environment::

    curator:
      min_paid_aaii: 62
      cheap_in_max_usd_per_1m: ${CHEAP_IN_CAP}
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modelcurator._internal.exceptions import ConfigError
from modelcurator.curation.types import Tunables
from modelcurator.snapshot.schema import SnapshotSources

logger: logging.Logger = logging.getLogger(__name__)

_ENV_PLACEHOLDER = re.compile(r"\${([^}]+)}")


def resolve_env_vars(*, data: Any) -> Any:
    """Recursively replace ``${VAR}`` strings with environment values.

    Unset variables resolve to an empty string.

    Args:
        data: Nested dictionaries, lists and scalars as loaded from YAML.

    Returns:
        The same structure with placeholders substituted.
    """
    if isinstance(data, dict):
        return {key: resolve_env_vars(data=value) for key, value in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars(data=item) for item in data]
    if isinstance(data, str):
        match = _ENV_PLACEHOLDER.fullmatch(data)
        if match:
            return os.environ.get(match.group(1), "")
        return data
    return data


class CuratorSettings(BaseSettings):
    """Tunables and source URLs for a curation run.

    Attributes:
        min_free_aaii: Minimum quality score for the free tier.
        min_paid_aaii: Minimum quality score for the cheap tier.
        cheap_in_max_usd_per_1m: Prompt price cap for the cheap tier.
        cheap_out_max_usd_per_1m: Completion price cap for the cheap tier.
        min_context_length: Smallest acceptable context window.
        fuzzy_match_threshold: Jaro-Winkler floor for fuzzy resolution.
        curator_free_target: Size of the free tier.
        curator_priority_providers: Comma-separated cheap-tier providers, in order.
    """

    min_free_aaii: float = 60.0
    min_paid_aaii: float = 65.0
    cheap_in_max_usd_per_1m: float = Field(default=1.5, ge=0)
    cheap_out_max_usd_per_1m: float = Field(default=6.0, ge=0)
    min_context_length: int = Field(default=8_192, ge=0)
    fuzzy_match_threshold: float = Field(default=0.94, ge=0, le=1)
    curator_free_target: int = Field(default=3, ge=1)
    curator_priority_providers: str = "openai,anthropic,google,x-ai"
    openrouter_models_url: str = "https://openrouter.ai/api/v1/models"
    aa_models_url: str = "https://artificialanalysis.ai/api/v2/data/llms/models"

    model_config: SettingsConfigDict = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("curator_priority_providers", mode="before")
    @classmethod
    def _join_provider_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return value

    def priority_providers(self) -> tuple[str, ...]:
        return tuple(
            provider.strip().lower()
            for provider in self.curator_priority_providers.split(",")
            if provider.strip()
        )

    def tunables(self) -> Tunables:
        """Project the settings onto the engine's :class:`Tunables`."""

        return Tunables(
            min_free_quality=self.min_free_aaii,
            min_paid_quality=self.min_paid_aaii,
            cheap_in_max=self.cheap_in_max_usd_per_1m,
            cheap_out_max=self.cheap_out_max_usd_per_1m,
            min_context_length=self.min_context_length,
            fuzzy_match_threshold=self.fuzzy_match_threshold,
            free_target=self.curator_free_target,
            priority_providers=self.priority_providers(),
        )

    def sources(self) -> SnapshotSources:
        return SnapshotSources(
            openrouter_models_url=self.openrouter_models_url,
            aa_models_url=self.aa_models_url,
        )


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file {path} is not valid YAML: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    section = loaded.get("curator", {})
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'curator' in {path} must be a mapping")
    return resolve_env_vars(data=section)


def load_settings(config_path: Optional[Path] = None) -> CuratorSettings:
    """Load settings from the environment, optionally overlaid by a YAML file.

    Args:
        config_path: YAML file with a ``curator:`` mapping.

    Returns:
        Validated settings.

    Raises:
        ConfigError: If the file cannot be read or a value fails validation.
    """
    overrides: Dict[str, Any] = {}
    if config_path is not None:
        overrides = _read_config_file(Path(config_path))
        logger.debug("Loaded %d curator settings from %s", len(overrides), config_path)

    try:
        return CuratorSettings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid curator settings: {exc}") from exc


__all__ = ["CuratorSettings", "load_settings", "resolve_env_vars"]
