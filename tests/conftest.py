"""Configure pytest environment for all tests."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.absolute()
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from modelcurator._internal.logging import ROOT_LOGGER  # noqa: E402
from modelcurator.catalog.types import PricingCatalogEntry, QualityCatalogEntry  # noqa: E402

CURATOR_ENV_VARS = (
    "MIN_FREE_AAII",
    "MIN_PAID_AAII",
    "CHEAP_IN_MAX_USD_PER_1M",
    "CHEAP_OUT_MAX_USD_PER_1M",
    "MIN_CONTEXT_LENGTH",
    "FUZZY_MATCH_THRESHOLD",
    "CURATOR_FREE_TARGET",
    "CURATOR_PRIORITY_PROVIDERS",
    "OPENROUTER_MODELS_URL",
    "AA_MODELS_URL",
)


@pytest.fixture(autouse=True)
def reset_curator_logging():
    """Undo handlers and propagation changes made by configure_logging."""

    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_curator_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no curator variables set and no stray .env file in reach."""

    for name in CURATOR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_pricing():
    def _make(
        slug: str,
        name: Optional[str] = None,
        prompt: Optional[float] = None,
        completion: Optional[float] = None,
        context: Optional[int] = 32_768,
        created: Optional[datetime] = None,
    ) -> PricingCatalogEntry:
        return PricingCatalogEntry(
            slug=slug,
            display_name=name or slug,
            context_length=context,
            prompt_price=prompt,
            completion_price=completion,
            created_at=created,
        )

    return _make


@pytest.fixture
def make_quality():
    def _make(
        name: str,
        score: Optional[float] = 70.0,
        raw_slug: Optional[str] = None,
        known: Optional[str] = None,
        provider: Optional[str] = None,
        modalities: tuple = (),
        context: Optional[int] = None,
    ) -> QualityCatalogEntry:
        return QualityCatalogEntry(
            display_name=name,
            raw_slug=raw_slug,
            known_pricing_slug=known,
            provider_hint=provider,
            modalities=modalities,
            context_length=context,
            quality_score=score,
        )

    return _make
