"""Curation of the free and cheap tiers."""

from modelcurator.curation.engine import curate
from modelcurator.curation.types import CuratedEntry, CurationResult, PriceSource, Tunables

__all__ = ["CuratedEntry", "CurationResult", "PriceSource", "Tunables", "curate"]
