"""Input catalogs: shapes, normalization, ingestion and aliases."""

from modelcurator.catalog.aliases import build_alias_map, load_alias_map
from modelcurator.catalog.ingest import parse_pricing_listing, parse_quality_listing
from modelcurator.catalog.normalize import normalize
from modelcurator.catalog.types import AliasDictionary, PricingCatalogEntry, QualityCatalogEntry

__all__ = [
    "AliasDictionary",
    "PricingCatalogEntry",
    "QualityCatalogEntry",
    "build_alias_map",
    "load_alias_map",
    "normalize",
    "parse_pricing_listing",
    "parse_quality_listing",
]
