"""
Model Curator: free and cheap default-model curation
====================================================

Reconciles a pricing listing with a quality-scoring listing and produces two
small, ranked tiers of models for automatic default selection.

Examples:
    from modelcurator import curate, parse_pricing_listing, parse_quality_listing

    result = curate(
        parse_quality_listing(quality_payload),
        parse_pricing_listing(pricing_payload),
        aliases={},
    )
    print([entry.slug for entry in result.free])
"""

from __future__ import annotations

import importlib.metadata

from modelcurator._internal.exceptions import (
    ConfigError,
    CuratorError,
    DatasetFormatError,
    SnapshotError,
    SnapshotSchemaError,
)
from modelcurator.catalog import (
    PricingCatalogEntry,
    QualityCatalogEntry,
    load_alias_map,
    normalize,
    parse_pricing_listing,
    parse_quality_listing,
)
from modelcurator.curation import CuratedEntry, CurationResult, Tunables, curate
from modelcurator.resolution import IdentityResolver, MatchResult
from modelcurator.snapshot import (
    CuratedCatalog,
    ModelPreference,
    materialize_snapshot,
    parse_snapshot,
    render_snapshot,
    select_auto,
)

try:
    __version__ = importlib.metadata.version("model-curator")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "ConfigError",
    "CuratedCatalog",
    "CuratedEntry",
    "CurationResult",
    "CuratorError",
    "DatasetFormatError",
    "IdentityResolver",
    "MatchResult",
    "ModelPreference",
    "PricingCatalogEntry",
    "QualityCatalogEntry",
    "SnapshotError",
    "SnapshotSchemaError",
    "Tunables",
    "curate",
    "load_alias_map",
    "materialize_snapshot",
    "normalize",
    "parse_pricing_listing",
    "parse_quality_listing",
    "parse_snapshot",
    "render_snapshot",
    "select_auto",
    "__version__",
]
