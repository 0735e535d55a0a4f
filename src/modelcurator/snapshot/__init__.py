"""Snapshot documents: writing, reading and model selection."""

from modelcurator.snapshot.reader import (
    CuratedCatalog,
    ModelPreference,
    load_snapshot,
    parse_snapshot,
    select_auto,
)
from modelcurator.snapshot.schema import SNAPSHOT_SCHEMA_VERSION, SnapshotFile
from modelcurator.snapshot.writer import (
    describe_discard,
    materialize_snapshot,
    render_snapshot,
    write_snapshot,
)

__all__ = [
    "CuratedCatalog",
    "ModelPreference",
    "SNAPSHOT_SCHEMA_VERSION",
    "SnapshotFile",
    "describe_discard",
    "load_snapshot",
    "materialize_snapshot",
    "parse_snapshot",
    "render_snapshot",
    "select_auto",
    "write_snapshot",
]
