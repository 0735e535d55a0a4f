"""`model-curator curate`: run the engine over local listing files."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from modelcurator._internal.configuration.settings import load_settings
from modelcurator._internal.exceptions import DatasetFormatError
from modelcurator.catalog.aliases import load_alias_map
from modelcurator.catalog.ingest import parse_pricing_listing, parse_quality_listing
from modelcurator.curation.engine import curate
from modelcurator.snapshot.writer import materialize_snapshot, render_snapshot, write_snapshot


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DatasetFormatError(f"{path} is not valid JSON: {exc}") from exc


def cmd_curate(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    tunables = settings.tunables()

    pricing = parse_pricing_listing(_read_json(args.pricing))
    quality = parse_quality_listing(_read_json(args.quality))
    aliases = load_alias_map(args.aliases) if args.aliases else {}

    result = curate(quality, pricing, aliases, tunables)
    snapshot = materialize_snapshot(result, tunables, settings.sources())

    if args.out:
        write_snapshot(args.out, snapshot)
        print(
            f"Wrote {len(result.free)} free and {len(result.cheap)} cheap models to {args.out}",
            file=sys.stderr,
        )
    else:
        sys.stdout.write(render_snapshot(snapshot))
    return 0
