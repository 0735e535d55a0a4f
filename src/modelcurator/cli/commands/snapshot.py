"""`model-curator show` and `model-curator select`."""

import argparse

from modelcurator.snapshot.reader import ModelPreference, load_snapshot, resolve_preference


def _format_price(value: float | None) -> str:
    return "-" if value is None else f"${value:.2f}"


def cmd_show(args: argparse.Namespace) -> int:
    catalog = load_snapshot(args.snapshot)
    print(f"Snapshot generated {catalog.generated_at.isoformat()}")

    current_tier = None
    for summary in catalog.summaries():
        if summary.tier != current_tier:
            current_tier = summary.tier
            print(f"\n{current_tier.value.upper()} tier:")
        prices = f"{_format_price(summary.price_in_per_million)}/{_format_price(summary.price_out_per_million)}"
        print(f"  {summary.slug:<45} {summary.aaii:>6.1f}  {prices}")
    return 0


def cmd_select(args: argparse.Namespace) -> int:
    catalog = load_snapshot(args.snapshot)
    preference = ModelPreference.parse(args.model)
    entry = resolve_preference(catalog, preference, free_only=args.free_only)
    if entry is None:
        print(f"No curated model matches {preference.as_str()!r}")
        return 1
    print(entry.slug)
    return 0
