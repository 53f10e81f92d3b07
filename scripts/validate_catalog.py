"""Standalone taxonomy catalog validation script.

Builds the engine from the catalog and override documents, prints per-layer
counts and raw numeric collisions, and round-trips every path through the
address codec.

Usage:
    python -m scripts.validate_catalog
    python -m scripts.validate_catalog data/curated/nna_taxonomy_v1.3.json \\
        --overrides data/curated/nna_taxonomy_overrides_v1.3.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from nna_registry.config.settings import get_settings
from nna_registry.taxonomy.engine import TaxonomyEngine
from nna_registry.taxonomy.errors import InvalidCatalog


def _print_header(path: Path, engine: TaxonomyEngine) -> None:
    """Print catalog header."""
    w = 60
    print("=" * w)
    print("  NNA Taxonomy Catalog Validation")
    print(f"  {path}")
    print("=" * w)
    print(f"  Version:   {engine.version}")
    print(f"  Checksum:  {engine.checksum}")
    print(f"  Overrides: {len(engine.overrides)}")
    print(f"  Aliases:   {len(engine.validator.aliases)}")


def _print_layer_table(engine: TaxonomyEngine) -> None:
    """Print per-layer category / subcategory counts."""
    print()
    print(f"  {'Layer':<6} {'Code':>4} {'Name':<16} {'Categories':>10} {'Subcategories':>13}")
    print(f"  {'------':<6} {'----':>4} {'----------------':<16} {'----------':>10} {'-------------':>13}")
    for layer in engine.tree.layers:
        subs = sum(len(c.subcategories) for c in layer.categories)
        print(
            f"  {layer.code.value:<6} {layer.numeric_code:>4} {layer.name[:16]:<16}"
            f" {len(layer.categories):>10} {subs:>13}"
        )


def round_trip_failures(engine: TaxonomyEngine) -> list[str]:
    """Paths whose HFN does not survive HFN -> MFA -> HFN (and back)."""
    failures: list[str] = []
    codec = engine.codec
    for layer, category, sub in engine.tree.iter_paths():
        encoded = codec.encode(layer.code.value, category.code, sub.code, 1)
        if codec.mfa_to_hfn(encoded.mfa) != encoded.hfn:
            failures.append(f"{encoded.hfn} -> {encoded.mfa} -> {codec.mfa_to_hfn(encoded.mfa)}")
        elif codec.hfn_to_mfa(encoded.hfn) != encoded.mfa:
            failures.append(f"{encoded.mfa} -> {encoded.hfn} -> {codec.hfn_to_mfa(encoded.hfn)}")
    return failures


def run(catalog_path: Path, overrides_path: Path | None) -> int:
    """Validate and report. Returns the process exit code."""
    try:
        engine = TaxonomyEngine.from_files(catalog_path, overrides_path)
    except InvalidCatalog as exc:
        print(f"  INVALID CATALOG: {exc}")
        return 1

    _print_header(catalog_path, engine)
    _print_layer_table(engine)

    collisions = engine.tree.numeric_collisions()
    if collisions:
        print()
        print(f"  Raw numeric collisions resolved by overrides ({len(collisions)}):")
        for key, codes in sorted(collisions.items()):
            print(f"    - {key}: {', '.join(codes)}")

    failures = round_trip_failures(engine)
    print()
    if failures:
        print(f"  ROUND-TRIP FAILURES ({len(failures)}):")
        for f in failures:
            print(f"    ! {f}")
        return 1

    paths = sum(1 for _ in engine.tree.iter_paths())
    print(f"  Round-trip: {paths} paths PASS")
    return 0


def main() -> None:
    """Run catalog validation."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Validate an NNA taxonomy catalog and its overrides",
    )
    parser.add_argument(
        "catalog_path", type=Path, nargs="?",
        default=Path(settings.TAXONOMY_CATALOG_PATH),
        help="Path to taxonomy catalog JSON",
    )
    parser.add_argument(
        "--overrides", type=Path,
        default=Path(settings.TAXONOMY_OVERRIDES_PATH),
        help="Path to overrides JSON",
    )
    parser.add_argument(
        "--no-overrides", action="store_true",
        help="Validate the catalog alone",
    )
    args = parser.parse_args()

    overrides = None if args.no_overrides else args.overrides
    sys.exit(run(args.catalog_path, overrides))


if __name__ == "__main__":
    main()
