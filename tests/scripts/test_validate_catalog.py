"""Tests for the catalog validation script."""

import json
from pathlib import Path

import pytest

from scripts.validate_catalog import round_trip_failures, run
from nna_registry.taxonomy.engine import TaxonomyEngine

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data" / "curated"
CATALOG_PATH = DATA_DIR / "nna_taxonomy_v1.3.json"
OVERRIDES_PATH = DATA_DIR / "nna_taxonomy_overrides_v1.3.json"


class TestValidateCatalog:
    def test_curated_catalog_passes(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run(CATALOG_PATH, OVERRIDES_PATH) == 0
        out = capsys.readouterr().out
        assert "Version:   1.3" in out
        assert "PASS" in out

    def test_invalid_catalog_fails(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"layers": {}}), encoding="utf-8")
        assert run(path, None) == 1
        assert "INVALID CATALOG" in capsys.readouterr().out

    def test_no_round_trip_failures(self, taxonomy_engine: TaxonomyEngine) -> None:
        assert round_trip_failures(taxonomy_engine) == []
