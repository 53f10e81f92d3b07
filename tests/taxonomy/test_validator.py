"""Tests for Validator: path validation, input forms and legacy aliases."""

import pytest

from nna_registry.models.common import ValidationStatus
from nna_registry.models.taxonomy import OverrideEntry
from nna_registry.taxonomy.catalog import parse_aliases, parse_layers
from nna_registry.taxonomy.engine import TaxonomyEngine
from nna_registry.taxonomy.validator import Validator


class TestValidPaths:
    @pytest.mark.parametrize(
        ("layer", "category", "subcategory"),
        [
            ("S", "POP", "HPM"),
            ("s", "pop", "hpm"),
            ("2", "001", "007"),
            ("Stars", "Pop", "Pop_Hipster_Male_Stars"),
            ("stars", "1", "pop hipster male stars"),
        ],
    )
    def test_accepted_forms(
        self, mini_engine: TaxonomyEngine, layer: str, category: str, subcategory: str,
    ) -> None:
        result = mini_engine.validator.validate(layer, category, subcategory)
        assert result.ok
        assert result.status == ValidationStatus.OK
        assert result.path.key == "S.POP.HPM"
        assert result.alias_of is None

    def test_display_literals(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("S", "Hip_Hop", "Base")
        assert result.path.key == "S.HIP.BAS"

    def test_override_resolved_subcategory(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("W", "BCH", "010")
        assert result.path.key == "W.BCH.FES"


class TestInvalidPaths:
    def test_invalid_layer(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("X", "POP", "HPM")
        assert not result.ok
        assert result.status == ValidationStatus.INVALID_LAYER
        assert result.message == "Invalid layer: X"
        assert result.path is None

    @pytest.mark.parametrize("layer", ["²", "２"])
    def test_unicode_digit_layer(self, mini_engine: TaxonomyEngine, layer: str) -> None:
        result = mini_engine.validator.validate(layer, "POP", "HPM")
        assert result.status == ValidationStatus.INVALID_LAYER
        assert result.message == f"Invalid layer: {layer}"

    def test_invalid_category(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("S", "ZZZ", "HPM")
        assert result.status == ValidationStatus.INVALID_CATEGORY
        assert result.message == "Invalid category: ZZZ for layer: S"

    def test_invalid_subcategory(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("S", "POP", "ZZZ")
        assert result.status == ValidationStatus.INVALID_SUBCATEGORY
        assert result.message == "Invalid subcategory: ZZZ for layer: S, category: POP"

    def test_subcategory_from_other_category(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("G", "POP", "HPM")
        assert result.status == ValidationStatus.INVALID_SUBCATEGORY

    def test_no_unconditional_pass(self, mini_document: dict) -> None:
        """S.POP.HPM is valid only because the catalog declares it."""
        del mini_document["layers"]["S"]["entries"]["POP.HPM"]
        engine = TaxonomyEngine.build(
            parse_layers(mini_document),
            [OverrideEntry(layer="W", category="BCH",
                           subcategory_alpha="FES", subcategory_numeric="010")],
            parse_aliases(mini_document),
        )
        result = engine.validator.validate("S", "POP", "HPM")
        assert result.status == ValidationStatus.INVALID_SUBCATEGORY


class TestAliases:
    @pytest.mark.parametrize("layer", ["W", "w", "5", "05", "Worlds", "worlds"])
    def test_alias_resolves_to_canonical(
        self, mini_engine: TaxonomyEngine, layer: str,
    ) -> None:
        result = mini_engine.validator.validate(layer, "HIP", "BAS")
        assert result.ok
        assert result.path.key == "W.URB.BAS"
        assert result.alias_of == "W.HIP.BAS"

    def test_alias_with_display_literals(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("w", "Hip_Hop", "Base")
        assert result.path.key == "W.URB.BAS"

    def test_direct_resolution_wins(self, mini_engine: TaxonomyEngine) -> None:
        result = mini_engine.validator.validate("W", "URB", "BAS")
        assert result.alias_of is None

    def test_broken_alias_reports_original_failure(
        self, mini_engine: TaxonomyEngine,
    ) -> None:
        validator = Validator(mini_engine.resolver, {"W.HIP.BAS": "W.URB.ZZZ"})
        result = validator.validate("W", "HIP", "BAS")
        assert result.status == ValidationStatus.INVALID_CATEGORY
        assert result.message == "Invalid category: HIP for layer: W"

    def test_override_only_legacy_code(self, mini_document: dict) -> None:
        engine = TaxonomyEngine.build(
            parse_layers(mini_document),
            [
                OverrideEntry(layer="W", category="BCH",
                              subcategory_alpha="FES", subcategory_numeric="010"),
                OverrideEntry(layer="S", category="POP",
                              subcategory_alpha="LEG", subcategory_numeric="050"),
            ],
        )
        result = engine.validator.validate("S", "POP", "LEG")
        assert result.path.key == "S.POP.LEG"
