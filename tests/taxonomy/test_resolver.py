"""Tests for CodeResolver: scoped alpha <-> numeric conversion."""

import warnings

import pytest

from nna_registry.models.taxonomy import OverrideEntry
from nna_registry.taxonomy.catalog import parse_layers
from nna_registry.taxonomy.engine import TaxonomyEngine
from nna_registry.taxonomy.errors import UnknownCode, UnknownCodeWarning
from nna_registry.taxonomy.overrides import OverrideTable
from nna_registry.taxonomy.resolver import CodeResolver, normalize_alpha
from nna_registry.taxonomy.tree import TaxonomyTree


@pytest.fixture
def resolver(mini_engine: TaxonomyEngine) -> CodeResolver:
    return mini_engine.resolver


class TestNormalizeAlpha:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("pop", "POP"),
            (" hpm ", "HPM"),
            ("Natural", "NAT"),
            ("Base", "BAS"),
            ("Hip_Hop", "HIP"),
            ("Hip-Hop", "HIP"),
            ("y2k", "Y2K"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_alpha(raw) == expected


class TestLayerLevel:
    def test_layer_to_numeric(self, resolver: CodeResolver) -> None:
        assert resolver.layer_to_numeric("S") == "2"
        assert resolver.layer_to_numeric("worlds") == "5"
        assert resolver.layer_to_numeric("C") == "9"

    def test_layer_to_alpha(self, resolver: CodeResolver) -> None:
        assert resolver.layer_to_alpha("2") == "S"
        assert resolver.layer_to_alpha("s") == "S"

    def test_numeric_layer_is_idempotent(self, resolver: CodeResolver) -> None:
        assert resolver.layer_to_numeric("02") == "2"

    def test_unknown_layer_warns(self, resolver: CodeResolver) -> None:
        with pytest.warns(UnknownCodeWarning, match="'X'"):
            assert resolver.layer_to_numeric("X") == "0"

    def test_unicode_digit_layer(self, resolver: CodeResolver) -> None:
        with pytest.warns(UnknownCodeWarning):
            assert resolver.layer_to_numeric("²") == "0"
        with pytest.raises(UnknownCode):
            resolver.layer_to_alpha("²", strict=True)

    def test_unknown_layer_strict(self, resolver: CodeResolver) -> None:
        with pytest.raises(UnknownCode):
            resolver.layer_to_alpha("X", strict=True)


class TestAlphaToNumeric:
    def test_category(self, resolver: CodeResolver) -> None:
        assert resolver.alpha_to_numeric("S", None, "POP") == "001"
        assert resolver.alpha_to_numeric("W", None, "bch") == "004"

    def test_subcategory(self, resolver: CodeResolver) -> None:
        assert resolver.alpha_to_numeric("S", "POP", "HPM") == "007"
        assert resolver.alpha_to_numeric("G", "POP", "TSW") == "012"

    def test_numeric_scope_inputs(self, resolver: CodeResolver) -> None:
        assert resolver.alpha_to_numeric("2", "001", "HPM") == "007"

    @pytest.mark.parametrize("code", ["7", "07", "007"])
    def test_idempotent_on_numeric_input(self, resolver: CodeResolver, code: str) -> None:
        assert resolver.alpha_to_numeric("S", "POP", code) == "007"

    def test_display_literals(self, resolver: CodeResolver) -> None:
        assert resolver.alpha_to_numeric("S", None, "Hip_Hop") == "003"
        assert resolver.alpha_to_numeric("S", "HIP", "Base") == "001"

    def test_unknown_returns_zero_code(self, resolver: CodeResolver) -> None:
        with pytest.warns(UnknownCodeWarning):
            assert resolver.alpha_to_numeric("S", None, "ZZZ") == "000"
        with pytest.warns(UnknownCodeWarning):
            assert resolver.alpha_to_numeric("S", "POP", "ZZZ") == "000"

    def test_unknown_strict(self, resolver: CodeResolver) -> None:
        with pytest.raises(UnknownCode) as exc_info:
            resolver.alpha_to_numeric("S", "POP", "ZZZ", strict=True)
        assert exc_info.value.scope == "S.POP"

    def test_subcategory_under_unknown_category(self, resolver: CodeResolver) -> None:
        with pytest.raises(UnknownCode):
            resolver.alpha_to_numeric("S", "ZZZ", "HPM", strict=True)


class TestNumericToAlpha:
    def test_category(self, resolver: CodeResolver) -> None:
        assert resolver.numeric_to_alpha("W", None, "015") == "NAT"

    @pytest.mark.parametrize("code", ["7", "07", "007"])
    def test_subcategory(self, resolver: CodeResolver, code: str) -> None:
        assert resolver.numeric_to_alpha("S", "POP", code) == "HPM"

    def test_idempotent_on_alpha_input(self, resolver: CodeResolver) -> None:
        assert resolver.numeric_to_alpha("S", "POP", "hpm") == "HPM"
        assert resolver.numeric_to_alpha("W", None, "Natural") == "NAT"

    def test_same_number_different_scope(self, resolver: CodeResolver) -> None:
        assert resolver.numeric_to_alpha("G", "POP", "012") == "TSW"
        with pytest.warns(UnknownCodeWarning):
            assert resolver.numeric_to_alpha("S", "POP", "012") == "012"

    def test_unknown_strict(self, resolver: CodeResolver) -> None:
        with pytest.raises(UnknownCode):
            resolver.numeric_to_alpha("S", None, "099", strict=True)


class TestOverridePrecedence:
    """Overrides are consulted before the tree."""

    def test_collision_resolved_by_override(self, resolver: CodeResolver) -> None:
        assert resolver.numeric_to_alpha("W", "BCH", "003") == "SUN"
        assert resolver.numeric_to_alpha("W", "BCH", "010") == "FES"
        assert resolver.alpha_to_numeric("W", "BCH", "FES") == "010"
        assert resolver.alpha_to_numeric("W", "BCH", "SUN") == "003"

    def test_collision_without_override_is_unresolvable(self, mini_document: dict) -> None:
        resolver = CodeResolver(TaxonomyTree(parse_layers(mini_document)))
        with pytest.raises(UnknownCode):
            resolver.numeric_to_alpha("W", "BCH", "003", strict=True)

    def test_override_beats_tree(self, mini_document: dict) -> None:
        table = OverrideTable([
            OverrideEntry(layer="S", category="POP",
                          subcategory_alpha="HPM", subcategory_numeric="099"),
        ])
        resolver = CodeResolver(TaxonomyTree(parse_layers(mini_document)), table)
        assert resolver.alpha_to_numeric("S", "POP", "HPM") == "099"
        assert resolver.numeric_to_alpha("S", "POP", "099") == "HPM"
        # The tree's number for HPM no longer resolves to it
        with pytest.raises(UnknownCode):
            resolver.numeric_to_alpha("S", "POP", "007", strict=True)

    def test_override_is_scoped(self, resolver: CodeResolver) -> None:
        with pytest.raises(UnknownCode):
            resolver.numeric_to_alpha("W", "URB", "010", strict=True)


class TestLookupCode:
    def test_by_code(self, resolver: CodeResolver) -> None:
        assert resolver.lookup_code("S", "POP", "hpm") == "HPM"

    def test_by_numeric(self, resolver: CodeResolver) -> None:
        assert resolver.lookup_code("S", "POP", "7") == "HPM"

    @pytest.mark.parametrize(
        "name", ["Pop_Hipster_Male_Stars", "pop hipster male stars", "Pop-Hipster-Male-Stars"],
    )
    def test_by_display_name(self, resolver: CodeResolver, name: str) -> None:
        assert resolver.lookup_code("S", "POP", name) == "HPM"

    def test_category_by_name(self, resolver: CodeResolver) -> None:
        assert resolver.lookup_code("W", None, "Beach") == "BCH"
        assert resolver.lookup_code("S", None, "Hip-Hop") == "HIP"

    def test_no_match(self, resolver: CodeResolver) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert resolver.lookup_code("S", "POP", "Nothing") is None
            assert resolver.lookup_code("S", "POP", "099") is None
            assert resolver.lookup_code("S", "ZZZ", "HPM") is None
            assert resolver.lookup_code("X", None, "POP") is None
