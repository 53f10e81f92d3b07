"""Fixtures for taxonomy tests: a small hand-built catalog.

The mini catalog keeps the shapes that matter from the real one:
subcategory numbers reused across layers (S.POP vs G.POP), one raw
numeric collision inside a category (W.BCH: SUN and FES both 003) that the
override table resolves, a legacy alias (W.HIP.BAS -> W.URB.BAS) and a
Composite layer.
"""

import copy

import pytest

from nna_registry.models.taxonomy import OverrideEntry
from nna_registry.taxonomy.catalog import parse_aliases, parse_layers
from nna_registry.taxonomy.engine import TaxonomyEngine

MINI_CATALOG: dict = {
    "version": "test-1",
    "layers": {
        "G": {
            "name": "Songs",
            "numericCode": 1,
            "fileTypes": ["mp3"],
            "entries": {
                "POP": {"numericCode": "001", "name": "Pop"},
                "POP.BAS": {"numericCode": "001", "name": "Base"},
                "POP.TSW": {"numericCode": "012", "name": "Swift_Inspired"},
                "RCK": {"numericCode": "002", "name": "Rock"},
                "RCK.BAS": {"numericCode": "001", "name": "Base"},
            },
        },
        "S": {
            "name": "Stars",
            "numericCode": 2,
            "entries": {
                "POP": {"numericCode": "001", "name": "Pop"},
                "POP.BAS": {"numericCode": "001", "name": "Base"},
                "POP.DIV": {"numericCode": "002", "name": "Pop_Diva_Female_Stars"},
                "POP.HPM": {"numericCode": "007", "name": "Pop_Hipster_Male_Stars"},
                "HIP": {"numericCode": "003", "name": "Hip_Hop"},
                "HIP.BAS": {"numericCode": "001", "name": "Base"},
            },
        },
        "W": {
            "name": "Worlds",
            "numericCode": 5,
            "entries": {
                "BCH": {"numericCode": "004", "name": "Beach"},
                "BCH.SUN": {"numericCode": "003", "name": "Sunset"},
                "BCH.TRO": {"numericCode": "002", "name": "Tropical"},
                "BCH.FES": {"numericCode": "003", "name": "Festival"},
                "NAT": {"numericCode": "015", "name": "Natural"},
                "NAT.BAS": {"numericCode": "001", "name": "Base"},
                "URB": {"numericCode": "003", "name": "Urban"},
                "URB.BAS": {"numericCode": "001", "name": "Base"},
            },
        },
        "C": {
            "name": "Composite",
            "numericCode": 9,
            "entries": {
                "RMX": {"numericCode": "001", "name": "Remix"},
                "RMX.POP": {"numericCode": "001", "name": "Pop_Remix"},
            },
        },
    },
    "aliases": {"W.HIP.BAS": "W.URB.BAS"},
}

MINI_OVERRIDES = [
    OverrideEntry(layer="W", category="BCH", subcategory_alpha="FES", subcategory_numeric="010"),
    OverrideEntry(layer="S", category="POP", subcategory_alpha="HPM", subcategory_numeric="007"),
]


def build_mini_engine(
    document: dict | None = None,
    overrides: list[OverrideEntry] | None = None,
) -> TaxonomyEngine:
    doc = document if document is not None else copy.deepcopy(MINI_CATALOG)
    return TaxonomyEngine.build(
        parse_layers(doc),
        MINI_OVERRIDES if overrides is None else overrides,
        parse_aliases(doc),
        version=doc.get("version", ""),
    )


@pytest.fixture
def mini_document() -> dict:
    """A fresh, mutable copy of the mini catalog document."""
    return copy.deepcopy(MINI_CATALOG)


@pytest.fixture
def mini_engine() -> TaxonomyEngine:
    return build_mini_engine()
