"""TaxonomyTree: the canonical, immutable layer/category/subcategory catalog.

Built once per catalog version and shared read-only across callers.
Sibling alpha codes must be unique; sibling numeric codes may collide here
(collisions are reported by ``numeric_collisions`` and must be resolved by
the override table before an engine is built).
"""

from __future__ import annotations

import hashlib
import json
import re
from collections.abc import Iterable, Iterator

from nna_registry.models.common import LAYER_NUMERIC_CODES, LayerCode
from nna_registry.models.taxonomy import CategoryEntry, Layer, TaxonomyItem
from nna_registry.taxonomy.errors import InvalidCatalog, UnknownCode

_DIGITS = re.compile(r"[0-9]{1,3}")
_NAME_NOISE = re.compile(r"[\s_\-]+")
_LAYER_CODES = frozenset(code.value for code in LayerCode)


def is_digits(value: str) -> bool:
    """True for a non-empty run of ASCII digits. Superscripts and other
    Unicode digits do not count."""
    return value.isascii() and value.isdigit()


def is_numeric(code: str) -> bool:
    """True for 1-3 digit strings ('7', '07', '007')."""
    return bool(_DIGITS.fullmatch(code))


def pad_numeric(code: str) -> str:
    """'7' -> '007'. Leaves longer strings alone."""
    return code.zfill(3)


def normalize_name(name: str) -> str:
    """'Pop Hipster_Male-Stars' -> 'POPHIPSTERMALESTARS'."""
    return _NAME_NOISE.sub("", name).upper()


class TaxonomyTree:
    """Immutable in-memory catalog with alpha, numeric and name indexes."""

    def __init__(self, layers: Iterable[Layer], *, version: str = "") -> None:
        self._version = version
        self._layers: dict[LayerCode, Layer] = {}
        self._layer_by_numeric: dict[str, Layer] = {}
        self._layer_by_name: dict[str, Layer] = {}
        self._categories: dict[LayerCode, dict[str, CategoryEntry]] = {}
        self._category_by_numeric: dict[LayerCode, dict[str, list[CategoryEntry]]] = {}
        self._subcategories: dict[tuple[LayerCode, str], dict[str, TaxonomyItem]] = {}
        self._subcategory_by_numeric: dict[
            tuple[LayerCode, str], dict[str, list[TaxonomyItem]]
        ] = {}

        for layer in layers:
            self._index_layer(layer)

        if not self._layers:
            msg = "Catalog defines no layers."
            raise InvalidCatalog(msg)

        self._checksum = self._compute_checksum()

    # -----------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------

    def _index_layer(self, layer: Layer) -> None:
        if layer.code in self._layers:
            msg = f"Duplicate layer code '{layer.code.value}'."
            raise InvalidCatalog(msg)
        expected = LAYER_NUMERIC_CODES[layer.code]
        if layer.numeric_code != expected:
            msg = (
                f"Layer '{layer.code.value}' must have numeric code {expected}, "
                f"catalog declares {layer.numeric_code}."
            )
            raise InvalidCatalog(msg)

        self._layers[layer.code] = layer
        self._layer_by_numeric[str(layer.numeric_code)] = layer
        self._layer_by_name[normalize_name(layer.name)] = layer

        categories: dict[str, CategoryEntry] = {}
        by_numeric: dict[str, list[CategoryEntry]] = {}
        for category in layer.categories:
            if category.code in categories:
                msg = (
                    f"Duplicate category code '{category.code}' "
                    f"in layer '{layer.code.value}'."
                )
                raise InvalidCatalog(msg)
            categories[category.code] = category
            by_numeric.setdefault(category.numeric_code, []).append(category)

            scope = (layer.code, category.code)
            subs: dict[str, TaxonomyItem] = {}
            sub_by_numeric: dict[str, list[TaxonomyItem]] = {}
            for sub in category.subcategories:
                if sub.code in subs:
                    msg = (
                        f"Duplicate subcategory code '{sub.code}' in "
                        f"'{layer.code.value}.{category.code}'."
                    )
                    raise InvalidCatalog(msg)
                subs[sub.code] = sub
                sub_by_numeric.setdefault(sub.numeric_code, []).append(sub)
            self._subcategories[scope] = subs
            self._subcategory_by_numeric[scope] = sub_by_numeric

        self._categories[layer.code] = categories
        self._category_by_numeric[layer.code] = by_numeric

    def _compute_checksum(self) -> str:
        payload = json.dumps(
            [layer.model_dump(mode="json") for layer in self._layers.values()],
            sort_keys=True,
            separators=(",", ":"),
        )
        return f"sha256:{hashlib.sha256(payload.encode('utf-8')).hexdigest()}"

    # -----------------------------------------------------------------
    # Metadata
    # -----------------------------------------------------------------

    @property
    def version(self) -> str:
        return self._version

    @property
    def checksum(self) -> str:
        """SHA-256 over the canonical JSON form of all layers."""
        return self._checksum

    @property
    def layers(self) -> list[Layer]:
        """All layers in catalog order."""
        return list(self._layers.values())

    # -----------------------------------------------------------------
    # Layer lookups
    # -----------------------------------------------------------------

    def find_layer(self, code: str) -> Layer | None:
        """Look up a layer by alpha code, numeric code or display name."""
        value = code.strip()
        if value.upper() in _LAYER_CODES:
            return self._layers.get(LayerCode(value.upper()))
        if is_digits(value):
            return self._layer_by_numeric.get(str(int(value)))
        return self._layer_by_name.get(normalize_name(value))

    def get_layer(self, code: str) -> Layer:
        """Look up a layer.

        Raises:
            UnknownCode: If no layer matches.
        """
        layer = self.find_layer(code)
        if layer is None:
            raise UnknownCode(code, "layers")
        return layer

    # -----------------------------------------------------------------
    # Category / subcategory lookups
    # -----------------------------------------------------------------

    def get_categories(self, layer: str) -> list[CategoryEntry]:
        """Categories of a layer in catalog order.

        Raises:
            UnknownCode: If the layer is unknown.
        """
        return list(self.get_layer(layer).categories)

    def find_category(self, layer: str, code: str) -> CategoryEntry | None:
        """Look up a category by alpha or numeric code within one layer.

        A numeric code shared by several categories is ambiguous and
        returns None.
        """
        found = self.find_layer(layer)
        if found is None:
            return None
        value = code.strip().upper()
        if is_numeric(value):
            matches = self._category_by_numeric[found.code].get(pad_numeric(value), [])
            return matches[0] if len(matches) == 1 else None
        return self._categories[found.code].get(value)

    def get_subcategories(self, layer: str, category: str) -> list[TaxonomyItem]:
        """Subcategories of a category in catalog order.

        Raises:
            UnknownCode: If the layer or category is unknown.
        """
        found = self.get_layer(layer)
        entry = self.find_category(found.code.value, category)
        if entry is None:
            raise UnknownCode(category, f"layer {found.code.value}")
        return list(entry.subcategories)

    def find_subcategory(
        self, layer: str, category: str, code: str,
    ) -> TaxonomyItem | None:
        """Look up a subcategory by alpha code within (layer, category).

        Numeric lookups go through ``subcategories_with_numeric`` because a
        numeric code is not guaranteed unique in the raw catalog.
        """
        scope = self._scope(layer, category)
        if scope is None:
            return None
        return self._subcategories[scope].get(code.strip().upper())

    def subcategories_with_numeric(
        self, layer: str, category: str, numeric_code: str,
    ) -> list[TaxonomyItem]:
        """All subcategories of (layer, category) carrying a numeric code."""
        scope = self._scope(layer, category)
        if scope is None:
            return []
        return list(self._subcategory_by_numeric[scope].get(pad_numeric(numeric_code), []))

    def _scope(self, layer: str, category: str) -> tuple[LayerCode, str] | None:
        found = self.find_layer(layer)
        if found is None:
            return None
        entry = self.find_category(found.code.value, category)
        if entry is None:
            return None
        return (found.code, entry.code)

    # -----------------------------------------------------------------
    # Catalog-wide views
    # -----------------------------------------------------------------

    def iter_paths(self) -> Iterator[tuple[Layer, CategoryEntry, TaxonomyItem]]:
        """Every (layer, category, subcategory) in catalog order."""
        for layer in self._layers.values():
            for category in layer.categories:
                for sub in category.subcategories:
                    yield layer, category, sub

    def numeric_collisions(self) -> dict[str, list[str]]:
        """Sibling sets where several codes share a numeric code.

        Returns:
            {'W.BCH.003': ['SUN', 'FES'], 'S.001': ['POP', 'RCK'], ...}
        """
        collisions: dict[str, list[str]] = {}
        for layer_code, by_numeric in self._category_by_numeric.items():
            for numeric, cats in by_numeric.items():
                if len(cats) > 1:
                    collisions[f"{layer_code.value}.{numeric}"] = [c.code for c in cats]
        for (layer_code, category), by_numeric in self._subcategory_by_numeric.items():
            for numeric, subs in by_numeric.items():
                if len(subs) > 1:
                    collisions[f"{layer_code.value}.{category}.{numeric}"] = [
                        s.code for s in subs
                    ]
        return collisions
