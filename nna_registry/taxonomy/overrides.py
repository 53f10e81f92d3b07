"""OverrideTable: declarative subcategory exceptions scoped to (layer, category).

The taxonomy reuses numeric subcategory codes across categories (``007`` is
Indie_Pop under Songs/Pop and Pop_Hipster_Male_Stars under Stars/Pop), and
legacy catalogs assigned the same number twice inside one category. Each
OverrideEntry pins one alpha <-> numeric pair for one (layer, category); the
resolver consults this table before the generic tree lookup.

There is no global numeric -> alpha dictionary: every key includes the
(layer, category) scope.
"""

from __future__ import annotations

from collections.abc import Iterable

from nna_registry.models.common import LayerCode
from nna_registry.models.taxonomy import OverrideEntry
from nna_registry.taxonomy.errors import AmbiguousOverride
from nna_registry.taxonomy.tree import is_numeric, pad_numeric

_Key = tuple[LayerCode, str, str]


class OverrideTable:
    """Immutable, bidirectional set of forced subcategory pairings.

    Keys are (layer, category alpha code, value) where value is either the
    subcategory alpha code or its numeric code. The two directions of one
    entry share a scope, so a numeric key only ever resolves inside its own
    (layer, category).
    """

    def __init__(self, entries: Iterable[OverrideEntry] = ()) -> None:
        self._entries: tuple[OverrideEntry, ...] = tuple(entries)
        self._pairs: dict[_Key, str] = {}
        for entry in self._entries:
            scope = (entry.layer, entry.category)
            self._bind((*scope, entry.subcategory_alpha), entry.subcategory_numeric)
            self._bind((*scope, entry.subcategory_numeric), entry.subcategory_alpha)

    def _bind(self, key: _Key, target: str) -> None:
        existing = self._pairs.get(key)
        if existing is not None and existing != target:
            layer, category, value = key
            msg = (
                f"Override for {layer.value}.{category}.{value} maps to both "
                f"'{existing}' and '{target}'."
            )
            raise AmbiguousOverride(msg)
        self._pairs[key] = target

    @property
    def entries(self) -> list[OverrideEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entries_for(self, layer: LayerCode, category: str) -> list[OverrideEntry]:
        """Overrides declared for one (layer, category alpha code)."""
        return [
            e for e in self._entries
            if e.layer == layer and e.category == category
        ]

    def resolve_subcategory(
        self, layer: LayerCode | str, category: str, value: str,
    ) -> str | None:
        """Paired code for a subcategory value, or None if not overridden.

        Args:
            layer: Layer code. Anything outside the ten layers resolves to
                None.
            category: Category alpha code (callers resolve numeric
                categories through the tree first).
            value: Subcategory alpha code or numeric code (1-3 digits).

        Returns:
            The numeric code for an alpha value, the alpha code for a numeric
            value, or None when no override covers the key.
        """
        try:
            layer_code = LayerCode(layer)
        except ValueError:
            return None
        normalized = value.strip().upper()
        if is_numeric(normalized):
            normalized = pad_numeric(normalized)
        return self._pairs.get((layer_code, category.upper(), normalized))
