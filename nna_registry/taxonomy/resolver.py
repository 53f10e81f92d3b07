"""CodeResolver: single-level alpha <-> numeric code conversion.

Pure and stateless: every answer comes from the tree (and, for
subcategories, the override table consulted first). Callers may pass
either form everywhere; converting a code that is already in the target
form returns it normalized.

Unknown codes never raise unless ``strict=True``. The non-strict fallback
is ``"000"`` (alpha -> numeric) or the padded input (numeric -> alpha),
signalled with an ``UnknownCodeWarning``.
"""

from __future__ import annotations

import warnings

from nna_registry.models.taxonomy import TaxonomyItem
from nna_registry.taxonomy.errors import UnknownCode, UnknownCodeWarning
from nna_registry.taxonomy.overrides import OverrideTable
from nna_registry.taxonomy.tree import (
    TaxonomyTree,
    is_digits,
    is_numeric,
    normalize_name,
    pad_numeric,
)

UNKNOWN_NUMERIC = "000"
UNKNOWN_LAYER_NUMERIC = "0"

# Legacy display strings that older clients send instead of codes.
# Input normalization only; these are not taxonomy entries.
LITERAL_ALIASES: dict[str, str] = {
    "NATURAL": "NAT",
    "BASE": "BAS",
    "HIPHOP": "HIP",
}


def normalize_alpha(code: str) -> str:
    """Uppercase a code, mapping legacy display literals ('Base' -> 'BAS')."""
    value = code.strip()
    return LITERAL_ALIASES.get(normalize_name(value), value.upper())


class CodeResolver:
    """Converts one taxonomy level at a time between alpha and numeric codes."""

    def __init__(self, tree: TaxonomyTree, overrides: OverrideTable | None = None) -> None:
        self._tree = tree
        self._overrides = overrides or OverrideTable()

    @property
    def tree(self) -> TaxonomyTree:
        return self._tree

    @property
    def overrides(self) -> OverrideTable:
        return self._overrides

    # -----------------------------------------------------------------
    # Layer level
    # -----------------------------------------------------------------

    def layer_to_numeric(self, layer: str, *, strict: bool = False) -> str:
        """'S' -> '2'. Numeric input is returned unpadded ('02' -> '2')."""
        found = self._tree.find_layer(layer)
        if found is None:
            if is_digits(layer.strip()):
                return str(int(layer))
            return self._unknown(layer, "layers", UNKNOWN_LAYER_NUMERIC, strict)
        return str(found.numeric_code)

    def layer_to_alpha(self, layer: str, *, strict: bool = False) -> str:
        """'2' -> 'S'. Alpha input is returned uppercased."""
        found = self._tree.find_layer(layer)
        if found is None:
            fallback = layer.strip() if is_digits(layer.strip()) else layer.strip().upper()
            return self._unknown(layer, "layers", fallback, strict)
        return found.code.value

    # -----------------------------------------------------------------
    # Category / subcategory level
    # -----------------------------------------------------------------

    def alpha_to_numeric(
        self,
        layer: str,
        category: str | None,
        code: str,
        *,
        strict: bool = False,
    ) -> str:
        """Numeric code for a category (``category=None``) or subcategory.

        Idempotent: a 1-3 digit ``code`` is returned zero-padded.

        Raises:
            UnknownCode: Only when ``strict`` and the code cannot be resolved.
        """
        if is_numeric(code.strip()):
            return pad_numeric(code.strip())
        alpha = normalize_alpha(code)

        if category is None:
            entry = self._tree.find_category(layer, alpha)
            if entry is None:
                return self._unknown(code, f"{layer} categories", UNKNOWN_NUMERIC, strict)
            return entry.numeric_code

        scope = self._scope(layer, category)
        if scope is None:
            return self._unknown(code, f"{layer}.{category}", UNKNOWN_NUMERIC, strict)
        layer_code, category_code = scope

        pinned = self._overrides.resolve_subcategory(layer_code, category_code, alpha)
        if pinned is not None:
            return pinned
        item = self._tree.find_subcategory(layer_code, category_code, alpha)
        if item is None:
            return self._unknown(
                code, f"{layer_code}.{category_code}", UNKNOWN_NUMERIC, strict,
            )
        return item.numeric_code

    def numeric_to_alpha(
        self,
        layer: str,
        category: str | None,
        code: str,
        *,
        strict: bool = False,
    ) -> str:
        """Alpha code for a category (``category=None``) or subcategory.

        Idempotent: a non-numeric ``code`` is returned uppercased, with
        legacy display literals normalized ('Natural' -> 'NAT').

        Raises:
            UnknownCode: Only when ``strict`` and the code cannot be resolved.
        """
        if not is_numeric(code.strip()):
            return normalize_alpha(code)
        numeric = pad_numeric(code.strip())

        if category is None:
            entry = self._tree.find_category(layer, numeric)
            if entry is None:
                return self._unknown(code, f"{layer} categories", numeric, strict)
            return entry.code

        scope = self._scope(layer, category)
        if scope is None:
            return self._unknown(code, f"{layer}.{category}", numeric, strict)
        layer_code, category_code = scope

        pinned = self._overrides.resolve_subcategory(layer_code, category_code, numeric)
        if pinned is not None:
            return pinned
        candidates = self._unpinned(
            layer_code,
            category_code,
            self._tree.subcategories_with_numeric(layer_code, category_code, numeric),
        )
        if len(candidates) != 1:
            return self._unknown(code, f"{layer_code}.{category_code}", numeric, strict)
        return candidates[0].code

    # -----------------------------------------------------------------
    # Name lookups
    # -----------------------------------------------------------------

    def lookup_code(self, layer: str, category: str | None, value: str) -> str | None:
        """Resolve a code, numeric code or display name to an alpha code.

        ``lookup_code('S', 'POP', 'Pop Hipster Male Stars') -> 'HPM'``.
        Returns None when nothing matches.
        """
        if is_numeric(value.strip()):
            try:
                return self.numeric_to_alpha(layer, category, value, strict=True)
            except UnknownCode:
                return None

        alpha = normalize_alpha(value)
        items: list[TaxonomyItem]
        if category is None:
            found = self._tree.find_layer(layer)
            items = list(found.categories) if found is not None else []
        else:
            scope = self._scope(layer, category)
            if scope is None:
                return None
            if self._overrides.resolve_subcategory(*scope, alpha) is not None:
                return alpha
            items = self._tree.get_subcategories(*scope)

        for item in items:
            if item.code == alpha:
                return item.code
        wanted = normalize_name(value)
        for item in items:
            if normalize_name(item.name) == wanted:
                return item.code
        return None

    # -----------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------

    def _scope(self, layer: str, category: str) -> tuple[str, str] | None:
        """(layer alpha, category alpha) for any accepted input form."""
        found = self._tree.find_layer(layer)
        if found is None:
            return None
        entry = self._tree.find_category(found.code.value, normalize_alpha(category))
        if entry is None:
            return None
        return found.code.value, entry.code

    def _unpinned(
        self, layer: str, category: str, candidates: list[TaxonomyItem],
    ) -> list[TaxonomyItem]:
        """Drop tree items whose alpha code an override moved to another number."""
        return [
            item for item in candidates
            if self._overrides.resolve_subcategory(layer, category, item.code)
            in (None, item.numeric_code)
        ]

    @staticmethod
    def _unknown(code: str, scope: str, fallback: str, strict: bool) -> str:
        if strict:
            raise UnknownCode(code, scope)
        warnings.warn(
            f"Unknown code '{code}' in {scope}; using '{fallback}'.",
            UnknownCodeWarning,
            stacklevel=3,
        )
        return fallback
