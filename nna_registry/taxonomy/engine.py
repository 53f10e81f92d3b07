"""TaxonomyEngine: one immutable catalog snapshot and everything bound to it.

The engine is built once from the catalog and override documents, checked
for uniqueness-by-scope, and then shared read-only by every caller. A
refresh builds a complete replacement and swaps the reference; requests
already holding the old engine finish against it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path

from nna_registry.config.settings import get_settings
from nna_registry.models.taxonomy import Layer, OverrideEntry
from nna_registry.taxonomy.catalog import load_catalog, load_overrides
from nna_registry.taxonomy.codec import AddressCodec
from nna_registry.taxonomy.errors import InvalidCatalog
from nna_registry.taxonomy.overrides import OverrideTable
from nna_registry.taxonomy.resolver import CodeResolver
from nna_registry.taxonomy.tree import TaxonomyTree
from nna_registry.taxonomy.validator import Validator

logger = logging.getLogger(__name__)


class TaxonomyEngine:
    """Tree, overrides, aliases, resolver, validator and codec for one catalog version."""

    def __init__(
        self,
        tree: TaxonomyTree,
        overrides: OverrideTable,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._tree = tree
        self._overrides = overrides
        self._resolver = CodeResolver(tree, overrides)
        self._validator = Validator(self._resolver, aliases)
        self._codec = AddressCodec(self._resolver, self._validator)

    @classmethod
    def build(
        cls,
        layers: Iterable[Layer],
        overrides: Iterable[OverrideEntry] = (),
        aliases: Mapping[str, str] | None = None,
        *,
        version: str = "",
    ) -> TaxonomyEngine:
        """Assemble and verify an engine.

        Raises:
            InvalidCatalog: If the tree is malformed, an override targets an
                undeclared category, two categories or two subcategories of
                one scope share a numeric code after overrides, or an alias
                points at a path that does not exist.
            AmbiguousOverride: If two override entries disagree.
        """
        tree = TaxonomyTree(layers, version=version)
        table = OverrideTable(overrides)
        _check_override_scopes(tree, table)
        _check_category_numbering(tree)
        _check_subcategory_numbering(tree, table)
        engine = cls(tree, table, aliases)
        _check_aliases(engine)
        logger.info(
            "Taxonomy engine built: version=%s checksum=%s overrides=%d aliases=%d",
            tree.version, tree.checksum, len(table), len(engine.validator.aliases),
        )
        return engine

    @classmethod
    def from_files(
        cls,
        catalog_path: str | Path,
        overrides_path: str | Path | None = None,
    ) -> TaxonomyEngine:
        """Build an engine from catalog and (optional) override documents."""
        version, layers, aliases = load_catalog(catalog_path)
        entries = load_overrides(overrides_path)
        return cls.build(layers, entries, aliases, version=version)

    @property
    def version(self) -> str:
        return self._tree.version

    @property
    def checksum(self) -> str:
        return self._tree.checksum

    @property
    def tree(self) -> TaxonomyTree:
        return self._tree

    @property
    def overrides(self) -> OverrideTable:
        return self._overrides

    @property
    def resolver(self) -> CodeResolver:
        return self._resolver

    @property
    def validator(self) -> Validator:
        return self._validator

    @property
    def codec(self) -> AddressCodec:
        return self._codec


# ---------------------------------------------------------------------------
# Build-time checks
# ---------------------------------------------------------------------------


def _check_override_scopes(tree: TaxonomyTree, table: OverrideTable) -> None:
    for entry in table.entries:
        if tree.find_category(entry.layer.value, entry.category) is None:
            msg = (
                f"Override {entry.layer.value}.{entry.category}."
                f"{entry.subcategory_alpha} targets an undeclared category."
            )
            raise InvalidCatalog(msg)
        item = tree.find_subcategory(
            entry.layer.value, entry.category, entry.subcategory_alpha,
        )
        if item is not None and item.numeric_code != entry.subcategory_numeric:
            logger.info(
                "Override renumbers %s.%s.%s from %s to %s",
                entry.layer.value, entry.category, entry.subcategory_alpha,
                item.numeric_code, entry.subcategory_numeric,
            )


def _check_category_numbering(tree: TaxonomyTree) -> None:
    problems = []
    for layer in tree.layers:
        seen: dict[str, str] = {}
        for category in layer.categories:
            other = seen.setdefault(category.numeric_code, category.code)
            if other != category.code:
                problems.append(
                    f"{layer.code.value}: {other} and {category.code} "
                    f"share {category.numeric_code}"
                )
    if problems:
        msg = "Category numeric codes collide: " + "; ".join(problems)
        raise InvalidCatalog(msg)


def _check_subcategory_numbering(tree: TaxonomyTree, table: OverrideTable) -> None:
    """Within every (layer, category) the effective numeric codes must be unique."""
    problems = []
    for layer in tree.layers:
        for category in layer.categories:
            effective: dict[str, str] = {}
            for item in category.subcategories:
                pinned = table.resolve_subcategory(layer.code, category.code, item.code)
                effective[item.code] = pinned or item.numeric_code
            for entry in table.entries_for(layer.code, category.code):
                effective[entry.subcategory_alpha] = entry.subcategory_numeric

            by_numeric: dict[str, list[str]] = {}
            for alpha, numeric in effective.items():
                by_numeric.setdefault(numeric, []).append(alpha)
            for numeric, codes in by_numeric.items():
                if len(codes) > 1:
                    problems.append(
                        f"{layer.code.value}.{category.code}.{numeric}: "
                        + ", ".join(codes)
                    )
    if problems:
        msg = (
            "Subcategory numeric codes collide after overrides: "
            + "; ".join(problems)
        )
        raise InvalidCatalog(msg)


def _check_aliases(engine: TaxonomyEngine) -> None:
    for legacy, canonical in engine.validator.aliases.items():
        layer, category, subcategory = canonical.split(".")
        result = engine.validator.validate(layer, category, subcategory)
        if not result.ok or result.alias_of is not None:
            msg = f"Alias {legacy} points at unknown path {canonical}."
            raise InvalidCatalog(msg)


# ---------------------------------------------------------------------------
# Process-wide registry
# ---------------------------------------------------------------------------


class TaxonomyRegistry:
    """Holds the current engine; ``refresh`` swaps it atomically.

    A failed refresh raises and leaves the previous engine in place.
    """

    def __init__(
        self,
        catalog_path: str | Path | None = None,
        overrides_path: str | Path | None = None,
    ) -> None:
        self._catalog_path = catalog_path
        self._overrides_path = overrides_path
        self._engine: TaxonomyEngine | None = None
        self._lock = threading.Lock()

    def _paths(self) -> tuple[str | Path, str | Path | None]:
        if self._catalog_path is not None:
            return self._catalog_path, self._overrides_path
        settings = get_settings()
        return settings.TAXONOMY_CATALOG_PATH, settings.TAXONOMY_OVERRIDES_PATH or None

    def get(self) -> TaxonomyEngine:
        """The current engine, loading it on first use."""
        engine = self._engine
        if engine is not None:
            return engine
        with self._lock:
            if self._engine is None:
                self._engine = TaxonomyEngine.from_files(*self._paths())
            return self._engine

    def refresh(self) -> TaxonomyEngine:
        """Reload both documents and replace the current engine."""
        with self._lock:
            engine = TaxonomyEngine.from_files(*self._paths())
            previous = self._engine
            self._engine = engine
        logger.info(
            "Taxonomy refreshed: %s -> %s",
            previous.checksum if previous is not None else None,
            engine.checksum,
        )
        return engine

    def set(self, engine: TaxonomyEngine | None) -> None:
        """Install a prebuilt engine (or clear it so the next ``get`` reloads)."""
        with self._lock:
            self._engine = engine


_registry = TaxonomyRegistry()


def get_registry() -> TaxonomyRegistry:
    """Factory function for dependency injection via FastAPI Depends."""
    return _registry


def get_engine() -> TaxonomyEngine:
    """The shared engine, for FastAPI Depends."""
    return _registry.get()
