"""Validator: checks that a taxonomy path exists before an address is minted.

Each level accepts an alpha code, a numeric code or a display name in any
case. Subcategories resolve through the override table before the tree.
When direct resolution fails at any level, the catalog's alias map
(legacy 'L.C.S' -> canonical 'L.C.S') is consulted once.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from nna_registry.models.common import ValidationStatus
from nna_registry.models.taxonomy import TaxonomyPath, ValidationResult
from nna_registry.taxonomy.resolver import CodeResolver, normalize_alpha

logger = logging.getLogger(__name__)


class Validator:
    """Resolves (layer, category, subcategory) input to a canonical alpha path."""

    def __init__(
        self,
        resolver: CodeResolver,
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._resolver = resolver
        self._aliases = dict(aliases or {})

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def validate(self, layer: str, category: str, subcategory: str) -> ValidationResult:
        """Validate a taxonomy path.

        Returns:
            ValidationResult with status OK and the canonical path, or the
            status of the first level that could not be resolved.
        """
        result = self._resolve(layer, category, subcategory)
        if result.ok:
            return result

        alias_key = self._alias_key(layer, category, subcategory)
        canonical = self._aliases.get(alias_key)
        if canonical is None:
            logger.debug("Taxonomy path %s rejected: %s", alias_key, result.message)
            return result

        aliased = self._resolve(*canonical.split("."))
        if not aliased.ok:
            # A broken alias is a catalog defect; report the original failure.
            logger.warning(
                "Alias %s points at unresolvable path %s: %s",
                alias_key, canonical, aliased.message,
            )
            return result
        logger.debug("Taxonomy path %s resolved via alias to %s", alias_key, canonical)
        return aliased.model_copy(update={"alias_of": alias_key})

    def _resolve(self, layer: str, category: str, subcategory: str) -> ValidationResult:
        tree = self._resolver.tree
        found = tree.find_layer(layer)
        if found is None:
            return ValidationResult(
                status=ValidationStatus.INVALID_LAYER,
                message=f"Invalid layer: {layer}",
            )
        layer_code = found.code.value

        category_code = self._resolver.lookup_code(layer_code, None, category)
        if category_code is None:
            return ValidationResult(
                status=ValidationStatus.INVALID_CATEGORY,
                message=f"Invalid category: {category} for layer: {layer_code}",
            )

        subcategory_code = self._resolver.lookup_code(layer_code, category_code, subcategory)
        if subcategory_code is None:
            return ValidationResult(
                status=ValidationStatus.INVALID_SUBCATEGORY,
                message=(
                    f"Invalid subcategory: {subcategory} for layer: {layer_code}, "
                    f"category: {category_code}"
                ),
            )

        return ValidationResult(
            status=ValidationStatus.OK,
            path=TaxonomyPath(
                layer=layer_code,
                category=category_code,
                subcategory=subcategory_code,
            ),
        )

    def _alias_key(self, layer: str, category: str, subcategory: str) -> str:
        """Legacy 'L.C.S' key; the layer may be given in any accepted form."""
        found = self._resolver.tree.find_layer(layer)
        layer_code = found.code.value if found is not None else layer.strip().upper()
        return ".".join(
            [layer_code, normalize_alpha(category), normalize_alpha(subcategory)]
        )
