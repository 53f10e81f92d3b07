"""Immutable taxonomy and address entities: items, layers, overrides, addresses."""

from pydantic import Field

from nna_registry.models.common import (
    AlphaCode,
    LayerCode,
    NNABase,
    NumericCode,
    ValidationStatus,
)


class TaxonomyItem(NNABase, frozen=True):
    """One node of the taxonomy: a category or a subcategory.

    ``code`` is unique within its sibling set. ``numeric_code`` is only
    guaranteed unique within its sibling set after override resolution.
    """

    code: AlphaCode
    numeric_code: NumericCode
    name: str = Field(..., min_length=1)


class CategoryEntry(TaxonomyItem, frozen=True):
    """A category and the subcategories it owns, in catalog order."""

    subcategories: tuple[TaxonomyItem, ...] = ()


class Layer(NNABase, frozen=True):
    """A top-level asset layer and the categories it owns, in catalog order."""

    code: LayerCode
    numeric_code: int = Field(..., ge=1, le=10)
    name: str = Field(..., min_length=1)
    description: str = ""
    file_types: tuple[str, ...] = ()
    categories: tuple[CategoryEntry, ...] = ()


class OverrideEntry(NNABase, frozen=True):
    """A forced subcategory alpha <-> numeric pairing scoped to (layer, category).

    Consulted before the generic tree lookup. ``category`` is the
    category's alpha code.
    """

    layer: LayerCode
    category: AlphaCode
    subcategory_alpha: AlphaCode = Field(..., alias="subcategoryAlpha")
    subcategory_numeric: NumericCode = Field(..., alias="subcategoryNumeric")
    note: str = ""


class TaxonomyPath(NNABase, frozen=True):
    """A canonical (layer, category, subcategory) triple in alpha codes."""

    layer: LayerCode
    category: AlphaCode
    subcategory: AlphaCode

    @property
    def key(self) -> str:
        """Dotted form, e.g. 'S.POP.HPM'."""
        return f"{self.layer.value}.{self.category}.{self.subcategory}"


class Address(NNABase, frozen=True):
    """A parsed NNA address.

    Segments hold whatever form the source string used (alpha for an HFN,
    numeric for an MFA). ``extension`` and ``components`` are the optional
    trailing parts; ``components`` is only populated for composite addresses.
    """

    layer: str
    category: str
    subcategory: str
    sequential: str
    extension: str | None = None
    components: tuple[str, ...] = ()

    @property
    def base(self) -> str:
        """The four-segment address without suffixes."""
        return f"{self.layer}.{self.category}.{self.subcategory}.{self.sequential}"


class EncodedAddress(NNABase, frozen=True):
    """The two serializations of one logical address."""

    hfn: str
    mfa: str


class ValidationResult(NNABase, frozen=True):
    """Outcome of validating a taxonomy path.

    ``path`` is the canonical alpha path when ``status`` is OK.
    ``alias_of`` records the legacy key when the path was reached via an alias.
    """

    status: ValidationStatus
    path: TaxonomyPath | None = None
    message: str = ""
    alias_of: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ValidationStatus.OK
