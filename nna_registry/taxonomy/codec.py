"""AddressCodec: the HFN <-> MFA bijection.

HFN: ``S.POP.HPM.003[.ext]``      MFA: ``2.001.007.003[.ext]``
Composite: ``C.RMX.POP.001:<addr1>+<addr2>+...``

Round-trip law (for well-formed addresses whose codes exist)::

    hfn_to_mfa(mfa_to_hfn(x)) == x
    mfa_to_hfn(hfn_to_mfa(y)) == y

Conversions degrade rather than fail: fewer than four segments returns the
input unchanged, an unresolvable code is passed through as written, and
everything after the fourth segment (file extension) or after the first
``:`` (composite component list) is copied verbatim.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from nna_registry.models.common import LayerCode
from nna_registry.models.taxonomy import Address, EncodedAddress
from nna_registry.taxonomy.errors import InvalidAddress, MalformedAddress, UnknownCode
from nna_registry.taxonomy.resolver import CodeResolver, normalize_alpha
from nna_registry.taxonomy.tree import is_digits
from nna_registry.taxonomy.validator import Validator

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = "."
COMPOSITE_SEPARATOR = ":"
COMPONENT_SEPARATOR = "+"
MIN_SEGMENTS = 4
DEFAULT_SEQUENTIAL = "000"


def format_sequential(sequential: int | str) -> str:
    """7 -> '007', '42' -> '042'. Values above 999 keep all their digits.

    Raises:
        ValueError: If the value is negative or not a whole number.
    """
    if isinstance(sequential, int):
        if sequential < 0:
            msg = f"Sequential must be non-negative, got {sequential}."
            raise ValueError(msg)
        return f"{sequential:03d}"
    value = str(sequential).strip()
    if not is_digits(value):
        msg = f"Sequential must be digits, got '{sequential}'."
        raise ValueError(msg)
    return value.zfill(3)


def _format_suffix(suffix: str | None) -> str:
    if not suffix:
        return ""
    return suffix if suffix.startswith(SEGMENT_SEPARATOR) else f"{SEGMENT_SEPARATOR}{suffix}"


def split_address(address: str) -> tuple[list[str], str]:
    """Split into dot segments of the base and the verbatim composite tail.

    'C.RMX.POP.001:G.POP.TSW.001+S.POP.HPM.001'
        -> (['C', 'RMX', 'POP', '001'], ':G.POP.TSW.001+S.POP.HPM.001')
    """
    base, sep, components = address.partition(COMPOSITE_SEPARATOR)
    return base.split(SEGMENT_SEPARATOR), f"{sep}{components}"


class AddressCodec:
    """Builds, parses and converts NNA addresses through one resolver."""

    def __init__(self, resolver: CodeResolver, validator: Validator) -> None:
        self._resolver = resolver
        self._validator = validator

    # -----------------------------------------------------------------
    # Minting
    # -----------------------------------------------------------------

    def encode(
        self,
        layer: str,
        category: str,
        subcategory: str,
        sequential: int | str = DEFAULT_SEQUENTIAL,
        suffix: str | None = None,
        components: Sequence[str] | None = None,
    ) -> EncodedAddress:
        """Build the HFN and MFA for one taxonomy path.

        Args:
            layer, category, subcategory: Any accepted form (alpha, numeric,
                display name); legacy aliases resolve to their canonical path.
            sequential: Instance number, padded to three digits.
            suffix: File extension appended to both forms ('mp4' or '.mp4').
            components: Composite layer only. Component addresses are appended
                as ':a+b+...' in the given order.

        Raises:
            InvalidAddress: If the path does not validate, or components are
                given for a non-composite layer.
            ValueError: If ``sequential`` is not a non-negative whole number.
        """
        result = self._validator.validate(layer, category, subcategory)
        if not result.ok:
            raise InvalidAddress(result.message, result)
        path = result.path
        seq = format_sequential(sequential)
        tail = _format_suffix(suffix)

        hfn = SEGMENT_SEPARATOR.join(
            [path.layer.value, path.category, path.subcategory, seq]
        ) + tail
        mfa = SEGMENT_SEPARATOR.join(
            [
                self._resolver.layer_to_numeric(path.layer.value, strict=True),
                self._resolver.alpha_to_numeric(
                    path.layer.value, None, path.category, strict=True,
                ),
                self._resolver.alpha_to_numeric(
                    path.layer.value, path.category, path.subcategory, strict=True,
                ),
                seq,
            ]
        ) + tail

        if components:
            hfn = self.compose(hfn, components)
            mfa = self.compose(mfa, components)
        return EncodedAddress(hfn=hfn, mfa=mfa)

    def compose(self, base: str, components: Sequence[str]) -> str:
        """Assemble a composite address: ``base:comp1+comp2+...``.

        Component order is preserved; duplicates are kept.

        Raises:
            InvalidAddress: If ``base`` is not a Composite-layer address or
                no components are given.
        """
        parsed = self.parse(base)
        layer = self._resolver.tree.find_layer(parsed.layer)
        if layer is None or layer.code != LayerCode.COMPOSITE:
            msg = f"Only Composite layer addresses take components, got '{base}'."
            raise InvalidAddress(msg)
        if not components:
            msg = "A composite address needs at least one component."
            raise InvalidAddress(msg)
        return f"{base}{COMPOSITE_SEPARATOR}{COMPONENT_SEPARATOR.join(components)}"

    # -----------------------------------------------------------------
    # Conversion
    # -----------------------------------------------------------------

    def hfn_to_mfa(self, hfn: str) -> str:
        """'S.POP.HPM.003' -> '2.001.007.003'. Malformed input is returned unchanged."""
        segments, tail = split_address(hfn)
        if len(segments) < MIN_SEGMENTS:
            logger.debug("Not an NNA address (fewer than 4 segments): %r", hfn)
            return hfn
        layer, category, subcategory, *rest = segments
        r = self._resolver
        converted = [
            self._passthrough(lambda: r.layer_to_numeric(layer, strict=True), layer),
            self._passthrough(
                lambda: r.alpha_to_numeric(layer, None, category, strict=True), category,
            ),
            self._passthrough(
                lambda: r.alpha_to_numeric(layer, category, subcategory, strict=True),
                subcategory,
            ),
        ]
        return SEGMENT_SEPARATOR.join([*converted, *rest]) + tail

    def mfa_to_hfn(self, mfa: str) -> str:
        """'2.001.007.003' -> 'S.POP.HPM.003'. Malformed input is returned unchanged."""
        segments, tail = split_address(mfa)
        if len(segments) < MIN_SEGMENTS:
            logger.debug("Not an NNA address (fewer than 4 segments): %r", mfa)
            return mfa
        layer, category, subcategory, *rest = segments
        r = self._resolver
        converted = [
            self._passthrough(lambda: r.layer_to_alpha(layer, strict=True), layer),
            self._passthrough(
                lambda: r.numeric_to_alpha(layer, None, category, strict=True), category,
            ),
            self._passthrough(
                lambda: r.numeric_to_alpha(layer, category, subcategory, strict=True),
                subcategory,
            ),
        ]
        return SEGMENT_SEPARATOR.join([*converted, *rest]) + tail

    @staticmethod
    def _passthrough(convert: Callable[[], str], raw: str) -> str:
        try:
            return convert()
        except UnknownCode as exc:
            logger.warning("%s Passing '%s' through unchanged.", exc, raw)
            return raw

    # -----------------------------------------------------------------
    # Parsing / normalization
    # -----------------------------------------------------------------

    def parse(self, address: str) -> Address:
        """Split an HFN or MFA into its parts.

        Raises:
            MalformedAddress: If there are fewer than four segments.
        """
        segments, tail = split_address(address)
        if len(segments) < MIN_SEGMENTS:
            msg = f"Address '{address}' has fewer than {MIN_SEGMENTS} segments."
            raise MalformedAddress(msg)
        layer, category, subcategory, sequential, *rest = segments
        components = tuple(tail[1:].split(COMPONENT_SEPARATOR)) if tail[1:] else ()
        return Address(
            layer=layer,
            category=category,
            subcategory=subcategory,
            sequential=sequential,
            extension=SEGMENT_SEPARATOR.join(rest) or None,
            components=components,
        )

    def format_hfn(self, raw: str) -> str:
        """Normalize a loosely-typed HFN to canonical codes.

        's.pop.hpm.3' -> 'S.POP.HPM.003';
        'S.Hip_Hop.Base.1' -> 'S.HIP.BAS.001';
        'W.bch.Sun.1.mp4' -> 'W.BCH.SUN.001.mp4'.

        Fewer than three segments cannot be normalized and come back
        uppercased; a missing sequential becomes '001'.
        """
        segments, tail = split_address(raw.strip())
        if len(segments) < 3:
            logger.debug("Cannot format HFN %r: fewer than 3 segments", raw)
            return raw.strip().upper()
        layer, category, subcategory, *rest = segments
        sequential, extension = (rest[0], rest[1:]) if rest else ("1", [])

        r = self._resolver
        layer_code = self._passthrough(lambda: r.layer_to_alpha(layer, strict=True), layer.upper())
        category_code = r.lookup_code(layer_code, None, category) or normalize_alpha(category)
        subcategory_code = (
            r.lookup_code(layer_code, category_code, subcategory)
            or normalize_alpha(subcategory)
        )
        try:
            sequential = format_sequential(sequential)
        except ValueError:
            logger.debug("Leaving non-numeric sequential %r in %r", sequential, raw)
        return SEGMENT_SEPARATOR.join(
            [layer_code, category_code, subcategory_code, sequential, *extension]
        ) + tail

    def is_equivalent(self, a: str, b: str) -> bool:
        """True if two addresses (HFN or MFA, any mix) name the same asset.

        Compares the numeric (layer, category, subcategory, sequential)
        tuple; suffixes are ignored. Malformed input is never equivalent.
        """
        try:
            left = self.parse(self.hfn_to_mfa(a))
            right = self.parse(self.hfn_to_mfa(b))
        except MalformedAddress:
            return False
        return (
            (left.layer, left.category, left.subcategory, left.sequential.zfill(3))
            == (right.layer, right.category, right.subcategory, right.sequential.zfill(3))
        )
