"""Taxonomy engine errors.

Fatal (raised while building the engine at startup):
    InvalidCatalog, AmbiguousOverride

Recoverable (raised on request paths, or signalled as a warning):
    UnknownCode / UnknownCodeWarning, MalformedAddress, InvalidAddress,
    SequenceConflict

Each class also derives from the builtin that API handlers already map
(ValueError -> 400, KeyError -> 404).
"""


class TaxonomyError(Exception):
    """Base class for all taxonomy engine errors."""


class InvalidCatalog(TaxonomyError, ValueError):
    """The catalog is malformed, has duplicate codes, or numbering collides."""


class AmbiguousOverride(InvalidCatalog):
    """Two override entries map the same (layer, category, value) key differently."""


class UnknownCode(TaxonomyError, KeyError):
    """A code is absent from both the tree and the override table."""

    def __init__(self, code: str, scope: str = "") -> None:
        self.code = code
        self.scope = scope
        where = f" in {scope}" if scope else ""
        super().__init__(f"Unknown code '{code}'{where}.")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class UnknownCodeWarning(UserWarning):
    """Non-strict signal that a code was not found and a fallback was used."""


class MalformedAddress(TaxonomyError, ValueError):
    """An address has fewer than four dot-separated segments."""


class InvalidAddress(TaxonomyError, ValueError):
    """A taxonomy path failed validation and no address can be minted."""

    def __init__(self, message: str, result=None) -> None:  # noqa: ANN001
        super().__init__(message)
        self.result = result


class SequenceConflict(TaxonomyError, RuntimeError):
    """A concurrent allocator write lost the race for a counter."""
