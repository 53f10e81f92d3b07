"""Shared types, enums, and base models used across NNA Registry domain models."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


# --- Reusable annotated types ---

AlphaCode = Annotated[
    str,
    Field(
        pattern=r"^[A-Z0-9]{3}$",
        description="Three-character human-friendly code, e.g. 'POP' or 'Y2K'.",
    ),
]
NumericCode = Annotated[
    str,
    Field(pattern=r"^[0-9]{3}$", description="Zero-padded three-digit code, e.g. '007'."),
]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class LayerCode(StrEnum):
    """The closed set of asset layers."""

    SONGS = "G"
    STARS = "S"
    LOOKS = "L"
    MOVES = "M"
    WORLDS = "W"
    BRANDED = "B"
    PERSONALIZE = "P"
    TRAINING_DATA = "T"
    COMPOSITE = "C"
    RIGHTS = "R"


# Layer numeric codes are fixed; the catalog may not renumber layers.
LAYER_NUMERIC_CODES: dict[LayerCode, int] = {
    LayerCode.SONGS: 1,
    LayerCode.STARS: 2,
    LayerCode.LOOKS: 3,
    LayerCode.MOVES: 4,
    LayerCode.WORLDS: 5,
    LayerCode.BRANDED: 6,
    LayerCode.PERSONALIZE: 7,
    LayerCode.TRAINING_DATA: 8,
    LayerCode.COMPOSITE: 9,
    LayerCode.RIGHTS: 10,
}


class ValidationStatus(StrEnum):
    """Outcome of validating a taxonomy path."""

    OK = "OK"
    INVALID_LAYER = "INVALID_LAYER"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    INVALID_SUBCATEGORY = "INVALID_SUBCATEGORY"


# --- Base model ---


class NNABase(BaseModel):
    """Base model with common configuration for all NNA Registry Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "protected_namespaces": (),
    }
