"""Catalog source: reads the versioned taxonomy and override documents.

Catalog document layout::

    {
      "version": "1.3",
      "layers": {
        "S": {
          "name": "Stars", "numericCode": 2,
          "description": "...", "fileTypes": ["png", ...],
          "entries": {
            "POP":     {"numericCode": "001", "name": "Pop"},
            "POP.HPM": {"numericCode": "007", "name": "Pop_Hipster_Male_Stars"}
          }
        }
      },
      "aliases": {"W.HIP.BAS": "W.URB.BAS"}
    }

Entry keys without a dot are categories; ``CAT.SUB`` keys are subcategories
of ``CAT``. Declaration order is preserved and becomes listing order.

The documents are read-only input: where they are stored is the caller's
concern, this module only needs a path or an already-decoded mapping.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from nna_registry.models.taxonomy import CategoryEntry, Layer, OverrideEntry, TaxonomyItem
from nna_registry.taxonomy.errors import InvalidCatalog

logger = logging.getLogger(__name__)


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """json object hook: a repeated key would otherwise silently win."""
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            msg = f"Duplicate key '{key}' in catalog document."
            raise InvalidCatalog(msg)
        result[key] = value
    return result


def read_document(path: str | Path) -> dict[str, Any]:
    """Read a JSON catalog/overrides document.

    Raises:
        InvalidCatalog: If the file is missing, is not valid JSON, is not a
            JSON object, or repeats a key within one object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f, object_pairs_hook=_reject_duplicate_keys)
    except FileNotFoundError:
        msg = f"Catalog file not found: {path}"
        raise InvalidCatalog(msg) from None
    except json.JSONDecodeError as exc:
        msg = f"Catalog file {path} is not valid JSON: {exc}"
        raise InvalidCatalog(msg) from exc
    if not isinstance(data, dict):
        msg = f"Catalog file {path} must contain a JSON object."
        raise InvalidCatalog(msg)
    return data


def parse_layers(document: Mapping[str, Any]) -> list[Layer]:
    """Build Layer objects from a decoded catalog document.

    Raises:
        InvalidCatalog: On missing keys, malformed codes, or a subcategory
            whose category is not declared in the same layer.
    """
    raw_layers = document.get("layers")
    if not isinstance(raw_layers, Mapping) or not raw_layers:
        msg = "Catalog must define a non-empty 'layers' object."
        raise InvalidCatalog(msg)

    layers: list[Layer] = []
    for layer_code, raw in raw_layers.items():
        entries = raw.get("entries")
        if not isinstance(entries, Mapping):
            msg = f"Layer '{layer_code}' has no 'entries' object."
            raise InvalidCatalog(msg)

        category_items: dict[str, dict[str, Any]] = {}
        subcategories: dict[str, list[TaxonomyItem]] = {}
        for key, value in entries.items():
            category, _, subcategory = key.partition(".")
            try:
                if not subcategory:
                    category_items[category] = {
                        "code": category,
                        "numeric_code": value["numericCode"],
                        "name": value["name"],
                    }
                    subcategories.setdefault(category, [])
                    continue
                if category not in category_items:
                    msg = (
                        f"Subcategory '{layer_code}.{key}' is declared before "
                        f"(or without) its category '{category}'."
                    )
                    raise InvalidCatalog(msg)
                subcategories[category].append(
                    TaxonomyItem(
                        code=subcategory,
                        numeric_code=value["numericCode"],
                        name=value["name"],
                    )
                )
            except KeyError as exc:
                msg = f"Entry '{layer_code}.{key}' is missing field {exc}."
                raise InvalidCatalog(msg) from None
            except ValidationError as exc:
                msg = f"Entry '{layer_code}.{key}' is malformed: {exc}"
                raise InvalidCatalog(msg) from exc

        try:
            categories = tuple(
                CategoryEntry(**item, subcategories=tuple(subcategories[code]))
                for code, item in category_items.items()
            )
            layers.append(
                Layer(
                    code=layer_code,
                    numeric_code=raw.get("numericCode", 0),
                    name=raw.get("name", layer_code),
                    description=raw.get("description", ""),
                    file_types=tuple(raw.get("fileTypes", ())),
                    categories=categories,
                )
            )
        except ValidationError as exc:
            msg = f"Layer '{layer_code}' is malformed: {exc}"
            raise InvalidCatalog(msg) from exc

    return layers


def parse_aliases(document: Mapping[str, Any]) -> dict[str, str]:
    """Legacy 'L.C.S' -> canonical 'L.C.S' strings, uppercased.

    Raises:
        InvalidCatalog: If a key or value is not a three-part dotted path.
    """
    aliases: dict[str, str] = {}
    for legacy, canonical in (document.get("aliases") or {}).items():
        if legacy.count(".") != 2 or str(canonical).count(".") != 2:
            msg = f"Alias '{legacy}' -> '{canonical}' must map L.C.S to L.C.S."
            raise InvalidCatalog(msg)
        aliases[legacy.upper()] = str(canonical).upper()
    return aliases


def parse_overrides(document: Mapping[str, Any]) -> list[OverrideEntry]:
    """Build OverrideEntry records from a decoded overrides document.

    Raises:
        InvalidCatalog: If an entry is missing fields or has malformed codes.
    """
    entries: list[OverrideEntry] = []
    for i, raw in enumerate(document.get("overrides") or []):
        try:
            entries.append(OverrideEntry.model_validate(raw))
        except ValidationError as exc:
            msg = f"Override #{i} is malformed: {exc}"
            raise InvalidCatalog(msg) from exc
    return entries


def load_catalog(path: str | Path) -> tuple[str, list[Layer], dict[str, str]]:
    """Load (version, layers, aliases) from a catalog file."""
    document = read_document(path)
    layers = parse_layers(document)
    aliases = parse_aliases(document)
    version = str(document.get("version", ""))
    logger.info(
        "Loaded taxonomy catalog %s (version %s, %d layers, %d aliases)",
        path, version, len(layers), len(aliases),
    )
    return version, layers, aliases


def load_overrides(path: str | Path | None) -> list[OverrideEntry]:
    """Load override entries; ``None`` means the catalog has no overrides."""
    if path is None:
        return []
    entries = parse_overrides(read_document(path))
    logger.info("Loaded %d taxonomy overrides from %s", len(entries), path)
    return entries
