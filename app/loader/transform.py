"""
==============================================================================
Supplier Record Transform Module
==============================================================================

Pure normalization of one supplier product into the stored product shape.

Raw shape (supplier export):
---------------------------
    product
     ├── id, name, unitPrice, unit, enabled, barcode?, detail?, href?, ...
     └── structure[]
          └── variable?
               ├── id, name, requerid, quantity, maximum, quantitymaximum
               └── components[]
                    └── component
                         └── id, name, unitPrice, unit, enabled, barcode?, ...

Normalized shape:
----------------
    product
     ├── id, name, unitPrice, unit, enabled, barcode, detail, href, ...
     └── variables[]
          ├── id, name, required, quantity, maximum, quantityMaximum
          └── components[]
               └── id, name, unitPrice, unit, enabled, barcode, detail, href

Field handling is declared per level in the *_RULES tables below:

- REQUIRED:     must be present and non-null, copied as is
- EMPTY_STRING: copied when present, "" when absent or null
- PASSTHROUGH:  copied when present, left out when absent or null

Structure entries without a ``variable`` are skipped. Order of variables
and components follows the input. Numbers are copied without conversion.

==============================================================================
"""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple


class TransformError(ValueError):
    """
    Raised when a supplier record cannot be normalized.

    Attributes:
        path: JSON path of the offending value (e.g. ``structure[0].variable.name``)
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{message} at '{path}'" if path else message)


class FieldPolicy(str, enum.Enum):
    """How a missing source field is treated."""

    REQUIRED = "required"
    EMPTY_STRING = "empty_string"
    PASSTHROUGH = "passthrough"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldRule:
    """Copy ``source`` from the raw record to ``target`` under ``policy``."""

    source: str
    target: str
    policy: FieldPolicy


REQUIRED = FieldPolicy.REQUIRED
EMPTY_STRING = FieldPolicy.EMPTY_STRING
PASSTHROUGH = FieldPolicy.PASSTHROUGH


PRODUCT_RULES: Tuple[FieldRule, ...] = (
    FieldRule("id", "id", REQUIRED),
    FieldRule("name", "name", REQUIRED),
    FieldRule("unitPrice", "unitPrice", REQUIRED),
    FieldRule("unit", "unit", REQUIRED),
    FieldRule("enabled", "enabled", REQUIRED),
    FieldRule("barcode", "barcode", EMPTY_STRING),
    FieldRule("detail", "detail", EMPTY_STRING),
    FieldRule("href", "href", EMPTY_STRING),
    FieldRule("salesgroup", "salesgroup", PASSTHROUGH),
    FieldRule("groupId", "groupId", PASSTHROUGH),
    FieldRule("type", "type", PASSTHROUGH),
    FieldRule("highlighted", "highlighted", PASSTHROUGH),
    FieldRule("manufactured", "manufactured", PASSTHROUGH),
    FieldRule("productResale", "productResale", PASSTHROUGH),
    FieldRule("lastCost", "lastCost", PASSTHROUGH),
)

# "requerid" and "quantitymaximum" are the supplier's spellings.
VARIABLE_RULES: Tuple[FieldRule, ...] = (
    FieldRule("id", "id", REQUIRED),
    FieldRule("name", "name", REQUIRED),
    FieldRule("requerid", "required", REQUIRED),
    FieldRule("quantity", "quantity", REQUIRED),
    FieldRule("maximum", "maximum", REQUIRED),
    FieldRule("quantitymaximum", "quantityMaximum", REQUIRED),
)

COMPONENT_RULES: Tuple[FieldRule, ...] = (
    FieldRule("id", "id", REQUIRED),
    FieldRule("name", "name", REQUIRED),
    FieldRule("unitPrice", "unitPrice", REQUIRED),
    FieldRule("unit", "unit", REQUIRED),
    FieldRule("enabled", "enabled", REQUIRED),
    FieldRule("barcode", "barcode", EMPTY_STRING),
    FieldRule("detail", "detail", EMPTY_STRING),
    FieldRule("href", "href", EMPTY_STRING),
)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _expect_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TransformError(f"Expected an object, got {type(value).__name__}", path)
    return value


def _expect_list(value: Any, path: str) -> Sequence[Any]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise TransformError(f"Expected an array, got {type(value).__name__}", path)
    return value


def apply_rules(raw: Mapping[str, Any], rules: Sequence[FieldRule], path: str = "") -> Dict[str, Any]:
    """
    Build a new record from ``raw`` following ``rules``.

    Raises:
        TransformError: If a REQUIRED field is absent or null
    """
    record: Dict[str, Any] = {}

    for rule in rules:
        value = raw.get(rule.source)

        if value is None:
            if rule.policy is FieldPolicy.REQUIRED:
                raise TransformError("Missing required field", _join(path, rule.source))
            if rule.policy is FieldPolicy.EMPTY_STRING:
                record[rule.target] = ""
            continue

        record[rule.target] = copy.deepcopy(value)

    return record


def normalize_component(raw: Any, path: str = "component") -> Dict[str, Any]:
    """Normalize one supplier component."""
    return apply_rules(_expect_mapping(raw, path), COMPONENT_RULES, path)


def normalize_variable(raw: Any, path: str = "variable") -> Dict[str, Any]:
    """Normalize one supplier variable and its component references."""
    variable = _expect_mapping(raw, path)
    record = apply_rules(variable, VARIABLE_RULES, path)

    components: List[Dict[str, Any]] = []
    refs_path = _join(path, "components")
    for index, ref in enumerate(_expect_list(variable.get("components"), refs_path)):
        ref_path = f"{refs_path}[{index}]"
        ref = _expect_mapping(ref, ref_path)
        components.append(normalize_component(ref.get("component"), _join(ref_path, "component")))

    record["components"] = components
    return record


def normalize(raw: Any) -> Dict[str, Any]:
    """
    Normalize one supplier product.

    Args:
        raw: Decoded JSON object for one entry of ``products``

    Returns:
        New dict in the stored (camelCase) shape, sharing nothing with ``raw``

    Raises:
        TransformError: If the record or a nested part is malformed

    Example:
        >>> normalize({"id": 1, "name": "Pizza", "unitPrice": 10,
        ...            "unit": "ea", "enabled": "1"})["variables"]
        []
    """
    product = _expect_mapping(raw, "")
    record = apply_rules(product, PRODUCT_RULES)

    variables: List[Dict[str, Any]] = []
    for index, entry in enumerate(_expect_list(product.get("structure"), "structure")):
        entry_path = f"structure[{index}]"
        entry = _expect_mapping(entry, entry_path)
        if entry.get("variable") is None:
            continue
        variables.append(normalize_variable(entry["variable"], _join(entry_path, "variable")))

    record["variables"] = variables
    return record
