"""Condition evaluation over a triggering event payload.

Pure functions, no state: evaluating the same condition against the same
payload always gives the same answer.

Coercion rules:
- a field missing from the payload is told apart from an explicit null; for
  `equals` / `not_equals` both compare as None
- `contains` compares string forms (missing -> "undefined", None -> "null",
  bools -> "true"/"false", integral floats without ".0", containers as
  compact JSON)
- `greater_than` / `less_than` compare numeric forms; None and blank strings
  are 0, bools are 0/1, numeric strings are parsed, integers too large for a float
  are +/-inf, a missing field and everything else is NaN, and any comparison
  involving NaN is False
- an operator this module does not know passes (fail-open)
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from numbers import Real
from typing import Any

from .models import Condition, ConditionOperator

logger = logging.getLogger(__name__)

# Marks a field absent from the payload, as opposed to present with None.
MISSING: Any = object()


def lookup_field(payload: Mapping[str, Any], field: str, default: Any = None) -> Any:
    """Resolve `field` in the payload.

    An exact top-level key wins; otherwise the field is walked as a dot-path
    through nested mappings. Missing -> `default`.
    """

    if field in payload:
        return payload[field]

    current: Any = payload
    for part in field.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that does not cross types (1 != "1", True != 1)."""

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if _is_number(left) and _is_number(right):
        return bool(left == right)
    if type(left) is not type(right):
        return False
    return bool(left == right)


def to_text(value: Any) -> str:
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str, ensure_ascii=False)
    return str(value)


def to_number(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def evaluate(condition: Condition, payload: Mapping[str, Any], *, warn_unknown: bool = True) -> bool:
    actual = lookup_field(payload, condition.field, MISSING)
    expected = condition.value

    try:
        operator = ConditionOperator(condition.operator)
    except ValueError:
        if warn_unknown:
            logger.warning(
                "Unknown condition operator; treating condition as met",
                extra={"field": condition.field, "operator": condition.operator},
            )
        return True

    if operator is ConditionOperator.EQUALS:
        return strict_equals(_none_if_missing(actual), expected)
    if operator is ConditionOperator.NOT_EQUALS:
        return not strict_equals(_none_if_missing(actual), expected)
    if operator is ConditionOperator.CONTAINS:
        return to_text(expected) in to_text(actual)
    if operator is ConditionOperator.GREATER_THAN:
        # NaN on either side makes the comparison False.
        return to_number(actual) > to_number(expected)
    if operator is ConditionOperator.LESS_THAN:
        return to_number(actual) < to_number(expected)

    raise AssertionError(f"Unhandled operator: {operator}")


def conditions_met(
    conditions: Iterable[Condition], payload: Mapping[str, Any], *, warn_unknown: bool = True
) -> bool:
    """AND over all conditions; an empty list is met."""

    return all(evaluate(c, payload, warn_unknown=warn_unknown) for c in conditions)


def _none_if_missing(value: Any) -> Any:
    return None if value is MISSING else value


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)
