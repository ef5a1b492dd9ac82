from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Operator(str, Enum):
    EQ = "EQ"
    LK = "LK"    # case-insensitive substring
    GTE = "GTE"
    LTE = "LTE"
    IN = "IN"
    BT = "BT"    # inclusive range, value is (low, high)


class LogicalOperator(str, Enum):
    AND = "And"
    OR = "Or"


# ---------------------------------------------------------------------------
# Core filter models
# ---------------------------------------------------------------------------

@dataclass
class FilterExpression:
    """
    Basic component of a filter: a property (column), an operator, and a value.
    The value is always bound as a parameter, never rendered into SQL text.
    """
    property_name: str
    operator: Operator = Operator.EQ
    value: Any = ""

    # camelCase JSON helpers
    def to_dict(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {
            "propertyName": self.property_name,
            "operator": self.operator.value,
            "value": value,
        }


Predicate = Union[FilterExpression, "FilterCollection"]


@dataclass
class FilterCollection:
    """
    Ordered group of predicates joined by one logical operator.
    Items are either FilterExpressions or nested FilterCollections.
    """
    logical_operator: LogicalOperator = LogicalOperator.AND
    items: List[Predicate] = field(default_factory=list)

    def add(self, item: Predicate) -> "FilterCollection":
        self.items.append(item)
        return self

    def __len__(self) -> int:
        return len(self.items)

    def expressions(self) -> List[FilterExpression]:
        """Flatten to leaf expressions, depth first."""
        out: List[FilterExpression] = []
        for item in self.items:
            if isinstance(item, FilterCollection):
                out.extend(item.expressions())
            else:
                out.append(item)
        return out

    # camelCase JSON helpers
    def to_dict(self) -> Dict[str, Any]:
        return {
            "logicalOperator": self.logical_operator.value,
            "items": [i.to_dict() for i in self.items],
        }


def all_of(*items: Predicate) -> FilterCollection:
    return FilterCollection(LogicalOperator.AND, list(items))


def any_of(*items: Predicate) -> FilterCollection:
    return FilterCollection(LogicalOperator.OR, list(items))


__all__ = [
    "Operator",
    "LogicalOperator",
    "FilterExpression",
    "FilterCollection",
    "Predicate",
    "all_of",
    "any_of",
]
