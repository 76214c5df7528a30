"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Self

from leazr.domain.base import ValueObject
from leazr.domain.exceptions import InvalidAttributeError, InvalidPriceError

# One selected value per attribute name, e.g. {"Couleur": "Noir", "Taille": "M"}
Combination = dict[str, str]

CENT = Decimal("0.01")


# ============================================================================
# Prices
# ============================================================================


def to_price(value: Any, field: str = "price") -> Decimal:
    """Convert a number or numeric string to a two-decimal price.

    Args:
        value: Value to convert (int, float, str or Decimal).
        field: Field name used in the error.

    Returns:
        Price rounded half-up to cents.

    Raises:
        InvalidPriceError: If the value is not numeric.
    """
    if isinstance(value, bool):
        raise InvalidPriceError(field, value, "must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidPriceError(field, value, "must be a number") from None
    if not amount.is_finite():
        raise InvalidPriceError(field, value, "must be a finite number")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_positive_price(value: Any, field: str = "price") -> Decimal:
    """Convert a value to a price and require it to be strictly positive.

    Raises:
        InvalidPriceError: If the value is not numeric or not above zero.
    """
    price = to_price(value, field)
    if price <= 0:
        raise InvalidPriceError(field, value, "must be positive")
    return price


def to_stock(value: Any) -> int:
    """Validate a stock quantity.

    Raises:
        InvalidPriceError: If the value is not a non-negative integer.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPriceError("stock", value, "must be an integer")
    if value < 0:
        raise InvalidPriceError("stock", value, "must not be negative")
    return value


# ============================================================================
# Attributes
# ============================================================================


def parse_attribute_values(raw: str | Sequence[str]) -> list[str]:
    """Parse attribute values typed by a user.

    Accepts either a comma-separated string ("Noir, Blanc, Noir") or a
    sequence of strings. Values are trimmed, blanks dropped and duplicates
    removed ignoring case, keeping the first spelling.

    Args:
        raw: Comma-separated string or list of values.

    Returns:
        Ordered list of distinct values.
    """
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    values: list[str] = []
    seen: set[str] = set()
    for item in items:
        value = str(item).strip()
        if value and value.lower() not in seen:
            seen.add(value.lower())
            values.append(value)
    return values


@dataclass(frozen=True)
class AttributeSet(ValueObject):
    """Variation attributes declared by a parent product.

    Maps attribute names to their ordered allowed values. Insertion order
    is preserved and defines the enumeration order of combinations.

    Attributes:
        attributes: Pairs of (name, values) in declaration order.
    """

    attributes: tuple[tuple[str, tuple[str, ...]], ...] = ()

    def __post_init__(self) -> None:
        """Validate attribute names and values."""
        seen: set[str] = set()
        for name, values in self.attributes:
            if not name or not name.strip():
                raise InvalidAttributeError("Attribute name is required")
            if name in seen:
                raise InvalidAttributeError(f"Duplicate attribute '{name}'", name)
            if not values:
                raise InvalidAttributeError(
                    f"Attribute '{name}' needs at least one value", name
                )
            seen.add(name)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Sequence[str]] | None) -> Self:
        """Build an attribute set from a name -> values mapping.

        Values are normalized with parse_attribute_values, so a stored
        comma-separated string is accepted too.

        Args:
            mapping: Attribute mapping, or None for an empty set.

        Returns:
            AttributeSet instance.
        """
        if not mapping:
            return cls()
        return cls(
            attributes=tuple(
                (str(name).strip(), tuple(parse_attribute_values(values)))
                for name, values in mapping.items()
            )
        )

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to a JSON-friendly mapping.

        Returns:
            Attribute name -> list of values.
        """
        return {name: list(values) for name, values in self.attributes}

    @property
    def names(self) -> list[str]:
        """Get attribute names in declaration order."""
        return [name for name, _ in self.attributes]

    def values_for(self, name: str) -> tuple[str, ...]:
        """Get allowed values of an attribute.

        Returns:
            Allowed values, or an empty tuple for an unknown attribute.
        """
        for attr_name, values in self.attributes:
            if attr_name == name:
                return values
        return ()

    def __contains__(self, name: object) -> bool:
        return any(attr_name == name for attr_name, _ in self.attributes)

    def __iter__(self) -> Iterator[tuple[str, tuple[str, ...]]]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def is_empty(self) -> bool:
        """Check whether no attribute is declared."""
        return not self.attributes

    @property
    def combination_count(self) -> int:
        """Number of combinations the set enumerates (0 when empty)."""
        if not self.attributes:
            return 0
        count = 1
        for _, values in self.attributes:
            count *= len(values)
        return count

    def with_attribute(self, name: str, values: Sequence[str]) -> Self:
        """Return a copy with an attribute added or its values replaced.

        A replaced attribute keeps its position.

        Args:
            name: Attribute name.
            values: Allowed values.

        Returns:
            New AttributeSet.
        """
        name = name.strip()
        new_values = tuple(values)
        if name in self:
            attributes = tuple(
                (attr_name, new_values if attr_name == name else attr_values)
                for attr_name, attr_values in self.attributes
            )
        else:
            attributes = self.attributes + ((name, new_values),)
        return type(self)(attributes=attributes)

    def without_attribute(self, name: str) -> Self:
        """Return a copy without the given attribute."""
        return type(self)(
            attributes=tuple(
                (attr_name, values)
                for attr_name, values in self.attributes
                if attr_name != name
            )
        )
