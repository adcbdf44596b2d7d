"""Inputs for a single RSU vest sale-price calculation.

Monetary amounts and rates are held as ``Decimal`` so that every
intermediate value rounds to the cent exactly as a payroll statement
would. Share counts are plain integers.
"""

from dataclasses import dataclass, fields as dataclass_fields
from decimal import Decimal, InvalidOperation
from typing import Any, Dict


class InputParseError(ValueError):
    """Raised when a user-supplied value cannot be parsed for a field."""

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid value for {field_name}: {value!r}")


DECIMAL_FIELDS = (
    'vcd_price',
    'vest_day_price',
    'medicare_rate',
    'social_security_rate',
    'federal_rate',
    'salt_rate',
    'tax_sale_price',
)

SHARE_FIELDS = ('vesting_shares', 'shares_sold_for_taxes')

FLAG_FIELDS = ('include_capital_gains', 'include_net_investment_tax')


def parse_decimal(field_name: str, value: Any) -> Decimal:
    """Parse a price or rate into a Decimal.

    Floats go through ``str()`` first so ``0.1`` becomes ``Decimal('0.1')``
    rather than its binary expansion.
    """
    if isinstance(value, bool):
        raise InputParseError(field_name, value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(str(value).strip().replace(',', ''))
        except InvalidOperation:
            raise InputParseError(field_name, value) from None
    if not result.is_finite():
        raise InputParseError(field_name, value)
    return result


def parse_shares(field_name: str, value: Any) -> int:
    """Parse a share count. Whole numbers only."""
    if isinstance(value, bool):
        raise InputParseError(field_name, value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise InputParseError(field_name, value)
    try:
        return int(str(value).strip().replace(',', ''))
    except ValueError:
        raise InputParseError(field_name, value) from None


def parse_flag(field_name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ('1', 'true', 'yes', 'y', 'on'):
        return True
    if text in ('', '0', 'false', 'no', 'n', 'off'):
        return False
    raise InputParseError(field_name, value)


@dataclass(frozen=True)
class CalculationInput:
    """Everything the pricing engine needs for one vest event."""
    vcd_price: Decimal
    vesting_shares: int
    vest_day_price: Decimal
    medicare_rate: Decimal
    social_security_rate: Decimal
    federal_rate: Decimal
    salt_rate: Decimal
    shares_sold_for_taxes: int
    tax_sale_price: Decimal
    include_capital_gains: bool = False
    include_net_investment_tax: bool = False

    @classmethod
    def from_strings(cls, **raw: Any) -> 'CalculationInput':
        """Build an input from loosely typed values (CLI strings, JSON numbers).

        Raises:
            InputParseError: if a required field is missing or unparseable.
        """
        values: Dict[str, Any] = {}
        for name in DECIMAL_FIELDS + SHARE_FIELDS:
            value = raw.get(name)
            if value is None:
                raise InputParseError(name, value)
            if name in SHARE_FIELDS:
                values[name] = parse_shares(name, value)
            else:
                values[name] = parse_decimal(name, value)
        for name in FLAG_FIELDS:
            values[name] = parse_flag(name, raw.get(name, False))
        return cls(**values)

    def to_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for the calculator functions."""
        return {f.name: getattr(self, f.name) for f in dataclass_fields(self)}

    def validation_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``validate_inputs`` (no flags)."""
        kwargs = self.to_kwargs()
        for name in FLAG_FIELDS:
            kwargs.pop(name)
        return kwargs
