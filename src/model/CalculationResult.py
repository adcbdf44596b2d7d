"""Result record for a required sale price calculation.

Every intermediate value is kept so callers and renderers can show (and
tests can assert on) each step of the calculation.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CalculationResult:
    """Snapshot of one calculation. Currency fields are rounded to cents."""

    # Gross income
    gross_income_vcd: Decimal
    gross_income_vest_day: Decimal

    # Withholding
    total_tax_rate: Decimal  # unrounded sum of the four rates
    tax_amount: Decimal  # sum of the four rounded lines below
    federal_tax: Decimal
    social_security_tax: Decimal
    medicare_tax: Decimal
    salt_tax: Decimal

    # Targets
    original_net_income_target: Decimal
    adjusted_net_income_target: Decimal
    net_income_target: Decimal

    # Sell-to-cover
    shares_after_tax_sale: int
    tax_sale_proceeds: Decimal
    cash_distribution: Decimal  # negative when the tax sale fell short

    # Answer
    required_sale_price: Decimal
    capital_gains_tax: Optional[Decimal]
    niit_tax: Optional[Decimal]

    # Inputs, echoed at source precision
    vesting_shares: int
    shares_sold_for_taxes: int
    vcd_price: Decimal
    vest_day_price: Decimal
    tax_sale_price: Decimal
    medicare_rate: Decimal
    social_security_rate: Decimal
    federal_rate: Decimal
    salt_rate: Decimal
    include_capital_gains: bool = False
    include_net_investment_tax: bool = False

    @property
    def has_capital_gains(self) -> bool:
        return self.capital_gains_tax is not None

    @property
    def total_capital_gains_tax(self) -> Decimal:
        """Capital gains tax plus NIIT; absent lines count as zero."""
        return (self.capital_gains_tax or Decimal('0')) + (self.niit_tax or Decimal('0'))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
