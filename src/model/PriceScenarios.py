from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from model.CalculationResult import CalculationResult


WAIT = 'wait'
SELL = 'sell'
MATCH = 'match'


@dataclass(frozen=True)
class PriceScenarios:
    """Required sale price with each capital-gains option layered on.

    ``with_capital_gains_and_niit`` is None unless NIIT was requested.
    """
    without_capital_gains: CalculationResult
    with_capital_gains: CalculationResult
    with_capital_gains_and_niit: Optional[CalculationResult] = None

    @property
    def final(self) -> CalculationResult:
        return self.with_capital_gains_and_niit or self.with_capital_gains

    @property
    def capital_gains_impact(self) -> Decimal:
        """Per-share price increase caused by capital gains tax."""
        return self.with_capital_gains.required_sale_price - self.without_capital_gains.required_sale_price

    @property
    def niit_impact(self) -> Decimal:
        """Per-share price increase caused by NIIT (zero if not requested)."""
        if self.with_capital_gains_and_niit is None:
            return Decimal('0.00')
        return self.with_capital_gains_and_niit.required_sale_price - self.with_capital_gains.required_sale_price

    @property
    def total_impact(self) -> Decimal:
        return self.final.required_sale_price - self.without_capital_gains.required_sale_price


@dataclass(frozen=True)
class Recommendation:
    """What to do with the remaining shares relative to the vest day price.

    action is one of WAIT (price must rise by ``per_share``), SELL (up to
    ``per_share`` below the vest day price is acceptable) or MATCH.
    """
    action: str
    per_share: Decimal

    @property
    def message(self) -> str:
        if self.action == WAIT:
            return f"WAIT for higher price (+${self.per_share:,.2f}/share premium needed)"
        if self.action == SELL:
            return f"SELL NOW (can accept up to ${self.per_share:,.2f}/share discount)"
        return "SELL at vest day price (perfect match)"
