"""Renderer classes for displaying required sale price results.

This module contains renderer classes that handle the presentation logic
for a calculation. Each renderer takes a CalculationResult (and, when
capital gains are modeled, the PriceScenarios comparison) and prints it.
"""

import json
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Optional

from calc.sale_price_calculator import NIIT_RATE, recommend
from model.CalculationResult import CalculationResult
from model.PriceScenarios import PriceScenarios
from model.field_metadata import get_short_name


def format_currency(value: Decimal) -> str:
    """Format as dollars with thousands separators, e.g. -$965.00."""
    if value < 0:
        return f"-${-value:,.2f}"
    # abs() drops the sign of a negative zero
    return f"${abs(value):,.2f}"


def format_percentage(value: Decimal) -> str:
    """Format a decimal fraction as a percentage, e.g. 0.3465 -> 34.65%."""
    return f"{value * 100:.2f}%"


def to_jsonable(value: Any) -> Any:
    """Convert Decimals (recursively) to strings so no precision is lost."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def scenarios_to_dict(scenarios: PriceScenarios) -> Dict[str, Any]:
    data = {
        'without_capital_gains': scenarios.without_capital_gains.required_sale_price,
        'with_capital_gains': scenarios.with_capital_gains.required_sale_price,
        'capital_gains_impact': scenarios.capital_gains_impact,
        'total_impact': scenarios.total_impact,
    }
    if scenarios.with_capital_gains_and_niit is not None:
        data['with_capital_gains_and_niit'] = scenarios.with_capital_gains_and_niit.required_sale_price
        data['niit_impact'] = scenarios.niit_impact
    return data


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    def __init__(self, scenarios: Optional[PriceScenarios] = None):
        """Initialize with the optional capital gains comparison.

        Args:
            scenarios: Prices without/with capital gains (and NIIT), shown
                when capital gains are modeled.
        """
        self.scenarios = scenarios

    @abstractmethod
    def render(self, data: CalculationResult) -> None:
        """Render the result to output.

        Args:
            data: The CalculationResult to display
        """
        pass


class ReportRenderer(BaseRenderer):
    """Renderer for the full sectioned breakdown."""

    def _line(self, label: str, value: str) -> None:
        print(f"  {label + ':':<40} {value:>15}")

    def render(self, data: CalculationResult) -> None:
        print()
        print("=" * 60)
        print(f"{'RSU REQUIRED SALE PRICE':^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("INPUT SUMMARY")
        print("-" * 60)
        self._line(get_short_name('vesting_shares'), str(data.vesting_shares))
        self._line(get_short_name('vcd_price'), format_currency(data.vcd_price))
        self._line(get_short_name('vest_day_price'), format_currency(data.vest_day_price))
        self._line(get_short_name('tax_sale_price'), format_currency(data.tax_sale_price))
        self._line(get_short_name('shares_sold_for_taxes'), str(data.shares_sold_for_taxes))
        print()
        self._line("Federal", format_percentage(data.federal_rate))
        self._line("Social Security", format_percentage(data.social_security_rate))
        self._line("Medicare", format_percentage(data.medicare_rate))
        self._line("SALT", format_percentage(data.salt_rate))
        print(f"  {'-' * 40}")
        self._line("Total", format_percentage(data.total_tax_rate))

        print()
        print("-" * 60)
        print("GROSS INCOME")
        print("-" * 60)
        self._line("At VCD Price", format_currency(data.gross_income_vcd))
        self._line("At Vest Day Price", format_currency(data.gross_income_vest_day))

        print()
        print("-" * 60)
        print("WITHHOLDING")
        print("-" * 60)
        self._line(get_short_name('federal_tax'), format_currency(data.federal_tax))
        self._line(get_short_name('social_security_tax'), format_currency(data.social_security_tax))
        self._line(get_short_name('medicare_tax'), format_currency(data.medicare_tax))
        self._line(get_short_name('salt_tax'), format_currency(data.salt_tax))
        print(f"  {'-' * 40}")
        self._line(get_short_name('tax_amount'), format_currency(data.tax_amount))

        print()
        print("-" * 60)
        print("SHARE SALE FOR TAXES")
        print("-" * 60)
        self._line(get_short_name('tax_sale_proceeds'), format_currency(data.tax_sale_proceeds))
        self._line(get_short_name('cash_distribution'), format_currency(data.cash_distribution))
        self._line(get_short_name('shares_after_tax_sale'), str(data.shares_after_tax_sale))

        print()
        print("-" * 60)
        print("NET INCOME TARGETS")
        print("-" * 60)
        self._line(get_short_name('original_net_income_target'), format_currency(data.original_net_income_target))
        self._line(get_short_name('adjusted_net_income_target'), format_currency(data.adjusted_net_income_target))

        if data.include_capital_gains:
            self._render_capital_gains(data)

        print()
        print("=" * 60)
        print("RESULT")
        print("=" * 60)
        self._line(get_short_name('net_income_target'), format_currency(data.net_income_target))
        self._line(get_short_name('shares_after_tax_sale'), str(data.shares_after_tax_sale))
        self._line(get_short_name('required_sale_price'), format_currency(data.required_sale_price))
        print()
        print(f"  {recommend(data).message}")
        print("=" * 60)

    def _render_capital_gains(self, data: CalculationResult) -> None:
        print()
        print("-" * 60)
        print("PRICE ANALYSIS")
        print("-" * 60)
        if data.capital_gains_tax is None:
            print("  No capital gains tax (selling at/below vest day price)")
            return

        print("  Capital gains tax applies (selling above vest day price)")
        self._line(get_short_name('capital_gains_tax'), format_currency(data.capital_gains_tax))
        if data.niit_tax is not None:
            self._line(f"NIIT ({format_percentage(NIIT_RATE)})", format_currency(data.niit_tax))
            self._line("Total Capital Gains + NIIT", format_currency(data.total_capital_gains_tax))

        if self.scenarios is None:
            return
        scenarios = self.scenarios
        print()
        print("  Price scenarios:")
        self._line("No Capital Gains", format_currency(scenarios.without_capital_gains.required_sale_price))
        self._line("+ Capital Gains", format_currency(scenarios.with_capital_gains.required_sale_price))
        if scenarios.with_capital_gains_and_niit is not None:
            self._line("+ Capital Gains + NIIT",
                       format_currency(scenarios.with_capital_gains_and_niit.required_sale_price))
        print()
        print("  Impact per share:")
        self._line("Capital Gains", "+" + format_currency(scenarios.capital_gains_impact))
        if scenarios.with_capital_gains_and_niit is not None:
            self._line("NIIT", "+" + format_currency(scenarios.niit_impact))
            self._line("Total Impact", "+" + format_currency(scenarios.total_impact))


class SummaryRenderer(BaseRenderer):
    """Renderer for the handful of values needed to act on a vest."""

    def render(self, data: CalculationResult) -> None:
        print(f"{get_short_name('required_sale_price')}: {format_currency(data.required_sale_price)}")
        print(f"{get_short_name('shares_after_tax_sale')}: {data.shares_after_tax_sale}")
        print(f"{get_short_name('net_income_target')}: {format_currency(data.net_income_target)}")
        print(f"{get_short_name('cash_distribution')}: {format_currency(data.cash_distribution)}")
        if data.capital_gains_tax is not None:
            print(f"{get_short_name('capital_gains_tax')}: {format_currency(data.capital_gains_tax)}")
        if data.niit_tax is not None:
            print(f"{get_short_name('niit_tax')}: {format_currency(data.niit_tax)}")
        print(recommend(data).message)


class JsonRenderer(BaseRenderer):
    """Renderer that prints the result as JSON. Decimals are emitted as strings."""

    def render(self, data: CalculationResult) -> None:
        payload = data.to_dict()
        if self.scenarios is not None:
            payload['scenarios'] = scenarios_to_dict(self.scenarios)
        recommendation = recommend(data)
        payload['recommendation'] = {'action': recommendation.action, 'per_share': recommendation.per_share}
        print(json.dumps(to_jsonable(payload), indent=2))


RENDERER_REGISTRY = {
    'Report': ReportRenderer,
    'Summary': SummaryRenderer,
    'Json': JsonRenderer,
}
