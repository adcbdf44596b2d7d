"""Required sale price for RSU shares left after a sell-to-cover vest.

Withholding is taken on the actual vest day value, while the net income
target is benchmarked against the vesting commencement date (VCD) price.
The calculator answers: at what price must the remaining shares be sold
so the employee nets what they would have netted had the stock vested at
the VCD price, after crediting (or debiting) whatever cash the automatic
tax sale left over.

All amounts are ``Decimal``. Currency values round to cents with banker's
rounding; rates are kept at full precision.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import List, Optional

from model.CalculationInput import CalculationInput
from model.CalculationResult import CalculationResult
from model.PriceScenarios import PriceScenarios, Recommendation, WAIT, SELL, MATCH


NIIT_RATE = Decimal('0.038')
CURRENCY_QUANTUM = Decimal('0.01')

ZERO = Decimal('0')
ONE = Decimal('1')


class CapitalGainsRateError(ZeroDivisionError):
    """The capital gains rate leaves nothing of the gain after tax.

    Solving for the sale price divides by (1 - rate), so a rate of 100% or
    more has no answer.
    """

    def __init__(self, rate: Decimal):
        self.rate = rate
        super().__init__(f"Capital gains tax rate {rate} must be less than 1")


def round_currency(value: Decimal) -> Decimal:
    """Round to cents using banker's rounding (half to even)."""
    return value.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_EVEN)


def capital_gains_rate(federal_rate: Decimal, salt_rate: Decimal,
                       include_net_investment_tax: bool = False) -> Decimal:
    """Short-term capital gains rate: federal + SALT, plus NIIT if requested."""
    rate = federal_rate + salt_rate
    if include_net_investment_tax:
        rate += NIIT_RATE
    return rate


def _validate_tax_rate(rate: Decimal, name: str) -> Optional[str]:
    if not rate.is_finite() or rate < ZERO or rate > ONE:
        return f"{name} rate must be between 0 and 1"
    return None


def validate_inputs(vcd_price: Decimal,
                    vesting_shares: int,
                    vest_day_price: Decimal,
                    medicare_rate: Decimal,
                    social_security_rate: Decimal,
                    federal_rate: Decimal,
                    salt_rate: Decimal,
                    shares_sold_for_taxes: int,
                    tax_sale_price: Decimal) -> List[str]:
    """Check inputs for reasonable ranges.

    Every violated rule is reported, not just the first.

    Returns:
        List of human-readable error messages; empty when the inputs are valid.
    """
    errors = []

    if not vcd_price.is_finite() or vcd_price <= ZERO:
        errors.append("VCD price must be positive")
    if not vest_day_price.is_finite() or vest_day_price <= ZERO:
        errors.append("Vest day price must be positive")
    if not tax_sale_price.is_finite() or tax_sale_price <= ZERO:
        errors.append("Tax sale price must be positive")

    if vesting_shares <= 0:
        errors.append("Vesting shares must be positive")
    if shares_sold_for_taxes < 0:
        errors.append("Shares sold for taxes cannot be negative")
    if shares_sold_for_taxes > vesting_shares:
        errors.append("Shares sold for taxes cannot exceed vesting shares")

    for rate, name in ((medicare_rate, "Medicare"),
                       (social_security_rate, "Social Security"),
                       (federal_rate, "Federal tax"),
                       (salt_rate, "SALT")):
        error = _validate_tax_rate(rate, name)
        if error:
            errors.append(error)

    rates = (medicare_rate, social_security_rate, federal_rate, salt_rate)
    # A NaN or infinite rate is already reported above and cannot be summed
    if all(rate.is_finite() for rate in rates):
        if sum(rates, ZERO) > ONE:
            errors.append("Total tax rate cannot exceed 100%")

    return errors


def validate_capital_gains_rate(federal_rate: Decimal, salt_rate: Decimal,
                                include_net_investment_tax: bool = False) -> List[str]:
    """Reject capital gains rates the price adjustment cannot solve for."""
    if not (federal_rate.is_finite() and salt_rate.is_finite()):
        return []
    if capital_gains_rate(federal_rate, salt_rate, include_net_investment_tax) >= ONE:
        return ["Capital gains tax rate must be less than 100%"]
    return []


def calculate_required_sale_price(vcd_price: Decimal,
                                  vesting_shares: int,
                                  vest_day_price: Decimal,
                                  medicare_rate: Decimal,
                                  social_security_rate: Decimal,
                                  federal_rate: Decimal,
                                  salt_rate: Decimal,
                                  shares_sold_for_taxes: int,
                                  tax_sale_price: Decimal,
                                  include_capital_gains: bool = False,
                                  include_net_investment_tax: bool = False) -> CalculationResult:
    """Calculate the minimum sale price for the shares left after the tax sale.

    Callers are expected to run ``validate_inputs`` first. Zero remaining
    shares yields a required sale price of exactly 0.

    Raises:
        CapitalGainsRateError: capital gains are enabled, selling at the
            required price would realize a gain, and the capital gains rate
            is 100% or more.
    """
    shares = Decimal(vesting_shares)

    # Baseline (VCD) and actual (vest day) gross income
    gross_income_vcd = shares * vcd_price
    gross_income_vest_day = shares * vest_day_price

    # Withholding is on the vest day value. Round each line, then sum the
    # rounded lines so the breakdown foots to the total.
    federal_tax = round_currency(gross_income_vest_day * federal_rate)
    social_security_tax = round_currency(gross_income_vest_day * social_security_rate)
    medicare_tax = round_currency(gross_income_vest_day * medicare_rate)
    salt_tax = round_currency(gross_income_vest_day * salt_rate)
    tax_amount = federal_tax + social_security_tax + medicare_tax + salt_tax
    total_tax_rate = federal_rate + social_security_rate + medicare_rate + salt_rate

    # What the employee would have netted at the VCD price
    original_net_income_target = round_currency(gross_income_vcd - gross_income_vcd * total_tax_rate)

    shares_after_tax_sale = vesting_shares - shares_sold_for_taxes
    tax_sale_proceeds = Decimal(shares_sold_for_taxes) * tax_sale_price

    # Positive: surplus paid out as cash. Negative: withholding still owed.
    cash_distribution = round_currency(tax_sale_proceeds - tax_amount)
    adjusted_net_income_target = original_net_income_target - cash_distribution

    if shares_after_tax_sale > 0:
        required_sale_price = adjusted_net_income_target / Decimal(shares_after_tax_sale)
    else:
        required_sale_price = ZERO

    capital_gains_tax = None
    niit_tax = None
    if include_capital_gains and shares_after_tax_sale > 0:
        rate = capital_gains_rate(federal_rate, salt_rate, include_net_investment_tax)
        if required_sale_price > vest_day_price:
            # Solve target = P - (P - vest_day_price) * rate for P
            if rate >= ONE:
                raise CapitalGainsRateError(rate)
            target_net_per_share = adjusted_net_income_target / Decimal(shares_after_tax_sale)
            required_sale_price = (target_net_per_share - vest_day_price * rate) / (ONE - rate)

        if required_sale_price > vest_day_price:
            profit_per_share = required_sale_price - vest_day_price
            capital_gains_tax = round_currency(
                profit_per_share * (federal_rate + salt_rate) * shares_after_tax_sale)
            if include_net_investment_tax:
                niit_tax = round_currency(profit_per_share * NIIT_RATE * shares_after_tax_sale)

    adjusted_net_income_target = round_currency(adjusted_net_income_target)
    return CalculationResult(
        gross_income_vcd=round_currency(gross_income_vcd),
        gross_income_vest_day=round_currency(gross_income_vest_day),
        total_tax_rate=total_tax_rate,
        tax_amount=tax_amount,
        federal_tax=federal_tax,
        social_security_tax=social_security_tax,
        medicare_tax=medicare_tax,
        salt_tax=salt_tax,
        original_net_income_target=original_net_income_target,
        adjusted_net_income_target=adjusted_net_income_target,
        net_income_target=adjusted_net_income_target,
        shares_after_tax_sale=shares_after_tax_sale,
        tax_sale_proceeds=round_currency(tax_sale_proceeds),
        cash_distribution=cash_distribution,
        required_sale_price=round_currency(required_sale_price),
        capital_gains_tax=capital_gains_tax,
        niit_tax=niit_tax,
        vesting_shares=vesting_shares,
        shares_sold_for_taxes=shares_sold_for_taxes,
        vcd_price=vcd_price,
        vest_day_price=vest_day_price,
        tax_sale_price=tax_sale_price,
        medicare_rate=medicare_rate,
        social_security_rate=social_security_rate,
        federal_rate=federal_rate,
        salt_rate=salt_rate,
        include_capital_gains=include_capital_gains,
        include_net_investment_tax=include_net_investment_tax,
    )


def validate(calculation_input: CalculationInput) -> List[str]:
    """Validate a CalculationInput, including the capital gains rate when enabled."""
    errors = validate_inputs(**calculation_input.validation_kwargs())
    if calculation_input.include_capital_gains:
        errors.extend(validate_capital_gains_rate(
            calculation_input.federal_rate,
            calculation_input.salt_rate,
            calculation_input.include_net_investment_tax,
        ))
    return errors


def calculate(calculation_input: CalculationInput) -> CalculationResult:
    return calculate_required_sale_price(**calculation_input.to_kwargs())


def compare_price_scenarios(calculation_input: CalculationInput) -> PriceScenarios:
    """Required sale price without capital gains, with them, and with NIIT.

    The NIIT scenario is only computed when the input asks for NIIT.
    """
    kwargs = calculation_input.to_kwargs()
    kwargs.update(include_capital_gains=False, include_net_investment_tax=False)
    without_capital_gains = calculate_required_sale_price(**kwargs)

    kwargs.update(include_capital_gains=True)
    with_capital_gains = calculate_required_sale_price(**kwargs)

    with_niit = None
    if calculation_input.include_net_investment_tax:
        kwargs.update(include_net_investment_tax=True)
        with_niit = calculate_required_sale_price(**kwargs)

    return PriceScenarios(
        without_capital_gains=without_capital_gains,
        with_capital_gains=with_capital_gains,
        with_capital_gains_and_niit=with_niit,
    )


def recommend(result: CalculationResult) -> Recommendation:
    """Compare the required sale price against the vest day price."""
    vest_day_price = round_currency(result.vest_day_price)
    if result.required_sale_price > vest_day_price:
        return Recommendation(WAIT, result.required_sale_price - vest_day_price)
    if result.required_sale_price < vest_day_price:
        return Recommendation(SELL, vest_day_price - result.required_sale_price)
    return Recommendation(MATCH, Decimal('0.00'))
