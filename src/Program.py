import sys
import argparse
from decimal import Decimal

from calc.sale_price_calculator import validate, calculate, compare_price_scenarios, CapitalGainsRateError
from model.CalculationInput import CalculationInput, InputParseError, parse_decimal, parse_shares
from render.renderers import RENDERER_REGISTRY
from tax.WithholdingDetails import WithholdingDetails


def _decimal_arg(text: str) -> Decimal:
    try:
        return parse_decimal('value', text)
    except InputParseError:
        raise argparse.ArgumentTypeError(f"invalid decimal value: {text!r}") from None


def _shares_arg(text: str) -> int:
    try:
        return parse_shares('value', text)
    except InputParseError:
        raise argparse.ArgumentTypeError(f"invalid share count: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rsu-sale-price',
        description='Calculate the minimum sale price for RSU shares remaining after a sell-to-cover vest',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Report   Print the full breakdown with price analysis (default)
  Summary  Print the required sale price and key values only
  Json     Print the result as JSON

Rates default to reference/withholding-rates.json (or the file named by
--reference or RSU_SALE_PRICE_REFERENCE).

Examples:
  rsu-sale-price -v 100 -s 100 -p 80 -x 25 -a 80
  rsu-sale-price -v 100 -s 100 -p 80 -x 25 -a 80 -c -n
  rsu-sale-price -v 64.62 -s 551 -p 89.70 -x 166 -a 91.4334 -t 0 --mode Json
        """
    )
    parser.add_argument('-v', '--vcd-price', type=_decimal_arg, required=True,
                        help='VCD (vesting commencement date) price per share')
    parser.add_argument('-s', '--vesting-shares', type=_shares_arg, required=True,
                        help='Number of shares vesting')
    parser.add_argument('-p', '--vest-day-price', type=_decimal_arg, required=True,
                        help='Share price on vest day')
    parser.add_argument('-m', '--medicare-rate', type=_decimal_arg,
                        help='Medicare tax rate as a decimal, e.g. 0.0145 for 1.45%%')
    parser.add_argument('-o', '--social-security-rate', type=_decimal_arg,
                        help='Social Security tax rate as a decimal, e.g. 0.062 for 6.2%%')
    parser.add_argument('-r', '--federal-rate', type=_decimal_arg,
                        help='Federal tax rate as a decimal, e.g. 0.22 for 22%%')
    parser.add_argument('-t', '--salt-rate', type=_decimal_arg,
                        help='SALT (state and local tax) rate as a decimal, e.g. 0.05 for 5%%')
    parser.add_argument('-x', '--shares-sold-for-taxes', type=_shares_arg, required=True,
                        help='Number of shares sold for tax withholding')
    parser.add_argument('-a', '--tax-sale-price', type=_decimal_arg, required=True,
                        help='Price per share when sold for taxes')
    parser.add_argument('-c', '--include-capital-gains', action='store_true',
                        help='Include short-term capital gains tax (federal + SALT rates)')
    parser.add_argument('-n', '--include-net-investment-tax', action='store_true',
                        help='Include the 3.8%% net investment income tax on capital gains')
    parser.add_argument('--mode', '-M',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Report',
                        help='Output mode: Report (default), Summary or Json')
    parser.add_argument('--reference',
                        help='Path to a withholding rates JSON file')
    return parser


def build_input(args: argparse.Namespace, withholding: WithholdingDetails) -> CalculationInput:
    """Combine parsed flags with the reference rates for any rate not given."""
    def rate(name: str) -> Decimal:
        value = getattr(args, name)
        return value if value is not None else withholding.rate(name)

    return CalculationInput(
        vcd_price=args.vcd_price,
        vesting_shares=args.vesting_shares,
        vest_day_price=args.vest_day_price,
        medicare_rate=rate('medicare_rate'),
        social_security_rate=rate('social_security_rate'),
        federal_rate=rate('federal_rate'),
        salt_rate=rate('salt_rate'),
        shares_sold_for_taxes=args.shares_sold_for_taxes,
        tax_sale_price=args.tax_sale_price,
        include_capital_gains=args.include_capital_gains,
        include_net_investment_tax=args.include_net_investment_tax,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.include_net_investment_tax and not args.include_capital_gains:
        print("Note: --include-net-investment-tax only applies with --include-capital-gains")

    try:
        withholding = WithholdingDetails(args.reference)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    calculation_input = build_input(args, withholding)

    errors = validate(calculation_input)
    if errors:
        for error in errors:
            print(f"Error: {error}")
        sys.exit(1)

    try:
        result = calculate(calculation_input)
        scenarios = compare_price_scenarios(calculation_input) if calculation_input.include_capital_gains else None
    except CapitalGainsRateError as e:
        print(f"Error: {e}")
        sys.exit(1)

    renderer = RENDERER_REGISTRY[args.mode](scenarios)
    renderer.render(result)


if __name__ == "__main__":
    main()
