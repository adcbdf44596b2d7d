#!/usr/bin/env python3
"""Interactive command shell for working out an RSU sale price.

This module provides an interactive shell that holds the same fields as
the calculator form: set each input, then calculate to see the required
sale price for the shares left after the sell-to-cover sale. Rate
fields start at the reference defaults.

Usage:
    python src/shell.py

Commands:
    set <field> <value>     - Set an input field
    unset <field>           - Clear an input field
    show                    - Show current inputs
    fields                  - List input and result fields
    validate                - Check inputs without calculating
    calculate (calc)        - Validate and calculate
    get <fields>            - Show fields from the last result
    render <mode>           - Re-render the last result (Report, Summary, Json)
    reset                   - Restore defaults and clear the result
    help                    - Show help message
    exit/quit               - Exit the shell

Examples:
    > set vcd_price 100
    > set vesting_shares 100
    > set include_capital_gains yes
    > calc
    > get required_sale_price, capital_gains_tax
"""

import sys
import os
import cmd
import readline
from dataclasses import fields as dataclass_fields

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from calc.sale_price_calculator import validate, calculate, compare_price_scenarios, CapitalGainsRateError
from model.CalculationInput import CalculationInput, InputParseError, FLAG_FIELDS
from model.CalculationResult import CalculationResult
from model.field_metadata import CURRENCY_FIELDS, RATE_FIELDS, get_short_name, get_description
from render.renderers import RENDERER_REGISTRY, format_currency, format_percentage
from tax.WithholdingDetails import WithholdingDetails


INPUT_FIELDS = [
    'vcd_price',
    'vesting_shares',
    'vest_day_price',
    'medicare_rate',
    'social_security_rate',
    'federal_rate',
    'salt_rate',
    'shares_sold_for_taxes',
    'tax_sale_price',
    'include_capital_gains',
    'include_net_investment_tax',
]

PARSE_ERROR_MESSAGE = "Please ensure all fields have valid numeric values"


def get_result_fields() -> list:
    """Get list of all field names from the CalculationResult dataclass."""
    return [f.name for f in dataclass_fields(CalculationResult)]


def format_value(field_name: str, value) -> str:
    """Format a result value for display."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if field_name in CURRENCY_FIELDS:
        return format_currency(value)
    if field_name in RATE_FIELDS:
        return format_percentage(value)
    return str(value)


class SalePriceShell(cmd.Cmd):
    """Interactive shell for the required sale price calculator."""

    intro = """
RSU Sale Price Interactive Shell
================================
Type 'help' for available commands.
Type 'fields' to see input and result fields.
Type 'exit' or 'quit' to exit.
"""
    prompt = '> '

    def __init__(self, withholding: WithholdingDetails = None):
        super().__init__()
        self.withholding = withholding or WithholdingDetails()
        self.values: dict = {}
        self.result: CalculationResult | None = None
        self.scenarios = None
        self.result_fields = get_result_fields()
        self._reset_values()

    def _reset_values(self):
        """Rates from the reference file; everything else empty."""
        self.values = {name: str(rate) for name, rate in self.withholding.default_rates().items()}
        for name in FLAG_FIELDS:
            self.values[name] = 'no'
        self.result = None
        self.scenarios = None

    def preloop(self):
        """Set up readline before entering the command loop."""
        try:
            readline.set_completer_delims(' \t\n,')
            if 'libedit' in (readline.__doc__ or ''):
                readline.parse_and_bind("bind ^I rl_complete")
            else:
                readline.parse_and_bind("tab: complete")
        except (AttributeError, TypeError):
            pass  # readline might not be fully available

    def _build_input(self) -> CalculationInput | None:
        try:
            return CalculationInput.from_strings(**self.values)
        except InputParseError:
            print(PARSE_ERROR_MESSAGE)
            return None

    def do_set(self, arg: str):
        """Set an input field.

        Usage: set <field> <value>

        Examples:
            set vcd_price 100
            set federal_rate 0.22
            set include_capital_gains yes
        """
        parts = arg.split(None, 1)
        if len(parts) != 2:
            print("Usage: set <field> <value>")
            return
        name, value = parts[0], parts[1].strip()
        if name not in INPUT_FIELDS:
            print(f"Error: Unknown input field: {name}")
            print("Use 'fields' command to see input field names.")
            return
        self.values[name] = value
        # A changed input makes the previous result stale
        self.result = None
        self.scenarios = None

    def do_unset(self, arg: str):
        """Clear an input field.

        Usage: unset <field>
        """
        name = arg.strip()
        if name not in INPUT_FIELDS:
            print(f"Error: Unknown input field: {name}")
            return
        self.values.pop(name, None)
        self.result = None
        self.scenarios = None

    def do_show(self, arg: str):
        """Show the current input values."""
        print()
        for name in INPUT_FIELDS:
            value = self.values.get(name)
            shown = value if value not in (None, '') else '(not set)'
            print(f"  {get_short_name(name) + ':':<28} {shown}")
        print()

    def do_fields(self, arg: str):
        """List input and result fields with descriptions."""
        print()
        print("Inputs:")
        for name in INPUT_FIELDS:
            print(f"  {name:<30} {get_description(name)}")
        print()
        print("Results:")
        for name in self.result_fields:
            if name in INPUT_FIELDS:
                continue
            print(f"  {name:<30} {get_description(name)}")
        print()

    def do_validate(self, arg: str):
        """Check the inputs without calculating."""
        calculation_input = self._build_input()
        if calculation_input is None:
            return
        errors = validate(calculation_input)
        if errors:
            for error in errors:
                print(f"Error: {error}")
        else:
            print("Inputs are valid.")

    def do_calculate(self, arg: str):
        """Validate the inputs and calculate the required sale price.

        Usage: calculate [mode]

        mode is one of the render modes (default Report).
        """
        mode = arg.strip() or 'Report'
        if mode not in RENDERER_REGISTRY:
            print(f"Error: Unknown mode '{mode}'. Available: {', '.join(RENDERER_REGISTRY)}")
            return
        calculation_input = self._build_input()
        if calculation_input is None:
            return
        errors = validate(calculation_input)
        if errors:
            for error in errors:
                print(f"Error: {error}")
            return
        try:
            self.result = calculate(calculation_input)
            self.scenarios = (compare_price_scenarios(calculation_input)
                              if calculation_input.include_capital_gains else None)
        except CapitalGainsRateError as e:
            print(f"Error: {e}")
            return
        RENDERER_REGISTRY[mode](self.scenarios).render(self.result)

    def do_calc(self, arg: str):
        """Shortcut for calculate."""
        return self.do_calculate(arg)

    def do_get(self, arg: str):
        """Show field(s) from the last result.

        Usage: get <fields>

        Examples:
            get required_sale_price
            get federal_tax, salt_tax, tax_amount
        """
        if self.result is None:
            print("No result yet. Use 'calculate' first.")
            return
        field_names = [f.strip() for f in arg.split(',') if f.strip()]
        if not field_names:
            print("Error: Please specify at least one field.")
            return
        invalid_fields = [f for f in field_names if f not in self.result_fields]
        if invalid_fields:
            print(f"Error: Unknown field(s): {', '.join(invalid_fields)}")
            print("Use 'fields' command to see available field names.")
            return
        print()
        for name in field_names:
            print(f"  {get_short_name(name) + ':':<28} {format_value(name, getattr(self.result, name))}")
        print()

    def do_render(self, arg: str):
        """Re-render the last result.

        Usage: render <mode>   (Report, Summary, Json)
        """
        if self.result is None:
            print("No result yet. Use 'calculate' first.")
            return
        mode = arg.strip() or 'Report'
        if mode not in RENDERER_REGISTRY:
            print(f"Error: Unknown mode '{mode}'. Available: {', '.join(RENDERER_REGISTRY)}")
            return
        RENDERER_REGISTRY[mode](self.scenarios).render(self.result)

    def do_reset(self, arg: str):
        """Restore default rates, clear other inputs and the last result."""
        self._reset_values()
        print("Inputs reset.")

    def do_exit(self, arg: str):
        """Exit the shell."""
        print("Goodbye!")
        return True

    def do_quit(self, arg: str):
        """Exit the shell."""
        return self.do_exit(arg)

    def do_EOF(self, arg: str):
        """Handle Ctrl+D to exit."""
        print()  # Print newline for clean exit
        return self.do_exit(arg)

    def emptyline(self):
        """Do nothing on empty line."""
        pass

    def default(self, line: str):
        """Handle unknown commands."""
        print(f"Unknown command: {line}")
        print("Type 'help' for available commands.")

    def complete_set(self, text, line, begidx, endidx):
        return [f for f in INPUT_FIELDS if f.startswith(text)]

    def complete_unset(self, text, line, begidx, endidx):
        return [f for f in INPUT_FIELDS if f.startswith(text)]

    def complete_get(self, text, line, begidx, endidx):
        """Tab completion for the get command (case-insensitive substring match)."""
        if not text:
            return self.result_fields
        text_lower = text.lower()
        return [f for f in self.result_fields if text_lower in f.lower()]

    def complete_render(self, text, line, begidx, endidx):
        return [m for m in RENDERER_REGISTRY if m.startswith(text)]


def main():
    try:
        withholding = WithholdingDetails(sys.argv[1] if len(sys.argv) > 1 else None)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    shell = SalePriceShell(withholding)
    shell.cmdloop()


if __name__ == "__main__":
    main()
