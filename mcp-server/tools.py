"""RSU Sale Price Tools for MCP Server.

This module provides the tool implementations that wrap the required
sale price calculator and expose it through MCP. Arguments arrive as
JSON, so numbers may be strings, ints or floats; everything is parsed to
Decimal/int before it reaches the calculator.
"""

import os
import sys
from typing import Any, Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.sale_price_calculator import (
    validate,
    calculate,
    compare_price_scenarios,
    recommend,
    CapitalGainsRateError,
)
from model.CalculationInput import CalculationInput, InputParseError
from model.field_metadata import FIELD_METADATA
from render.renderers import scenarios_to_dict
from tax.WithholdingDetails import WithholdingDetails


PARSE_ERROR_MESSAGE = "Please ensure all fields have valid numeric values"


class SalePriceTools:
    """Tools that wrap the required sale price calculator for MCP access."""

    def __init__(self, reference_path: Optional[str] = None):
        """Initialize with the withholding reference file.

        Args:
            reference_path: Optional path to the withholding rates JSON.
        """
        self.withholding = WithholdingDetails(reference_path)

    def get_default_rates(self) -> Dict[str, Any]:
        """Default withholding rates applied when a rate argument is omitted."""
        rates = self.withholding.default_rates()
        rates['total_rate'] = self.withholding.total_rate()
        return rates

    def describe_fields(self) -> Dict[str, Any]:
        return {
            name: {'short_name': info.short_name, 'description': info.description}
            for name, info in FIELD_METADATA.items()
        }

    def _parse(self, arguments: Dict[str, Any]) -> CalculationInput:
        values = dict(self.withholding.default_rates())
        values.update({k: v for k, v in arguments.items() if v is not None})
        return CalculationInput.from_strings(**values)

    def _check(self, arguments: Dict[str, Any]):
        """Parse and validate. Returns (input, None) or (None, error payload)."""
        try:
            calculation_input = self._parse(arguments)
        except InputParseError as e:
            return None, {'valid': False, 'errors': [PARSE_ERROR_MESSAGE, str(e)]}
        errors = validate(calculation_input)
        if errors:
            return None, {'valid': False, 'errors': errors}
        return calculation_input, None

    def validate_inputs(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Validate inputs and report every violated rule."""
        calculation_input, failure = self._check(arguments)
        if failure:
            return failure
        return {'valid': True, 'errors': []}

    def calculate_required_sale_price(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Validate, then calculate. Returns every result field plus a recommendation."""
        calculation_input, failure = self._check(arguments)
        if failure:
            return failure
        try:
            result = calculate(calculation_input)
        except CapitalGainsRateError as e:
            return {'valid': False, 'errors': [str(e)]}

        payload = result.to_dict()
        payload['valid'] = True
        recommendation = recommend(result)
        payload['recommendation'] = {
            'action': recommendation.action,
            'per_share': recommendation.per_share,
            'message': recommendation.message,
        }
        return payload

    def compare_price_scenarios(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Required sale price without capital gains, with them, and with NIIT."""
        calculation_input, failure = self._check(arguments)
        if failure:
            return failure
        try:
            scenarios = compare_price_scenarios(calculation_input)
        except CapitalGainsRateError as e:
            return {'valid': False, 'errors': [str(e)]}
        payload = scenarios_to_dict(scenarios)
        payload['valid'] = True
        return payload
