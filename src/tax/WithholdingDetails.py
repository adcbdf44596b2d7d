import json
import os
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional


REFERENCE_ENV_VAR = 'RSU_SALE_PRICE_REFERENCE'

DEFAULT_REFERENCE_PATH = os.path.normpath(
    os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'withholding-rates.json'))

# reference file key -> calculator argument name
RATE_KEYS = {
    'federal': 'federal_rate',
    'socialSecurity': 'social_security_rate',
    'medicare': 'medicare_rate',
    'salt': 'salt_rate',
}


class WithholdingDetails:
    """Holds the default withholding rates applied to an RSU vest.

    Loads rates from the reference file so the command line, the shell and
    the MCP tools start from the same defaults. Rates are Decimals; the
    file may hold them as strings or numbers.
    """

    def __init__(self, reference_path: Optional[str] = None):
        """Initialize by loading the reference file.

        Args:
            reference_path: Path to the rates JSON. Defaults to the
                RSU_SALE_PRICE_REFERENCE environment variable, then to
                reference/withholding-rates.json.
        """
        self.reference_path = reference_path or os.environ.get(REFERENCE_ENV_VAR) or DEFAULT_REFERENCE_PATH
        self.rates: Dict[str, Decimal] = {}
        self._load()

    def _load(self):
        """Load rates from JSON. Missing keys fall back to zero."""
        if not os.path.exists(self.reference_path):
            raise FileNotFoundError(f"Withholding reference file not found: {self.reference_path}")
        with open(self.reference_path, 'r') as f:
            data = json.load(f, parse_float=Decimal)

        withholding = data.get('withholding', {})
        if not isinstance(withholding, dict):
            raise ValueError(f"{self.reference_path} must contain a 'withholding' object")

        for key, name in RATE_KEYS.items():
            value = withholding.get(key, 0)
            try:
                rate = Decimal(str(value))
            except InvalidOperation:
                raise ValueError(f"Invalid {key} rate in {self.reference_path}: {value!r}") from None
            if rate < 0 or rate > 1:
                raise ValueError(f"{key} rate in {self.reference_path} must be between 0 and 1, got {rate}")
            self.rates[name] = rate

    def default_rates(self) -> Dict[str, Decimal]:
        """Return the four default rates keyed by calculator argument name."""
        return dict(self.rates)

    def rate(self, name: str) -> Decimal:
        return self.rates[name]

    def total_rate(self) -> Decimal:
        return sum(self.rates.values(), Decimal('0'))
