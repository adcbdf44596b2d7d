"""Field metadata for CalculationResult fields.

This module provides descriptions and short names for all result fields.
Short names are used as labels in reports and the shell 'show' command.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Label (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Inputs
    "vcd_price": FieldInfo("VCD Price", "Price per share on the vesting commencement date"),
    "vesting_shares": FieldInfo("Vesting Shares", "Number of shares vesting"),
    "vest_day_price": FieldInfo("Vest Day Price", "Market price per share on the vest date"),
    "shares_sold_for_taxes": FieldInfo("Shares Sold for Taxes", "Shares sold automatically to cover withholding"),
    "tax_sale_price": FieldInfo("Tax Sale Price", "Price per share realized in the sell-to-cover sale"),
    "federal_rate": FieldInfo("Federal Rate", "Federal income tax withholding rate"),
    "social_security_rate": FieldInfo("Social Security Rate", "Social Security withholding rate"),
    "medicare_rate": FieldInfo("Medicare Rate", "Medicare withholding rate"),
    "salt_rate": FieldInfo("SALT Rate", "State and local tax withholding rate"),
    "include_capital_gains": FieldInfo("Include Capital Gains", "Model short-term capital gains tax on profit above the vest day price"),
    "include_net_investment_tax": FieldInfo("Include NIIT", "Add the 3.8% net investment income tax to capital gains"),

    # Gross income
    "gross_income_vcd": FieldInfo("Gross at VCD", "Gross income if shares vested at the VCD price"),
    "gross_income_vest_day": FieldInfo("Gross at Vest", "Gross income at the vest day price (withholding base)"),

    # Withholding
    "total_tax_rate": FieldInfo("Total Rate", "Sum of the four withholding rates"),
    "tax_amount": FieldInfo("Total Withholding", "Total tax withheld (sum of the rounded lines)"),
    "federal_tax": FieldInfo("Federal Tax", "Federal income tax withheld"),
    "social_security_tax": FieldInfo("Social Security", "Social Security tax withheld"),
    "medicare_tax": FieldInfo("Medicare Tax", "Medicare tax withheld"),
    "salt_tax": FieldInfo("SALT Tax", "State and local tax withheld"),

    # Sell-to-cover
    "shares_after_tax_sale": FieldInfo("Remaining Shares", "Shares left after the sell-to-cover sale"),
    "tax_sale_proceeds": FieldInfo("Tax Sale Proceeds", "Proceeds of the sell-to-cover sale"),
    "cash_distribution": FieldInfo("Cash Distribution", "Tax sale proceeds minus withholding (negative means still owed)"),

    # Targets
    "original_net_income_target": FieldInfo("Original Target", "Net income had the vest day price equaled the VCD price"),
    "adjusted_net_income_target": FieldInfo("Adjusted Target", "Net income still needed from the remaining shares"),
    "net_income_target": FieldInfo("Target Net Income", "Net income the remaining shares must realize"),

    # Answer
    "required_sale_price": FieldInfo("Required Sale Price", "Minimum price per remaining share to reach the target"),
    "capital_gains_tax": FieldInfo("Capital Gains Tax", "Short-term capital gains tax on the profit (federal + SALT)"),
    "niit_tax": FieldInfo("NIIT", "Net investment income tax (3.8%) on the profit"),
}

CURRENCY_FIELDS = (
    "vcd_price",
    "vest_day_price",
    "tax_sale_price",
    "gross_income_vcd",
    "gross_income_vest_day",
    "tax_amount",
    "federal_tax",
    "social_security_tax",
    "medicare_tax",
    "salt_tax",
    "tax_sale_proceeds",
    "cash_distribution",
    "original_net_income_target",
    "adjusted_net_income_target",
    "net_income_target",
    "required_sale_price",
    "capital_gains_tax",
    "niit_tax",
)

RATE_FIELDS = (
    "federal_rate",
    "social_security_rate",
    "medicare_rate",
    "salt_rate",
    "total_tax_rate",
)


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def get_field_info(field_name: str) -> FieldInfo | None:
    """Get the full FieldInfo for a field, or None if not found."""
    return FIELD_METADATA.get(field_name)
