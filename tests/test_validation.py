"""Tests for input validation."""

import os
import sys
from decimal import Decimal

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.sale_price_calculator import validate_inputs, validate_capital_gains_rate, validate
from model.CalculationInput import CalculationInput


def valid_kwargs(**overrides):
    kwargs = dict(
        vcd_price=Decimal('100'),
        vesting_shares=100,
        vest_day_price=Decimal('100'),
        medicare_rate=Decimal('0.0145'),
        social_security_rate=Decimal('0.062'),
        federal_rate=Decimal('0.22'),
        salt_rate=Decimal('0.05'),
        shares_sold_for_taxes=25,
        tax_sale_price=Decimal('100'),
    )
    kwargs.update(overrides)
    return kwargs


def test_valid_inputs():
    assert validate_inputs(**valid_kwargs()) == []


def test_negative_vcd_price():
    assert validate_inputs(**valid_kwargs(vcd_price=Decimal('-100'))) == ["VCD price must be positive"]


def test_zero_prices():
    errors = validate_inputs(**valid_kwargs(vcd_price=Decimal('0'), vest_day_price=Decimal('0'),
                                            tax_sale_price=Decimal('0')))
    assert errors == [
        "VCD price must be positive",
        "Vest day price must be positive",
        "Tax sale price must be positive",
    ]


def test_zero_vesting_shares():
    errors = validate_inputs(**valid_kwargs(vesting_shares=0, shares_sold_for_taxes=0))
    assert errors == ["Vesting shares must be positive"]


def test_negative_shares_sold():
    assert validate_inputs(**valid_kwargs(shares_sold_for_taxes=-1)) == ["Shares sold for taxes cannot be negative"]


def test_shares_sold_exceed_vesting():
    errors = validate_inputs(**valid_kwargs(shares_sold_for_taxes=101))
    assert errors == ["Shares sold for taxes cannot exceed vesting shares"]


def test_all_shares_sold_is_valid():
    assert validate_inputs(**valid_kwargs(shares_sold_for_taxes=100)) == []


def test_rate_out_of_range():
    errors = validate_inputs(**valid_kwargs(medicare_rate=Decimal('-0.01'), social_security_rate=Decimal('1.5'),
                                            federal_rate=Decimal('0'), salt_rate=Decimal('0')))
    assert "Medicare rate must be between 0 and 1" in errors
    assert "Social Security rate must be between 0 and 1" in errors
    assert "Total tax rate cannot exceed 100%" in errors


def test_federal_and_salt_rate_names():
    errors = validate_inputs(**valid_kwargs(federal_rate=Decimal('1.1'), salt_rate=Decimal('-0.1')))
    assert "Federal tax rate must be between 0 and 1" in errors
    assert "SALT rate must be between 0 and 1" in errors


def test_rate_bounds_are_inclusive():
    errors = validate_inputs(**valid_kwargs(federal_rate=Decimal('1'), salt_rate=Decimal('0'),
                                            medicare_rate=Decimal('0'), social_security_rate=Decimal('0')))
    assert errors == []


def test_total_rate_over_100_percent():
    errors = validate_inputs(**valid_kwargs(federal_rate=Decimal('0.6'), salt_rate=Decimal('0.4')))
    assert errors == ["Total tax rate cannot exceed 100%"]


def test_all_errors_reported():
    errors = validate_inputs(**valid_kwargs(vcd_price=Decimal('-1'), vesting_shares=-5,
                                            tax_sale_price=Decimal('0'), federal_rate=Decimal('2')))
    assert len(errors) == 6
    assert errors[0] == "VCD price must be positive"


def test_nan_price_is_reported():
    assert validate_inputs(**valid_kwargs(vcd_price=Decimal('NaN'))) == ["VCD price must be positive"]


def test_non_finite_values_are_reported():
    errors = validate_inputs(**valid_kwargs(vest_day_price=Decimal('Infinity'), tax_sale_price=Decimal('sNaN'),
                                            federal_rate=Decimal('NaN'), salt_rate=Decimal('-Infinity')))
    assert errors == [
        "Vest day price must be positive",
        "Tax sale price must be positive",
        "Federal tax rate must be between 0 and 1",
        "SALT rate must be between 0 and 1",
    ]


def test_non_finite_capital_gains_rate_left_to_rate_check():
    assert validate_capital_gains_rate(Decimal('NaN'), Decimal('0.05'), include_net_investment_tax=True) == []


def test_capital_gains_rate():
    assert validate_capital_gains_rate(Decimal('0.22'), Decimal('0.05')) == []
    assert validate_capital_gains_rate(Decimal('0.6'), Decimal('0.4')) == [
        "Capital gains tax rate must be less than 100%"]
    assert validate_capital_gains_rate(Decimal('0.6'), Decimal('0.38'), include_net_investment_tax=True) == [
        "Capital gains tax rate must be less than 100%"]
    assert validate_capital_gains_rate(Decimal('0.6'), Decimal('0.38')) == []


def test_validate_checks_capital_gains_only_when_enabled():
    kwargs = valid_kwargs(federal_rate=Decimal('0.6'), salt_rate=Decimal('0.38'),
                          medicare_rate=Decimal('0'), social_security_rate=Decimal('0'))
    assert validate(CalculationInput(**kwargs)) == []
    assert validate(CalculationInput(**kwargs, include_capital_gains=True)) == []
    assert validate(CalculationInput(**kwargs, include_capital_gains=True, include_net_investment_tax=True)) == [
        "Capital gains tax rate must be less than 100%"]
