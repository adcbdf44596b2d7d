"""Tests for the result renderers."""

import json
import os
import sys
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))

from calc.sale_price_calculator import calculate, compare_price_scenarios
from model.CalculationInput import CalculationInput
from render.renderers import (
    RENDERER_REGISTRY,
    JsonRenderer,
    ReportRenderer,
    SummaryRenderer,
    format_currency,
    format_percentage,
    to_jsonable,
)


def make_input(**overrides) -> CalculationInput:
    values = dict(
        vcd_price=Decimal('100'),
        vesting_shares=100,
        vest_day_price=Decimal('80'),
        medicare_rate=Decimal('0.0145'),
        social_security_rate=Decimal('0.062'),
        federal_rate=Decimal('0.22'),
        salt_rate=Decimal('0.05'),
        shares_sold_for_taxes=25,
        tax_sale_price=Decimal('80'),
    )
    values.update(overrides)
    return CalculationInput(**values)


def test_format_currency():
    assert format_currency(Decimal('1234.5')) == "$1,234.50"
    assert format_currency(Decimal('-965.00')) == "-$965.00"
    assert format_currency(Decimal('-0.00')) == "$0.00"


def test_format_percentage():
    assert format_percentage(Decimal('0.3465')) == "34.65%"
    assert format_percentage(Decimal('0.038')) == "3.80%"


def test_to_jsonable():
    assert to_jsonable({'a': Decimal('1.50'), 'b': [Decimal('2'), None], 'c': True}) == {
        'a': '1.50', 'b': ['2', None], 'c': True}


def test_registry():
    assert RENDERER_REGISTRY == {'Report': ReportRenderer, 'Summary': SummaryRenderer, 'Json': JsonRenderer}


class TestReportRenderer:

    def test_sections(self, capsys):
        ReportRenderer().render(calculate(make_input()))
        out = capsys.readouterr().out
        for heading in ("RSU REQUIRED SALE PRICE", "INPUT SUMMARY", "GROSS INCOME", "WITHHOLDING",
                        "SHARE SALE FOR TAXES", "NET INCOME TARGETS", "RESULT"):
            assert heading in out
        assert "PRICE ANALYSIS" not in out
        assert "$97.43" in out
        assert "-$772.00" in out
        assert "34.65%" in out
        assert "SELL NOW" not in out
        assert "WAIT for higher price (+$17.43/share premium needed)" in out

    def test_price_analysis_with_scenarios(self, capsys):
        calculation_input = make_input(include_capital_gains=True, include_net_investment_tax=True)
        ReportRenderer(compare_price_scenarios(calculation_input)).render(calculate(calculation_input))
        out = capsys.readouterr().out
        assert "PRICE ANALYSIS" in out
        assert "Capital gains tax applies (selling above vest day price)" in out
        assert "$509.96" in out
        assert "NIIT (3.80%)" in out
        assert "$71.77" in out
        assert "Total Capital Gains + NIIT" in out
        assert "$581.73" in out
        assert "Price scenarios:" in out
        assert "$97.43" in out
        assert "$103.87" in out
        assert "$105.18" in out
        assert "+$6.44" in out
        assert "+$1.31" in out
        assert "+$7.75" in out

    def test_price_analysis_without_gain(self, capsys):
        calculation_input = make_input(vest_day_price=Decimal('120'), tax_sale_price=Decimal('120'),
                                       include_capital_gains=True)
        ReportRenderer().render(calculate(calculation_input))
        out = capsys.readouterr().out
        assert "No capital gains tax (selling at/below vest day price)" in out
        assert "SELL NOW (can accept up to $17.43/share discount)" in out


def test_summary_renderer(capsys):
    SummaryRenderer().render(calculate(make_input(include_capital_gains=True)))
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Required Sale Price: $103.87"
    assert "Remaining Shares: 75" in out
    assert "Cash Distribution: -$772.00" in out
    assert "Capital Gains Tax: $483.41" in out
    assert not any(line.startswith("NIIT") for line in out)
    assert out[-1] == "WAIT for higher price (+$23.87/share premium needed)"


class TestJsonRenderer:

    def test_decimals_as_strings(self, capsys):
        JsonRenderer().render(calculate(make_input()))
        payload = json.loads(capsys.readouterr().out)
        assert payload['required_sale_price'] == '97.43'
        assert payload['cash_distribution'] == '-772.00'
        assert payload['vesting_shares'] == 100
        assert payload['capital_gains_tax'] is None
        assert payload['recommendation'] == {'action': 'wait', 'per_share': '17.43'}
        assert 'scenarios' not in payload

    def test_scenarios(self, capsys):
        calculation_input = make_input(include_capital_gains=True)
        JsonRenderer(compare_price_scenarios(calculation_input)).render(calculate(calculation_input))
        payload = json.loads(capsys.readouterr().out)
        assert payload['scenarios'] == {
            'without_capital_gains': '97.43',
            'with_capital_gains': '103.87',
            'capital_gains_impact': '6.44',
            'total_impact': '6.44',
        }


@pytest.mark.parametrize('mode', ['Report', 'Summary', 'Json'])
def test_every_mode_renders_all_shares_sold(mode, capsys):
    calculation_input = make_input(shares_sold_for_taxes=100, include_capital_gains=True)
    RENDERER_REGISTRY[mode]().render(calculate(calculation_input))
    assert capsys.readouterr().out
