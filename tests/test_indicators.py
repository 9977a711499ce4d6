"""Tests for indicators."""
import pytest

from aggregator import aggregate
from data_loader import load
from indicators import NOT_AVAILABLE, compute_indicators, format_indicators, growth_rate
from tests.helpers import csv_source


def test_indicators_for_reference_year(story):
    ind = compute_indicators(story, 2021, 1980)
    assert ind.total_co2 == pytest.approx(3300 / 1e6)
    assert ind.temp_change == pytest.approx(1.06)
    assert ind.ch4 == pytest.approx(0.111)
    assert ind.population == pytest.approx(303 / 1e9)
    assert ind.coal_share == pytest.approx(1300 / 3300 * 100)
    assert ind.oil_gas_share == pytest.approx(1780 / 3300 * 100)
    assert ind.renewable_energy == pytest.approx(151 / 1e6)
    assert ind.growth == pytest.approx(230)
    assert ind.major_country == "A"
    assert ind.per_capita_country == "B"


def test_growth_example():
    assert growth_rate(3000, 1000) == pytest.approx(200)


def test_growth_undefined_for_zero_baseline():
    assert growth_rate(3000, 0) is None


def test_growth_unavailable_without_baseline(story):
    ind = compute_indicators(story, 2021, 1950)
    assert ind.growth is None
    assert ind.total_co2 is not None


def test_missing_reference_year_is_unavailable_not_zero(records):
    story = aggregate(records, reference_year=1999)
    ind = compute_indicators(story, 1999, 1980)
    values = format_indicators(ind)
    assert all(v == NOT_AVAILABLE for v in values.values())
    assert ind.total_co2 is None
    assert ind.growth is None
    assert ind.major_country is None


def test_zero_emissions_are_reported_as_zero():
    story = aggregate(load(csv_source("A,AAA,2021,0,0,0,0,0,0,0,0,0,0,0,0")))
    ind = compute_indicators(story, 2021, 1980)
    assert ind.total_co2 == 0
    assert ind.temp_change == 0
    assert ind.coal_share is None
    assert ind.oil_gas_share is None
    assert format_indicators(ind)["total_co2"] == "0.00 M"


def test_format_indicators(story):
    values = format_indicators(compute_indicators(story, 2021, 1980))
    assert values["total_co2"] == "0.00 M"
    assert values["temp_change"] == "1.06 °C"
    assert values["ch4"] == "0.11 K"
    assert values["coal_share"] == "39.4%"
    assert values["oil_gas_share"] == "53.9%"
    assert values["growth"] == "230%"
    assert values["major_country"] == "A"
