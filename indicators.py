"""Headline KPIs for the reference year."""
from dataclasses import dataclass
from typing import Dict, Optional

from aggregator import AggregationResult
from config import BASELINE_YEAR, REFERENCE_YEAR

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class Indicators:
    reference_year: int
    baseline_year: int
    total_co2: Optional[float] = None         # million kt
    temp_change: Optional[float] = None       # mean °C
    ch4: Optional[float] = None               # thousand
    population: Optional[float] = None        # billion
    coal_share: Optional[float] = None        # %
    oil_gas_share: Optional[float] = None     # %
    renewable_energy: Optional[float] = None  # million
    growth: Optional[float] = None            # % since baseline year
    major_country: Optional[str] = None
    per_capita_country: Optional[str] = None


def _share(part: float, total: float) -> Optional[float]:
    if total == 0:
        return None
    return part / total * 100


def growth_rate(reference_total: float, baseline_total: float) -> Optional[float]:
    if baseline_total == 0:
        return None
    return (reference_total - baseline_total) / baseline_total * 100


def compute_indicators(aggregation: AggregationResult, reference_year: int = REFERENCE_YEAR,
                       baseline_year: int = BASELINE_YEAR) -> Indicators:
    """Derive the KPI panel values.

    Every field is None when its input is missing, so that a real zero
    emission stays distinguishable from "no data".
    """
    latest = aggregation.world_summary(reference_year)
    names = {}
    if reference_year == aggregation.reference_year:
        if aggregation.max_co2 is not None:
            names["major_country"] = aggregation.max_co2["country"]
        if aggregation.max_per_capita is not None:
            names["per_capita_country"] = aggregation.max_per_capita["country"]

    if latest is None:
        return Indicators(reference_year, baseline_year, **names)

    total = float(latest["total_co2"])
    growth = None
    start = aggregation.world_summary(baseline_year)
    if start is not None:
        growth = growth_rate(total, float(start["total_co2"]))

    return Indicators(
        reference_year,
        baseline_year,
        total_co2=total / 1e6,
        temp_change=float(latest["temp_change"]),
        ch4=float(latest["ch4"]) / 1e3,
        population=float(latest["population"]) / 1e9,
        coal_share=_share(float(latest["coal"]), total),
        oil_gas_share=_share(float(latest["oil"] + latest["gas"]), total),
        renewable_energy=float(latest["renewable_energy"]) / 1e6,
        growth=growth,
        **names,
    )


def _fmt(value: Optional[float], template: str) -> str:
    return NOT_AVAILABLE if value is None else template.format(value)


def format_indicators(ind: Indicators) -> Dict[str, str]:
    return {
        "total_co2": _fmt(ind.total_co2, "{:.2f} M"),
        "temp_change": _fmt(ind.temp_change, "{:.2f} °C"),
        "ch4": _fmt(ind.ch4, "{:.2f} K"),
        "population": _fmt(ind.population, "{:.2f} Bn"),
        "coal_share": _fmt(ind.coal_share, "{:.1f}%"),
        "oil_gas_share": _fmt(ind.oil_gas_share, "{:.1f}%"),
        "renewable_energy": _fmt(ind.renewable_energy, "{:.2f} M"),
        "growth": _fmt(ind.growth, "{:.0f}%"),
        "major_country": ind.major_country or NOT_AVAILABLE,
        "per_capita_country": ind.per_capita_country or NOT_AVAILABLE,
    }
