"""Groups cleaned records by country and year and derives world totals."""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import pandas as pd

from config import AGGREGATE_ENTRIES, FALLBACK_COUNTRY, REFERENCE_YEAR

logger = logging.getLogger(__name__)

# world_totals column -> records column summed into it
SUMMED = {
    "total_co2": "total_co2",
    "coal": "coal_co2",
    "oil": "oil_co2",
    "gas": "gas_co2",
    "cement": "cement_co2",
    "ch4": "ch4",
    "population": "population",
    "renewable_energy": "renewable_energy",
}
WORLD_COLUMNS = ["year", *SUMMED, "temp_change"]


@dataclass(frozen=True, eq=False)
class AggregationResult:
    records: pd.DataFrame
    by_country: Mapping[str, pd.DataFrame]
    by_year: Mapping[int, pd.DataFrame]
    years: Tuple[int, ...]
    world_totals: pd.DataFrame
    country_names: Tuple[str, ...]
    reference_year: int
    max_co2: Optional[pd.Series]
    max_per_capita: Optional[pd.Series]

    def world_summary(self, year: int) -> Optional[pd.Series]:
        rows = self.world_totals[self.world_totals["year"] == year]
        if rows.empty:
            return None
        return rows.iloc[0]

    def year_records(self, year: int) -> Optional[pd.DataFrame]:
        return self.by_year.get(year)

    def country_records(self, country: str) -> Optional[pd.DataFrame]:
        return self.by_country.get(country)

    def year_bounds(self) -> Optional[Tuple[int, int]]:
        if not self.years:
            return None
        return self.years[0], self.years[-1]

    def default_country(self) -> str:
        """Country preselected in the country selector."""
        if self.max_co2 is None:
            return FALLBACK_COUNTRY
        return self.max_co2["country"]

    @property
    def empty(self) -> bool:
        return self.records.empty


def world_totals(records: pd.DataFrame) -> pd.DataFrame:
    """Per-year sums across all records, with the mean temperature change."""
    if records.empty:
        return pd.DataFrame(columns=WORLD_COLUMNS)
    grouped = records.groupby("year", sort=True)
    totals = grouped[list(SUMMED.values())].sum().rename(columns={v: k for k, v in SUMMED.items()})
    totals["temp_change"] = grouped["temp_change"].mean()
    return totals.reset_index()[WORLD_COLUMNS]


def country_names(records: pd.DataFrame, exclude=AGGREGATE_ENTRIES) -> Tuple[str, ...]:
    names = set(records["country"]) - set(exclude)
    return tuple(sorted(names))


def superlative(year_data: Optional[pd.DataFrame], column: str, exclude=()) -> Optional[pd.Series]:
    """Row with the largest ``column`` value, first one wins on ties."""
    if year_data is None:
        return None
    candidates = year_data[~year_data["country"].isin(exclude)]
    if candidates.empty:
        return None
    return candidates.loc[candidates[column].idxmax()]


def aggregate(records: pd.DataFrame, reference_year: int = REFERENCE_YEAR,
              exclude_aggregates: bool = True) -> AggregationResult:
    """Build the read-only aggregation every chart and KPI reads from.

    With ``exclude_aggregates`` the superlatives skip rollup rows such as
    "World" and "EU-27", the same way the country list does.
    """
    by_country = {
        country: group.sort_values("year", kind="stable")
        for country, group in records.groupby("country", sort=False)
    }
    by_year = {int(year): group for year, group in records.groupby("year", sort=True)}
    years = tuple(sorted(by_year))

    year_data = by_year.get(reference_year)
    exclude = AGGREGATE_ENTRIES if exclude_aggregates else ()
    max_co2 = superlative(year_data, "total_co2", exclude)
    max_per_capita = superlative(year_data, "per_capita_co2", exclude)
    if year_data is None:
        logger.warning("Reference year %s is not in the dataset", reference_year)

    result = AggregationResult(
        records=records,
        by_country=MappingProxyType(by_country),
        by_year=MappingProxyType(by_year),
        years=years,
        world_totals=world_totals(records),
        country_names=country_names(records),
        reference_year=reference_year,
        max_co2=max_co2,
        max_per_capita=max_per_capita,
    )
    logger.info("Aggregated %d countries over %d years", len(by_country), len(years))
    return result
