"""Loads the per-country CO2/energy CSV into a clean records DataFrame."""
import logging

import pandas as pd

logger = logging.getLogger(__name__)

# CSV header -> records column
COLUMNS = {
    "Country": "country",
    "ISO.alpha-3": "iso3",
    "Year": "year",
    "Total.CO2": "total_co2",
    "Coal.CO2": "coal_co2",
    "Oil.CO2": "oil_co2",
    "Gas.CO2": "gas_co2",
    "Cement.CO2": "cement_co2",
    "Flaring.CO2": "flaring_co2",
    "Per.Capita.CO2": "per_capita_co2",
    "Temp_Change": "temp_change",
    "Total.Energy.Production": "total_energy",
    "Renewables.and.other.Energy": "renewable_energy",
    "CH4": "ch4",
    "Population": "population",
}
REQUIRED = ["Country", "Year", "Total.CO2", "Per.Capita.CO2", "Temp_Change"]
TEXT_COLUMNS = {"Country", "ISO.alpha-3"}
NUMERIC_COLUMNS = [c for c in COLUMNS if c not in TEXT_COLUMNS]


class LoadError(Exception):
    """The dataset could not be read or does not look like the expected CSV."""


def read_raw(source) -> pd.DataFrame:
    """Read every cell as text so that parsing rules stay in our hands."""
    try:
        return pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8")
    except (OSError, UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise LoadError(f"Could not read dataset {source!r}: {e}") from e


def clean(raw: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in REQUIRED if c not in raw.columns]
    if missing:
        raise LoadError(f"Missing columns in dataset: {missing}")

    df = raw.copy()
    absent = [c for c in COLUMNS if c not in df.columns]
    if absent:
        logger.warning("Dataset has no %s columns, treating them as empty", absent)
        for col in absent:
            df[col] = ""

    df = df[list(COLUMNS)].fillna("")
    for col in TEXT_COLUMNS:
        df[col] = df[col].astype(str).str.strip()
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col].astype(str).str.strip(), errors="coerce")

    keep = (
        (df["Country"] != "")
        & df["Year"].notna()
        & (df["Year"] % 1 == 0)
        & df["Total.CO2"].notna()
        & df["Per.Capita.CO2"].notna()
        & df["Temp_Change"].notna()
    )
    dropped = int((~keep).sum())
    if dropped:
        logger.debug("Dropped %d malformed rows", dropped)

    records = df[keep].rename(columns=COLUMNS).reset_index(drop=True)
    records["year"] = records["year"].astype(int)
    return records


def load(source) -> pd.DataFrame:
    """Load and clean the dataset at ``source`` (a path or an open file).

    Rows missing a country or year, or whose total CO2, per-capita CO2 or
    temperature change is not a number, are dropped silently. An empty cell in
    one of those three columns counts as not a number. Raises
    ``LoadError`` when the source cannot be read or lacks the required header.
    """
    records = clean(read_raw(source))
    logger.info("Loaded %d records", len(records))
    return records
