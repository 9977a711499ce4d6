# config.py
import os
from pathlib import Path

# ---------- CONFIG - edit these ----------
DATA_CSV = Path(os.environ.get("CO2STORY_DATA", "data/MASTER.csv"))
LOG_LEVEL = os.environ.get("CO2STORY_LOG_LEVEL", "INFO")

REFERENCE_YEAR = 2021          # "current" snapshot
BASELINE_YEAR = 1980           # denominator for the growth KPI
AGGREGATE_ENTRIES = ("World", "EU-27")
FALLBACK_COUNTRY = "World"
ALL_COUNTRIES = "All countries"

TOP_N = 10
REVEAL_THRESHOLD = 0.2
# -----------------------------------------

# Theme
ACCENT = "#37b776"
TEXT_COLOR = "#c9d1d9"
GRID_COLOR = "#2a2a2a"
BODY_FONT = "Roboto, sans-serif"
TITLE_FONT = "Playfair Display, serif"

SOURCE_COLORS = {
    "Coal": "#0074D9",
    "Oil": "#FF4136",
    "Gas": "#FF851B",
    "Cement": "#AAAAAA",
}
PIE_COLORS = ["#37b776", "#4CAF50", "#8BC34A", "#C0C0C0"]
RENEWABLE_COLOR = "#4CAF50"
