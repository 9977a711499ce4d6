"""Plotly figures for each story section, drawn at most once per parameter set."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from aggregator import AggregationResult
from config import (
    ACCENT, AGGREGATE_ENTRIES, ALL_COUNTRIES, BODY_FONT, GRID_COLOR, PIE_COLORS,
    RENEWABLE_COLOR, SOURCE_COLORS, TEXT_COLOR, TITLE_FONT, TOP_N,
)

logger = logging.getLogger(__name__)

# Stacking order of the source charts, bottom first
SOURCES = ["Coal", "Oil", "Gas", "Cement"]

CO2_TREND = "co2_trend"
SOURCE_MIX = "source_mix"
PER_CAPITA_MAP = "per_capita_map"
TOP_EMITTERS = "top_emitters"
CORRELATION = "correlation"
COUNTRY_SOURCES = "country_sources"
RENEWABLES = "renewables"
CHARTS = (CO2_TREND, SOURCE_MIX, PER_CAPITA_MAP, TOP_EMITTERS, CORRELATION, COUNTRY_SOURCES, RENEWABLES)

AXIS = dict(gridcolor=GRID_COLOR, zerolinecolor=GRID_COLOR, tickfont=dict(color=TEXT_COLOR), title=dict(standoff=15))


def base_layout() -> dict:
    """Dark theme shared by every chart; each figure layers its own overrides on top."""
    return dict(
        font=dict(family=BODY_FONT, color=TEXT_COLOR),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        xaxis=AXIS,
        yaxis=AXIS,
        title=dict(font=dict(family=TITLE_FONT, size=24, color=ACCENT), pad=dict(t=20)),
        hovermode="closest",
        margin=dict(t=80, b=60, l=60, r=20),
    )


def styled(fig: go.Figure, **overrides) -> go.Figure:
    fig.update_layout(base_layout())
    fig.update_layout(**overrides)
    return fig


# --- shaping ---

def source_mix_frame(world_totals: pd.DataFrame) -> pd.DataFrame:
    """World totals in long form: one row per year and emission source."""
    wide = world_totals[["year", *[s.lower() for s in SOURCES]]]
    wide = wide.rename(columns={s.lower(): s for s in SOURCES})
    return wide.melt(id_vars="year", value_vars=SOURCES, var_name="source", value_name="kt")


def per_capita_frame(aggregation: AggregationResult, year: int) -> Optional[pd.DataFrame]:
    year_data = aggregation.year_records(year)
    if year_data is None:
        return None
    shown = year_data[(year_data["iso3"] != "") & (year_data["per_capita_co2"] > 0)]
    return shown if not shown.empty else None


def top_emitters_frame(aggregation: AggregationResult, n: int = TOP_N) -> Optional[pd.DataFrame]:
    year_data = aggregation.year_records(aggregation.reference_year)
    if year_data is None:
        return None
    countries = year_data[~year_data["country"].isin(AGGREGATE_ENTRIES) & (year_data["total_co2"] > 0)]
    return countries.sort_values("total_co2", ascending=False, kind="stable").head(n)


def correlation_frame(aggregation: AggregationResult, country: str = ALL_COUNTRIES) -> Optional[pd.DataFrame]:
    year_data = aggregation.year_records(aggregation.reference_year)
    if year_data is None:
        return None
    if country != ALL_COUNTRIES:
        year_data = year_data[year_data["country"] == country]
    if year_data.empty:
        return None
    return year_data.assign(marker_size=year_data["total_co2"].clip(lower=0))


def country_sources_frame(aggregation: AggregationResult, country: str) -> Optional[pd.DataFrame]:
    country_data = aggregation.country_records(country)
    if country_data is None:
        return None
    latest = country_data[country_data["year"] == aggregation.reference_year]
    if latest.empty:
        return None
    row = latest.iloc[0]
    values = [row[f"{s.lower()}_co2"] for s in SOURCES]
    return pd.DataFrame({"source": SOURCES, "kt": values}).fillna(0)


# --- render state ---

class RenderStatus(Enum):
    NOT_RENDERED = "not-rendered"
    RENDERED = "rendered"


@dataclass(frozen=True)
class RenderState:
    status: RenderStatus = RenderStatus.NOT_RENDERED
    params: tuple = ()

    def matches(self, params: tuple) -> bool:
        return self.status is RenderStatus.RENDERED and self.params == params


class ChartRenderer:
    """Draws the story charts onto named surfaces.

    A surface is anything with a ``draw(figure)`` method (a Streamlit
    placeholder in the app, a recorder in tests). A draw is skipped when the
    chart was already drawn with the same parameters or when its data is
    missing; every ``draw_*`` method returns whether it drew.
    """

    def __init__(self, aggregation: AggregationResult, surfaces: Mapping[str, object]):
        self.aggregation = aggregation
        self.surfaces = surfaces
        self.states = {chart: RenderState() for chart in CHARTS}

    def _draw(self, chart: str, params: tuple, build: Callable[[], Optional[go.Figure]]) -> bool:
        if self.states[chart].matches(params):
            return False
        surface = self.surfaces.get(chart)
        if surface is None:
            logger.warning("No surface for chart %s", chart)
            return False
        fig = build()
        if fig is None:
            logger.debug("No data for chart %s %s", chart, params)
            return False
        surface.draw(fig)
        self.states[chart] = RenderState(RenderStatus.RENDERED, params)
        return True

    def draw_co2_trend(self) -> bool:
        def build():
            totals = self.aggregation.world_totals
            if totals.empty:
                return None
            fig = px.line(totals, x="year", y="total_co2")
            fig.update_traces(line_color=ACCENT, line_width=4, name="Global emissions")
            return styled(fig, title_text="Global CO2 emissions over time (kt)",
                          xaxis_title="Year", yaxis_title="Total CO2 (kt)", showlegend=False)
        return self._draw(CO2_TREND, (), build)

    def draw_source_mix(self) -> bool:
        def build():
            totals = self.aggregation.world_totals
            if totals.empty:
                return None
            fig = px.area(
                source_mix_frame(totals), x="year", y="kt", color="source",
                category_orders={"source": SOURCES}, color_discrete_map=SOURCE_COLORS,
            )
            fig.update_traces(line_width=0)
            return styled(
                fig, title_text="Global CO2 emissions by source (kt)",
                xaxis_title="Year", yaxis_title="Total CO2 (kt)",
                legend=dict(x=0, y=1.1, orientation="h", title_text="", font=dict(color=TEXT_COLOR)),
                margin=dict(t=100),
            )
        return self._draw(SOURCE_MIX, (), build)

    def draw_per_capita_map(self, year: int) -> bool:
        def build():
            data = per_capita_frame(self.aggregation, year)
            if data is None:
                return None
            fig = px.choropleth(
                data, locations="iso3", locationmode="ISO-3", color="per_capita_co2",
                hover_name="country", color_continuous_scale="Viridis", projection="natural earth",
                labels={"per_capita_co2": "Per-capita CO2 (t)"},
            )
            fig.update_traces(marker_line_color="white", marker_line_width=0.5)
            fig.update_geos(showcoastlines=True, coastlinecolor="#555", showland=True, landcolor="#444",
                            showframe=False, bgcolor="rgba(0,0,0,0)")
            return styled(fig, title_text=f"Per-capita CO2 emissions by country in {year}",
                          height=600, margin=dict(t=80, b=0, l=0, r=0))
        return self._draw(PER_CAPITA_MAP, (year,), build)

    def draw_top_emitters(self) -> bool:
        year = self.aggregation.reference_year

        def build():
            data = top_emitters_frame(self.aggregation)
            if data is None or data.empty:
                return None
            fig = px.bar(data, x="total_co2", y="country", orientation="h")
            fig.update_traces(marker_color=ACCENT)
            return styled(fig, title_text=f"Top {TOP_N} CO2 emitting countries in {year}",
                          xaxis_title="Total CO2 (kt)", yaxis=dict(title_text="", automargin=True, autorange="reversed"),
                          margin=dict(l=150))
        return self._draw(TOP_EMITTERS, (), build)

    def draw_correlation(self, country: str = ALL_COUNTRIES) -> bool:
        year = self.aggregation.reference_year

        def build():
            data = correlation_frame(self.aggregation, country)
            if data is None:
                return None
            fig = px.scatter(
                data, x="per_capita_co2", y="temp_change", size="marker_size", color="temp_change",
                hover_name="country", color_continuous_scale="Viridis", size_max=60, opacity=0.8,
                labels={"per_capita_co2": "Per-capita CO2 (t)", "temp_change": "Temperature change (°C)",
                        "marker_size": "Total CO2 (kt)"},
            )
            return styled(fig, title_text=f"Per-capita CO2 vs. temperature change ({year})")
        return self._draw(CORRELATION, (country,), build)

    def draw_country_sources(self, country: str) -> bool:
        year = self.aggregation.reference_year

        def build():
            data = country_sources_frame(self.aggregation, country)
            if data is None:
                return None
            fig = px.pie(data, names="source", values="kt", hole=0.4, color_discrete_sequence=PIE_COLORS)
            fig.update_traces(hoverinfo="label+percent", textinfo="label+percent", textposition="inside",
                              insidetextfont=dict(color="white", size=14))
            return styled(fig, title_text=f"CO2 emission sources for {country} ({year})", showlegend=True,
                          legend=dict(x=0.1, y=1.1, font=dict(color=TEXT_COLOR)),
                          margin=dict(t=80, b=50, l=0, r=0))
        return self._draw(COUNTRY_SOURCES, (country,), build)

    def draw_renewables(self) -> bool:
        def build():
            totals = self.aggregation.world_totals
            if totals.empty:
                return None
            fig = px.line(totals, x="year", y="renewable_energy")
            fig.update_traces(line_color=RENEWABLE_COLOR, line_width=4, name="Global renewable energy")
            return styled(fig, title_text="Renewable energy production over time",
                          xaxis_title="Year", yaxis_title="Renewable energy", showlegend=False)
        return self._draw(RENEWABLES, (), build)
