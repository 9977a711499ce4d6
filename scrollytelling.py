# scrollytelling.py
# Requirements: streamlit, pandas, plotly
# Run: streamlit run scrollytelling.py

import io
import logging

import streamlit as st

from aggregator import AggregationResult, aggregate
from charts import (
    CO2_TREND, CORRELATION, COUNTRY_SOURCES, PER_CAPITA_MAP, RENEWABLES, SOURCE_MIX, TOP_EMITTERS, ChartRenderer,
)
from config import ALL_COUNTRIES, BASELINE_YEAR, DATA_CSV, LOG_LEVEL, REFERENCE_YEAR, TITLE_FONT, TOP_N
from data_loader import LoadError, load
from indicators import compute_indicators, format_indicators
from scroll_controller import ScrollController

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("scrollytelling")

st.set_page_config(page_title="CO2 Story", page_icon="🌍", layout="wide")
st.markdown(
    f"<style>h1, h2 {{ font-family: {TITLE_FONT}; }}</style>",
    unsafe_allow_html=True,
)

# (section id, chart, title, text)
STORY = [
    ("section-1", CO2_TREND, "1️⃣ A century of rising emissions",
     "Global CO₂ emissions have climbed almost without pause. The line below adds up every record in the dataset, year by year."),
    ("section-2", SOURCE_MIX, "2️⃣ What we burn",
     "Coal, oil, gas and cement make up the bulk of those emissions. The stacked areas show how each source grew."),
    ("section-3", PER_CAPITA_MAP, "3️⃣ Who emits per person",
     "Emissions per person tell a different story from national totals. Drag the slider to travel through time."),
    ("section-4", TOP_EMITTERS, f"4️⃣ The top {TOP_N}",
     f"A handful of countries account for most of the emissions in {REFERENCE_YEAR}."),
    ("section-5", CORRELATION, "5️⃣ Emissions and warming",
     "Each bubble is a country: per-capita CO₂ against temperature change, sized by total emissions."),
    ("section-6", COUNTRY_SOURCES, "6️⃣ One country up close",
     "Pick a country to see where its emissions come from."),
    ("section-7", RENEWABLES, "7️⃣ The way out",
     "Renewable energy production is growing. Is it growing fast enough?"),
]


class PlaceholderSurface:
    """Draw target inside a Streamlit container; the chart slot is created on first draw."""

    def __init__(self, container):
        self.container = container
        self.slot = None

    def draw(self, fig):
        if self.slot is None:
            self.slot = self.container.empty()
        self.slot.plotly_chart(fig, width="stretch")


# --- Load data ---
@st.cache_resource(show_spinner="Loading dataset...", max_entries=8)
def build_story(source) -> AggregationResult:
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    return aggregate(load(source))


with st.sidebar:
    st.header("📤 Data")
    up = st.file_uploader("Upload CSV", type=["csv"])
    st.caption(f"Without an upload the story reads `{DATA_CSV}`.")

try:
    story = build_story(up.getvalue() if up is not None else str(DATA_CSV))
except LoadError:
    logger.exception("Could not load the dataset")
    st.title("Error loading the data")
    if up is not None:
        st.error("Sorry, the uploaded file could not be read. Check that it is a CSV with the expected columns.")
    else:
        st.error(f"Sorry, the data file could not be loaded. Make sure `{DATA_CSV.name}` exists in the `{DATA_CSV.parent}/` folder.")
    st.stop()

if story.empty:
    st.warning("The dataset has no usable rows.")

# --- STORY START ---
st.title("🌍 The CO₂ Story")
st.markdown("Scroll down the story: each chart appears as you reach its section.")

# KPIs
kpi = format_indicators(compute_indicators(story, REFERENCE_YEAR, BASELINE_YEAR))
c1, c2, c3, c4, c5 = st.columns(5)
c1.metric(f"Global CO₂ {REFERENCE_YEAR} (kt)", kpi["total_co2"])
c2.metric("Mean temperature change", kpi["temp_change"])
c3.metric("Methane (CH₄)", kpi["ch4"])
c4.metric("Population", kpi["population"])
c5.metric(f"Increase since {BASELINE_YEAR}", kpi["growth"])
c1, c2, c3, c4, c5 = st.columns(5)
c1.metric("Coal share", kpi["coal_share"])
c2.metric("Oil + gas share", kpi["oil_gas_share"])
c3.metric("Renewable energy", kpi["renewable_energy"])
c4.metric("Largest emitter", kpi["major_country"])
c5.metric("Largest per-capita emitter", kpi["per_capita_country"])

containers = {section_id: st.container() for section_id, *_ in STORY}
footer = st.container()

renderer = ChartRenderer(story, {chart: PlaceholderSurface(containers[sid]) for sid, chart, *_ in STORY})
controller: ScrollController = st.session_state.setdefault("scroll", ScrollController())

controller.bind("map_year", renderer.draw_per_capita_map)
controller.bind("scatter_country", renderer.draw_correlation)
controller.bind("source_country", renderer.draw_country_sources)


def section_box(section_id):
    _, _, title, text = next(s for s in STORY if s[0] == section_id)
    box = containers[section_id]
    box.header(title)
    box.markdown(text)
    return box


def show_map():
    box = section_box("section-3")
    bounds = story.year_bounds()
    if bounds is None:
        return
    lo, hi = bounds
    year = lo
    if lo < hi:
        year = box.slider("Year", min_value=lo, max_value=hi, value=min(max(REFERENCE_YEAR, lo), hi), key="map_year")
    controller.change("map_year", year)


def show_correlation():
    box = section_box("section-5")
    country = box.selectbox("Country", [ALL_COUNTRIES, *story.country_names], key="scatter_country")
    controller.change("scatter_country", country)


def show_country_sources():
    box = section_box("section-6")
    options = list(story.country_names)
    default = story.default_country()
    if default not in options:
        options.insert(0, default)
    country = box.selectbox("Country", options, index=options.index(default), key="source_country")
    controller.change("source_country", country)


def plain(section_id, draw):
    def show():
        section_box(section_id)
        draw()
    return show


controller.register("section-1", plain("section-1", renderer.draw_co2_trend))
controller.register("section-2", plain("section-2", renderer.draw_source_mix))
controller.register("section-3", show_map)
controller.register("section-4", plain("section-4", renderer.draw_top_emitters))
controller.register("section-5", show_correlation)
controller.register("section-6", show_country_sources)
controller.register("section-7", plain("section-7", renderer.draw_renewables))


def scroll_next():
    hidden = [sid for sid, *_ in STORY if not controller.is_revealed(sid)]
    if hidden:
        st.session_state["scrolled_into"] = [hidden[0]]


def scroll_all():
    st.session_state["scrolled_into"] = [sid for sid, *_ in STORY]


# Sections seen on earlier reruns are drawn again, then newly reached ones cross the threshold.
controller.replay()
for section_id in ["section-1", *st.session_state.pop("scrolled_into", [])]:
    controller.observe(section_id, 1.0)

with footer:
    if len(controller.revealed()) < len(STORY):
        b1, b2 = st.columns([1, 4])
        b1.button("Keep scrolling ↓", on_click=scroll_next)
        b2.button("Show the whole story", on_click=scroll_all)
    else:
        st.header("🧾 Downloadable tables")
        tab1, tab2 = st.tabs(["World totals by year", f"Countries in {REFERENCE_YEAR}"])
        with tab1:
            st.dataframe(story.world_totals)
            st.download_button("Download world totals CSV",
                               data=story.world_totals.to_csv(index=False),
                               file_name="world_totals_by_year.csv",
                               mime="text/csv")
        with tab2:
            latest = story.year_records(REFERENCE_YEAR)
            if latest is None:
                st.info(f"No records for {REFERENCE_YEAR}.")
            else:
                st.dataframe(latest)
                st.download_button(f"Download {REFERENCE_YEAR} CSV",
                                   data=latest.to_csv(index=False),
                                   file_name=f"countries_{REFERENCE_YEAR}.csv",
                                   mime="text/csv")
