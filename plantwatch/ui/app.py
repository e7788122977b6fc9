"""
PlantWatch - Streamlit Dashboard
================================

Monitoring view over the company plant documents.

Pages:
1. Plant Overview
2. Fault List
3. Tables
"""

import os

import numpy as np
import streamlit as st

from plantwatch.config import load_config
from plantwatch.plant import PlantStore, refresh
from plantwatch.reporting import fault_report, panel_frame, plant_summary
from plantwatch.ui.charts import string_power_figure, table_grid_figure


st.set_page_config(
    page_title="PlantWatch",
    page_icon="☀️",
    layout="wide",
    initial_sidebar_state="expanded"
)


def get_store() -> PlantStore:
    return PlantStore(os.environ.get("PLANTWATCH_DATA_DIR", "companies"))


def run_refresh(store: PlantStore, company_id: str, cycles: int = 1):
    """Advance the selected plant and persist it."""
    settings = load_config(os.environ.get("PLANTWATCH_CONFIG"))
    if "rng" not in st.session_state:
        st.session_state["rng"] = np.random.default_rng()
    details = store.load(company_id)
    for _ in range(cycles):
        refresh(details, rng=st.session_state["rng"], config=settings.engine)
    store.save(details)
    return details


def page_overview(details):
    """Plant Overview page."""
    st.header("📊 Plant Overview")
    summary = plant_summary(details)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Tables", summary["tables"])
    with col2:
        st.metric("Panels", summary["panels"])
    with col3:
        st.metric("Faulty Strings", summary["faulty_strings"])
    with col4:
        st.metric("Output", f"{summary['output_kw']:.2f} kW")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("🔵 Good", summary["good"])
    with col2:
        st.metric("🟠 Repairing", summary["repairing"])
    with col3:
        st.metric("🔴 Fault", summary["fault"])

    st.caption(f"Last updated: {summary['last_updated']}")

    st.divider()
    st.subheader("⚡ Panel Output")
    panels = panel_frame(details)
    if panels.empty:
        st.info("No tables configured")
    else:
        st.plotly_chart(string_power_figure(panels), use_container_width=True)


def page_faults(details):
    """Fault List page."""
    st.header("🚨 Fault List")
    faults = fault_report(details)
    if faults.empty:
        st.success("All strings healthy")
    else:
        st.dataframe(faults, hide_index=True, use_container_width=True)


def page_tables(details):
    """Tables page."""
    st.header("🔲 Tables")
    if not details.tables:
        st.info("No tables configured")
        return
    for table in details.tables:
        st.plotly_chart(table_grid_figure(table), use_container_width=True)


def main():
    """Main application."""
    st.title("☀️ PlantWatch")
    st.caption("Solar plant string monitoring")

    store = get_store()
    companies = store.list_companies()

    with st.sidebar:
        st.header("Company")
        if not companies:
            st.info("No companies found. Create one with `plantwatch create-company`.")
            return
        names = {c.company_id: f"{c.company_name} ({c.company_id})" for c in companies}
        company_id = st.selectbox("Select company", list(names), format_func=names.get)

        st.divider()
        cycles = st.number_input("Cycles", min_value=1, max_value=100, value=1)
        if st.button("🔄 Refresh Panel Data", type="primary", use_container_width=True):
            with st.spinner("Simulating..."):
                try:
                    run_refresh(store, company_id, int(cycles))
                    st.success("Panel data refreshed")
                except Exception as e:
                    st.error(f"Error: {str(e)}")

        st.divider()
        st.header("Navigation")
        page = st.radio(
            "Select Page",
            ["📊 Plant Overview", "🚨 Fault List", "🔲 Tables"]
        )

    details = store.load(company_id)
    if "Overview" in page:
        page_overview(details)
    elif "Fault" in page:
        page_faults(details)
    else:
        page_tables(details)


if __name__ == "__main__":
    main()
