from __future__ import annotations

import logging
import time

import pandas as pd
import streamlit as st

from cargo_loader import (
    Dimensions,
    PackingOptions,
    PackingResult,
    build_container_figure,
    build_container_plan,
    build_template_workbook,
    container_plan_html,
    items_to_frame,
    read_cargo_workbook,
    result_to_workbook,
    run_packing,
    sample_cargo,
)
from cargo_loader.constants import DEFAULT_CONTAINER_DIMS, DEFAULT_MAX_CONTAINERS

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Cargo Loading Planner", layout="wide")


@st.cache_data(show_spinner=False)
def load_cargo(file_bytes: bytes) -> pd.DataFrame:
    return read_cargo_workbook(file_bytes)


@st.cache_data(show_spinner=False)
def template_bytes() -> bytes:
    return build_template_workbook()


def read_options() -> PackingOptions:
    st.sidebar.header("Container")
    length = st.sidebar.number_input("Length (mm)", min_value=1.0, value=float(DEFAULT_CONTAINER_DIMS["length"]))
    width = st.sidebar.number_input("Width (mm)", min_value=1.0, value=float(DEFAULT_CONTAINER_DIMS["width"]))
    height = st.sidebar.number_input("Height (mm)", min_value=1.0, value=float(DEFAULT_CONTAINER_DIMS["height"]))

    st.sidebar.header("Loading rules")
    spacing = st.sidebar.number_input("Box spacing (mm)", min_value=0.0, value=0.0, step=10.0)
    allow_stacking = st.sidebar.checkbox("Allow stacking", value=True)
    min_containers = st.sidebar.number_input("Min containers", min_value=1, value=1, step=1)
    max_containers = st.sidebar.number_input("Max containers", min_value=1, value=DEFAULT_MAX_CONTAINERS, step=1)

    if st.sidebar.button("Re-optimize"):
        st.session_state["seed"] = st.session_state.get("seed", 0) + 1

    return PackingOptions(
        container_dims=Dimensions(length, width, height),
        spacing=spacing,
        allow_stacking=allow_stacking,
        min_containers=int(min_containers),
        max_containers=int(max_containers),
        seed=st.session_state.get("seed", 0),
    )


def render_result(result: PackingResult, runtime_seconds: float) -> None:
    st.subheader("Results")
    metric_cols = st.columns(6)
    metric_cols[0].metric("Total Boxes", int(result.metrics["total_items"]))
    metric_cols[1].metric("Loaded", int(result.metrics["packed_items"]))
    metric_cols[2].metric("Unloaded", int(result.metrics["unpacked_items"]))
    metric_cols[3].metric("Volume Used", f"{result.metrics['volume_utilization'] * 100:.1f}%")
    metric_cols[4].metric(
        "Containers", f"{int(result.metrics['containers_used'])}/{int(result.metrics['max_containers'])}"
    )
    metric_cols[5].metric("Runtime (s)", f"{runtime_seconds:.2f}")

    for message in result.warnings:
        st.warning(message)

    st.markdown("**Container Summary**")
    st.dataframe(result.container_summary, use_container_width=True)

    if result.containers:
        container_ids = [container.id for container in result.containers]
        selected_id = st.selectbox("Select a container for 3D visualization", container_ids, index=0)
        container = next(container for container in result.containers if container.id == selected_id)
        if container.safety_metrics is not None:
            st.info(f"Safety score {container.safety_metrics.score:.1f}/10: {container.safety_metrics.description}")
        st.plotly_chart(build_container_figure(container), use_container_width=True)
        st.plotly_chart(build_container_plan(container), use_container_width=True)
        st.download_button(
            label=f"Download Container #{container.id} Plan (HTML)",
            data=container_plan_html(container),
            file_name=f"container_{container.id}_plan.html",
            mime="text/html",
        )
        st.markdown("**Placements**")
        st.dataframe(result.placements.loc[result.placements["container_id"] == selected_id], use_container_width=True)
    else:
        st.warning("No boxes could be loaded. Check the container dimensions and the cargo list.")

    if not result.unpacked.empty:
        st.markdown("**Unloaded Boxes**")
        st.dataframe(result.unpacked, use_container_width=True)

    st.download_button(
        label="Download Loading Plan (Excel)",
        data=result_to_workbook(result),
        file_name="loading_plan.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


def main() -> None:
    st.title("Cargo Loading Planner")
    st.write(
        "Upload an `.xlsx` cargo list (columns `ID`, `Length`, `Width`, `Height`, `Weight` in mm and kg) "
        "or use the sample crates. The plan is recomputed whenever the settings change."
    )

    options = read_options()

    st.download_button(
        label="Download Cargo Template",
        data=template_bytes(),
        file_name="cargo_box_list.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    uploaded_file = st.file_uploader("Upload cargo list", type=["xlsx"])
    if uploaded_file is None:
        cargo_df = items_to_frame(sample_cargo())
    else:
        try:
            cargo_df = load_cargo(uploaded_file.getvalue())
        except ValueError as error:
            st.error(str(error))
            return
        if cargo_df.empty:
            st.error("The uploaded sheet has no boxes with positive dimensions.")
            return

    st.markdown("**Cargo Preview**")
    st.dataframe(cargo_df.head(15), use_container_width=True)

    start_time = time.perf_counter()
    try:
        result = run_packing(cargo_df, options)
    except ValueError as error:
        st.error(str(error))
        return
    runtime_seconds = time.perf_counter() - start_time

    render_result(result, runtime_seconds)


if __name__ == "__main__":
    main()
