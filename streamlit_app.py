"""Streamlit frontend for the SAN fabric validator."""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Any

import pandas as pd
import streamlit as st

from app.services.fabric_ingestion_service import FabricFileFormatError
from app.services.fabric_validation_service import FabricValidationRun, FabricValidationService
from app.services.report_export_service import (
    MEDIA_TYPES,
    STORAGE_FILENAME_PREFIX,
    ReportExportService,
    flatten_result,
    flatten_storage_mapping,
)
from app.validators.structure_validator import FabricStructureError
from zoning.filters import ALL, ERRORS, ResultFilter, select_rows
from zoning.models import FinalValidation, ValidationResult, Verdict
from zoning.storage import StorageFilter

st.set_page_config(page_title="SAN Fabric Validator", page_icon="FC", layout="wide")


@st.cache_resource(show_spinner=False)
def _load_services() -> dict[str, Any]:
    """Build backend services once per Streamlit process."""
    return {
        "validation": FabricValidationService(),
        "export": ReportExportService(),
    }


def run_validation(data: bytes, filename: str, content_type: str | None = None) -> FabricValidationRun:
    """Thin frontend adapter that delegates all processing to backend services."""
    return _load_services()["validation"].run_bytes(
        data,
        filename=filename,
        content_type=content_type,
    )


def _results_frame(results: list[ValidationResult]) -> pd.DataFrame:
    return pd.DataFrame([flatten_result(result) for result in results])


def _wwn_frame(result: ValidationResult) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "WWN": info.wwn,
                "Fabric": info.fabric,
                "Logged In": "Yes" if info.is_logged_in else "NOT LOGGED IN",
            }
            for info in result.wwns
        ]
    )


def _render_validation(run: FabricValidationRun, exporter: ReportExportService) -> None:
    summary = run.summary

    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Hosts", summary.total)
    col2.metric("Good", summary.good, f"{summary.percentage_good}%")
    col3.metric("FAB-A bad", summary.fab_a_bad)
    col4.metric("FAB-B bad", summary.fab_b_bad)
    col5.metric("Both bad", summary.both_bad)
    st.caption(
        f"Rows: {summary.original_entries} read, {summary.duplicates_removed} duplicates removed, "
        f"{summary.unique_entries} unique."
    )

    with st.sidebar:
        st.header("Filters")
        search = st.text_input("Search host")
        status = st.selectbox(
            "Final status",
            options=[ALL, ERRORS, *[item.value for item in FinalValidation]],
        )
        fab_a = st.selectbox("FAB-A status", options=[ALL, *[item.value for item in Verdict]])
        fab_b = st.selectbox("FAB-B status", options=[ALL, *[item.value for item in Verdict]])

    result_filter = ResultFilter.from_params(search=search, status=status, fab_a=fab_a, fab_b=fab_b)
    results = run.filtered(result_filter)
    st.caption(f"Showing {len(results)} of {len(run.results)} results")

    if not results:
        st.info("No hosts match the current filters.")
        return

    event = st.dataframe(
        _results_frame(results),
        use_container_width=True,
        hide_index=True,
        on_select="rerun",
        selection_mode="multi-row",
        key="results_table",
    )
    selected_rows = list(event.selection.rows)
    export_rows = select_rows(results, selected_rows)
    if selected_rows:
        st.caption(f"{len(export_rows)} selected hosts will be exported")

    hosts = [result.host for result in results]
    default_index = selected_rows[0] if selected_rows and selected_rows[0] < len(hosts) else 0
    selected_host = st.selectbox("WWN details", options=hosts, index=default_index)
    selected = next(result for result in results if result.host == selected_host)
    st.dataframe(_wwn_frame(selected), use_container_width=True, hide_index=True)

    now = datetime.now()
    dcol1, dcol2 = st.columns(2)
    with dcol1:
        st.download_button(
            label="Download Excel report",
            data=exporter.export(export_rows, output_format="xlsx"),
            file_name=exporter.report_filename("xlsx", now=now),
            mime=MEDIA_TYPES["xlsx"],
            use_container_width=True,
        )
    with dcol2:
        st.download_button(
            label="Download CSV report",
            data=exporter.export(export_rows, output_format="csv"),
            file_name=exporter.report_filename("csv", now=now),
            mime=MEDIA_TYPES["csv"],
            use_container_width=True,
        )


def _render_storage(run: FabricValidationRun, exporter: ReportExportService) -> None:
    storage_summary = run.storage_summary

    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Servers", storage_summary.total_servers)
    col2.metric("Storage arrays", storage_summary.total_storages)
    col3.metric("Storage ports", storage_summary.total_paths)
    col4.metric("Healthy", storage_summary.healthy_servers)
    col5.metric("Unhealthy", storage_summary.unhealthy_servers)

    if not run.storage:
        st.info("No storage WWNs (starting with 5) found in this table.")
        return

    fabrics = sorted({fabric for mapping in run.storage for fabric in mapping.fabrics})
    fcol1, fcol2, fcol3 = st.columns(3)
    search = fcol1.text_input("Search server, storage or vendor", key="storage_search")
    fabric = fcol2.selectbox("Fabric", options=[ALL, *fabrics], key="storage_fabric")
    health = fcol3.selectbox("Health", options=[ALL, ERRORS], key="storage_health")

    storage_filter = StorageFilter.from_params(search=search, fabric=fabric, health=health)
    mappings = run.filtered_storage(storage_filter)
    st.caption(f"Showing {len(mappings)} of {len(run.storage)} servers")

    if not mappings:
        st.info("No servers match the current filters.")
        return

    st.dataframe(
        pd.DataFrame([flatten_storage_mapping(mapping) for mapping in mappings]),
        use_container_width=True,
        hide_index=True,
    )

    servers = [mapping.server for mapping in mappings]
    selected_server = st.selectbox("Connectivity", options=servers, key="storage_server")
    selected = next(mapping for mapping in mappings if mapping.server == selected_server)
    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Storage": link.storage,
                    "Fabric": link.fabric,
                    "Paths": f"{link.logged_in}/{link.total}",
                    "Status": "OK" if link.is_healthy else "ERROR",
                }
                for link in selected.connectivity()
            ]
        ),
        use_container_width=True,
        hide_index=True,
    )

    st.download_button(
        label="Download storage mapping CSV",
        data=exporter.export_storage(mappings, output_format="csv"),
        file_name=exporter.report_filename("csv", prefix=STORAGE_FILENAME_PREFIX),
        mime=MEDIA_TYPES["csv"],
    )


if "run" not in st.session_state:
    st.session_state.run = None
if "run_error" not in st.session_state:
    st.session_state.run_error = None
if "upload_hash" not in st.session_state:
    st.session_state.upload_hash = None


st.title("SAN Fabric Validator")
st.caption(
    "Valid per-fabric shapes: 2 logged in + 2 not logged in (AIX), "
    "or 1 logged in + 0 not logged in (ESXi/RHEL)."
)

uploaded_file = st.file_uploader("Upload zoning table", type=["csv", "xlsx"])
if uploaded_file is not None:
    uploaded_bytes = uploaded_file.getvalue()
    upload_hash = hashlib.sha256(uploaded_bytes).hexdigest()
    if upload_hash != st.session_state.upload_hash:
        st.session_state.upload_hash = upload_hash
        try:
            with st.spinner("Validating fabrics..."):
                st.session_state.run = run_validation(
                    uploaded_bytes, uploaded_file.name, uploaded_file.type
                )
            st.session_state.run_error = None
        except FabricStructureError as exc:
            st.session_state.run = None
            st.session_state.run_error = exc.messages
        except FabricFileFormatError as exc:
            st.session_state.run = None
            st.session_state.run_error = [str(exc)]
else:
    st.session_state.run = None
    st.session_state.run_error = None
    st.session_state.upload_hash = None

if st.session_state.run_error:
    for message in st.session_state.run_error:
        st.error(message)
elif st.session_state.run is None:
    st.info("Upload a CSV or XLSX zoning table to validate.")
else:
    current_run: FabricValidationRun = st.session_state.run
    report_exporter: ReportExportService = _load_services()["export"]
    validation_tab, storage_tab = st.tabs(["Validation", "Storage mapping"])
    with validation_tab:
        _render_validation(current_run, report_exporter)
    with storage_tab:
        _render_storage(current_run, report_exporter)
