"""Streamlit form for submitting and browsing incident reports."""

import asyncio
import logging
from typing import Any, Coroutine

import streamlit as st

from incident_report.config.settings import settings
from incident_report.errors import BackendIOFailure, InvalidReport, LocationError
from incident_report.location.provider import create_location_provider
from incident_report.maps import build_map_url
from incident_report.service import ReportFormService, format_subtitle
from incident_report.storage.backends import create_backend
from incident_report.storage.repository import ReportStore

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Incident Report", page_icon="🚨", layout="centered")


def _event_loop() -> asyncio.AbstractEventLoop:
    """Per-session loop so backend connections stay bound to one loop."""
    if "event_loop" not in st.session_state:
        st.session_state["event_loop"] = asyncio.new_event_loop()
    return st.session_state["event_loop"]


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    return _event_loop().run_until_complete(coro)


def _get_service() -> ReportFormService:
    if "service" not in st.session_state:
        store = ReportStore(create_backend(settings), key=settings.reports_key)
        try:
            _run(store.load())
        except BackendIOFailure as e:
            logger.error(f"Could not load reports: {e}")
            st.session_state["load_error"] = str(e)
        st.session_state["service"] = ReportFormService(
            store,
            create_location_provider(settings),
            open_map_on_submit=False,
        )
    return st.session_state["service"]


service = _get_service()

st.title("Incident Report")

if st.session_state.get("load_error"):
    st.warning(f"Saved reports could not be loaded: {st.session_state['load_error']}")

if st.session_state.get("flash"):
    level, message = st.session_state.pop("flash")
    getattr(st, level)(message)

# ── Report form ─────────────────────────────────────────────

# Inputs are cleared only after a saved submission; must run before the
# widgets are created.
if st.session_state.pop("clear_form", False):
    st.session_state["report_title"] = ""
    st.session_state["report_description"] = ""

with st.form(key="report_form"):
    title = st.text_input("Title", key="report_title")
    description = st.text_area("Description", height=100, key="report_description")
    submitted = st.form_submit_button("Submit Report")

if submitted:
    with st.spinner("Getting your location..."):
        try:
            result = _run(service.submit(title, description))
        except InvalidReport as e:
            for message in e.errors:
                st.error(message)
        except LocationError as e:
            st.error(f"Error: {e}")
        except BackendIOFailure as e:
            st.error(f"Report kept for this session but not saved: {e}")
        else:
            report = result.report
            st.session_state["clear_form"] = True
            st.session_state["flash"] = ("success", "Report submitted")
            if settings.open_map_on_submit:
                st.session_state["last_map_url"] = build_map_url(
                    report.latitude, report.longitude
                )
            st.rerun()

if st.session_state.get("last_map_url"):
    st.link_button("View on map", st.session_state.pop("last_map_url"))

# ── Submitted reports ───────────────────────────────────────

reports = service.store.snapshot()
if reports:
    st.markdown("---")
    st.subheader("Submitted Reports:")

    for index, report in enumerate(reports):
        with st.container(border=True):
            cols = st.columns([6, 1, 1])
            with cols[0]:
                st.markdown(f"**{report.title}**")
                st.text(format_subtitle(report))
            with cols[1]:
                st.link_button("🗺️", build_map_url(report.latitude, report.longitude))
            with cols[2]:
                if st.button("🗑️", key=f"delete_{index}"):
                    try:
                        _run(service.delete(index))
                    except BackendIOFailure as e:
                        st.session_state["flash"] = ("warning", f"Report deleted for this session only: {e}")
                    else:
                        st.session_state["flash"] = ("success", "Report deleted")
                    st.rerun()
