"""
CV Intake dashboard – Streamlit frontend.
No business logic in layout; fetching and filtering live in services.
"""

import asyncio
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import streamlit as st
from pydantic import ValidationError

from config import FEATURE_FLAGS, SUPABASE_ACCESS_TOKEN
from rules.presets import DEFAULT_PRESET, get_preset, presets_for_vertical, resolve_effective_rules
from rules.verticals import DEFAULT_VERTICAL, VERTICALS, get_vertical
from schemas.candidate import CVUpload
from services.candidate_helpers import candidate_highlights, get_processing_status
from services.dashboard_filters import (
    AdvancedFilterState,
    DashboardView,
    apply_dashboard_filters,
    apply_flag_overrides,
    dashboard_stats,
    extract_source_email_options,
)
from services.day_range import FetchResult, FetchStatus, fetch_day_result
from services.export_service import export_candidates_csv, export_filename
from services.intake_client import build_client, fetch_candidate_counts, submit_cv_upload
from utils.date_utils import format_day
from utils.helpers import normalize_to_list
from utils.logger import get_logger

logger = get_logger(__name__)

VIEW_LABELS = {DashboardView.BEST: "Best candidates", DashboardView.ALL_UPLOADS: "All uploads"}
COUNT_WINDOW_DAYS = 7


def _run(coro):
    """Run a coroutine from Streamlit's sync context on a fresh event loop."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _load_day(day: str, token: str) -> FetchResult:
    async with build_client(access_token=token) as client:
        return await fetch_day_result(day, client=client)


async def _load_counts(start: str, end: str, token: str) -> Dict[str, int]:
    async with build_client(access_token=token) as client:
        return await fetch_candidate_counts(start, end, client=client)


async def _upload(file_bytes: bytes, filename: str, user_id: str, source_email: Optional[str], token: str):
    async with build_client(access_token=token) as client:
        return await submit_cv_upload(file_bytes, filename, user_id, source_email, client=client)


def _parse_uploads(rows: List[Any]) -> List[CVUpload]:
    """Rows that fail validation are skipped and logged."""
    uploads = []
    for row in rows:
        try:
            uploads.append(CVUpload.model_validate(row))
        except ValidationError as e:
            logger.warning("Skipping malformed candidate row: %s", e)
    return uploads


def _render_sidebar_flags():
    flags = apply_flag_overrides(FEATURE_FLAGS, dict(st.query_params))
    st.sidebar.subheader("Features")
    return flags.model_copy(update={
        "enable_verticals": st.sidebar.toggle("Verticals", value=flags.enable_verticals),
        "enable_filter_presets": st.sidebar.toggle("Filter presets", value=flags.enable_filter_presets),
        "enable_advanced_filters": st.sidebar.toggle("Advanced filters", value=flags.enable_advanced_filters),
        "enable_dynamic_ingestion": st.sidebar.toggle("CV upload", value=flags.enable_dynamic_ingestion),
    })


def _render_advanced_filters(uploads: List[CVUpload]) -> AdvancedFilterState:
    with st.expander("Advanced filters"):
        search = st.text_input("Search name, email, employment or country", key="adv_search")
        countries_all = sorted({
            c.strip()
            for u in uploads if u.extracted_json
            for c in normalize_to_list(u.extracted_json.countries)
            if c.strip()
        })
        countries = st.multiselect("Countries (any)", options=countries_all, key="adv_countries")
        skills_text = st.text_input("Skills (all, comma separated)", key="adv_skills")
        score_min, score_max = st.slider("Score", min_value=0, max_value=10, value=(0, 10), key="adv_score")
        source_emails = st.multiselect(
            "Source email",
            options=extract_source_email_options(uploads),
            key="adv_sources",
        )
        col1, col2 = st.columns(2)
        with col1:
            date_from = st.date_input("Received from", value=None, key="adv_from")
        with col2:
            date_to = st.date_input("Received to", value=None, key="adv_to")
    score_set = (score_min, score_max) != (0, 10)
    return AdvancedFilterState(
        search=search or None,
        countries=countries,
        skills=[s.strip() for s in skills_text.split(",") if s.strip()],
        score_min=score_min if score_set else None,
        score_max=score_max if score_set else None,
        source_emails=source_emails,
        date_from=format_day(date_from) if date_from else None,
        date_to=format_day(date_to) if date_to else None,
    )


def _render_card(upload: CVUpload) -> None:
    data = upload.extracted_json
    highlights = candidate_highlights(data)
    with st.container():
        st.markdown("---")
        col_a, col_b = st.columns([3, 1])
        with col_a:
            st.markdown(f"### {(data.candidate_name if data else None) or upload.original_filename or 'Unnamed'}")
            if data:
                st.caption(f"**Email:** {data.email_address or '—'} · **Phone:** {data.contact_number or '—'}")
                countries = ", ".join(normalize_to_list(data.countries))
                if countries:
                    st.caption(f"**Countries:** {countries}")
                st.markdown(
                    f"`{highlights['degree']}` `{highlights['experience']}` `{highlights['subject']}`"
                )
                if data.current_employment:
                    st.caption(f"**Current:** {data.current_employment}")
        with col_b:
            if data and data.score:
                st.metric("Score", data.score)
            st.caption("Teaching degree ✓" if highlights["teaching_degree"] else "No completed teaching degree")
            st.caption(f"Status: {get_processing_status(upload)}")
            if upload.file_url:
                st.link_button("Open CV", url=upload.file_url, type="secondary")
        if data and data.justification:
            with st.expander("Justification"):
                st.markdown(data.justification)


def _render_upload_form(token: str) -> None:
    with st.expander("Upload a CV"):
        with st.form("upload_cv", clear_on_submit=True):
            file = st.file_uploader("CV file", type=["pdf", "docx", "txt"])
            user_id = st.text_input("User ID")
            source_email = st.text_input("Source email (optional)")
            submitted = st.form_submit_button("Upload")
        if submitted:
            if not file or not user_id.strip():
                st.error("Choose a file and enter a user ID.")
                return
            with st.spinner("Uploading…"):
                result = _run(_upload(file.getvalue(), file.name, user_id.strip(), source_email.strip() or None, token))
            if result:
                st.success(f"Uploaded {file.name}; processing started (upload {result.get('upload_id')}).")
            else:
                st.error("Upload failed. Check the API logs.")


def render_layout() -> None:
    """Streamlit page layout; data access and filters come from services."""
    st.set_page_config(page_title="CV Intake Dashboard", layout="wide")
    st.title("CV Intake Dashboard")
    st.markdown("*Candidates received per day, screened against the selected hiring rules.*")

    token = st.sidebar.text_input("Access token", value=SUPABASE_ACCESS_TOKEN, type="password")
    day_value: date = st.sidebar.date_input("Day", value=date.today())
    day = format_day(day_value)
    flags = _render_sidebar_flags()

    vertical_config = None
    preset = None
    strict = False
    if flags.enable_verticals or flags.enable_filter_presets:
        vertical_id = st.sidebar.selectbox(
            "Vertical",
            options=list(VERTICALS.keys()),
            index=list(VERTICALS.keys()).index(DEFAULT_VERTICAL),
            format_func=lambda v: VERTICALS[v].name,
        )
        vertical_config = get_vertical(vertical_id)
        if flags.enable_filter_presets:
            presets = presets_for_vertical(vertical_id)
            if presets:
                ids = [p.id for p in presets]
                preset_id = st.sidebar.selectbox(
                    "Preset",
                    options=ids,
                    index=ids.index(DEFAULT_PRESET) if DEFAULT_PRESET in ids else 0,
                    format_func=lambda p: get_preset(p).name,
                )
                preset = get_preset(preset_id)
                vertical_config = resolve_effective_rules(preset_id, vertical_id)
                st.sidebar.caption(preset.description)
        if preset is None:
            strict = st.sidebar.checkbox("Strict matching", value=False)

    view = st.radio(
        "View",
        options=list(VIEW_LABELS.keys()),
        format_func=VIEW_LABELS.get,
        horizontal=True,
    )
    st.divider()

    if not token:
        st.info("Enter an access token in the sidebar to load candidates.")
        if flags.enable_dynamic_ingestion:
            _render_upload_form(token)
        return

    with st.spinner(f"Loading candidates for {day}…"):
        result = _run(_load_day(day, token))
    if result.status == FetchStatus.FAILED:
        st.error("Could not load candidates. " + "; ".join(result.errors))
    uploads = _parse_uploads(result.candidates)

    advanced = _render_advanced_filters(uploads) if flags.enable_advanced_filters else None
    shown = apply_dashboard_filters(
        uploads,
        view=view,
        feature_flags=flags,
        vertical_config=vertical_config,
        preset=preset,
        strict=strict,
        advanced=advanced,
    )

    stats = dashboard_stats(uploads)
    cols = st.columns(5)
    cols[0].metric("Uploads", stats.total)
    cols[1].metric("Completed", stats.completed)
    cols[2].metric("Processing", stats.processing)
    cols[3].metric("Qualified", stats.qualified)
    cols[4].metric("Avg score", stats.average_score if stats.average_score is not None else "—")

    start = format_day(day_value - timedelta(days=COUNT_WINDOW_DAYS - 1))
    counts = _run(_load_counts(start, day, token))
    if counts:
        with st.expander(f"Uploads over the last {COUNT_WINDOW_DAYS} days"):
            st.bar_chart(counts)

    st.subheader("Results")
    st.markdown(f"**Showing:** {len(shown)} of {len(uploads)} · *{VIEW_LABELS[view]}*")
    st.download_button(
        "Export qualified to CSV",
        data=export_candidates_csv(shown),
        file_name=export_filename(),
        mime="text/csv",
        key="export_csv",
    )
    if not shown:
        st.warning("No candidates match for this day. Try another day or relax the filters.")
    for upload in shown:
        _render_card(upload)

    if flags.enable_dynamic_ingestion:
        st.divider()
        _render_upload_form(token)


if __name__ == "__main__":
    render_layout()
