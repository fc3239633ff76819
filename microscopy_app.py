"""Microscopy Streamlit UI.

Run with:

    streamlit run microscopy_app.py

The page layout mirrors the bench workflow: scan a slide, review the
counts and alerts, save the result under a sample name, and reopen saved
samples from History. All state transitions go through MicroscopyApp;
this module only renders.
"""

from __future__ import annotations

import json
import time

import streamlit as st

from gui.app import MicroscopyApp, SessionRegistry
from gui.services.clients import get_session_controller
from gui.services.export_service import build_excel_bytes, build_pdf_bytes, export_json
from gui.services.stats_service import StatsService
from gui.theme import ModernTheme
from microscopy.config import get_settings
from microscopy.errors import PersistenceError
from microscopy.session.controller import AppPhase, HomeSubview, Page
from microscopy.utils.logger import setup_logging


st.set_page_config(
    page_title="Microscopy",
    page_icon="🔬",
    layout="wide",
    initial_sidebar_state="expanded",
)

THEME = ModernTheme()
st.markdown(THEME.css(), unsafe_allow_html=True)

NOTICE_RENDERERS = {
    "success": st.success,
    "info": st.info,
    "warning": st.warning,
    "error": st.error,
}


@st.cache_resource
def get_stats_service() -> StatsService:
    return StatsService()


@st.cache_resource
def get_session_registry() -> SessionRegistry:
    return SessionRegistry()


def _session_id():
    from streamlit.runtime.scriptrunner import get_script_run_ctx

    ctx = get_script_run_ctx()
    return ctx.session_id if ctx is not None else None


def _release_ended_sessions(registry: SessionRegistry) -> None:
    from streamlit import runtime

    if runtime.exists():
        registry.reap(runtime.get_instance().is_active_session)


def get_app() -> MicroscopyApp:
    """One MicroscopyApp per browser session."""

    if "app" not in st.session_state:
        settings = get_settings()
        setup_logging(settings.log_level)
        app = MicroscopyApp(
            controller=get_session_controller(settings),
            export_dir=settings.export_dir,
        )
        app.run(settings.splash_seconds)
        st.session_state.app = app

        registry = get_session_registry()
        session_id = _session_id()
        if session_id is not None:
            # Replacing the slot shuts down this session's previous app.
            registry.register(session_id, app)
        _release_ended_sessions(registry)
    return st.session_state.app


def render_splash():
    st.markdown(
        '<div class="splash"><h1>🔬 Microscopy</h1>'
        '<p class="subheader">AI-Powered Marine Analysis</p></div>',
        unsafe_allow_html=True,
    )


def render_notices(app: MicroscopyApp):
    for notice in app.state.drain():
        NOTICE_RENDERERS.get(notice.level, st.info)(notice.message)


def render_status_bar(app: MicroscopyApp):
    snap = app.controller.snapshot()
    latency = app.state.last_latency_ms
    latency_txt = f"{latency:.0f} ms" if latency is not None else "—"
    st.markdown(
        (
            '<div class="statusbar">'
            f"<b>Status</b> · Page: <code>{snap.active_page.value}</code> · "
            f"Saved samples: <code>{snap.history_size}</code> · "
            f"Last scan: <code>{latency_txt}</code>"
            "</div>"
        ),
        unsafe_allow_html=True,
    )


def render_save_dialog(app: MicroscopyApp):
    workflow = app.controller.save_workflow
    if workflow is None:
        return
    with st.container(border=True):
        st.subheader("💾 Save Sample")
        st.caption("Enter a unique name or ID for this sample slide.")
        with st.form("save_sample", clear_on_submit=False):
            name = st.text_input("Sample name", placeholder="e.g., Bay-Sample-001")
            c1, c2 = st.columns(2)
            save = c1.form_submit_button("Save", type="primary", use_container_width=True)
            cancel = c2.form_submit_button("Cancel", use_container_width=True)
        if save:
            app.confirm_save(name)
            st.rerun()
        if cancel:
            app.cancel_save()
            st.rerun()


def page_home(app: MicroscopyApp):
    subview = app.controller.home_subview

    if subview is HomeSubview.WELCOME:
        st.header("Welcome")
        st.write(
            "Portable, on-site analysis of marine microorganisms. "
            "Place a slide under the microscope and run a scan to count and "
            "classify what is in the frame."
        )
        if st.button("Get started", type="primary"):
            app.dismiss_intro()
            st.rerun()
        return

    if subview is HomeSubview.AWAITING_SCAN:
        with st.container(border=True):
            st.header("Ready for Analysis")
            st.caption('Click the "Scan Sample" button to begin.')
            if st.button("🔎 Scan Sample", type="primary"):
                app.scan()
                st.rerun()
        return

    result = app.controller.current_result
    stats_service = get_stats_service()
    stats = stats_service.get_statistics(result)

    render_save_dialog(app)

    left, right = st.columns([3, 2])
    with left:
        with st.container(border=True):
            st.subheader("Live Feed & Actions")
            st.image(result.image_ref, caption="Microscope Feed", use_container_width=True)
            c1, c2, c3, c4 = st.columns(4)
            if c1.button("🔎 Scan Again", type="primary", use_container_width=True):
                app.scan()
                st.rerun()
            if c2.button("💾 Save Results", use_container_width=True):
                app.request_save()
                st.rerun()
            c3.download_button(
                "📄 Export PDF",
                data=build_pdf_bytes(result, stats),
                file_name=f"{result.id}.pdf",
                mime="application/pdf",
                use_container_width=True,
            )
            c4.download_button(
                "📊 Export Excel",
                data=build_excel_bytes(result, stats),
                file_name=f"{result.id}.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                use_container_width=True,
            )
            with st.expander("More export options", expanded=False):
                st.download_button(
                    "Download JSON",
                    data=json.dumps(export_json(result, stats), indent=2),
                    file_name=f"{result.id}.json",
                    mime="application/json",
                )
                if st.button("Write all formats to export folder"):
                    for fmt in ("json", "xlsx", "pdf"):
                        app.export(fmt)
                    st.rerun()

    with right:
        with st.container(border=True):
            for card in stats_service.summary_cards(result):
                st.metric(card.title, card.value, help=card.helper_text or None)

        alerts = stats_service.alert_lines(result)
        if alerts:
            with st.container(border=True):
                st.subheader("⚠️ High-Risk Alerts")
                for line in alerts:
                    st.markdown(f'<div class="alert-card"><b>{line}</b></div>', unsafe_allow_html=True)

        with st.container(border=True):
            st.subheader("Environmental Data")
            for card in stats_service.environmental_cards(result):
                st.write(f"{card.icon} {card.value}")

        with st.container(border=True):
            st.subheader("Species Distribution")
            for row in stats_service.distribution_rows(result):
                st.write(f"**{row.name}** · {row.label}")
                st.progress(min(row.percentage, 100))
            note = stats_service.rounding_note(result)
            if note:
                st.caption(note)


def page_about():
    st.header("ℹ️ About the System")
    st.write(
        "The Embedded Intelligent Microscopy System is a portable, AI-powered "
        "solution for real-time analysis of marine microorganisms. It automates "
        "the traditionally manual process of microscopic analysis for rapid, "
        "repeatable biodiversity monitoring."
    )
    st.subheader("Core Features")
    st.markdown(
        "- On-site analysis on a compact edge computer.\n"
        "- Detection, segmentation and classification models.\n"
        "- Analysis time down from hours to minutes per sample.\n"
        "- Real-time alerts for harmful algal blooms and other critical events."
    )
    st.subheader("How to Use This Interface")
    st.markdown(
        "1. **Home:** the main dashboard with the microscope feed.\n"
        "2. **Scan Sample:** runs the analysis on the current frame.\n"
        "3. **Review Data:** totals, species distribution, environment and alerts.\n"
        '4. **Save Results:** store the analysis under a sample name (e.g. "Dock-A-Slide-05").\n'
        "5. **History:** reopen any saved sample.\n"
        "6. **Export:** download the current scan as PDF or Excel."
    )


def page_history(app: MicroscopyApp):
    st.header("🗂 Saved Samples")
    entries = app.history()
    if not entries:
        st.info(
            "No samples have been saved yet. Go to the Home page to perform a "
            "scan and save the results."
        )
        return

    cols = st.columns(4)
    for idx, entry in enumerate(entries):
        captured = entry.snapshot.environmental.timestamp_utc.strftime("%Y-%m-%d")
        with cols[idx % 4]:
            if st.button(
                f"{entry.name}\n\n{captured}",
                key=f"history_{entry.id}",
                use_container_width=True,
            ):
                app.select_history(entry.id)
                st.rerun()


def main():
    """Main Streamlit application."""

    try:
        app = get_app()
    except PersistenceError as e:
        st.error(f"Failed to load saved samples: {e}")
        return

    if app.controller.app_phase is AppPhase.LOADING:
        render_splash()
        time.sleep(0.25)
        st.rerun()

    st.markdown('<div class="main-header">🔬 Microscopy</div>', unsafe_allow_html=True)

    with st.sidebar:
        st.header("Navigation")
        for page, label in ((Page.HOME, "🏠 Home"), (Page.ABOUT, "ℹ️ About"), (Page.HISTORY, "🗂 History")):
            kind = "primary" if app.active_page is page else "secondary"
            if st.button(label, key=f"nav_{page.value}", type=kind, use_container_width=True):
                app.switch_view(page.value)
                st.rerun()

    render_notices(app)

    page = app.active_page
    if page is Page.HOME:
        page_home(app)
    elif page is Page.ABOUT:
        page_about()
    else:
        page_history(app)

    render_status_bar(app)


def _running_in_streamlit() -> bool:
    """Best-effort detection for whether we're running under `streamlit run`."""

    try:
        from streamlit.runtime.scriptrunner import get_script_run_ctx

        return get_script_run_ctx() is not None
    except Exception:
        return False


if __name__ == "__main__":
    if not _running_in_streamlit():
        import sys

        print(
            "This is a Streamlit app. Run it with:\n\n  streamlit run microscopy_app.py\n",
            file=sys.stderr,
        )
        raise SystemExit(1)

    main()
