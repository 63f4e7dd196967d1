"""Streamlit app for BalanceBeam.

This module is the presentation layer. It renders the budget editor,
the favorites list and the CSV import screen, and forwards every user
action to :class:`~balancebeam.session.BudgetSession`, the favorites
store or the export helpers. Nothing here computes totals or validates
data itself.

To run the dashboard from the command line::

    streamlit run balancebeam/dashboard.py

or use ``run_dashboard.py`` in the project root.
"""

from __future__ import annotations

import os
import sys
from typing import Dict, Optional

import streamlit as st

# Conditional imports to support execution both as part of a package
# and directly via ``streamlit run balancebeam/dashboard.py``.
if __package__:
    from .aggregation import aggregate, category_totals
    from .config import COLOR_THEMES, PUBLIC_URL, ensure_data_directories, theme_name_for
    from .csv_import import (
        SAMPLE_CSV,
        describe_error,
        items_to_frame,
        parse_csv,
        read_csv_upload,
        sample_csv_bytes,
    )
    from .exceptions import (
        CSVFileTypeError,
        CSVParseError,
        EmptySnapshotError,
        ItemValidationError,
        SharePayloadError,
    )
    from .export import (
        SHARE_PARAM,
        SharedBudget,
        build_share_url,
        decode_share_payload,
        export_filename,
        export_json,
        export_pdf,
    )
    from .favorites import PreferencesStore, SnapshotStore
    from .formatting import escape_dollar_for_markdown, format_currency, format_percent
    from .logger import configure_logging, get_logger
    from .models import AggregationResult, ChartType, ItemKind, Preferences, field_error_messages
    from .session import BudgetSession
    from .storage import JSONFileStore, KeyValueStore
    from .visualization import create_budget_chart
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from balancebeam.aggregation import aggregate, category_totals  # type: ignore
    from balancebeam.config import COLOR_THEMES, PUBLIC_URL, ensure_data_directories, theme_name_for  # type: ignore
    from balancebeam.csv_import import (  # type: ignore
        SAMPLE_CSV,
        describe_error,
        items_to_frame,
        parse_csv,
        read_csv_upload,
        sample_csv_bytes,
    )
    from balancebeam.exceptions import (  # type: ignore
        CSVFileTypeError,
        CSVParseError,
        EmptySnapshotError,
        ItemValidationError,
        SharePayloadError,
    )
    from balancebeam.export import (  # type: ignore
        SHARE_PARAM,
        SharedBudget,
        build_share_url,
        decode_share_payload,
        export_filename,
        export_json,
        export_pdf,
    )
    from balancebeam.favorites import PreferencesStore, SnapshotStore  # type: ignore
    from balancebeam.formatting import escape_dollar_for_markdown, format_currency, format_percent  # type: ignore
    from balancebeam.logger import configure_logging, get_logger  # type: ignore
    from balancebeam.models import (  # type: ignore
        AggregationResult,
        ChartType,
        ItemKind,
        Preferences,
        field_error_messages,
    )
    from balancebeam.session import BudgetSession  # type: ignore
    from balancebeam.storage import JSONFileStore, KeyValueStore  # type: ignore
    from balancebeam.visualization import create_budget_chart  # type: ignore

logger = get_logger("dashboard")

SESSION_KEY = "budget_session"
PREFERENCES_KEY = "preferences"
FIELD_ERRORS_KEY = "field_errors"
FLASH_KEY = "flash"
SHARED_TOKEN_KEY = "shared_token"
CUSTOM_THEME = "Custom"
UPLOAD_NONCE_KEY = "csv_upload_nonce"

CHART_LABELS = {
    ChartType.BAR: "📊 Bar",
    ChartType.PIE: "🥧 Pie",
    ChartType.LINE: "📈 Line",
}

CSV_FORMAT_GUIDE = """
**Format:** Category,Amount,Type

- Each line represents one budget item
- Amount must be a positive number
- Type must be either 'income' or 'expense'
- No headers required
"""


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------


def _get_store() -> KeyValueStore:
    return JSONFileStore()


def _ensure_session_state(store: KeyValueStore) -> BudgetSession:
    state = st.session_state
    if SESSION_KEY not in state:
        state[SESSION_KEY] = BudgetSession()
    if PREFERENCES_KEY not in state:
        state[PREFERENCES_KEY] = PreferencesStore(store).load()
    if FIELD_ERRORS_KEY not in state:
        state[FIELD_ERRORS_KEY] = {}
    return state[SESSION_KEY]


def _flash(level: str, message: str) -> None:
    st.session_state[FLASH_KEY] = (level, message)


def _show_flash() -> None:
    flash = st.session_state.pop(FLASH_KEY, None)
    if not flash:
        return
    level, message = flash
    icon = {"success": "✅", "error": "❌", "info": "ℹ️"}.get(level, "ℹ️")
    st.toast(message, icon=icon)


def _consume_share_link(session: BudgetSession) -> Optional[SharedBudget]:
    """Load a budget passed through the ``shared`` query parameter, once per link.

    Raises:
        SharePayloadError: If the link cannot be decoded.
    """
    token = st.query_params.get(SHARE_PARAM)
    if not token or st.session_state.get(SHARED_TOKEN_KEY) == token:
        return None
    st.session_state[SHARED_TOKEN_KEY] = token
    shared = decode_share_payload(token)
    session.load_shared(shared)
    logger.info("Loaded shared budget %r with %d items", shared.title, len(shared.items))
    return shared


# ---------------------------------------------------------------------------
# Intent handlers (widget callbacks)
# ---------------------------------------------------------------------------


def _upload_key() -> str:
    # File uploaders cannot be reset through session state; a new key gives an empty one
    return f"csv_upload_{st.session_state.get(UPLOAD_NONCE_KEY, 0)}"


def _handle_add_item() -> None:
    state = st.session_state
    session: BudgetSession = state[SESSION_KEY]
    kind = state.get("new_kind", ItemKind.INCOME.value)
    try:
        item = session.add_item(state.get("new_category", ""), state.get("new_amount", ""), kind)
    except ItemValidationError as exc:
        state[FIELD_ERRORS_KEY] = field_error_messages(exc.errors)
        return
    state[FIELD_ERRORS_KEY] = {}
    state["new_category"] = ""
    state["new_amount"] = ""
    _flash("success", f"{item.category} added to {item.kind.value}")


def _handle_remove_item(item_id: str) -> None:
    session: BudgetSession = st.session_state[SESSION_KEY]
    if session.remove_item(item_id):
        _flash("success", "Budget item has been removed")


def _handle_save_favorite(store: KeyValueStore) -> None:
    session: BudgetSession = st.session_state[SESSION_KEY]
    try:
        snapshot = session.to_snapshot()
        SnapshotStore(store).save(snapshot)
    except EmptySnapshotError as exc:
        _flash("error", str(exc))
        return
    _flash("success", f'"{snapshot.title}" has been saved to favorites')


def _handle_load_favorite(store: KeyValueStore, snapshot_id: str) -> None:
    session: BudgetSession = st.session_state[SESSION_KEY]
    snapshot = SnapshotStore(store).get(snapshot_id)
    if snapshot is None:
        _flash("error", "That budget is no longer in your favorites")
        return
    session.load_snapshot(snapshot)
    _flash("success", f'"{snapshot.title}" has been loaded')


def _handle_remove_favorite(store: KeyValueStore, snapshot_id: str) -> None:
    SnapshotStore(store).remove(snapshot_id)
    _flash("success", "Budget has been removed from favorites")


def _handle_animation_toggle(store: KeyValueStore) -> None:
    preferences = Preferences(animated=bool(st.session_state.get("animated_toggle", True)))
    st.session_state[PREFERENCES_KEY] = preferences
    PreferencesStore(store).save(preferences)


def _handle_import(items_key: str) -> None:
    session: BudgetSession = st.session_state[SESSION_KEY]
    items = st.session_state.pop(items_key, None) or []
    if not items:
        return
    count = session.import_items(items)
    st.session_state["csv_text"] = ""
    st.session_state.pop(_upload_key(), None)
    st.session_state[UPLOAD_NONCE_KEY] = st.session_state.get(UPLOAD_NONCE_KEY, 0) + 1
    _flash("success", f"{count} items imported successfully")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_totals(totals: AggregationResult) -> None:
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("💰 Total Income", format_currency(totals.total_income))
    with col2:
        st.metric("💸 Total Expenses", format_currency(totals.total_expenses))
    with col3:
        st.metric("📈 Net Income", format_currency(totals.net_income))
    with col4:
        st.metric("🎯 Savings Progress", format_percent(totals.savings_progress))
        st.progress(min(max(totals.savings_progress, 0.0), 100.0) / 100.0)


def render_item_form(session: BudgetSession) -> None:
    errors: Dict[str, str] = st.session_state.get(FIELD_ERRORS_KEY, {})
    session.set_title(st.text_input("Budget Title", value=session.state.title, placeholder="Enter budget title"))

    with st.form("add_item_form", clear_on_submit=False):
        col1, col2, col3 = st.columns([2, 1, 1])
        with col1:
            st.text_input("Category", key="new_category", placeholder="e.g., Salary, Rent")
            if "category" in errors:
                st.error(errors["category"])
        with col2:
            st.text_input("Amount", key="new_amount", placeholder="0.00")
            if "amount" in errors:
                st.error(errors["amount"])
        with col3:
            st.selectbox(
                "Type",
                options=[kind.value for kind in ItemKind],
                format_func=lambda value: value.capitalize(),
                key="new_kind",
            )
        st.form_submit_button("➕ Add Item", on_click=_handle_add_item)

    goal = st.number_input("Savings Goal", value=float(session.state.savings_goal), step=100.0)
    session.set_savings_goal(goal)


def render_item_list(session: BudgetSession) -> None:
    if not session.state.items:
        return
    st.subheader("Budget Items")
    for item in session.items:
        col1, col2, col3 = st.columns([3, 2, 1])
        badge = "🟢" if item.kind is ItemKind.INCOME else "🔴"
        with col1:
            st.markdown(f"{badge} **{item.category}** · {item.kind.value}")
        with col2:
            st.markdown(f"**{escape_dollar_for_markdown(item.amount)}**")
        with col3:
            st.button("🗑️", key=f"remove_item_{item.id}", on_click=_handle_remove_item, args=(item.id,))


def render_chart(session: BudgetSession, preferences: Preferences) -> None:
    st.subheader("Visualization")
    options = list(ChartType)
    selected = st.radio(
        "Chart type",
        options=options,
        index=options.index(session.state.chart_type),
        format_func=lambda chart_type: CHART_LABELS[chart_type],
        horizontal=True,
        label_visibility="collapsed",
    )
    session.set_chart_type(selected)
    if not session.state.items:
        st.info("Add budget items to see visualization")
        return
    fig = create_budget_chart(
        session.state.items,
        session.state.chart_type,
        session.state.color_theme,
        animated=preferences.animated,
    )
    st.plotly_chart(fig, use_container_width=True)
    with st.expander("Category breakdown"):
        st.dataframe(category_totals(session.state.items), use_container_width=True, hide_index=True)


def render_customization(session: BudgetSession, preferences: Preferences, store: KeyValueStore) -> None:
    st.sidebar.header("🎨 Customization")
    theme_names = list(COLOR_THEMES)
    current = theme_name_for(session.state.color_theme) or CUSTOM_THEME
    if current == CUSTOM_THEME:
        theme_names.insert(0, CUSTOM_THEME)
    choice = st.sidebar.radio("Color theme", options=theme_names, index=theme_names.index(current))
    if choice != current:
        session.apply_theme(choice)
    st.sidebar.markdown(
        " ".join(f"<span style='color:{color}'>●</span>" for color in session.state.color_theme),
        unsafe_allow_html=True,
    )
    st.sidebar.toggle(
        "Animations",
        value=preferences.animated,
        key="animated_toggle",
        on_change=_handle_animation_toggle,
        args=(store,),
        help="Enable smooth animations for chart transitions",
    )


def render_save_and_export(session: BudgetSession, store: KeyValueStore) -> None:
    st.button("⭐ Save to Favorites", use_container_width=True, on_click=_handle_save_favorite, args=(store,))

    st.subheader("📤 Export Options")
    snapshot = session.preview_snapshot()
    totals = session.totals()
    try:
        json_text = export_json(snapshot, totals)
        share_url = build_share_url(PUBLIC_URL, snapshot, totals)
    except EmptySnapshotError as exc:
        st.info(str(exc))
        return

    # A prepared PDF is only offered while the budget it was built from is unchanged
    signature = (snapshot.title, snapshot.savings_goal, snapshot.items)
    if st.button("📄 Prepare PDF", use_container_width=True):
        st.session_state["pdf_export"] = (signature, export_pdf(snapshot, totals))
    prepared_signature, pdf_bytes = st.session_state.get("pdf_export", (None, None))
    if pdf_bytes and prepared_signature == signature:
        st.download_button(
            "⬇️ Download PDF",
            data=pdf_bytes,
            file_name=export_filename(snapshot.title, "pdf"),
            mime="application/pdf",
            use_container_width=True,
        )
    st.download_button(
        "⬇️ Export as JSON",
        data=json_text,
        file_name=export_filename(snapshot.title, "json"),
        mime="application/json",
        use_container_width=True,
    )
    with st.expander("🔗 Share Budget"):
        st.code(share_url, language=None)


def render_favorites(store: KeyValueStore) -> None:
    favorites = SnapshotStore(store).load_all()
    if not favorites:
        st.info("⭐ No favorite budgets yet. Save your budgets to access them quickly later.")
        return
    for snapshot in favorites:
        totals = aggregate(snapshot.items, snapshot.savings_goal)
        label = f"{snapshot.title} · {snapshot.created_at.astimezone().strftime('%Y-%m-%d')}"
        with st.expander(label, expanded=False):
            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Income", format_currency(totals.total_income))
            with col2:
                st.metric("Expenses", format_currency(totals.total_expenses))
            with col3:
                st.metric("Net Income", format_currency(totals.net_income))
            st.caption(
                f"{len(snapshot.items)} items • Goal: {format_currency(snapshot.savings_goal)} "
                f"• Chart: {snapshot.chart_type.value}"
            )
            load_col, delete_col = st.columns(2)
            with load_col:
                st.button(
                    "Load Budget",
                    key=f"load_favorite_{snapshot.id}",
                    on_click=_handle_load_favorite,
                    args=(store, snapshot.id),
                    use_container_width=True,
                )
            with delete_col:
                st.button(
                    "🗑️ Remove",
                    key=f"remove_favorite_{snapshot.id}",
                    on_click=_handle_remove_favorite,
                    args=(store, snapshot.id),
                    use_container_width=True,
                )


def render_import() -> None:
    st.subheader("📥 Import Budget Data")
    uploaded = st.file_uploader("Upload CSV File", type=["csv"], key=_upload_key())
    text = st.text_area(
        "Or paste CSV data",
        key="csv_text",
        placeholder="Salary,5000,income\nRent,1200,expense",
        height=160,
    )
    st.download_button("📄 Download Sample", data=sample_csv_bytes(), file_name="sample_budget.csv", mime="text/csv")

    source = text
    if uploaded is not None:
        if text and text.strip():
            st.caption("Importing from the uploaded file. Remove it to import the pasted data instead.")
        try:
            source = read_csv_upload(uploaded)
        except CSVFileTypeError as exc:
            st.error(str(exc))
            return

    if source and source.strip():
        try:
            items = parse_csv(source)
        except CSVParseError as exc:
            logger.info("CSV import rejected: %s", exc)
            st.error(f"CSV Parse Error: {describe_error(exc)}")
        else:
            st.success(f"{len(items)} items ready to import")
            st.dataframe(items_to_frame(items), use_container_width=True, hide_index=True)
            st.session_state["csv_preview_items"] = items
            st.button(
                f"Import {len(items)} Items",
                on_click=_handle_import,
                args=("csv_preview_items",),
                type="primary",
            )

    with st.expander("CSV Format Guide"):
        st.markdown(CSV_FORMAT_GUIDE)
        st.code(SAMPLE_CSV, language=None)


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="BalanceBeam", page_icon="⚖️", layout="wide")
    ensure_data_directories()
    configure_logging()

    store = _get_store()
    session = _ensure_session_state(store)
    try:
        shared = _consume_share_link(session)
    except SharePayloadError as exc:
        st.warning(f"Could not open shared budget: {exc}")
    else:
        if shared is not None:
            st.success(f'Shared budget "{shared.title}" loaded')
    preferences: Preferences = st.session_state[PREFERENCES_KEY]

    st.title("⚖️ BalanceBeam")
    st.markdown("Your Personal Financial Planning Platform")
    _show_flash()

    render_customization(session, preferences, store)
    favorites_count = len(SnapshotStore(store))

    create_tab, favorites_tab, import_tab = st.tabs(
        ["➕ Create Budget", f"⭐ Favorites ({favorites_count})", "📥 Import Data"]
    )
    with create_tab:
        # Totals render last so they reflect edits made by the widgets below
        totals_slot = st.container()
        left, right = st.columns([2, 1])
        with left:
            render_item_form(session)
            render_item_list(session)
        with right:
            render_chart(session, preferences)
            render_save_and_export(session, store)
        with totals_slot:
            render_totals(session.totals())
    with favorites_tab:
        render_favorites(store)
    with import_tab:
        render_import()


if __name__ == "__main__":
    main()
