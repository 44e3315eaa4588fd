"""
Streamlit Frontend for Petty Cash Manager

This is the screen the person holding the cash box works from every day.

DESIGN PRINCIPLES:
1. Stats first: balance and pending returns are always visible
2. One form per action (add/edit, return, funds)
3. Clear error messages in simple language
4. Visual feedback for all operations
5. No hidden actions: deletes ask for confirmation

All logic lives in petty_cash; this module only draws and forwards
input to the orchestrator flows.
"""

import asyncio
from datetime import date
from decimal import Decimal, InvalidOperation
from html import escape

import streamlit as st
import streamlit.components.v1 as components

from petty_cash.audit import configure_logging
from petty_cash.config import get_settings, validate_all_settings
from petty_cash.models.transaction import (
    ReportPeriod,
    ReportType,
    StatusFilter,
    TransactionFilter,
)
from petty_cash.orchestrator import LedgerFlow, ReportFlow, create_app_components
from petty_cash.presentation import (
    TransactionCard,
    build_dashboard_summary,
    build_transaction_cards,
)
from petty_cash.queries import describe_filter
from petty_cash.reports import report_filename
from petty_cash.services import AttachmentError, AutoSaver, encode_attachment, make_thumbnail


# Page configuration
st.set_page_config(
    page_title="Petty Cash Manager",
    page_icon="💵",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .stat-box {
        padding: 16px;
        background-color: #f8f9fa;
        border-radius: 10px;
        text-align: center;
    }
    .big-number {
        font-size: 1.8em;
        font-weight: bold;
        color: #2c3e50;
    }
    .stat-label {
        font-size: 0.8em;
        color: #666;
        text-transform: uppercase;
    }
    .avatar-initials {
        display: inline-flex;
        align-items: center;
        justify-content: center;
        width: 32px;
        height: 32px;
        border-radius: 50%;
        color: #fff;
        font-weight: 600;
        margin-right: 8px;
    }
    .status-borrowed { color: #dc3545; font-weight: 600; }
    .status-returned { color: #28a745; font-weight: 600; }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    configure_logging()
    ledger_flow, report_flow, store = create_app_components(use_remote=True)
    run_async(store.load())

    autosaver = AutoSaver(store)
    autosaver.start()
    return ledger_flow, report_flow, autosaver


def parse_money(raw: str):
    """Form text to Decimal; None when blank, not a number, or not finite."""
    if raw is None or not raw.strip():
        return None
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def notify(success: bool, message: str) -> None:
    if success:
        st.success(message)
    else:
        st.error(message)


def main():
    """Main application entry point."""
    ledger_flow, report_flow, _ = get_components()

    # Sidebar navigation
    st.sidebar.title("💵 Petty Cash Manager")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📋 Transactions", "➕ Add Transaction", "📊 Reports", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Record every cash advance
        2. Mark it returned when the money comes back
        3. Print a report at the end of the month
        """
    )

    if "flash" in st.session_state:
        notify(*st.session_state.pop("flash"))

    # Route to appropriate page
    if page == "📋 Transactions":
        render_transactions_page(ledger_flow)
    elif page == "➕ Add Transaction":
        render_transaction_form(ledger_flow)
    elif page == "📊 Reports":
        render_reports_page(report_flow)
    elif page == "⚙️ Settings":
        render_settings_page(ledger_flow)


def render_stats(ledger_flow: LedgerFlow):
    """The stat tiles."""
    store = ledger_flow.store
    currency = get_settings().app.currency_symbol
    summary = build_dashboard_summary(store.stats(), store.transactions, currency)

    tiles = [
        (summary.available_funds, "Available Funds"),
        (summary.total_borrowed, "Total Borrowed"),
        (summary.total_returned, "Total Returned"),
        (summary.pending_returns, "Pending Returns"),
        (summary.current_balance, "Current Balance"),
    ]
    for col, (value, label) in zip(st.columns(len(tiles)), tiles):
        with col:
            st.markdown(f"""
            <div class="stat-box">
                <div class="big-number">{value}</div>
                <div class="stat-label">{label}</div>
            </div>
            """, unsafe_allow_html=True)


def render_transactions_page(ledger_flow: LedgerFlow):
    """Render the dashboard: stats, filters and the transaction list."""
    st.title("📋 Transactions")
    render_stats(ledger_flow)
    st.markdown("---")

    # Filters
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        status = st.selectbox(
            "Status",
            options=list(StatusFilter),
            format_func=lambda s: s.value.title(),
        )
    with col2:
        date_from = st.date_input("From", value=None)
    with col3:
        date_to = st.date_input("To", value=None)
    with col4:
        borrower = st.text_input("Person", placeholder="Search by name")

    criteria = TransactionFilter(
        status=status,
        date_from=date_from,
        date_to=date_to,
        borrower=borrower,
    )
    matching = ledger_flow.store.filtered(criteria)
    st.caption(f"{len(matching)} transactions • {describe_filter(criteria)}")

    cards = build_transaction_cards(matching, get_settings().app.currency_symbol)
    if not cards:
        st.info("No transactions found. Use 'Add Transaction' to record the first one.")
        return

    for card in cards:
        render_card(ledger_flow, card)


def render_card(ledger_flow: LedgerFlow, card: TransactionCard):
    """One transaction with its actions."""
    with st.container(border=True):
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown(
                f'<span class="avatar-initials" style="background:{card.avatar_color}">'
                f'{escape(card.initials)}</span><strong>{escape(card.borrower)}</strong>'
                f' &nbsp; <span class="status-{card.status.value}">{card.status_label}</span>',
                unsafe_allow_html=True,
            )
            details = [f"**Amount:** {card.amount_label}", f"**Borrowed:** {card.borrow_date_label}"]
            if card.returned_amount_label:
                details.append(f"**Returned:** {card.returned_amount_label}")
            if card.return_date_label:
                details.append(f"**Return date:** {card.return_date_label}")
            st.markdown(" • ".join(details))
            for label, value in (
                ("Contact", card.contact),
                ("Description", card.description),
                ("Return notes", card.return_notes),
            ):
                if value:
                    st.caption(f"{label}: {value}")
        with col2:
            if card.attachment:
                try:
                    st.image(make_thumbnail(card.attachment))
                except AttachmentError:
                    st.caption("Attachment unreadable")

        actions = st.columns(3)
        with actions[0]:
            if card.can_return and st.button("↩️ Mark as Returned", key=f"return_{card.id}"):
                st.session_state.return_id = card.id
        with actions[1]:
            if st.button("✏️ Edit", key=f"edit_{card.id}"):
                st.session_state.edit_id = card.id
                st.session_state.flash = (True, "Open 'Add Transaction' to edit this entry.")
                st.rerun()
        with actions[2]:
            if st.button("🗑️ Delete", key=f"delete_{card.id}"):
                st.session_state.delete_id = card.id

        if st.session_state.get("delete_id") == card.id:
            st.warning("Are you sure you want to delete this transaction?")
            yes, no = st.columns(2)
            if yes.button("Yes, delete", key=f"confirm_delete_{card.id}", type="primary"):
                st.session_state.flash = run_async(ledger_flow.delete_transaction(card.id))
                st.session_state.pop("delete_id", None)
                st.rerun()
            if no.button("Cancel", key=f"cancel_delete_{card.id}"):
                st.session_state.pop("delete_id", None)
                st.rerun()

        if st.session_state.get("return_id") == card.id:
            render_return_form(ledger_flow, card)


def render_return_form(ledger_flow: LedgerFlow, card: TransactionCard):
    with st.form(f"return_form_{card.id}"):
        return_date = st.date_input("Return date", value=date.today())
        amount = st.text_input("Return amount")
        notes = st.text_area("Notes")
        submitted = st.form_submit_button("💾 Record Return", type="primary")

    if submitted:
        success, message, _ = run_async(ledger_flow.record_return(
            card.id,
            return_date=return_date,
            amount=parse_money(amount),
            notes=notes,
        ))
        if success:
            st.session_state.pop("return_id", None)
            st.session_state.flash = (True, message)
            st.rerun()
        st.error(message)


def render_transaction_form(ledger_flow: LedgerFlow):
    """Add a transaction, or edit the one selected on the list."""
    edit_id = st.session_state.get("edit_id")
    current = ledger_flow.store.get(edit_id) if edit_id is not None else None

    st.title("✏️ Edit Transaction" if current else "➕ Add Transaction")

    with st.form("transaction_form", clear_on_submit=current is None):
        col1, col2 = st.columns(2)
        with col1:
            borrow_date = st.date_input(
                "Borrow date *",
                value=current.borrow_date if current else date.today(),
            )
            amount = st.text_input(
                "Amount *",
                value=f"{current.amount:.2f}" if current else "",
            )
            borrower = st.text_input("Borrower *", value=current.borrower if current else "")
            contact = st.text_input("Contact", value=(current.contact or "") if current else "")
        with col2:
            return_amount = st.text_input(
                "Amount already returned",
                value=f"{current.returned_amount:.2f}" if current and current.returned_amount else "",
            )
            return_date = st.date_input(
                "Return date",
                value=current.return_date if current else None,
            )
            return_notes = st.text_area(
                "Return notes",
                value=(current.return_notes or "") if current else "",
            )
        description = st.text_area(
            "Description",
            value=(current.description or "") if current else "",
        )
        uploaded = st.file_uploader(
            "Receipt (optional)",
            type=get_settings().app.supported_formats_list,
        )

        submitted = st.form_submit_button("💾 Save Transaction", type="primary")

    if current and st.button("Cancel edit"):
        st.session_state.pop("edit_id", None)
        st.rerun()

    if not submitted:
        return

    attachment = None
    if uploaded is not None:
        try:
            attachment = encode_attachment(uploaded.getvalue(), filename=uploaded.name)
        except AttachmentError as e:
            st.error(str(e))
            return

    fields = {
        "borrow_date": borrow_date,
        "amount": parse_money(amount),
        "return_amount": parse_money(return_amount),
        "borrower": borrower,
        "contact": contact,
        "description": description,
        "return_date": return_date,
        "return_notes": return_notes,
        "attachment": attachment,
    }
    success, message, _ = run_async(ledger_flow.save_transaction(fields, edit_id=edit_id))
    if success:
        st.session_state.pop("edit_id", None)
        st.session_state.flash = (True, message)
        st.rerun()
    st.error(message)


def render_reports_page(report_flow: ReportFlow):
    """Render the report builder and the export."""
    st.title("📊 Reports")

    col1, col2 = st.columns(2)
    with col1:
        report_type = st.selectbox(
            "Report type",
            options=list(ReportType),
            format_func=lambda r: r.value.title(),
        )
    with col2:
        period = st.selectbox(
            "Period",
            options=list(ReportPeriod),
            index=list(ReportPeriod).index(ReportPeriod.MONTH),
            format_func=lambda p: p.value.title(),
        )

    date_from = date_to = None
    if period == ReportPeriod.CUSTOM:
        col3, col4 = st.columns(2)
        with col3:
            date_from = st.date_input("From date", value=None)
        with col4:
            date_to = st.date_input("To date", value=None)

    if st.button("📄 Generate Report", type="primary"):
        success, message, data, html = run_async(report_flow.generate_report(
            period,
            report_type=report_type,
            date_from=date_from,
            date_to=date_to,
        ))
        if not success:
            st.error(message)
        else:
            st.download_button(
                "⬇️ Download printable report",
                data=html,
                file_name=report_filename(data),
                mime="text/html",
            )
            components.html(html, height=600, scrolling=True)

    st.markdown("---")
    st.markdown("### Export")
    st.markdown("Download every transaction as a CSV file.")
    if st.button("📦 Prepare CSV export"):
        filename, csv_text = run_async(report_flow.export_csv())
        st.download_button(
            "⬇️ Download CSV",
            data=csv_text,
            file_name=filename,
            mime="text/csv",
        )
        st.success("Data exported successfully!")


def render_settings_page(ledger_flow: LedgerFlow):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Available Funds")
    currency = get_settings().app.currency_symbol
    st.markdown(f"Current float: **{currency} {ledger_flow.store.available_funds:,.2f}**")

    with st.form("funds_form"):
        new_funds = st.text_input(
            "New available funds",
            value=f"{ledger_flow.store.available_funds:.2f}",
        )
        password = st.text_input("Admin password", type="password")
        submitted = st.form_submit_button("Update funds")

    if submitted:
        notify(*run_async(ledger_flow.update_available_funds(parse_money(new_funds), password)))

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Local storage", "local_storage"),
        ("Google Sheets (remote copy)", "google_sheets"),
        ("Application settings", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.warning(f"⚠️ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
