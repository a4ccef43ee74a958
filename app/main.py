"""
Streamlit Frontend for FinTrack

Pages:
1. Dashboard - headline figures, charts and AI insights
2. Transactions - add, edit and delete income/expense records
3. Debts - track money owed in both directions
4. Reports - JSON/CSV export, JSON import and the printable summary
5. Settings - configuration status

The UI never computes figures itself; everything shown comes from the
LedgerBook, which recomputes on every rerun.
"""

import asyncio
from datetime import date
from typing import Optional

import streamlit as st

from fintrack.config import get_settings, validate_all_settings
from fintrack.ledger import expense_by_category, format_currency, income_expense_series
from fintrack.models import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    DebtDirection,
    DebtStatus,
    TransactionKind,
)
from fintrack.orchestrator import (
    InsightFlow,
    LedgerBook,
    create_app_components,
)
from fintrack.reports import (
    ReportFormatError,
    export_filename,
    render_printable_text,
)
from fintrack.validation import RecordValidationError


# Page configuration
st.set_page_config(
    page_title="FinTrack",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
</style>
""", unsafe_allow_html=True)


DIRECTION_LABELS = {
    DebtDirection.THEY_OWE_ME: "They owe me",
    DebtDirection.I_OWE_THEM: "I owe them",
}


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
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to open local storage, changes will not be saved: {e}")
        return create_app_components(use_storage=False)


def money(amount) -> str:
    return format_currency(amount, get_settings().app.currency_symbol)


def show_validation_error(error: RecordValidationError):
    for issue in error.issues:
        st.error(issue.message)


def show_warnings(result):
    for warning in result.warnings:
        st.warning(warning)


def main():
    """Main application entry point."""
    ledger, insight_flow, _ = get_components()

    st.sidebar.title("💰 FinTrack")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "💳 Transactions", "🤝 Debts", "📄 Reports", "⚙️ Settings"],
        index=0,
    )

    if not ledger.last_save_ok:
        st.sidebar.warning("Last save failed. Your changes are kept for this session.")

    if page == "📊 Dashboard":
        render_dashboard(ledger, insight_flow)
    elif page == "💳 Transactions":
        render_transactions_page(ledger)
    elif page == "🤝 Debts":
        render_debts_page(ledger)
    elif page == "📄 Reports":
        render_reports_page(ledger)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_dashboard(ledger: LedgerBook, insight_flow: InsightFlow):
    """Headline figures, charts and AI insights."""
    st.title("📊 Dashboard")
    summary = ledger.summary()

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Balance", money(summary.balance), help="Available funds")
    col2.metric("Monthly Spend", money(summary.total_expense), help="Total outgoing")
    col3.metric("To Receive", money(summary.total_receivable), help="Pending debts from others")
    col4.metric("To Pay", money(summary.total_payable), help="Your pending debts")

    chart_col, insight_col = st.columns([2, 1])

    with chart_col:
        st.subheader("Financial Overview")
        point = income_expense_series(ledger.transactions)[0]
        st.bar_chart(
            {
                "series": ["Income", "Expense"],
                "amount": [float(point["Income"]), float(point["Expense"])],
            },
            x="series",
            y="amount",
        )

        breakdown = expense_by_category(ledger.transactions)
        if breakdown:
            st.subheader("Spending by Category")
            st.bar_chart(
                {
                    "category": [name for name, _ in breakdown],
                    "amount": [float(total) for _, total in breakdown],
                },
                x="category",
                y="amount",
            )

    with insight_col:
        st.subheader("✨ AI Insights")
        if not insight_flow.is_configured:
            st.info("Set GEMINI_API_KEY to enable AI insights.")

        if st.button("Analyze my finances", disabled=insight_flow.busy, type="primary"):
            with st.spinner("Thinking..."):
                insight = run_async(insight_flow.analyze())
            if insight is not None:
                st.session_state.insight = insight

        if st.session_state.get("insight"):
            with st.container(border=True):
                st.markdown(st.session_state.insight)


def transaction_form(key: str, existing=None) -> Optional[dict]:
    """Render the transaction form; returns the submitted values."""
    categories = list(EXPENSE_CATEGORIES) + list(INCOME_CATEGORIES)
    with st.form(key, clear_on_submit=existing is None):
        col1, col2 = st.columns(2)
        with col1:
            kind = st.selectbox(
                "Type",
                options=list(TransactionKind),
                index=list(TransactionKind).index(existing.kind) if existing else 1,
                format_func=lambda k: k.value.title(),
            )
            description = st.text_input(
                "Description",
                value=existing.description if existing else "",
                placeholder="e.g. Grocery Shopping",
            )
            category_choice = st.selectbox(
                "Category",
                options=categories + ["Custom..."],
                index=categories.index(existing.category)
                if existing and existing.category in categories
                else (len(categories) if existing else 0),
            )
            custom_category = st.text_input(
                "Custom category",
                value=existing.category if existing and existing.category not in categories else "",
            )
        with col2:
            amount = st.number_input(
                f"Amount ({get_settings().app.currency_symbol})",
                value=float(existing.amount) if existing else 0.0,
                min_value=0.0,
                step=0.01,
                format="%.2f",
            )
            txn_date = st.date_input("Date", value=existing.date if existing else date.today())

        submitted = st.form_submit_button("Save Transaction", type="primary")

    if not submitted:
        return None
    return {
        "kind": kind,
        "description": description,
        "category": custom_category if category_choice == "Custom..." else category_choice,
        "amount": amount,
        "date": txn_date,
    }


def render_transactions_page(ledger: LedgerBook):
    """Add, edit and delete transactions."""
    st.title("💳 Transactions")

    with st.expander("➕ New Transaction"):
        form = transaction_form("new_transaction")
        if form is not None:
            try:
                _, result = ledger.add_transaction(form)
                show_warnings(result)
                st.success("Transaction saved")
            except RecordValidationError as e:
                show_validation_error(e)

    transactions = ledger.transactions
    if not transactions:
        st.info("No transactions recorded yet.")
        return

    st.dataframe(
        [
            {
                "Date": t.date.isoformat(),
                "Description": t.description,
                "Category": t.category,
                "Amount": ("+ " if t.is_income else "- ") + money(t.amount),
            }
            for t in transactions
        ],
        use_container_width=True,
        hide_index=True,
    )

    st.markdown("### Edit or delete")
    selected = st.selectbox(
        "Transaction",
        options=[t.id for t in transactions],
        format_func=lambda tid: (
            lambda t: f"{t.date.isoformat()} · {t.description} · {money(t.amount)}"
        )(ledger.get_transaction(tid)),
    )
    current = ledger.get_transaction(selected)

    form = transaction_form(f"edit_{selected}", existing=current)
    if form is not None:
        try:
            _, result = ledger.update_transaction(selected, form)
            show_warnings(result)
            st.success("Transaction updated")
            st.rerun()
        except RecordValidationError as e:
            show_validation_error(e)

    confirm = st.checkbox("Yes, delete this transaction", key=f"confirm_delete_{selected}")
    if st.button("🗑️ Delete Transaction"):
        if ledger.delete_transaction(selected, confirmed=confirm):
            st.rerun()
        else:
            st.warning("Tick the confirmation box to delete.")


def debt_form(key: str, existing=None) -> Optional[dict]:
    """Render the debt form; returns the submitted values."""
    with st.form(key, clear_on_submit=existing is None):
        col1, col2 = st.columns(2)
        with col1:
            direction = st.selectbox(
                "Type",
                options=list(DebtDirection),
                index=list(DebtDirection).index(existing.direction) if existing else 0,
                format_func=lambda d: DIRECTION_LABELS[d],
            )
            person = st.text_input("Person", value=existing.person if existing else "")
            description = st.text_input(
                "Description (optional)",
                value=(existing.description or "") if existing else "",
            )
        with col2:
            amount = st.number_input(
                f"Amount ({get_settings().app.currency_symbol})",
                value=float(existing.amount) if existing else 0.0,
                min_value=0.0,
                step=0.01,
                format="%.2f",
            )
            due_date = st.date_input(
                "Due Date (optional)",
                value=existing.due_date if existing else None,
            )

        submitted = st.form_submit_button("Save Record", type="primary")

    if not submitted:
        return None
    return {
        "direction": direction,
        "person": person,
        "description": description,
        "amount": amount,
        "due_date": due_date,
    }


def render_debts_page(ledger: LedgerBook):
    """Track debts, settle them and delete them."""
    st.title("🤝 Debt Manager")

    with st.expander("➕ New Record"):
        form = debt_form("new_debt")
        if form is not None:
            try:
                _, result = ledger.add_debt(form)
                show_warnings(result)
                st.success("Debt saved")
            except RecordValidationError as e:
                show_validation_error(e)

    debts = ledger.debts
    if not debts:
        st.info("No debts recorded yet.")
        return

    for debt in debts:
        with st.container(border=True):
            col1, col2, col3 = st.columns([3, 1, 1])
            with col1:
                status_icon = "✅" if debt.status == DebtStatus.SETTLED else "⏳"
                st.markdown(
                    f"{status_icon} **{debt.person}** · {DIRECTION_LABELS[debt.direction]} · "
                    f"**{money(debt.amount)}**"
                )
                details = [debt.description or ""]
                if debt.due_date:
                    details.append(f"Due {debt.due_date.strftime('%d %b %Y')}")
                st.caption(" · ".join(part for part in details if part))
            with col2:
                label = "Mark settled" if debt.is_pending else "Mark pending"
                if st.button(label, key=f"toggle_{debt.id}"):
                    ledger.toggle_debt_status(debt.id)
                    st.rerun()
            with col3:
                confirm = st.checkbox("Confirm", key=f"confirm_debt_{debt.id}")
                if st.button("🗑️ Delete", key=f"delete_{debt.id}"):
                    if ledger.delete_debt(debt.id, confirmed=confirm):
                        st.rerun()
                    else:
                        st.warning("Tick Confirm to delete.")

    st.markdown("### Edit a record")
    selected = st.selectbox(
        "Debt",
        options=[d.id for d in debts],
        format_func=lambda did: (
            lambda d: f"{d.person} · {money(d.amount)}"
        )(ledger.get_debt(did)),
    )
    form = debt_form(f"edit_debt_{selected}", existing=ledger.get_debt(selected))
    if form is not None:
        try:
            _, result = ledger.update_debt(selected, form)
            show_warnings(result)
            st.success("Debt updated")
            st.rerun()
        except RecordValidationError as e:
            show_validation_error(e)


def render_reports_page(ledger: LedgerBook):
    """Exports, import and the printable summary."""
    st.title("📄 Reports")

    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "⬇️ Export JSON",
            data=ledger.export_json(),
            file_name=export_filename("json"),
            mime="application/json",
            on_click=ledger.record_export,
            args=("json",),
        )
    with col2:
        st.download_button(
            "⬇️ Export CSV",
            data=ledger.export_csv(),
            file_name=export_filename("csv"),
            mime="text/csv",
            on_click=ledger.record_export,
            args=("csv",),
        )

    st.markdown("---")
    st.subheader("Import from JSON export")
    uploaded = st.file_uploader("Choose an export file", type=["json"])
    if uploaded is not None:
        confirm = st.checkbox("Replace all current records with this file")
        if st.button("Import"):
            try:
                if ledger.import_json(uploaded.read().decode("utf-8"), confirmed=confirm):
                    st.success("Ledger imported")
                    st.rerun()
                else:
                    st.warning("Tick the confirmation box to replace your records.")
            except (ReportFormatError, UnicodeDecodeError) as e:
                st.error(f"Could not import file: {e}")

    st.markdown("---")
    report_text = render_printable_text(
        ledger.printable_report(),
        get_settings().app.currency_symbol,
    )
    st.download_button(
        "🖨️ Download printable report",
        data=report_text,
        file_name=export_filename("md"),
        mime="text/markdown",
        on_click=ledger.record_export,
        args=("printable",),
    )
    st.markdown(report_text)


def render_settings_page():
    """Show configuration status."""
    st.title("⚙️ Settings")

    results = validate_all_settings()
    for name in ("gemini", "storage", "app"):
        if results.get(name):
            st.success(f"{name.title()}: configured")
        else:
            st.warning(f"{name.title()}: {results.get(f'{name}_error', 'not configured')}")

    st.caption(f"Data file: {get_settings().storage.blob_path}")


if __name__ == "__main__":
    main()
