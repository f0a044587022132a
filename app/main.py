"""
Streamlit Frontend for CaZen

The screens the couple uses day to day: dashboard, budget, checklist,
guest list, wedding setup and settings.

DESIGN PRINCIPLES:
1. Every number shown comes from the dashboard aggregator
2. Forms build drafts; validation errors are shown, never silently fixed
3. Every action gives feedback (toast)

CRITICAL: st.cache_resource is shared by every browser session in the
process. Only stateless components (storage, services) are cached; who is
signed in and which theme is active live in an AppContext kept in
st.session_state.
"""

import asyncio
from datetime import date
from typing import Optional

import streamlit as st
from pydantic import ValidationError

from cazen.context import AppContext, AuthSession
from cazen.formatting import amount_from_input, format_currency, format_percentage
from cazen.models.planning import (
    Expense,
    ExpenseDraft,
    ExpenseStatus,
    Guest,
    GuestDraft,
    GuestStatus,
    Organization,
    OrganizationDraft,
    Task,
    TaskCategory,
    TaskDraft,
    TaskPriority,
    Theme,
)
from cazen.notifications import Notifier
from cazen.orchestrator import AppComponents, create_app_components
from cazen.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="CaZen",
    page_icon="💍",
    layout="wide",
    initial_sidebar_state="expanded",
)

DARK_CSS = """
<style>
    .stApp { background-color: #1f1b24; color: #f3eef7; }
</style>
"""


class ToastNotifier(Notifier):
    """Shows service messages as Streamlit toasts."""

    def success(self, message: str) -> None:
        st.toast(message, icon="✅")

    def error(self, message: str) -> None:
        st.toast(message, icon="⚠️")


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create the shared application components (cached)."""
    return create_app_components(use_storage=True, notifier=ToastNotifier())


def get_context(components: AppComponents) -> AppContext:
    """This browser session's AppContext, started on first use."""
    if "app_context" not in st.session_state:
        context = components.create_context()
        run_async(context.start())
        st.session_state.app_context = context
    return st.session_state.app_context


def sign_out() -> None:
    """Button callback: drop this session's context and clear the login."""
    context = st.session_state.pop("app_context", None)
    if context is not None:
        context.stop()
    st.session_state.user_id = ""


def submit(coro) -> None:
    """Run a service call and refresh the page, or show why it failed."""
    try:
        run_async(coro)
    except StorageError as e:
        st.error(f"Failed to save: {str(e)}")
        return
    st.rerun()


def _as_float(amount) -> Optional[float]:
    return float(amount) if amount is not None else None


def main():
    """Main application entry point."""
    components = get_components()

    st.sidebar.title("💍 CaZen")
    st.sidebar.markdown("---")

    # Auth is handled by the hosting platform; we only need the user id.
    user_id = st.sidebar.text_input("Signed in as", key="user_id").strip()

    context = get_context(components)
    if (user_id or None) != context.session.user_id:
        run_async(context.session.update(AuthSession(user_id=user_id) if user_id else None))

    if context.theme.theme == Theme.DARK:
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    if not context.session.is_authenticated:
        st.title("Plan your wedding calmly")
        st.info("Enter your user id in the sidebar to start.")
        return

    organization = run_async(components.organizations.get_for_owner(context.session.user_id))
    if organization is None:
        render_setup_page(components, context)
        return

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "💰 Budget", "✅ Tasks", "👥 Guests", "⚙️ Settings"],
        index=0,
        key="page",
    )

    if page == "🏠 Dashboard":
        render_dashboard_page(components, context)
    elif page == "💰 Budget":
        render_budget_page(components, context, organization)
    elif page == "✅ Tasks":
        render_tasks_page(components, context, organization)
    elif page == "👥 Guests":
        render_guests_page(components, context, organization)
    elif page == "⚙️ Settings":
        render_settings_page(components, context)


# =============================================================================
# FORMS
# =============================================================================

def expense_form(key: str, expense: Optional[Expense] = None) -> Optional[ExpenseDraft]:
    """Expense fields, prefilled when editing. Returns a draft once submitted and valid."""
    statuses = list(ExpenseStatus)
    with st.form(key, clear_on_submit=expense is None):
        category = st.text_input(
            "Category *",
            value=expense.category if expense else "",
            placeholder="e.g. Venue, Catering, Decoration",
            key=f"{key}-category",
        )
        description = st.text_area(
            "Description",
            value=(expense.description or "") if expense else "",
            key=f"{key}-description",
        )
        estimated = st.number_input(
            "Estimated amount",
            min_value=0.0,
            step=0.01,
            format="%.2f",
            value=_as_float(expense.estimated_amount) if expense else None,
            key=f"{key}-estimated",
        )
        actual = st.number_input(
            "Actual amount",
            min_value=0.0,
            step=0.01,
            format="%.2f",
            value=_as_float(expense.actual_amount) if expense else None,
            key=f"{key}-actual",
        )
        status = st.selectbox(
            "Status",
            options=statuses,
            index=statuses.index(expense.status) if expense else 0,
            format_func=lambda s: s.value.title(),
            key=f"{key}-status",
        )
        submitted = st.form_submit_button("Save changes" if expense else "Save", type="primary")

    if not submitted:
        return None
    try:
        return ExpenseDraft(
            category=category,
            description=description,
            estimated_amount=amount_from_input(estimated),
            actual_amount=amount_from_input(actual),
            status=status,
        )
    except ValidationError as e:
        st.error(f"Please check the form: {e.errors()[0]['msg']}")
        return None


def task_form(key: str, task: Optional[Task] = None) -> Optional[TaskDraft]:
    """Task fields, prefilled when editing."""
    categories = list(TaskCategory)
    with st.form(key, clear_on_submit=task is None):
        title = st.text_input("Title *", value=task.title if task else "", key=f"{key}-title")
        description = st.text_area(
            "Description",
            value=(task.description or "") if task else "",
            key=f"{key}-description",
        )
        category = st.selectbox(
            "Category",
            options=categories,
            index=categories.index(task.category if task else TaskCategory.OTHER),
            format_func=lambda c: c.value.title(),
            key=f"{key}-category",
        )
        high_priority = st.checkbox(
            "High priority",
            value=task.is_high_priority if task else False,
            key=f"{key}-priority",
        )
        due_date = st.date_input(
            "Due date",
            value=task.due_date if task else None,
            key=f"{key}-due",
        )
        submitted = st.form_submit_button("Save changes" if task else "Save", type="primary")

    if not submitted:
        return None
    try:
        return TaskDraft(
            title=title,
            description=description,
            category=category,
            priority=TaskPriority.HIGH if high_priority else TaskPriority.NORMAL,
            due_date=due_date,
        )
    except ValidationError as e:
        st.error(f"Please check the form: {e.errors()[0]['msg']}")
        return None


def guest_form(key: str, guest: Optional[Guest] = None) -> Optional[GuestDraft]:
    """Guest fields, prefilled when editing. The RSVP is changed from the list."""
    with st.form(key, clear_on_submit=guest is None):
        name = st.text_input("Name *", value=guest.name if guest else "", key=f"{key}-name")
        email = st.text_input("Email", value=(guest.email or "") if guest else "", key=f"{key}-email")
        phone = st.text_input("Phone", value=(guest.phone or "") if guest else "", key=f"{key}-phone")
        plus_one = st.checkbox("Plus one", value=guest.plus_one if guest else False, key=f"{key}-plus-one")
        table_number = st.number_input(
            "Table",
            min_value=1,
            step=1,
            value=guest.table_number if guest else None,
            key=f"{key}-table",
        )
        notes = st.text_area("Notes", value=(guest.notes or "") if guest else "", key=f"{key}-notes")
        submitted = st.form_submit_button("Save changes" if guest else "Save", type="primary")

    if not submitted:
        return None
    try:
        return GuestDraft(
            name=name,
            email=email or None,
            phone=phone or None,
            status=guest.status if guest else GuestStatus.PENDING,
            plus_one=plus_one,
            table_number=int(table_number) if table_number is not None else None,
            notes=notes or None,
        )
    except ValidationError as e:
        st.error(f"Please check the form: {e.errors()[0]['msg']}")
        return None


# =============================================================================
# PAGES
# =============================================================================

def render_setup_page(components: AppComponents, context: AppContext):
    """First run: create the wedding."""
    st.title("Welcome to CaZen! 💫")
    st.markdown("Let's start with the details of your wedding.")

    with st.form("setup"):
        partner_name = st.text_input("Partner's name *", key="setup-partner")
        wedding_date = st.date_input("Wedding date *", value=date.today(), key="setup-date")
        venue = st.text_input("Ceremony venue (optional)", key="setup-venue")
        submitted = st.form_submit_button("Create wedding", type="primary")

    if submitted:
        try:
            draft = OrganizationDraft(
                partner_name=partner_name,
                wedding_date=wedding_date,
                venue=venue or None,
            )
        except ValidationError as e:
            st.error(f"Please check the form: {e.errors()[0]['msg']}")
            return
        submit(components.organizations.setup(context.session.user_id, draft))


def render_dashboard_page(components: AppComponents, context: AppContext):
    """Progress and summary cards."""
    view = run_async(components.dashboard.load_dashboard(context.session.user_id))
    if view is None:
        st.rerun()
        return

    stats = view.stats
    currency = components.settings.currency_code

    st.title("Hello! 💫")
    st.markdown(
        "Take a deep breath, everything is under control. "
        "Your big day gets closer with every task you finish."
    )

    st.subheader("❤️ Wedding progress")
    st.progress(stats.progress_percentage / 100)
    st.caption(
        f"{stats.tasks_completed} of {stats.tasks_total} tasks completed "
        f"({stats.progress_percentage}%)"
    )

    col1, col2, col3 = st.columns(3)
    col1.metric("Tasks", f"{stats.tasks_completed}/{stats.tasks_total}")
    col2.metric("Guests confirmed", f"{stats.guests_confirmed}/{stats.guests_total}")
    col3.metric(
        "Budget spent",
        format_currency(stats.budget_spent, currency),
        help=f"of {format_currency(stats.budget_total, currency)}",
    )


def render_budget_page(components: AppComponents, context: AppContext, organization: Organization):
    """Budget overview plus the expense list."""
    settings = components.settings
    st.title("💰 Budget")

    summary = run_async(
        components.dashboard.load_budget(organization.id, settings.default_total_budget)
    )

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Summary")
        st.markdown(f"**Total spent:** {format_currency(summary.total_spent, settings.currency_code)}")
        st.markdown(f"**Total budget:** {format_currency(summary.budget, settings.currency_code)}")
        remaining_text = format_currency(abs(summary.remaining), settings.currency_code)
        if summary.is_over_budget:
            st.error(f"Remaining: {remaining_text} (over budget)")
        else:
            st.success(f"Remaining: {remaining_text}")
        st.markdown(f"**Progress:** {format_percentage(summary.percentage_spent)}")
        st.progress(summary.progress_value / 100)

    with col2:
        st.subheader("By category")
        if summary.categories:
            st.bar_chart({c.name: float(c.value) for c in summary.categories})
        else:
            st.info("No expenses yet")

    st.markdown("---")
    st.subheader("Expenses")

    with st.expander("➕ New expense"):
        draft = expense_form("new-expense")
        if draft is not None:
            submit(components.expenses.create(organization.id, context.session.user_id, draft))

    expenses = run_async(components.dashboard.load_expenses(organization.id))
    if not expenses:
        st.info("No expenses registered yet.")
    for expense in expenses:
        col1, col2, col3 = st.columns([3, 2, 1])
        col1.markdown(f"**{expense.category}** · {expense.status.value}")
        if expense.description:
            col1.caption(expense.description)
        if expense.actual_amount is not None:
            col2.markdown(format_currency(expense.actual_amount, settings.currency_code))
        else:
            col2.markdown(
                f"Est. {format_currency(expense.estimated_amount or 0, settings.currency_code)}"
            )
        if col3.button("🗑️", key=f"del-expense-{expense.id}"):
            submit(components.expenses.delete(expense.id))

        with st.expander("✏️ Edit"):
            draft = expense_form(f"edit-expense-{expense.id}", expense)
            if draft is not None:
                submit(components.expenses.update(expense.id, draft))


def render_tasks_page(components: AppComponents, context: AppContext, organization: Organization):
    """The checklist."""
    st.title("✅ Tasks")

    with st.expander("➕ New task"):
        draft = task_form("new-task")
        if draft is not None:
            submit(components.tasks.create(organization.id, context.session.user_id, draft))

    open_tasks, completed = run_async(components.dashboard.load_task_board(organization.id))

    if not open_tasks and not completed:
        st.info("No tasks registered yet.")

    for task in open_tasks:
        label = f"**{task.title}** · {task.category.value}"
        if task.is_high_priority:
            label += " · 🔴 high priority"
        if task.due_date:
            label += f" · 📅 {task.due_date.strftime('%d %b')}"
        render_task_row(components, task, label, done=False)

    if completed:
        st.markdown("#### Completed")
        for task in completed:
            render_task_row(components, task, f"~~{task.title}~~", done=True)


def render_task_row(components: AppComponents, task: Task, label: str, done: bool):
    col1, col2 = st.columns([5, 1])
    if col1.checkbox(label, value=done, key=f"task-{task.id}") != done:
        submit(components.tasks.toggle_complete(task.id))
    if col2.button("🗑️", key=f"del-task-{task.id}"):
        submit(components.tasks.delete(task.id))

    with st.expander("✏️ Edit"):
        draft = task_form(f"edit-task-{task.id}", task)
        if draft is not None:
            submit(components.tasks.update(task.id, draft))


def render_guests_page(components: AppComponents, context: AppContext, organization: Organization):
    """The guest list with RSVP status."""
    st.title("👥 Guests")

    with st.expander("➕ New guest"):
        draft = guest_form("new-guest")
        if draft is not None:
            submit(components.guests.create(organization.id, context.session.user_id, draft))

    guests = run_async(components.dashboard.load_guests(organization.id))
    if not guests:
        st.info("No guests registered yet.")
    statuses = list(GuestStatus)
    for guest in guests:
        col1, col2, col3 = st.columns([3, 2, 1])
        col1.markdown(f"**{guest.name}**" + (" (+1)" if guest.plus_one else ""))
        status = col2.selectbox(
            "RSVP",
            options=statuses,
            index=statuses.index(guest.status),
            format_func=lambda s: s.value.title(),
            key=f"rsvp-{guest.id}",
            label_visibility="collapsed",
        )
        if status != guest.status:
            submit(components.guests.set_status(guest.id, status))
        if col3.button("🗑️", key=f"del-guest-{guest.id}"):
            submit(components.guests.delete(guest.id))

        with st.expander("✏️ Edit"):
            draft = guest_form(f"edit-guest-{guest.id}", guest)
            if draft is not None:
                submit(components.guests.update(guest.id, draft))


def render_settings_page(components: AppComponents, context: AppContext):
    """Appearance and account."""
    st.title("⚙️ Settings")

    st.markdown("### Appearance")
    dark = st.toggle("Dark mode", value=context.theme.theme == Theme.DARK)
    if dark != (context.theme.theme == Theme.DARK):
        run_async(context.theme.set_theme(Theme.DARK if dark else Theme.LIGHT))
        st.rerun()

    st.markdown("### Account")
    st.button("Sign out", type="primary", on_click=sign_out)

    st.markdown("### Connection Status")
    from cazen.config import validate_all_settings

    status = validate_all_settings()
    if status.get("google_sheets", False):
        st.success(f"✅ Google Sheets (Storage) - {components.storage.backend}")
    else:
        error = status.get("google_sheets_error", "Not configured")
        st.warning(f"⚠️ Google Sheets (Storage) - {error}. Running in demo mode.")


if __name__ == "__main__":
    main()
