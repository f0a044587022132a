"""
Tests for the Streamlit pages.

Pages run through Streamlit's AppTest against in-memory storage. The
components are cached for the whole process, so every test signs in with
its own user id.
"""

from pathlib import Path
from uuid import uuid4

import pytest
from streamlit.testing.v1 import AppTest

from cazen.config import get_settings
from cazen.models.planning import GuestStatus

APP_PATH = str(Path(__file__).parent.parent / "app" / "main.py")


@pytest.fixture(autouse=True)
def demo_mode(monkeypatch):
    """Run the app without Google Sheets configured."""
    monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
    monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def open_app() -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    return at


def button(at: AppTest, label: str):
    return next(b for b in at.button if b.label == label)


def sign_in_with_wedding(at: AppTest) -> str:
    user_id = f"user-{uuid4()}"
    at.text_input(key="user_id").input(user_id).run()
    at.text_input(key="setup-partner").input("Alex")
    button(at, "Create wedding").click().run()
    return user_id


class TestSessions:
    """Each browser session signs in on its own."""

    def test_signed_out_page(self):
        """Test the app asks for a user id first."""
        at = open_app()
        assert not at.exception
        assert "Enter your user id" in at.info[0].value

    def test_sign_in_does_not_leak_to_other_session(self):
        """Test a second browser stays signed out while the first is signed in."""
        first = open_app()
        sign_in_with_wedding(first)
        assert len(first.radio) == 1

        second = open_app()
        assert not second.exception
        assert len(second.radio) == 0
        assert "Enter your user id" in second.info[0].value

    def test_sign_out_clears_the_session(self):
        """Test signing out from settings returns to the signed-out page."""
        at = open_app()
        sign_in_with_wedding(at)
        at.radio(key="page").set_value("⚙️ Settings").run()

        button(at, "Sign out").click().run()

        assert not at.exception
        assert at.text_input(key="user_id").value == ""
        assert "Enter your user id" in at.info[0].value


class TestTasksPage:
    """Creating, editing and deleting tasks from the checklist."""

    def open_tasks(self) -> AppTest:
        at = open_app()
        sign_in_with_wedding(at)
        at.radio(key="page").set_value("✅ Tasks").run()
        at.text_input(key="new-task-title").input("Book the band")
        button(at, "Save").click().run()
        return at

    def task_labels(self, at: AppTest) -> list[str]:
        return [c.label for c in at.checkbox if c.key and c.key.startswith("task-")]

    def test_create(self):
        at = self.open_tasks()
        assert not at.exception
        assert any("Book the band" in label for label in self.task_labels(at))

    def test_edit_title(self):
        """Test the edit form saves a new title."""
        at = self.open_tasks()
        title = next(
            t for t in at.text_input
            if t.key and t.key.startswith("edit-task-") and t.key.endswith("-title")
        )
        title.input("Book the jazz band")
        button(at, "Save changes").click().run()

        assert not at.exception
        labels = self.task_labels(at)
        assert any("Book the jazz band" in label for label in labels)
        assert len(labels) == 1

    def test_delete(self):
        """Test the delete button removes the task."""
        at = self.open_tasks()
        delete = next(b for b in at.button if b.key and b.key.startswith("del-task-"))
        delete.click().run()

        assert not at.exception
        assert self.task_labels(at) == []
        assert any("No tasks registered yet." in i.value for i in at.info)


class TestBudgetPage:
    """Expense amounts typed into the budget page."""

    def test_zero_actual_amount_is_saved(self):
        """Test an actual amount of 0 is shown as paid 0, not as the estimate."""
        at = open_app()
        sign_in_with_wedding(at)
        at.radio(key="page").set_value("💰 Budget").run()

        at.text_input(key="new-expense-category").input("Flowers")
        at.number_input(key="new-expense-estimated").set_value(300.0)
        at.number_input(key="new-expense-actual").set_value(0.0)
        button(at, "Save").click().run()

        assert not at.exception
        amounts = [m.value for m in at.markdown]
        assert "R$ 0,00" in amounts
        assert not any(value.startswith("Est.") for value in amounts)


class TestGuestsPage:
    """Editing and deleting guests."""

    def open_guests(self) -> AppTest:
        at = open_app()
        sign_in_with_wedding(at)
        at.radio(key="page").set_value("👥 Guests").run()
        at.text_input(key="new-guest-name").input("Maria")
        button(at, "Save").click().run()
        return at

    def test_edit_keeps_rsvp(self):
        """Test editing a guest changes the name and keeps the RSVP."""
        at = self.open_guests()
        name = next(
            t for t in at.text_input
            if t.key and t.key.startswith("edit-guest-") and t.key.endswith("-name")
        )
        name.input("Maria Silva")
        button(at, "Save changes").click().run()

        assert not at.exception
        assert any(m.value == "**Maria Silva**" for m in at.markdown)
        rsvp = next(s for s in at.selectbox if s.key and s.key.startswith("rsvp-"))
        assert rsvp.index == list(GuestStatus).index(GuestStatus.PENDING)

    def test_delete(self):
        at = self.open_guests()
        delete = next(b for b in at.button if b.key and b.key.startswith("del-guest-"))
        delete.click().run()

        assert not at.exception
        assert any("No guests registered yet." in i.value for i in at.info)
