"""
Application Wiring for CaZen

Builds the storage backends, services and contexts the UI works with.

DESIGN DECISION: Storage is chosen once, here.
- With a spreadsheet configured, everything goes to Google Sheets
- Without one (or when asked), everything stays in memory so the app
  still runs as a demo
Nothing else in the code base knows which backend is in use.
"""

from typing import Optional

import structlog

from cazen.audit import ActivityLogger, configure_logging
from cazen.config import AppSettings, get_settings
from cazen.context import AppContext
from cazen.dashboard.service import DashboardService
from cazen.models.planning import Expense, Guest, Task
from cazen.notifications import Notifier
from cazen.services.planning import (
    ExpenseService,
    GuestService,
    OrganizationService,
    TaskService,
)
from cazen.services.storage import (
    ActivityStorageInterface,
    GoogleSheetsActivityStorage,
    GoogleSheetsClient,
    GoogleSheetsOrganizationStorage,
    GoogleSheetsProfileStorage,
    GoogleSheetsRecordRepository,
    InMemoryActivityStorage,
    InMemoryOrganizationStorage,
    InMemoryProfileStorage,
    InMemoryRecordRepository,
    OrganizationStorageInterface,
    ProfileStorageInterface,
    RecordRepository,
)

logger = structlog.get_logger(__name__)


class StorageBundle:
    """One backend's worth of storage objects."""

    def __init__(
        self,
        organizations: OrganizationStorageInterface,
        expenses: RecordRepository[Expense],
        tasks: RecordRepository[Task],
        guests: RecordRepository[Guest],
        profiles: ProfileStorageInterface,
        activity: ActivityStorageInterface,
        backend: str,
    ):
        self.organizations = organizations
        self.expenses = expenses
        self.tasks = tasks
        self.guests = guests
        self.profiles = profiles
        self.activity = activity
        self.backend = backend

    @classmethod
    def in_memory(cls) -> "StorageBundle":
        return cls(
            organizations=InMemoryOrganizationStorage(),
            expenses=InMemoryRecordRepository(),
            tasks=InMemoryRecordRepository(),
            guests=InMemoryRecordRepository(),
            profiles=InMemoryProfileStorage(),
            activity=InMemoryActivityStorage(),
            backend="memory",
        )

    @classmethod
    def google_sheets(cls, client: Optional[GoogleSheetsClient] = None) -> "StorageBundle":
        client = client or GoogleSheetsClient()
        sheets = client.settings
        return cls(
            organizations=GoogleSheetsOrganizationStorage(client),
            expenses=GoogleSheetsRecordRepository(client, Expense, sheets.expenses_sheet_name),
            tasks=GoogleSheetsRecordRepository(client, Task, sheets.tasks_sheet_name),
            guests=GoogleSheetsRecordRepository(client, Guest, sheets.guests_sheet_name),
            profiles=GoogleSheetsProfileStorage(client),
            activity=GoogleSheetsActivityStorage(client),
            backend="google_sheets",
        )


class AppComponents:
    """
    Everything the UI needs, built by create_app_components().

    These objects hold no per-user state and can be shared by every
    browser session. Sessions get their own AppContext from create_context().
    """

    def __init__(
        self,
        storage: StorageBundle,
        settings: AppSettings,
        dashboard: DashboardService,
        organizations: OrganizationService,
        expenses: ExpenseService,
        tasks: TaskService,
        guests: GuestService,
        activity_logger: ActivityLogger,
    ):
        self.storage = storage
        self.settings = settings
        self.dashboard = dashboard
        self.organizations = organizations
        self.expenses = expenses
        self.tasks = tasks
        self.guests = guests
        self.activity_logger = activity_logger

    def create_context(self) -> AppContext:
        """A fresh, not yet started, AppContext for one user session."""
        return AppContext(
            settings=self.settings,
            profiles=self.storage.profiles,
            activity_logger=self.activity_logger,
        )


def create_app_components(
    use_storage: bool = True,
    notifier: Optional[Notifier] = None,
    storage: Optional[StorageBundle] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use Google Sheets. Set to False for
                    demo mode and tests (in-memory storage).
        notifier: Where user messages go. Defaults to the log.
        storage: Explicit storage to use instead of either of the above.

    Returns:
        The wired, shareable components. Call create_context() once per
        user session.
    """
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)

    if storage is None:
        if use_storage:
            try:
                storage = StorageBundle.google_sheets()
            except Exception as e:
                # Storage not configured - continue in memory
                logger.warning("storage_not_configured", error=str(e))
                storage = StorageBundle.in_memory()
        else:
            storage = StorageBundle.in_memory()

    activity_logger = ActivityLogger(storage.activity)

    components = AppComponents(
        storage=storage,
        settings=app_settings,
        dashboard=DashboardService(
            organizations=storage.organizations,
            expenses=storage.expenses,
            tasks=storage.tasks,
            guests=storage.guests,
            activity_logger=activity_logger,
        ),
        organizations=OrganizationService(storage.organizations, notifier, activity_logger),
        expenses=ExpenseService(storage.expenses, notifier, activity_logger),
        tasks=TaskService(storage.tasks, notifier, activity_logger),
        guests=GuestService(storage.guests, notifier, activity_logger),
        activity_logger=activity_logger,
    )

    logger.info("app_components_created", backend=storage.backend)
    return components
