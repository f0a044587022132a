"""
Dashboard Loading

Bridges storage and the aggregation functions: fetch the wedding's rows
through the repositories, then hand the in-memory lists to the
aggregator. Nothing here computes a number itself.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from cazen.audit import ActivityLogger
from cazen.dashboard import aggregator
from cazen.models.activity import ActivityEventBuilder
from cazen.models.planning import Expense, Guest, Organization, Task
from cazen.models.summary import BudgetSummary, DashboardStats
from cazen.services.storage import OrganizationStorageInterface, RecordRepository


class DashboardView(BaseModel):
    """What the home page renders."""
    model_config = ConfigDict(frozen=True)

    organization: Organization
    stats: DashboardStats


class DashboardService:
    """
    Read-only access to the summaries of one wedding.

    GUARANTEES:
    - Only reports what storage returned
    - Owners without a wedding get None, never an empty dashboard
    """

    def __init__(
        self,
        organizations: OrganizationStorageInterface,
        expenses: RecordRepository[Expense],
        tasks: RecordRepository[Task],
        guests: RecordRepository[Guest],
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._organizations = organizations
        self._expenses = expenses
        self._tasks = tasks
        self._guests = guests
        self._activity_logger = activity_logger

    async def load_dashboard(self, owner_id: str) -> Optional[DashboardView]:
        """
        Load the dashboard of the user's wedding.

        Returns:
            The view, or None when the user has no wedding yet
            (the caller should send them to setup).
        """
        organization = await self._organizations.get_by_owner(owner_id)
        if organization is None:
            return None

        tasks = await self._tasks.find_by_organization(organization.id)
        guests = await self._guests.find_by_organization(organization.id)
        expenses = await self._expenses.find_by_organization(organization.id)

        if self._activity_logger:
            await self._activity_logger.log(
                ActivityEventBuilder.dashboard_loaded(
                    organization_id=organization.id,
                    tasks=len(tasks),
                    guests=len(guests),
                    expenses=len(expenses),
                )
            )

        return DashboardView(
            organization=organization,
            stats=aggregator.build_dashboard_stats(tasks, guests, expenses),
        )

    async def load_budget(
        self,
        organization_id: UUID,
        total_budget: Optional[Decimal] = None,
    ) -> BudgetSummary:
        expenses = await self._expenses.find_by_organization(organization_id)
        return aggregator.summarize_budget(expenses, total_budget)

    async def load_expenses(self, organization_id: UUID) -> list[Expense]:
        return await self._expenses.find_by_organization(organization_id)

    async def load_task_board(
        self,
        organization_id: UUID,
    ) -> tuple[list[Task], list[Task]]:
        """(open, completed) tasks in storage order."""
        tasks = await self._tasks.find_by_organization(organization_id)
        return aggregator.split_tasks(tasks)

    async def load_guests(self, organization_id: UUID) -> list[Guest]:
        return await self._guests.find_by_organization(organization_id)
