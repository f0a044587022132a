"""
Planning Services

The write side of the planner: setting up the wedding and keeping the
budget, checklist and guest list up to date.

Every operation follows the same shape:
1. Build the new record from a validated draft
2. Write it through the repository
3. Tell the user (notifier) and record it (activity log)

If the store fails, the user is told, the failure is recorded, and the
StorageError is re-raised so the caller can stop what it was doing.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from cazen.audit import ActivityLogger
from cazen.models.activity import ActivityEvent, ActivityEventBuilder
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
    TaskDraft,
    TaskStatus,
)
from cazen.notifications import LogNotifier, Notifier
from cazen.services.storage import (
    DuplicateError,
    NotFoundError,
    OrganizationStorageInterface,
    RecordRepository,
    StorageError,
)


class _PlanningService:
    """Shared notification and activity plumbing."""

    def __init__(
        self,
        notifier: Optional[Notifier] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._notifier = notifier or LogNotifier()
        self._activity_logger = activity_logger

    async def _record(self, event: ActivityEvent) -> None:
        if self._activity_logger:
            await self._activity_logger.log(event)

    async def _fail(
        self,
        operation: str,
        message: str,
        error: Exception,
        organization_id: Optional[UUID] = None,
    ) -> None:
        self._notifier.error(message)
        await self._record(
            ActivityEventBuilder.storage_error(
                operation=operation,
                error_message=str(error),
                organization_id=organization_id,
            )
        )


class OrganizationService(_PlanningService):
    """Wedding setup."""

    def __init__(
        self,
        storage: OrganizationStorageInterface,
        notifier: Optional[Notifier] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        super().__init__(notifier, activity_logger)
        self._storage = storage

    async def get_for_owner(self, owner_id: str) -> Optional[Organization]:
        """The user's wedding, or None if they still need to set one up."""
        return await self._storage.get_by_owner(owner_id)

    async def setup(self, owner_id: str, draft: OrganizationDraft) -> Organization:
        """
        Create the user's wedding.

        Raises:
            DuplicateError: If the user already has one
        """
        organization = Organization(
            owner_id=owner_id,
            partner_name=draft.partner_name,
            wedding_date=draft.wedding_date,
            venue=draft.venue,
        )

        try:
            await self._storage.create(organization)
        except DuplicateError:
            self._notifier.error("You already have a wedding set up")
            raise
        except StorageError as e:
            await self._fail("organization_setup", "Could not create the wedding", e)
            raise

        self._notifier.success("Wedding created successfully! 💍")
        await self._record(ActivityEventBuilder.organization_created(organization))
        return organization


class ExpenseService(_PlanningService):
    """Budget lines."""

    def __init__(
        self,
        repository: RecordRepository[Expense],
        notifier: Optional[Notifier] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        super().__init__(notifier, activity_logger)
        self._repository = repository

    @staticmethod
    def _paid_at(
        status: ExpenseStatus,
        previous: Optional[datetime] = None,
    ) -> Optional[datetime]:
        # Paid expenses keep the moment they were first marked paid.
        if status != ExpenseStatus.PAID:
            return None
        return previous or datetime.utcnow()

    async def create(
        self,
        organization_id: UUID,
        user_id: Optional[str],
        draft: ExpenseDraft,
    ) -> Expense:
        expense = Expense(
            organization_id=organization_id,
            user_id=user_id,
            category=draft.category,
            description=draft.description,
            estimated_amount=draft.estimated_amount,
            actual_amount=draft.actual_amount,
            status=draft.status,
            paid_at=self._paid_at(draft.status),
        )

        try:
            await self._repository.insert(expense)
        except StorageError as e:
            await self._fail("expense_create", "Could not save expense", e, organization_id)
            raise

        self._notifier.success("Expense created!")
        await self._record(ActivityEventBuilder.expense_saved(expense, created=True))
        return expense

    async def update(self, expense_id: UUID, draft: ExpenseDraft) -> Expense:
        """
        Replace the editable fields of an expense.

        Raises:
            NotFoundError: If the expense doesn't exist
        """
        try:
            existing = await self._repository.get_by_id(expense_id)
            if existing is None:
                raise NotFoundError(f"Expense not found: {expense_id}")

            expense = existing.model_copy(
                update={
                    "category": draft.category,
                    "description": draft.description,
                    "estimated_amount": draft.estimated_amount,
                    "actual_amount": draft.actual_amount,
                    "status": draft.status,
                    "paid_at": self._paid_at(draft.status, existing.paid_at),
                    "updated_at": datetime.utcnow(),
                }
            )
            await self._repository.update(expense)
        except StorageError as e:
            await self._fail("expense_update", "Could not save expense", e)
            raise

        self._notifier.success("Expense updated!")
        await self._record(ActivityEventBuilder.expense_saved(expense, created=False))
        return expense

    async def delete(self, expense_id: UUID) -> bool:
        try:
            existing = await self._repository.get_by_id(expense_id)
            if existing is None:
                return False
            deleted = await self._repository.delete(expense_id)
        except StorageError as e:
            await self._fail("expense_delete", "Could not delete expense", e)
            raise

        if deleted:
            self._notifier.success("Expense deleted!")
            await self._record(ActivityEventBuilder.expense_deleted(existing))
        return deleted


class TaskService(_PlanningService):
    """The planning checklist."""

    def __init__(
        self,
        repository: RecordRepository[Task],
        notifier: Optional[Notifier] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        super().__init__(notifier, activity_logger)
        self._repository = repository

    async def create(
        self,
        organization_id: UUID,
        user_id: Optional[str],
        draft: TaskDraft,
    ) -> Task:
        task = Task(
            organization_id=organization_id,
            user_id=user_id,
            title=draft.title,
            description=draft.description,
            category=draft.category,
            priority=draft.priority.value,
            due_date=draft.due_date,
        )

        try:
            await self._repository.insert(task)
        except StorageError as e:
            await self._fail("task_create", "Could not save task", e, organization_id)
            raise

        self._notifier.success("Task created!")
        await self._record(ActivityEventBuilder.task_saved(task, created=True))
        return task

    async def update(self, task_id: UUID, draft: TaskDraft) -> Task:
        """
        Replace the editable fields of a task. Status is left alone;
        use toggle_complete for that.
        """
        try:
            existing = await self._repository.get_by_id(task_id)
            if existing is None:
                raise NotFoundError(f"Task not found: {task_id}")

            task = existing.model_copy(
                update={
                    "title": draft.title,
                    "description": draft.description,
                    "category": draft.category,
                    "priority": draft.priority.value,
                    "due_date": draft.due_date,
                    "updated_at": datetime.utcnow(),
                }
            )
            await self._repository.update(task)
        except StorageError as e:
            await self._fail("task_update", "Could not save task", e)
            raise

        self._notifier.success("Task updated!")
        await self._record(ActivityEventBuilder.task_saved(task, created=False))
        return task

    async def toggle_complete(self, task_id: UUID) -> Task:
        """
        Tick or untick a task.

        Completed tasks go back to pending; anything else becomes completed.
        """
        try:
            existing = await self._repository.get_by_id(task_id)
            if existing is None:
                raise NotFoundError(f"Task not found: {task_id}")

            if existing.status == TaskStatus.COMPLETED:
                status, completed_at = TaskStatus.PENDING, None
            else:
                status, completed_at = TaskStatus.COMPLETED, datetime.utcnow()

            task = existing.model_copy(
                update={
                    "status": status,
                    "completed_at": completed_at,
                    "updated_at": datetime.utcnow(),
                }
            )
            await self._repository.update(task)
        except StorageError as e:
            await self._fail("task_toggle", "Could not update task", e)
            raise

        if task.status == TaskStatus.COMPLETED:
            self._notifier.success("Task completed!")
        else:
            self._notifier.success("Task reopened")
        await self._record(ActivityEventBuilder.task_toggled(task))
        return task

    async def delete(self, task_id: UUID) -> bool:
        try:
            existing = await self._repository.get_by_id(task_id)
            if existing is None:
                return False
            deleted = await self._repository.delete(task_id)
        except StorageError as e:
            await self._fail("task_delete", "Could not delete task", e)
            raise

        if deleted:
            self._notifier.success("Task deleted!")
            await self._record(ActivityEventBuilder.task_deleted(existing))
        return deleted


class GuestService(_PlanningService):
    """The guest list."""

    def __init__(
        self,
        repository: RecordRepository[Guest],
        notifier: Optional[Notifier] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        super().__init__(notifier, activity_logger)
        self._repository = repository

    async def create(
        self,
        organization_id: UUID,
        user_id: Optional[str],
        draft: GuestDraft,
    ) -> Guest:
        guest = Guest(
            organization_id=organization_id,
            user_id=user_id,
            **draft.model_dump(),
        )

        try:
            await self._repository.insert(guest)
        except StorageError as e:
            await self._fail("guest_create", "Could not save guest", e, organization_id)
            raise

        self._notifier.success("Guest added!")
        await self._record(ActivityEventBuilder.guest_saved(guest, created=True))
        return guest

    async def update(self, guest_id: UUID, draft: GuestDraft) -> Guest:
        try:
            existing = await self._repository.get_by_id(guest_id)
            if existing is None:
                raise NotFoundError(f"Guest not found: {guest_id}")

            guest = existing.model_copy(
                update={**draft.model_dump(), "updated_at": datetime.utcnow()}
            )
            await self._repository.update(guest)
        except StorageError as e:
            await self._fail("guest_update", "Could not save guest", e)
            raise

        self._notifier.success("Guest updated!")
        await self._record(ActivityEventBuilder.guest_saved(guest, created=False))
        return guest

    async def set_status(self, guest_id: UUID, status: GuestStatus) -> Guest:
        """Record an RSVP."""
        try:
            existing = await self._repository.get_by_id(guest_id)
            if existing is None:
                raise NotFoundError(f"Guest not found: {guest_id}")

            guest = existing.model_copy(
                update={"status": status, "updated_at": datetime.utcnow()}
            )
            await self._repository.update(guest)
        except StorageError as e:
            await self._fail("guest_status", "Could not update guest", e)
            raise

        self._notifier.success(f"{guest.name}: {status.value}")
        await self._record(
            ActivityEventBuilder.guest_status_changed(guest, previous=existing.status)
        )
        return guest

    async def delete(self, guest_id: UUID) -> bool:
        try:
            existing = await self._repository.get_by_id(guest_id)
            if existing is None:
                return False
            deleted = await self._repository.delete(guest_id)
        except StorageError as e:
            await self._fail("guest_delete", "Could not remove guest", e)
            raise

        if deleted:
            self._notifier.success("Guest removed!")
            await self._record(ActivityEventBuilder.guest_deleted(existing))
        return deleted
