"""
Abstract Storage Interface

DESIGN DECISION: The planner only ever talks to storage through these
interfaces. This allows us to:
1. Swap Google Sheets for a hosted database later
2. Use in-memory storage for testing and demo mode
3. Keep the dashboard and the planning services free of backend details

The only query the planner needs is "all rows of this wedding", so that is
all the record interface offers. Any further filtering happens in Python.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar
from uuid import UUID

from cazen.models.activity import ActivityEvent
from cazen.models.planning import Organization, Theme

RecordT = TypeVar("RecordT")


class RecordRepository(ABC, Generic[RecordT]):
    """
    Storage for one kind of organization-scoped record
    (expenses, tasks or guests).
    """

    @abstractmethod
    async def find_by_organization(self, organization_id: UUID) -> list[RecordT]:
        """
        All records belonging to an organization.

        Returns:
            Records in storage order (insertion order for the bundled
            backends). Empty list if there are none.
        """
        pass

    @abstractmethod
    async def get_by_id(self, record_id: UUID) -> Optional[RecordT]:
        """
        Retrieve a record by its ID.

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, record: RecordT) -> RecordT:
        """
        Store a new record.

        Raises:
            DuplicateError: If a record with the same id exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update(self, record: RecordT) -> RecordT:
        """
        Replace an existing record (matched by id).

        Raises:
            NotFoundError: If the record doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, record_id: UUID) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if a record was deleted, False if none matched
        """
        pass


class OrganizationStorageInterface(ABC):
    """Storage for weddings. Each owner has at most one."""

    @abstractmethod
    async def get_by_owner(self, owner_id: str) -> Optional[Organization]:
        """
        The organization owned by a user, if any.

        Returns:
            The organization, or None when the user hasn't set one up yet
        """
        pass

    @abstractmethod
    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        pass

    @abstractmethod
    async def create(self, organization: Organization) -> Organization:
        """
        Store a new organization.

        Raises:
            DuplicateError: If the owner already has an organization
        """
        pass


class ProfileStorageInterface(ABC):
    """Storage for per-user preferences."""

    @abstractmethod
    async def get_theme_preference(self, user_id: str) -> Optional[Theme]:
        """The user's saved theme, or None if they never chose one."""
        pass

    @abstractmethod
    async def set_theme_preference(self, user_id: str, theme: Theme) -> bool:
        """
        Save the user's theme, creating the profile if needed.

        Returns:
            True if saved successfully
        """
        pass


class ActivityStorageInterface(ABC):
    """
    Storage for the activity log.

    The log is append-only - we never delete or modify events.
    """

    @abstractmethod
    async def append_event(self, event: ActivityEvent) -> bool:
        """
        Append an activity event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        organization_id: Optional[UUID] = None,
        limit: int = 50,
    ) -> list[ActivityEvent]:
        """
        The most recent events, newest first.

        Args:
            organization_id: Only events of this wedding, if given
            limit: Maximum number of events to return
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
