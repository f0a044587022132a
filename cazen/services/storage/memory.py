"""
In-Memory Storage Implementation

Used by the tests and by demo mode when no spreadsheet is configured.
Data lives as long as the process does.

Records are immutable, so storing the instances themselves is safe.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from cazen.models.activity import ActivityEvent
from cazen.models.planning import Organization, Profile, Theme
from cazen.services.storage.interface import (
    ActivityStorageInterface,
    DuplicateError,
    NotFoundError,
    OrganizationStorageInterface,
    ProfileStorageInterface,
    RecordRepository,
    RecordT,
)


class InMemoryRecordRepository(RecordRepository[RecordT]):
    """Dict-backed record storage. Iteration order is insertion order."""

    def __init__(self, records: Optional[list[RecordT]] = None):
        self._records: dict[UUID, RecordT] = {}
        for record in records or []:
            self._records[record.id] = record

    async def find_by_organization(self, organization_id: UUID) -> list[RecordT]:
        return [
            record for record in self._records.values()
            if record.organization_id == organization_id
        ]

    async def get_by_id(self, record_id: UUID) -> Optional[RecordT]:
        return self._records.get(record_id)

    async def insert(self, record: RecordT) -> RecordT:
        if record.id in self._records:
            raise DuplicateError(f"Record already exists: {record.id}")
        self._records[record.id] = record
        return record

    async def update(self, record: RecordT) -> RecordT:
        if record.id not in self._records:
            raise NotFoundError(f"Record not found: {record.id}")
        self._records[record.id] = record
        return record

    async def delete(self, record_id: UUID) -> bool:
        return self._records.pop(record_id, None) is not None


class InMemoryOrganizationStorage(OrganizationStorageInterface):

    def __init__(self):
        self._organizations: dict[UUID, Organization] = {}

    async def get_by_owner(self, owner_id: str) -> Optional[Organization]:
        for organization in self._organizations.values():
            if organization.owner_id == owner_id:
                return organization
        return None

    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        return self._organizations.get(organization_id)

    async def create(self, organization: Organization) -> Organization:
        if await self.get_by_owner(organization.owner_id) is not None:
            raise DuplicateError(
                f"User {organization.owner_id} already has a wedding set up"
            )
        self._organizations[organization.id] = organization
        return organization


class InMemoryProfileStorage(ProfileStorageInterface):

    def __init__(self):
        self._profiles: dict[str, Profile] = {}

    async def get_theme_preference(self, user_id: str) -> Optional[Theme]:
        profile = self._profiles.get(user_id)
        return profile.theme_preference if profile else None

    async def set_theme_preference(self, user_id: str, theme: Theme) -> bool:
        profile = self._profiles.get(user_id)
        if profile is None:
            profile = Profile(user_id=user_id, theme_preference=theme)
        else:
            profile = profile.model_copy(
                update={"theme_preference": theme, "updated_at": datetime.utcnow()}
            )
        self._profiles[user_id] = profile
        return True


class InMemoryActivityStorage(ActivityStorageInterface):

    def __init__(self):
        self._events: list[ActivityEvent] = []

    @property
    def events(self) -> list[ActivityEvent]:
        return list(self._events)

    async def append_event(self, event: ActivityEvent) -> bool:
        self._events.append(event)
        return True

    async def get_recent_events(
        self,
        organization_id: Optional[UUID] = None,
        limit: int = 50,
    ) -> list[ActivityEvent]:
        events = [
            event for event in self._events
            if organization_id is None or event.organization_id == organization_id
        ]
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
