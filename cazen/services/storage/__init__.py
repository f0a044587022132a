"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Google Sheets is the hosted backend; the in-memory backend serves tests
and demo mode.
"""

from cazen.services.storage.interface import (
    ActivityStorageInterface,
    ConnectionError,
    DuplicateError,
    NotFoundError,
    OrganizationStorageInterface,
    ProfileStorageInterface,
    RecordRepository,
    StorageError,
)
from cazen.services.storage.memory import (
    InMemoryActivityStorage,
    InMemoryOrganizationStorage,
    InMemoryProfileStorage,
    InMemoryRecordRepository,
)
from cazen.services.storage.google_sheets import (
    GoogleSheetsActivityStorage,
    GoogleSheetsClient,
    GoogleSheetsOrganizationStorage,
    GoogleSheetsProfileStorage,
    GoogleSheetsRecordRepository,
)

__all__ = [
    # Interfaces
    "ActivityStorageInterface",
    "OrganizationStorageInterface",
    "ProfileStorageInterface",
    "RecordRepository",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryActivityStorage",
    "InMemoryOrganizationStorage",
    "InMemoryProfileStorage",
    "InMemoryRecordRepository",
    # Google Sheets implementation
    "GoogleSheetsActivityStorage",
    "GoogleSheetsClient",
    "GoogleSheetsOrganizationStorage",
    "GoogleSheetsProfileStorage",
    "GoogleSheetsRecordRepository",
]
