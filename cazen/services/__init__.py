"""
Services package.

Planning services live in cazen.services.planning and are imported from
there; this package only re-exports storage.
"""

from cazen.services.storage import (
    ActivityStorageInterface,
    ConnectionError,
    DuplicateError,
    NotFoundError,
    OrganizationStorageInterface,
    ProfileStorageInterface,
    RecordRepository,
    StorageError,
)

__all__ = [
    # Storage interfaces
    "ActivityStorageInterface",
    "OrganizationStorageInterface",
    "ProfileStorageInterface",
    "RecordRepository",
    # Storage exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
]
