"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the hosted row store because:
1. The couple can open their plan directly in Sheets
2. No database setup required
3. Built-in backup and sharing (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (a wedding is a few hundred rows)
- No transactions (one owner per wedding, so no concurrent writers)
- Limited query capabilities (we filter by equality in Python)

Each table is a worksheet whose first row holds the column names. Rows are
matched to columns by that header, so reordering columns in the sheet is
harmless.
"""

import json
from datetime import date, datetime
from enum import Enum
from typing import Generic, Optional, TypeVar
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cazen.config import GoogleSheetsSettings, get_settings
from cazen.models.activity import ActivityEvent
from cazen.models.planning import Organization, Profile, Theme
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

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = structlog.get_logger(__name__)

# Only the append itself is retried. Checks that run before it (duplicate
# ids, one wedding per owner) must not run again once the row may exist.
write_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_not_exception_type(StorageError),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._worksheets: dict[str, gspread.Worksheet] = {}
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        """Get or create a worksheet, writing the header row on creation."""
        if title not in self._worksheets:
            spreadsheet = self.get_spreadsheet()
            try:
                sheet = spreadsheet.worksheet(title)
            except gspread.WorksheetNotFound:
                sheet = spreadsheet.add_worksheet(
                    title=title,
                    rows=1000,
                    cols=len(columns),
                )
                sheet.append_row(columns)
            self._worksheets[title] = sheet
        return self._worksheets[title]


# =============================================================================
# ROW CODEC
# =============================================================================

def format_cell(value) -> str:
    """Render a model field as the text stored in a cell."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class SheetTable(Generic[ModelT]):
    """
    One worksheet holding one model.

    Empty cells are left out when parsing so model defaults apply.
    Columns listed in `json_columns` hold JSON text.
    """

    def __init__(
        self,
        client: GoogleSheetsClient,
        model: type[ModelT],
        sheet_name: str,
        json_columns: frozenset[str] = frozenset(),
    ):
        self._client = client
        self._model = model
        self._sheet_name = sheet_name
        self._columns = list(model.model_fields)
        self._json_columns = json_columns

    @property
    def columns(self) -> list[str]:
        return self._columns

    def sheet(self) -> gspread.Worksheet:
        return self._client.get_worksheet(self._sheet_name, self._columns)

    def header(self) -> list[str]:
        """Column names as they are laid out in the sheet right now."""
        header = self.sheet().row_values(1)
        return header or self._columns

    def to_row(self, record: ModelT, header: Optional[list[str]] = None) -> list[str]:
        """
        Cells for `record` in `header` order.

        Columns the model doesn't know are left blank.
        """
        return [
            format_cell(getattr(record, column)) if column in self._model.model_fields else ""
            for column in (header or self._columns)
        ]

    def from_cells(self, cells: dict[str, str]) -> ModelT:
        data = {}
        for column, value in cells.items():
            if value == "":
                continue
            if column in self._json_columns:
                data[column] = json.loads(value)
            else:
                data[column] = value
        return self._model.model_validate(data)

    def read(self) -> list[tuple[int, dict[str, str]]]:
        """
        All data rows as (sheet row number, {column: cell}).

        Row numbers are 1-based and include the header, as gspread expects.
        """
        values = self.sheet().get_all_values()
        if not values:
            return []
        header = values[0]
        rows = []
        for row_number, row in enumerate(values[1:], start=2):
            if not row or not any(row):
                continue
            rows.append((row_number, dict(zip(header, row))))
        return rows

    def parse_rows(
        self,
        rows: list[tuple[int, dict[str, str]]],
    ) -> list[ModelT]:
        records = []
        for row_number, cells in rows:
            try:
                records.append(self.from_cells(cells))
            except (ValidationError, ValueError) as e:
                # Hand-edited rows can be broken; skip them rather than
                # failing the whole page.
                logger.warning(
                    "sheet_row_skipped",
                    sheet=self._sheet_name,
                    row=row_number,
                    error=str(e),
                )
        return records

    def find_row_number(self, column: str, value: str) -> Optional[int]:
        for row_number, cells in self.read():
            if cells.get(column) == value:
                return row_number
        return None

    @write_retry
    def append(self, record: ModelT) -> None:
        self.sheet().append_row(
            self.to_row(record, self.header()),
            value_input_option="RAW",
        )

    def replace(self, row_number: int, record: ModelT) -> None:
        sheet = self.sheet()
        header = self.header()
        for col_idx, value in enumerate(self.to_row(record, header), start=1):
            if header[col_idx - 1] in self._model.model_fields:
                sheet.update_cell(row_number, col_idx, value)

    def remove(self, row_number: int) -> None:
        self.sheet().delete_rows(row_number)


# =============================================================================
# REPOSITORIES
# =============================================================================

class GoogleSheetsRecordRepository(RecordRepository[ModelT]):
    """
    Google Sheets implementation of organization-scoped record storage.

    Used for expenses, tasks and guests; the model decides the columns.
    """

    def __init__(
        self,
        client: GoogleSheetsClient,
        model: type[ModelT],
        sheet_name: str,
    ):
        self._table = SheetTable(client, model, sheet_name)

    async def find_by_organization(self, organization_id: UUID) -> list[ModelT]:
        try:
            rows = [
                (row_number, cells)
                for row_number, cells in self._table.read()
                if cells.get("organization_id") == str(organization_id)
            ]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list records: {e}")
        return self._table.parse_rows(rows)

    async def get_by_id(self, record_id: UUID) -> Optional[ModelT]:
        try:
            rows = [
                (row_number, cells)
                for row_number, cells in self._table.read()
                if cells.get("id") == str(record_id)
            ]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get record: {e}")
        records = self._table.parse_rows(rows)
        return records[0] if records else None

    async def insert(self, record: ModelT) -> ModelT:
        try:
            if self._table.find_row_number("id", str(record.id)) is not None:
                raise DuplicateError(f"Record already exists: {record.id}")
            self._table.append(record)
            return record
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save record: {e}")

    async def update(self, record: ModelT) -> ModelT:
        try:
            row_number = self._table.find_row_number("id", str(record.id))
            if row_number is None:
                raise NotFoundError(f"Record not found: {record.id}")
            self._table.replace(row_number, record)
            return record
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update record: {e}")

    async def delete(self, record_id: UUID) -> bool:
        try:
            row_number = self._table.find_row_number("id", str(record_id))
            if row_number is None:
                return False
            self._table.remove(row_number)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete record: {e}")


class GoogleSheetsOrganizationStorage(OrganizationStorageInterface):

    def __init__(self, client: GoogleSheetsClient, sheet_name: Optional[str] = None):
        self._table = SheetTable(
            client,
            Organization,
            sheet_name or client.settings.organizations_sheet_name,
        )

    def _find(self, column: str, value: str) -> Optional[Organization]:
        try:
            rows = [
                (row_number, cells)
                for row_number, cells in self._table.read()
                if cells.get(column) == value
            ]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get organization: {e}")
        organizations = self._table.parse_rows(rows)
        return organizations[0] if organizations else None

    async def get_by_owner(self, owner_id: str) -> Optional[Organization]:
        return self._find("owner_id", owner_id)

    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        return self._find("id", str(organization_id))

    async def create(self, organization: Organization) -> Organization:
        if self._find("owner_id", organization.owner_id) is not None:
            raise DuplicateError(
                f"User {organization.owner_id} already has a wedding set up"
            )
        try:
            self._table.append(organization)
            return organization
        except Exception as e:
            raise StorageError(f"Failed to save organization: {e}")


class GoogleSheetsProfileStorage(ProfileStorageInterface):

    def __init__(self, client: GoogleSheetsClient, sheet_name: Optional[str] = None):
        self._table = SheetTable(
            client,
            Profile,
            sheet_name or client.settings.profiles_sheet_name,
        )

    async def get_theme_preference(self, user_id: str) -> Optional[Theme]:
        try:
            rows = [
                (row_number, cells)
                for row_number, cells in self._table.read()
                if cells.get("user_id") == user_id
            ]
        except Exception as e:
            raise StorageError(f"Failed to read profile: {e}")
        profiles = self._table.parse_rows(rows)
        return profiles[0].theme_preference if profiles else None

    async def set_theme_preference(self, user_id: str, theme: Theme) -> bool:
        try:
            for row_number, cells in self._table.read():
                if cells.get("user_id") != user_id:
                    continue
                profile = self._table.from_cells(cells).model_copy(
                    update={"theme_preference": theme, "updated_at": datetime.utcnow()}
                )
                self._table.replace(row_number, profile)
                return True

            self._table.append(Profile(user_id=user_id, theme_preference=theme))
            return True
        except Exception as e:
            raise StorageError(f"Failed to save theme preference: {e}")


class GoogleSheetsActivityStorage(ActivityStorageInterface):
    """
    Google Sheets implementation of the activity log.

    Events are append-only.
    """

    def __init__(self, client: GoogleSheetsClient, sheet_name: Optional[str] = None):
        self._table = SheetTable(
            client,
            ActivityEvent,
            sheet_name or client.settings.activity_sheet_name,
            json_columns=frozenset({"details"}),
        )

    async def append_event(self, event: ActivityEvent) -> bool:
        try:
            self._table.append(event)
            return True
        except Exception as e:
            raise StorageError(f"Failed to write activity event: {e}")

    async def get_recent_events(
        self,
        organization_id: Optional[UUID] = None,
        limit: int = 50,
    ) -> list[ActivityEvent]:
        try:
            rows = [
                (row_number, cells)
                for row_number, cells in self._table.read()
                if organization_id is None
                or cells.get("organization_id") == str(organization_id)
            ]
        except Exception as e:
            raise StorageError(f"Failed to get activity events: {e}")

        events = self._table.parse_rows(rows)
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
