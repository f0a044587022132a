"""
Planning Data Models for CaZen

These models describe the rows the planner works with: the wedding
(organization), its expenses, tasks and guests, and the user's profile.

DESIGN DECISION: Records and drafts are separate models.
- Records are immutable snapshots of what the store returned. They are
  lenient: whatever is stored can be loaded and aggregated.
- Drafts are what the user typed into a form. They are strict and are the
  only place where input is validated.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================

class ExpenseStatus(str, Enum):
    """Payment status of an expense."""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class TaskStatus(str, Enum):
    """Progress of a planning task."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskCategory(str, Enum):
    """Area of the wedding a task belongs to."""
    CEREMONY = "ceremony"
    RECEPTION = "reception"
    GUESTS = "guests"
    VENDORS = "vendors"
    FINANCIAL = "financial"
    OTHER = "other"


class TaskPriority(int, Enum):
    """Task priority. Anything above NORMAL is shown as high priority."""
    NORMAL = 0
    HIGH = 1


class GuestStatus(str, Enum):
    """RSVP status of a guest."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class Theme(str, Enum):
    """UI colour theme."""
    LIGHT = "light"
    DARK = "dark"


# =============================================================================
# RECORDS - immutable snapshots of stored rows
# =============================================================================

class Organization(BaseModel):
    """
    The wedding being planned.

    Every other record is scoped to exactly one organization, and each
    user owns at most one.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    owner_id: str = Field(..., min_length=1, description="Auth user id of the owner")
    partner_name: Optional[str] = None
    wedding_date: Optional[date] = None
    venue: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Expense(BaseModel):
    """
    A budget line.

    `estimated_amount` is what the couple planned to pay and
    `actual_amount` what was actually paid. Either may be missing.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    organization_id: UUID
    user_id: Optional[str] = None
    category: str = Field(..., description="Free-text category label")
    description: Optional[str] = None
    estimated_amount: Optional[Decimal] = None
    actual_amount: Optional[Decimal] = None
    status: ExpenseStatus = ExpenseStatus.PENDING
    paid_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Task(BaseModel):
    """A planning task on the checklist."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    organization_id: UUID
    user_id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    category: TaskCategory = TaskCategory.OTHER
    status: TaskStatus = TaskStatus.PENDING
    priority: int = TaskPriority.NORMAL.value
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_high_priority(self) -> bool:
        return self.priority > TaskPriority.NORMAL.value


class Guest(BaseModel):
    """An invited guest."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    organization_id: UUID
    user_id: Optional[str] = None
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    status: GuestStatus = GuestStatus.PENDING
    plus_one: bool = False
    table_number: Optional[int] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Profile(BaseModel):
    """Per-user preferences."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    full_name: str = ""
    theme_preference: Optional[Theme] = None
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# =============================================================================
# DRAFTS - validated form input
# =============================================================================

class OrganizationDraft(BaseModel):
    """Input of the wedding setup form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    partner_name: str = Field(..., min_length=1, max_length=200)
    wedding_date: date
    venue: Optional[str] = Field(default=None, max_length=300)


class ExpenseDraft(BaseModel):
    """
    Input of the expense form.

    CRITICAL: Amounts are validated here and only here. The aggregation
    functions trust whatever records they are given.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="e.g. Venue, Catering, Decoration",
    )
    description: Optional[str] = Field(default=None, max_length=1000)
    estimated_amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    actual_amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    status: ExpenseStatus = ExpenseStatus.PENDING

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class TaskDraft(BaseModel):
    """Input of the task form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: TaskCategory = TaskCategory.OTHER
    priority: TaskPriority = TaskPriority.NORMAL
    due_date: Optional[date] = None

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class GuestDraft(BaseModel):
    """Input of the guest form."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=50)
    status: GuestStatus = GuestStatus.PENDING
    plus_one: bool = False
    table_number: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = Field(default=None, max_length=1000)
