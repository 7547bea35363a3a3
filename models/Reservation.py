from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.StatusHistory import StatusHistory


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SEATED = "SEATED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"

    @property
    def is_active(self) -> bool:
        return self in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.SEATED)

    @property
    def is_terminal(self) -> bool:
        return not self.is_active

class ReservationCancellationReason(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SYSTEM = "SYSTEM"

class Reservation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    customer_name: str
    customer_phone: Optional[str] = None
    guests: int = Field(gt=0)
    reservation_time: datetime
    table_ids: list[int] = Field(default_factory=list)
    status: ReservationStatus = ReservationStatus.PENDING
    status_history: list[StatusHistory] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    cancellation_reason: Optional[ReservationCancellationReason] = None
    notes: Optional[str] = None
    order_id: Optional[int] = None

class ReservationCreate(BaseModel):
    customer_name: str
    customer_phone: Optional[str] = None
    guests: int = Field(gt=0)
    reservation_time: datetime
    table_ids: list[int] = Field(default_factory=list)
    notes: Optional[str] = None

class ReservationUpdate(BaseModel):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    guests: Optional[int] = Field(default=None, gt=0)
    reservation_time: Optional[datetime] = None
    table_ids: Optional[list[int]] = None
    notes: Optional[str] = None

class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus
    cancellation_reason: Optional[ReservationCancellationReason] = None
