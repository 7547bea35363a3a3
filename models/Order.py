from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.StatusHistory import StatusHistory


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERING = "DELIVERING"
    DINE_IN_PENDING_PAYMENT = "DINE_IN_PENDING_PAYMENT"
    COMPLETED_PICKUP = "COMPLETED_PICKUP"
    COMPLETED_DELIVERY = "COMPLETED_DELIVERY"
    COMPLETED_DINE_IN = "COMPLETED_DINE_IN"
    CANCELLED = "CANCELLED"

    @property
    def is_completed(self) -> bool:
        return self in (
            OrderStatus.COMPLETED_PICKUP,
            OrderStatus.COMPLETED_DELIVERY,
            OrderStatus.COMPLETED_DINE_IN,
        )

    @property
    def is_terminal(self) -> bool:
        return self.is_completed or self is OrderStatus.CANCELLED

class OrderType(str, Enum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"
    DINE_IN = "DINE_IN"

class Order(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    customer_name: str
    type: OrderType = OrderType.DINE_IN
    status: OrderStatus = OrderStatus.PENDING
    table_ids: list[int] = Field(default_factory=list)
    guests: Optional[int] = None
    total: float = 0.0
    is_paid: bool = False
    created_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    status_history: list[StatusHistory] = Field(default_factory=list)
    reservation_id: Optional[int] = None

    @property
    def occupies_tables(self) -> bool:
        """True while a dine-in order holds its tables."""
        return self.type is OrderType.DINE_IN and bool(self.table_ids) and not self.status.is_terminal

class OrderCreate(BaseModel):
    customer_name: str
    type: OrderType = OrderType.DINE_IN
    table_ids: list[int] = Field(default_factory=list)
    guests: Optional[int] = Field(default=None, gt=0)
    total: float = Field(default=0.0, ge=0)
    is_paid: bool = False
    reservation_id: Optional[int] = None

class OrderStatusUpdate(BaseModel):
    status: OrderStatus
