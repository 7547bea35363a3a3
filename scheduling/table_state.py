"""Floor-plan status of each table at a given instant."""
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from models import Order, OrderStatus, Reservation, ReservationSettings, ReservationStatus, Table, TableOverride

from .snapshot import Snapshot


class TableStatus(str, Enum):
    FREE = "FREE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    BLOCKED = "BLOCKED"

class TableStateDetails(BaseModel):
    type: str
    id: Optional[int] = None
    customer_name: str
    time: Optional[str] = None
    start_time: Optional[datetime] = None
    order_status: Optional[OrderStatus] = None
    late: bool = False

class TableState(BaseModel):
    table: Table
    status: TableStatus
    details: Optional[TableStateDetails] = None
    active_orders: list[Order] = Field(default_factory=list)
    accumulated_total: float = 0.0


def _reservation_details(reservation: Reservation, now: datetime) -> TableStateDetails:
    return TableStateDetails(
        type="reservation",
        id=reservation.id,
        customer_name=reservation.customer_name,
        time=reservation.reservation_time.strftime("%H:%M"),
        late=reservation.reservation_time <= now,
    )


def project_status(
    table: Table,
    orders: list[Order],
    reservations: list[Reservation],
    settings: ReservationSettings,
    now: datetime,
) -> TableState:
    if table.override_status is TableOverride.BLOCKED:
        return TableState(
            table=table,
            status=TableStatus.BLOCKED,
            details=TableStateDetails(type="manual", customer_name="Administrator"),
        )

    active_orders = [o for o in orders if o.occupies_tables and table.id in o.table_ids]
    if active_orders:
        active_orders.sort(key=lambda o: o.created_at or now)
        oldest = active_orders[0]
        return TableState(
            table=table,
            status=TableStatus.OCCUPIED,
            details=TableStateDetails(
                type="order",
                id=oldest.id,
                customer_name=oldest.customer_name,
                start_time=oldest.created_at,
                order_status=oldest.status,
            ),
            active_orders=active_orders,
            accumulated_total=round(sum(o.total for o in active_orders), 2),
        )

    late_since = now - timedelta(minutes=settings.extension_block_time)
    block_until = now + timedelta(minutes=settings.initial_block_time)
    visible_until = now + timedelta(minutes=settings.visibility_window)

    upcoming = sorted(
        (
            r for r in reservations
            if r.status is ReservationStatus.CONFIRMED and table.id in r.table_ids
        ),
        key=lambda r: r.reservation_time,
    )
    for reservation in upcoming:
        start = reservation.reservation_time
        # verspätete Gäste halten den Tisch noch extension_block_time Minuten
        if late_since < start <= block_until:
            return TableState(table=table, status=TableStatus.BLOCKED, details=_reservation_details(reservation, now))
    for reservation in upcoming:
        if block_until < reservation.reservation_time <= visible_until:
            return TableState(table=table, status=TableStatus.RESERVED, details=_reservation_details(reservation, now))

    return TableState(table=table, status=TableStatus.FREE)


def project_all(snapshot: Snapshot, now: datetime) -> list[TableState]:
    return [
        project_status(table, snapshot.orders, snapshot.reservations, snapshot.settings, now)
        for table in snapshot.tables
    ]
