"""Which tables are taken during a time window."""
from datetime import datetime, timedelta
from typing import Iterable, Optional

from models import Order, Reservation, ReservationSettings, ReservationStatus, Table, TableOverride

from .snapshot import Snapshot


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


def reservation_window(reservation: Reservation, settings: ReservationSettings) -> tuple[datetime, datetime]:
    start = reservation.reservation_time
    return start, start + timedelta(minutes=settings.duration)


def order_window(order: Order, settings: ReservationSettings) -> tuple[datetime, datetime]:
    # Tischbelegung einer Bestellung wird mit der Reservierungsdauer angenähert
    start = order.created_at
    return start, start + timedelta(minutes=settings.duration)


def active_reservations(reservations: Iterable[Reservation], ignore_reservation_id: Optional[int] = None) -> list[Reservation]:
    return [
        r for r in reservations
        if r.status.is_active and r.id != ignore_reservation_id
    ]


def active_dine_in_orders(orders: Iterable[Order]) -> list[Order]:
    return [o for o in orders if o.occupies_tables and o.created_at is not None]


def tables_unavailable_during(
    snapshot: Snapshot,
    start: datetime,
    end: datetime,
    ignore_reservation_id: Optional[int] = None,
) -> set[int]:
    taken: set[int] = set()
    settings = snapshot.settings

    for reservation in active_reservations(snapshot.reservations, ignore_reservation_id):
        res_start, res_end = reservation_window(reservation, settings)
        if overlaps(start, end, res_start, res_end):
            taken.update(reservation.table_ids)

    for order in active_dine_in_orders(snapshot.orders):
        order_start, order_end = order_window(order, settings)
        if overlaps(start, end, order_start, order_end):
            taken.update(order.table_ids)

    return taken


def available_tables(
    snapshot: Snapshot,
    start: datetime,
    end: datetime,
    tables: Optional[list[Table]] = None,
    ignore_reservation_id: Optional[int] = None,
) -> list[Table]:
    """Reservable, not manually blocked and free for the whole window."""
    candidates = snapshot.tables if tables is None else tables
    taken = tables_unavailable_during(snapshot, start, end, ignore_reservation_id)
    return [
        table for table in candidates
        if table.allows_reservations
        and table.override_status is not TableOverride.BLOCKED
        and table.id not in taken
    ]


def available_tables_for_dine_in(
    snapshot: Snapshot,
    now: datetime,
    ignore_reservation_id: Optional[int] = None,
) -> list[Table]:
    """Tables a walk-in party can sit at right now.

    Unlike :func:`available_tables` this ignores ``allows_reservations``.
    A table is taken while an active dine-in order sits at it, while a
    confirmed reservation arrives within ``initial_block_time``, or when an
    active reservation overlaps the meal starting now (``[now, now + duration)``).
    """
    block_until = now + timedelta(minutes=snapshot.settings.initial_block_time)
    meal_end = now + timedelta(minutes=snapshot.settings.duration)

    occupied: set[int] = set()
    for order in snapshot.orders:
        if order.occupies_tables:
            occupied.update(order.table_ids)

    blocked: set[int] = set()
    for reservation in snapshot.reservations:
        if reservation.id == ignore_reservation_id or reservation.status is not ReservationStatus.CONFIRMED:
            continue
        if now < reservation.reservation_time <= block_until:
            blocked.update(reservation.table_ids)
    blocked |= tables_unavailable_during(snapshot, now, meal_end, ignore_reservation_id)

    return [
        table for table in snapshot.tables
        if table.override_status is not TableOverride.BLOCKED
        and table.id not in occupied
        and table.id not in blocked
    ]
