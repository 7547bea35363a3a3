"""Write-path checks: pick tables, then re-check them right before commit."""
import logging
from datetime import datetime, timedelta
from typing import Optional

from .allocator import AllocationStrategy
from .business_calendar import is_open_at
from .errors import (
    InsufficientCapacityError,
    NoTableAvailableError,
    OutsideOpeningHoursError,
    SlotUnavailableError,
    TooShortNoticeError,
)
from .occupancy import available_tables
from .slots import available_slots, find_available_tables
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


def check_bookable_time(snapshot: Snapshot, when: datetime, now: datetime) -> None:
    """Rejects start times outside opening hours or inside the minimum notice."""
    if not is_open_at(when, snapshot.schedule, snapshot.exceptions):
        raise OutsideOpeningHoursError(f"{when.isoformat()} is outside opening hours")
    earliest = now + timedelta(minutes=snapshot.settings.min_booking_time)
    if when < earliest:
        raise TooShortNoticeError(
            f"Reservations need {snapshot.settings.min_booking_time} minutes notice"
        )


def assign_tables(
    snapshot: Snapshot,
    when: datetime,
    guests: int,
    now: datetime,
    ignore_reservation_id: Optional[int] = None,
    strategy: AllocationStrategy = AllocationStrategy.GREEDY,
) -> list[int]:
    table_ids = find_available_tables(snapshot, when, guests, ignore_reservation_id, strategy)
    if table_ids is None:
        alternatives = available_slots(snapshot, when.date(), guests, now, strategy=strategy)
        logger.info("No table for %d guests at %s, %d alternatives", guests, when, len(alternatives))
        raise NoTableAvailableError(
            f"No table for {guests} guests at {when.strftime('%Y-%m-%d %H:%M')}",
            alternatives=alternatives,
        )
    return table_ids


def revalidate_assignment(
    snapshot: Snapshot,
    when: datetime,
    table_ids: list[int],
    guests: int,
    ignore_reservation_id: Optional[int] = None,
) -> None:
    """Raises unless every table in ``table_ids`` is still free at ``when``.

    Called with a freshly loaded snapshot right before committing a booking.
    """
    if not table_ids:
        raise SlotUnavailableError("No tables assigned")
    duplicates = sorted({table_id for table_id in table_ids if table_ids.count(table_id) > 1})
    if duplicates:
        raise SlotUnavailableError(f"Tables {duplicates} assigned more than once", duplicates)

    tables = []
    for table_id in table_ids:
        table = snapshot.table_by_id(table_id)
        if table is None:
            raise SlotUnavailableError(f"Table {table_id} does not exist", [table_id])
        tables.append(table)

    end = when + timedelta(minutes=snapshot.settings.duration)
    free_ids = {t.id for t in available_tables(snapshot, when, end, ignore_reservation_id=ignore_reservation_id)}
    taken = [table_id for table_id in table_ids if table_id not in free_ids]
    if taken:
        logger.warning("Tables %s no longer free at %s", taken, when)
        raise SlotUnavailableError("The selected slot is no longer available", taken)

    seats = sum(t.capacity for t in tables)
    if seats < guests:
        raise InsufficientCapacityError(f"Tables seat {seats}, party has {guests}")
