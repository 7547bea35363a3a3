"""Bookable start times for a day."""
from datetime import date, datetime, timedelta
from typing import Optional

from models import Table

from .allocator import AllocationStrategy, allocate
from .business_calendar import interval_bounds, open_intervals_for
from .occupancy import available_tables
from .snapshot import Snapshot


def find_available_tables(
    snapshot: Snapshot,
    when: datetime,
    party_size: int,
    ignore_reservation_id: Optional[int] = None,
    strategy: AllocationStrategy = AllocationStrategy.GREEDY,
    tables: Optional[list[Table]] = None,
) -> Optional[list[int]]:
    """Table ids that seat the party for a reservation starting at ``when``."""
    end = when + timedelta(minutes=snapshot.settings.duration)
    free = available_tables(snapshot, when, end, tables=tables, ignore_reservation_id=ignore_reservation_id)
    return allocate(free, party_size, strategy)


def available_slots(
    snapshot: Snapshot,
    day: date,
    party_size: int,
    now: datetime,
    interval_minutes: Optional[int] = None,
    strategy: AllocationStrategy = AllocationStrategy.GREEDY,
) -> list[str]:
    """Start times ("HH:MM") on ``day`` at which ``party_size`` guests can be seated.

    Times are walked from each opening interval's start in steps of
    ``interval_minutes`` (default: the configured slot interval). On the
    current day, times earlier than ``now + min_booking_time`` are skipped.
    Past days, non-positive party sizes and non-positive intervals yield an
    empty list.
    """
    settings = snapshot.settings
    interval = settings.slot_interval if interval_minutes is None else interval_minutes
    if party_size <= 0 or interval <= 0 or day < now.date():
        return []

    intervals = open_intervals_for(day, snapshot.schedule, snapshot.exceptions)
    if not intervals:
        return []

    reservable = [t for t in snapshot.tables if t.allows_reservations]
    if not reservable:
        return []

    earliest = None
    if day == now.date():
        earliest = now + timedelta(minutes=settings.min_booking_time)

    step = timedelta(minutes=interval)
    result = []
    for slot in intervals:
        cursor, close = interval_bounds(slot, day)
        while cursor < close:
            if earliest is not None and cursor < earliest:
                cursor += step
                continue
            if find_available_tables(snapshot, cursor, party_size, strategy=strategy, tables=reservable) is not None:
                result.append(cursor.strftime("%H:%M"))
            cursor += step
    return result
