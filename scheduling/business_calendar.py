"""Opening hours: weekly schedule plus date-ranged exceptions."""
import logging
from datetime import date, datetime, timedelta
from typing import Optional

from models import ExceptionType, ScheduleException, TimeSlot, WeeklySchedule

logger = logging.getLogger(__name__)


def find_exception(exceptions: list[ScheduleException], day: date) -> Optional[ScheduleException]:
    """Returns the exception that applies to ``day``.

    Overlapping ranges are rejected when exceptions are written, but stored
    data may still overlap. In that case the shortest range wins, then the
    earliest start date, then list order.
    """
    matches = [exc for exc in exceptions if exc.covers(day)]
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "%d schedule exceptions cover %s (%s), using the shortest range",
            len(matches), day.isoformat(), ", ".join(str(m.id or m.name) for m in matches),
        )
    return min(
        enumerate(matches),
        key=lambda item: (item[1].length_days, item[1].start_date, item[0]),
    )[1]


def open_intervals_for(day: date, schedule: WeeklySchedule, exceptions: list[ScheduleException]) -> list[TimeSlot]:
    exception = find_exception(exceptions, day)
    if exception is not None:
        if exception.type is ExceptionType.CLOSED:
            return []
        return list(exception.slots)

    day_schedule = schedule.for_day(day)
    if not day_schedule.is_open:
        return []
    return list(day_schedule.slots)


def interval_bounds(slot: TimeSlot, anchor: date) -> tuple[datetime, datetime]:
    """Concrete start and end of ``slot`` when it opens on ``anchor``."""
    start = datetime.combine(anchor, slot.open)
    end = datetime.combine(anchor, slot.close)
    if slot.crosses_midnight:
        end += timedelta(days=1)
    return start, end


def _contains(slot: TimeSlot, anchor: date, instant: datetime) -> bool:
    start, end = interval_bounds(slot, anchor)
    return start <= instant < end


def is_open_at(instant: datetime, schedule: WeeklySchedule, exceptions: list[ScheduleException]) -> bool:
    today = instant.date()
    yesterday = today - timedelta(days=1)

    exception = find_exception(exceptions, today)
    if exception is not None:
        if exception.type is ExceptionType.CLOSED:
            return False
        # Spätschicht vom Vortag mit denselben Sonderzeiten
        return any(
            _contains(slot, anchor, instant)
            for anchor in (today, yesterday)
            for slot in exception.slots
        )

    for anchor in (today, yesterday):
        day_schedule = schedule.for_day(anchor)
        if not day_schedule.is_open:
            continue
        if any(_contains(slot, anchor, instant) for slot in day_schedule.slots):
            return True
    return False
