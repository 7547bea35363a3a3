import logging
from datetime import datetime
from typing import NoReturn, Optional
from zoneinfo import ZoneInfo

from fastapi import HTTPException
from sqlalchemy.orm import Session

from config import ALLOCATION_STRATEGY, BUSINESS_TIMEZONE
from models import *
from scheduling import (
    AllocationStrategy,
    InsufficientCapacityError,
    InvalidTransitionError,
    NoTableAvailableError,
    OutsideOpeningHoursError,
    ReservationLockedError,
    SchedulingError,
    SlotUnavailableError,
    Snapshot,
    TooShortNoticeError,
    revalidate_assignment,
)

logger = logging.getLogger(__name__)


def now_local() -> datetime:
    """Current wall-clock time of the restaurant, without tzinfo."""
    if BUSINESS_TIMEZONE:
        return datetime.now(ZoneInfo(BUSINESS_TIMEZONE)).replace(tzinfo=None)
    return datetime.now()

def to_local(value: datetime) -> datetime:
    """Converts an aware timestamp to naive local time; naive values are kept."""
    if value.tzinfo is None:
        return value
    zone = ZoneInfo(BUSINESS_TIMEZONE) if BUSINESS_TIMEZONE else None
    return value.astimezone(zone).replace(tzinfo=None)

def allocation_strategy() -> AllocationStrategy:
    try:
        return AllocationStrategy(ALLOCATION_STRATEGY)
    except ValueError:
        logger.warning("Unknown ALLOCATION_STRATEGY %r, using greedy", ALLOCATION_STRATEGY)
        return AllocationStrategy.GREEDY

# ---------------------------------------------------------
# Snapshot laden
# ---------------------------------------------------------
def load_settings(db: Session) -> ReservationSettings:
    row = db.query(ReservationSettingsDB).first()
    if not row:
        return ReservationSettings()
    return ReservationSettings.model_validate(row)

def load_schedule(db: Session) -> WeeklySchedule:
    rows = {row.day: row for row in db.query(DayScheduleDB).all()}
    days = {}
    for day in WEEKDAYS:
        row = rows.get(day)
        if row is None:
            days[day] = getattr(DEFAULT_WEEKLY_SCHEDULE, day)
        else:
            days[day] = DaySchedule(is_open=row.is_open, slots=row.slots or [])
    return WeeklySchedule(**days)

def load_exceptions(db: Session) -> list[ScheduleException]:
    rows = db.query(ScheduleExceptionDB).order_by(ScheduleExceptionDB.start_date.asc()).all()
    return [ScheduleException.model_validate(row) for row in rows]

def load_snapshot(db: Session) -> Snapshot:
    return Snapshot(
        tables=[Table.model_validate(t) for t in db.query(TableDB).order_by(TableDB.id.asc()).all()],
        orders=[Order.model_validate(o) for o in db.query(OrderDB).all()],
        reservations=[
            Reservation.model_validate(r)
            for r in db.query(ReservationDB).order_by(ReservationDB.reservation_time.asc()).all()
        ],
        settings=load_settings(db),
        schedule=load_schedule(db),
        exceptions=load_exceptions(db),
    )

# ---------------------------------------------------------
# Fehler-Mapping
# ---------------------------------------------------------
def raise_scheduling_error(exc: SchedulingError) -> NoReturn:
    error = {"detail": str(exc)}
    body = {"success": False, "retryable": exc.retryable}

    if isinstance(exc, NoTableAvailableError):
        status_code, error["code"] = 409, ErrorCode.NO_TABLE_AVAILABLE.value
        body["alternatives"] = exc.alternatives
    elif isinstance(exc, SlotUnavailableError):
        status_code, error["code"] = 409, ErrorCode.SLOT_UNAVAILABLE.value
        error["table_ids"] = exc.table_ids
    elif isinstance(exc, InsufficientCapacityError):
        status_code, error["code"] = 400, ErrorCode.INSUFFICIENT_CAPACITY.value
    elif isinstance(exc, OutsideOpeningHoursError):
        status_code, error["code"] = 400, ErrorCode.OUTSIDE_OPENING_HOURS.value
    elif isinstance(exc, TooShortNoticeError):
        status_code, error["code"] = 400, ErrorCode.TOO_SHORT_NOTICE.value
    elif isinstance(exc, ReservationLockedError):
        status_code, error["code"] = 423, ErrorCode.RESERVATION_LOCKED.value
    elif isinstance(exc, InvalidTransitionError):
        status_code, error["code"] = 400, ErrorCode.INVALID_TRANSITION.value
    else:
        status_code, error["code"] = 400, type(exc).__name__

    body["errors"] = [error]
    raise HTTPException(status_code=status_code, detail=body) from exc

def check_table_assignment(db: Session, when: datetime, table_ids: list[int], guests: int,
                           ignore_reservation_id: Optional[int] = None):
    """Re-checks the chosen tables against the current database state."""
    snapshot = load_snapshot(db)
    try:
        revalidate_assignment(snapshot, when, table_ids, guests, ignore_reservation_id)
    except SchedulingError as exc:
        raise_scheduling_error(exc)

def history_json(history: list[StatusHistory]) -> list[dict]:
    return [entry.model_dump(mode="json") for entry in history]

def slots_json(slots: list[TimeSlot]) -> list[dict]:
    return [slot.model_dump(mode="json") for slot in slots]
