import logging
from datetime import date, datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from helper import allocation_strategy, load_snapshot, now_local, to_local
from scheduling import (
    allocate,
    available_slots,
    available_tables,
    is_open_at,
    open_intervals_for,
)

logger = logging.getLogger(__name__)

availability_router = APIRouter(
    tags=["Availability"]
)

@availability_router.get("/availability/open", tags=["Availability"])
def get_is_open(at: datetime = Query(None), db: Session = Depends(get_db)):
    """
    Tells whether the restaurant is open.

    Args:
        at (datetime, optional): Local time to check; defaults to now.
    """
    try:
        snapshot = load_snapshot(db)
        instant = to_local(at) if at else now_local()
        return {"at": instant, "open": is_open_at(instant, snapshot.schedule, snapshot.exceptions)}
    except Exception as e:
        logger.exception("Failed to check opening hours")
        raise HTTPException(status_code=500, detail=str(e))

@availability_router.get("/availability/intervals", tags=["Availability"])
def get_open_intervals(day: date = Query(...), db: Session = Depends(get_db)):
    """Effective opening intervals of a day after applying exceptions."""
    try:
        snapshot = load_snapshot(db)
        intervals = open_intervals_for(day, snapshot.schedule, snapshot.exceptions)
        return {"date": day, "intervals": [slot.model_dump(mode="json") for slot in intervals]}
    except Exception as e:
        logger.exception("Failed to list opening intervals for %s", day)
        raise HTTPException(status_code=500, detail=str(e))

@availability_router.get("/availability/slots", tags=["Availability"])
def get_available_slots(day: date = Query(...), guests: int = Query(...), interval: int = Query(None),
                        db: Session = Depends(get_db)):
    """
    Liefert die buchbaren Startzeiten für einen Tag.
    Beispiel:
    - day="2025-10-11"
    - guests=4
    - interval=30 (optional, sonst Einstellung slot_interval)
    """
    try:
        snapshot = load_snapshot(db)
        slots = available_slots(snapshot, day, guests, now_local(), interval, allocation_strategy())
        return {"date": day, "guests": guests, "slots": slots}
    except Exception as e:
        logger.exception("Failed to list slots for %s", day)
        raise HTTPException(status_code=500, detail=str(e))

@availability_router.get("/availability/tables", tags=["Availability"])
def get_available_tables(at: datetime = Query(...), guests: int = Query(None),
                         ignore_reservation_id: int = Query(None), db: Session = Depends(get_db)):
    """
    Tables free for a reservation starting at ``at`` and, when ``guests`` is
    given, the tables the allocator would assign.
    """
    try:
        at = to_local(at)
        snapshot = load_snapshot(db)
        end = at + timedelta(minutes=snapshot.settings.duration)
        free = available_tables(snapshot, at, end, ignore_reservation_id=ignore_reservation_id)
        result = {
            "start": at,
            "end": end,
            "tables": [t.model_dump(mode="json") for t in free],
        }
        if guests is not None:
            result["assignment"] = allocate(free, guests, allocation_strategy())
        return result
    except Exception as e:
        logger.exception("Failed to list available tables")
        raise HTTPException(status_code=500, detail=str(e))
