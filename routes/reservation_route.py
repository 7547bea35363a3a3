import logging
from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from helper import (
    allocation_strategy,
    check_table_assignment,
    history_json,
    load_snapshot,
    now_local,
    raise_scheduling_error,
    to_local,
)
from models import *
from routes.websocket import broadcast_event
from scheduling import (
    InvalidTransitionError,
    ReservationLockedError,
    SchedulingError,
    assign_tables,
    check_bookable_time,
    is_reservation_editable,
    next_reservation_statuses,
    transition_reservation,
)

logger = logging.getLogger(__name__)

reservation_router = APIRouter(
    tags=["Reservation"]
)

def _reservation_json(db_res: ReservationDB) -> dict:
    return Reservation.model_validate(db_res).model_dump(mode="json")

def _get_or_404(db: Session, id: int) -> ReservationDB:
    res = db.query(ReservationDB).filter(ReservationDB.id == id).first()
    if not res:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return res

@reservation_router.get("/reservations", tags=["Reservation"])
def get_reservations(status: ReservationStatus = Query(None), day: date = Query(None), db: Session = Depends(get_db)):
    """
    Retrieves reservations ordered by reservation time.

    Args:
        status (ReservationStatus, optional): Only reservations in this status.
        day (date, optional): Only reservations starting on this day.
    """
    try:
        query = db.query(ReservationDB)
        if status:
            query = query.filter(ReservationDB.status == status.value)
        if day:
            start = datetime.combine(day, time.min)
            query = query.filter(
                ReservationDB.reservation_time >= start,
                ReservationDB.reservation_time < start + timedelta(days=1)
            )
        reservations = query.order_by(ReservationDB.reservation_time.asc()).all()
        return [_reservation_json(r) for r in reservations]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@reservation_router.get("/reservations/{id}", tags=["Reservation"])
def get_reservation(id: int, db: Session = Depends(get_db)):

    try:
        return _reservation_json(_get_or_404(db, id))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@reservation_router.get("/reservations/{id}/next-statuses", tags=["Reservation"])
def get_next_statuses(id: int, db: Session = Depends(get_db)):
    """
    Lists the statuses the reservation may move to now and whether its
    time, party size or tables can still be changed.
    """
    try:
        res = Reservation.model_validate(_get_or_404(db, id))
        snapshot = load_snapshot(db)
        now = now_local()
        return {
            "id": res.id,
            "status": res.status.value,
            "next_statuses": [s.value for s in next_reservation_statuses(res, snapshot.orders, now)],
            "editable": is_reservation_editable(res, snapshot.settings, now),
        }
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@reservation_router.post("/reservations", tags=["Reservation"])
async def create_reservation(reservation: ReservationCreate, db: Session = Depends(get_db)):
    """
    Creates a pending reservation.

    Without ``table_ids`` the best fitting table or table combination is
    assigned automatically. Either way the tables are checked against the
    current bookings right before the insert; a conflict answers 409 so the
    caller can offer another slot.

    Args:
        reservation (ReservationCreate): Customer, party size and start time.

    Returns:
        dict: A success flag and the stored reservation.
    """
    try:
        reservation.reservation_time = to_local(reservation.reservation_time)
        now = now_local()
        snapshot = load_snapshot(db)
        try:
            check_bookable_time(snapshot, reservation.reservation_time, now)
            table_ids = reservation.table_ids or assign_tables(
                snapshot, reservation.reservation_time, reservation.guests, now,
                strategy=allocation_strategy()
            )
        except SchedulingError as exc:
            raise_scheduling_error(exc)

        check_table_assignment(db, reservation.reservation_time, table_ids, reservation.guests)

        history = [StatusHistory(status=ReservationStatus.PENDING.value, started_at=now)]
        db_res = ReservationDB(
            **reservation.model_dump(exclude={"table_ids"}),
            table_ids=table_ids,
            status=ReservationStatus.PENDING.value,
            status_history=history_json(history),
            created_at=now,
        )
        db.add(db_res)
        db.commit()
        db.refresh(db_res)
        logger.info("Reservation %s created for %d guests at %s on tables %s",
                    db_res.id, db_res.guests, db_res.reservation_time, table_ids)

        clean_res = _reservation_json(db_res)
        await broadcast_event("RESERVATION_CREATED", clean_res)
        return {"success": True, "reservation": clean_res}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Failed to create reservation")
        raise HTTPException(status_code=500, detail=str(e))


@reservation_router.put("/reservations/{id}", tags=["Reservation"])
async def update_reservation(id: int, updated: ReservationUpdate, db: Session = Depends(get_db)):
    """
    Edits a pending or confirmed reservation before its modification lock.

    Changing the time or party size without naming tables re-assigns them;
    the reservation's own tables do not count as taken.
    """
    try:
        res_row = _get_or_404(db, id)
        current = Reservation.model_validate(res_row)
        now = now_local()
        snapshot = load_snapshot(db)

        changes = updated.model_dump(exclude_unset=True, exclude_none=True)
        if changes.get("reservation_time"):
            changes["reservation_time"] = to_local(changes["reservation_time"])
        when = changes.get("reservation_time", current.reservation_time)
        guests = changes.get("guests", current.guests)
        table_ids = changes.get("table_ids") or current.table_ids

        try:
            if not is_reservation_editable(current, snapshot.settings, now):
                raise ReservationLockedError(f"Reservation {id} can no longer be modified")
            rescheduled = when != current.reservation_time or guests != current.guests
            if rescheduled:
                check_bookable_time(snapshot, when, now)
                if not changes.get("table_ids"):
                    table_ids = assign_tables(snapshot, when, guests, now, ignore_reservation_id=id,
                                              strategy=allocation_strategy())
        except SchedulingError as exc:
            raise_scheduling_error(exc)

        check_table_assignment(db, when, table_ids, guests, ignore_reservation_id=id)

        for field, value in changes.items():
            setattr(res_row, field, value)
        res_row.table_ids = list(table_ids)

        db.commit()
        db.refresh(res_row)

        clean_res = _reservation_json(res_row)
        await broadcast_event("RESERVATION_UPDATED", clean_res)
        return {"success": True, "reservation": clean_res}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))


@reservation_router.put("/reservations/{id}/status", tags=["Reservation"])
async def update_reservation_status(id: int, update: ReservationStatusUpdate, db: Session = Depends(get_db)):
    """
    Moves a reservation along its lifecycle and appends to its status history.
    """
    try:
        res_row = _get_or_404(db, id)
        current = Reservation.model_validate(res_row)
        now = now_local()
        orders = load_snapshot(db).orders

        try:
            allowed = next_reservation_statuses(current, orders, now)
            if update.status not in allowed:
                allowed_text = ", ".join(s.value for s in allowed) or "none"
                raise InvalidTransitionError(
                    f"Reservation {id} cannot move from {current.status.value} to {update.status.value} "
                    f"(allowed: {allowed_text})"
                )
            moved = transition_reservation(current, update.status, now, update.cancellation_reason)
        except SchedulingError as exc:
            raise_scheduling_error(exc)

        res_row.status = moved.status.value
        res_row.status_history = history_json(moved.status_history)
        res_row.finished_at = moved.finished_at
        res_row.cancellation_reason = moved.cancellation_reason.value if moved.cancellation_reason else None

        db.commit()
        db.refresh(res_row)
        logger.info("Reservation %s: %s -> %s", id, current.status.value, moved.status.value)

        clean_res = _reservation_json(res_row)
        await broadcast_event(f"RESERVATION_{moved.status.value}", clean_res)
        return {"success": True, "reservation": clean_res}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))


@reservation_router.delete("/reservations/{id}", tags=["Reservation"])
def delete_reservation(id: int, db: Session = Depends(get_db)):

    try:
        res = _get_or_404(db, id)
        db.delete(res)
        db.commit()
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))
