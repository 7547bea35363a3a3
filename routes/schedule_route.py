import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from helper import load_exceptions, load_schedule, slots_json
from models import *

logger = logging.getLogger(__name__)

schedule_router = APIRouter(
    tags=["Schedule"]
)

def _check_overlap(db: Session, exception: ScheduleException, ignore_id: int = None):
    for other in load_exceptions(db):
        if other.id == ignore_id:
            continue
        if exception.start_date <= other.end_date and other.start_date <= exception.end_date:
            raise HTTPException(status_code=400, detail={
                "success": False,
                "errors": [{
                    "code": ErrorCode.EXCEPTION_OVERLAP.value,
                    "detail": f"Overlaps exception '{other.name}' ({other.start_date} - {other.end_date})"
                }]
            })

@schedule_router.get("/schedule", tags=["Schedule"])
def get_schedule(db: Session = Depends(get_db)):
    """Weekly opening hours; days never saved fall back to the defaults."""
    try:
        return load_schedule(db).model_dump(mode="json")
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@schedule_router.put("/schedule", tags=["Schedule"])
def update_schedule(schedule: WeeklySchedule, db: Session = Depends(get_db)):

    try:
        rows = {row.day: row for row in db.query(DayScheduleDB).all()}
        for day in WEEKDAYS:
            day_schedule = getattr(schedule, day)
            row = rows.get(day)
            if row is None:
                row = DayScheduleDB(day=day)
                db.add(row)
            row.is_open = day_schedule.is_open
            row.slots = slots_json(day_schedule.slots)

        db.commit()
        return {"success": True, "schedule": load_schedule(db).model_dump(mode="json")}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

@schedule_router.get("/schedule/exceptions", tags=["Schedule"])
def get_exceptions(db: Session = Depends(get_db)):

    try:
        return [exc.model_dump(mode="json") for exc in load_exceptions(db)]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@schedule_router.get("/schedule/exceptions/{id}", tags=["Schedule"])
def get_exception(id: int, db: Session = Depends(get_db)):

    try:
        row = db.query(ScheduleExceptionDB).filter(ScheduleExceptionDB.id == id).first()
        if not row:
            raise HTTPException(status_code=404, detail="Exception not found")
        return ScheduleException.model_validate(row).model_dump(mode="json")
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@schedule_router.post("/schedule/exceptions", tags=["Schedule"])
def create_exception(exception: ScheduleException, db: Session = Depends(get_db)):
    """
    Adds a closure or special opening hours for a date range.

    Ranges may not overlap an existing exception; otherwise two rules would
    compete for the same day.
    """
    try:
        _check_overlap(db, exception)

        row = ScheduleExceptionDB(
            name=exception.name,
            start_date=exception.start_date,
            end_date=exception.end_date,
            type=exception.type.value,
            slots=slots_json(exception.slots),
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info("Schedule exception %s (%s) from %s to %s", row.id, row.type, row.start_date, row.end_date)
        return {"success": True, "exception": ScheduleException.model_validate(row).model_dump(mode="json")}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

@schedule_router.put("/schedule/exceptions/{id}", tags=["Schedule"])
def update_exception(id: int, exception: ScheduleException, db: Session = Depends(get_db)):

    try:
        row = db.query(ScheduleExceptionDB).filter(ScheduleExceptionDB.id == id).first()
        if not row:
            raise HTTPException(status_code=404, detail="Exception not found")

        _check_overlap(db, exception, ignore_id=id)

        row.name = exception.name
        row.start_date = exception.start_date
        row.end_date = exception.end_date
        row.type = exception.type.value
        row.slots = slots_json(exception.slots)

        db.commit()
        db.refresh(row)
        return {"success": True, "exception": ScheduleException.model_validate(row).model_dump(mode="json")}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

@schedule_router.delete("/schedule/exceptions/{id}", tags=["Schedule"])
def delete_exception(id: int, db: Session = Depends(get_db)):

    try:
        row = db.query(ScheduleExceptionDB).filter(ScheduleExceptionDB.id == id).first()
        if not row:
            raise HTTPException(status_code=404, detail="Exception not found")

        db.delete(row)
        db.commit()
        return {"success": True, "message": f"Exception with ID {id} deleted"}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))
