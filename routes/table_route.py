import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from database import get_db
from helper import load_snapshot, now_local
from models import *
from routes.websocket import broadcast_event
from scheduling import available_tables_for_dine_in, project_all

logger = logging.getLogger(__name__)

table_router = APIRouter(
    tags=["Table"]
)

def _table_json(db_table: TableDB) -> dict:
    return Table.model_validate(db_table).model_dump(mode="json")

@table_router.get("/tables/states", tags=["Table"])
def get_table_states(db: Session = Depends(get_db)):
    """
    Returns the floor-plan status of every table right now.

    Returns:
        list: One entry per table with status FREE, OCCUPIED, RESERVED or BLOCKED
        and the order or reservation that caused it.
    """
    try:
        snapshot = load_snapshot(db)
        return jsonable_encoder(project_all(snapshot, now_local()))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to project table states")
        raise HTTPException(status_code=500, detail=str(e))


@table_router.get("/tables/dine-in-available", tags=["Table"])
def get_dine_in_tables(ignore_reservation_id: int = Query(None), db: Session = Depends(get_db)):
    """
    Tables a walk-in party can be seated at immediately.

    Args:
        ignore_reservation_id (int, optional): Reservation being converted into an
            order; its own tables are not treated as blocked.
    """
    try:
        snapshot = load_snapshot(db)
        tables = available_tables_for_dine_in(snapshot, now_local(), ignore_reservation_id)
        return [t.model_dump(mode="json") for t in tables]
    except Exception as e:
        logger.exception("Failed to list dine-in tables")
        raise HTTPException(status_code=500, detail=str(e))


@table_router.get("/tables", tags=["Table"])
def get_tables(db: Session = Depends(get_db)):

    try:
        tables = db.query(TableDB).order_by(TableDB.name.asc()).all()
        return [_table_json(table) for table in tables]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@table_router.get("/tables/{id}", tags=["Table"])
def get_table(id: int, db: Session = Depends(get_db)):

    try:
        table = db.query(TableDB).filter(TableDB.id == id).first()
        if not table:
            raise HTTPException(status_code=404, detail="Table not found")
        return _table_json(table)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@table_router.post("/tables", tags=["Table"])
async def create_table(table: Table, db: Session = Depends(get_db)):

    try:
        db_table = TableDB(**table.model_dump(mode="json", exclude={"id"}))
        db.add(db_table)
        db.commit()
        db.refresh(db_table)

        clean_table = _table_json(db_table)
        await broadcast_event("TABLE_CREATED", clean_table)
        return {"success": True, "table": clean_table}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))


@table_router.put("/tables/{id}", tags=["Table"])
async def update_table(id: int, updated_table: Table, db: Session = Depends(get_db)):

    try:
        db_table = db.query(TableDB).filter(TableDB.id == id).first()
        if not db_table:
            raise HTTPException(status_code=404, detail="Table not found")

        for field, value in updated_table.model_dump(mode="json", exclude_unset=True, exclude={"id"}).items():
            setattr(db_table, field, value)

        db.commit()
        db.refresh(db_table)

        clean_table = _table_json(db_table)
        await broadcast_event("TABLE_UPDATED", clean_table)
        return {"success": True, "table": clean_table}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))


@table_router.put("/tables/{id}/override", tags=["Table"])
async def set_table_override(id: int, override: TableOverrideUpdate, db: Session = Depends(get_db)):
    """
    Blocks a table manually or lifts the block.

    A manual block wins over every computed status and keeps the table out of
    availability searches.
    """
    try:
        db_table = db.query(TableDB).filter(TableDB.id == id).first()
        if not db_table:
            raise HTTPException(status_code=404, detail="Table not found")

        db_table.override_status = override.override_status.value if override.override_status else None
        db.commit()
        db.refresh(db_table)
        logger.info("Table %s override set to %s", id, db_table.override_status)

        clean_table = _table_json(db_table)
        await broadcast_event("TABLE_OVERRIDE", clean_table)
        return {"success": True, "table": clean_table}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))


@table_router.delete("/tables/{id}", tags=["Table"])
def delete_table(id: int, db: Session = Depends(get_db)):

    try:
        db_table = db.query(TableDB).filter(TableDB.id == id).first()
        if not db_table:
            raise HTTPException(status_code=404, detail="Table not found")

        db.delete(db_table)
        db.commit()
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))
