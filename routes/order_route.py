import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from database import get_db
from helper import history_json, load_snapshot, now_local, raise_scheduling_error
from models import *
from routes.websocket import broadcast_event
from scheduling import (
    InvalidTransitionError,
    SchedulingError,
    SlotUnavailableError,
    available_tables_for_dine_in,
    transition_order,
    transition_reservation,
)

logger = logging.getLogger(__name__)

order_router = APIRouter(
    tags=["Order"]
)

def _order_json(db_order: OrderDB) -> dict:
    return Order.model_validate(db_order).model_dump(mode="json")

def _get_or_404(db: Session, id: int) -> OrderDB:
    order = db.query(OrderDB).filter(OrderDB.id == id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order

def _check_dine_in_tables(snapshot, order: OrderCreate, now):
    if not order.table_ids:
        raise SlotUnavailableError("Dine-in orders need at least one table")
    duplicates = sorted({table_id for table_id in order.table_ids if order.table_ids.count(table_id) > 1})
    if duplicates:
        raise SlotUnavailableError(f"Tables {duplicates} listed more than once", duplicates)
    free_ids = {t.id for t in available_tables_for_dine_in(snapshot, now, order.reservation_id)}
    taken = [table_id for table_id in order.table_ids if table_id not in free_ids]
    if taken:
        raise SlotUnavailableError("Tables are occupied or reserved during the meal", taken)

@order_router.post("/orders", tags=["Order"])
async def create_order(order: OrderCreate, db: Session = Depends(get_db)):
    """
    Creates a new order.

    Dine-in orders occupy their tables until they are completed or cancelled,
    so the tables are checked against the live floor state first. When the
    order comes from an active reservation, the reservation is linked and
    seated; finished reservations are refused.

    Args:
        order (OrderCreate): The order data submitted by the client.

    Returns:
        dict: A success flag and the created order.
    """
    try:
        now = now_local()
        snapshot = load_snapshot(db)
        if order.type is OrderType.DINE_IN:
            try:
                _check_dine_in_tables(snapshot, order, now)
            except SchedulingError as exc:
                raise_scheduling_error(exc)

        history = [StatusHistory(status=OrderStatus.PENDING.value, started_at=now)]
        db_order = OrderDB(
            **order.model_dump(mode="json"),
            status=OrderStatus.PENDING.value,
            status_history=history_json(history),
            created_at=now,
        )
        db.add(db_order)
        db.flush()

        if order.reservation_id is not None:
            res_row = db.query(ReservationDB).filter(ReservationDB.id == order.reservation_id).first()
            if not res_row:
                raise HTTPException(status_code=404, detail="Reservation not found")
            reservation = Reservation.model_validate(res_row)
            if not reservation.status.is_active:
                raise_scheduling_error(InvalidTransitionError(
                    f"Reservation {reservation.id} is {reservation.status.value} and cannot take an order"
                ))
            res_row.order_id = db_order.id
            if reservation.status is ReservationStatus.CONFIRMED:
                seated = transition_reservation(reservation, ReservationStatus.SEATED, now)
                res_row.status = seated.status.value
                res_row.status_history = history_json(seated.status_history)

        db.commit()
        db.refresh(db_order)
        logger.info("Order %s created (%s) on tables %s", db_order.id, db_order.type, db_order.table_ids)

        clean_order = _order_json(db_order)
        await broadcast_event(f"ORDER_{db_order.status}", clean_order)

        return {
            "success": True,
            "order": clean_order
        }

    except HTTPException as http_exc:
        db.rollback()
        raise http_exc

    except Exception as e:
        db.rollback()
        logger.exception("Failed to create order")
        raise HTTPException(status_code=500, detail=str(e))

@order_router.get("/orders", tags=["Order"])
def get_orders(status: OrderStatus = Query(None), db: Session = Depends(get_db)):
    """
    Retrieves all orders, newest first, optionally filtered by status.

    Args:
        status (OrderStatus, optional): Filter orders by their status.

    Returns:
        list: A list of order dictionaries.
    """
    try:
        query = db.query(OrderDB)
        if status:
            query = query.filter(OrderDB.status == status.value)
        orders = query.order_by(OrderDB.created_at.desc()).all()
        return [_order_json(order) for order in orders]
    except Exception as e:
        logger.error("Error in /orders: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

@order_router.get("/orders/{id}", tags=["Order"])
def get_order(id: int, db: Session = Depends(get_db)):
    try:
        return _order_json(_get_or_404(db, id))

    except HTTPException:
        raise

    except Exception as e:
        logger.error("Error in /orders/%s: %s", id, e)
        raise HTTPException(status_code=500, detail=str(e))

@order_router.put("/orders/{id}/status", tags=["Order"])
async def update_order_status(id: int, update: OrderStatusUpdate, db: Session = Depends(get_db)):
    """
    Advances an order through its lifecycle.

    Completed and cancelled orders are final; a completed or cancelled
    dine-in order frees its tables.
    """
    try:
        order_row = _get_or_404(db, id)
        current = Order.model_validate(order_row)
        try:
            moved = transition_order(current, update.status, now_local())
        except SchedulingError as exc:
            raise_scheduling_error(exc)

        order_row.status = moved.status.value
        order_row.status_history = history_json(moved.status_history)
        order_row.finished_at = moved.finished_at

        db.commit()
        db.refresh(order_row)
        logger.info("Order %s: %s -> %s", id, current.status.value, moved.status.value)

        clean_order = _order_json(order_row)
        await broadcast_event(f"ORDER_{moved.status.value}", clean_order)
        return {"success": True, "order": clean_order}
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

@order_router.put("/orders/{id}/payment", tags=["Order"])
async def settle_order_payment(id: int, db: Session = Depends(get_db)):
    """Marks an order as paid so it can be completed."""
    try:
        order_row = _get_or_404(db, id)
        order_row.is_paid = True
        db.commit()
        db.refresh(order_row)

        clean_order = _order_json(order_row)
        await broadcast_event("ORDER_PAID", clean_order)
        return {"success": True, "order": clean_order}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

# Bestellung löschen
@order_router.delete("/orders/{id}", tags=["Order"])
def delete_order(id: int, db: Session = Depends(get_db)):
    """
    Deletes an order by its ID.

    Args:
        id (int): The ID of the order to delete.

    Returns:
        dict: A success flag if deletion was successful.
    """
    try:
        order = _get_or_404(db, id)
        db.delete(order)
        db.commit()
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))
