"""Status transitions for reservations and orders."""
from datetime import datetime, timedelta
from typing import Optional

from models import (
    Order,
    OrderStatus,
    OrderType,
    Reservation,
    ReservationCancellationReason,
    ReservationSettings,
    ReservationStatus,
    StatusHistory,
)

from .errors import InvalidTransitionError

# Ab 30 Minuten vor Beginn darf platziert oder No-Show gesetzt werden
SEATING_WINDOW = timedelta(minutes=30)


def _append_history(history: list[StatusHistory], status: str, now: datetime) -> list[StatusHistory]:
    started_at = now
    if history and history[-1].started_at > now:
        started_at = history[-1].started_at
    return [*history, StatusHistory(status=status, started_at=started_at)]


def next_reservation_statuses(reservation: Reservation, orders: list[Order], now: datetime) -> list[ReservationStatus]:
    status = reservation.status
    if status is ReservationStatus.PENDING:
        return [ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED]
    if status is ReservationStatus.CONFIRMED:
        if now >= reservation.reservation_time - SEATING_WINDOW:
            return [ReservationStatus.SEATED, ReservationStatus.NO_SHOW, ReservationStatus.CANCELLED]
        return [ReservationStatus.CANCELLED]
    if status is ReservationStatus.SEATED:
        order = next((o for o in orders if o.id is not None and o.id == reservation.order_id), None)
        if order is not None and order.status.is_terminal:
            return [ReservationStatus.COMPLETED, ReservationStatus.CANCELLED]
        return [ReservationStatus.CANCELLED]
    return []


def transition_reservation(
    reservation: Reservation,
    status: ReservationStatus,
    now: datetime,
    reason: Optional[ReservationCancellationReason] = None,
) -> Reservation:
    """Returns a copy of ``reservation`` moved to ``status``.

    Finished reservations (completed, cancelled, no-show) are never reopened.
    """
    if reservation.status.is_terminal:
        raise InvalidTransitionError(
            f"Reservation {reservation.id} is already {reservation.status.value}"
        )
    if status is reservation.status:
        raise InvalidTransitionError(f"Reservation {reservation.id} is already {status.value}")

    update = {
        "status": status,
        "status_history": _append_history(reservation.status_history, status.value, now),
    }
    if status is ReservationStatus.CANCELLED:
        update["cancellation_reason"] = reason or ReservationCancellationReason.ADMIN
    if status.is_terminal:
        update["finished_at"] = now
    return reservation.model_copy(update=update)


def transition_order(order: Order, status: OrderStatus, now: datetime) -> Order:
    if order.status.is_terminal:
        raise InvalidTransitionError(f"Order {order.id} is already {order.status.value}")
    if status is order.status:
        raise InvalidTransitionError(f"Order {order.id} is already {status.value}")
    if status.is_completed and not order.is_paid:
        raise InvalidTransitionError("An order cannot be completed before its payment is settled")
    if (
        order.type is OrderType.DELIVERY
        and order.status is OrderStatus.CONFIRMED
        and status is OrderStatus.PREPARING
        and not order.is_paid
    ):
        raise InvalidTransitionError("Delivery orders are prepared only after payment")

    update = {
        "status": status,
        "status_history": _append_history(order.status_history, status.value, now),
    }
    if status.is_terminal:
        update["finished_at"] = now
    return order.model_copy(update=update)


def is_reservation_editable(reservation: Reservation, settings: ReservationSettings, now: datetime) -> bool:
    if reservation.status not in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
        return False
    lock_time = reservation.reservation_time - timedelta(minutes=settings.modification_lock_time)
    return now < lock_time
