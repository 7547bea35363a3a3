from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app import app
from models import *

client = TestClient(app)

pytestmark = pytest.mark.usefixtures("fixed_now")

EVENING = "2030-03-04T19:00:00"

# ---------------------------------------------------------
# Helper: Tische A(2), B(4), C(6) anlegen
# ---------------------------------------------------------
def create_test_tables(db: Session):
    tables = [TableDB(name=name, capacity=capacity) for name, capacity in (("A", 2), ("B", 4), ("C", 6))]
    db.add_all(tables)
    db.commit()
    for table in tables:
        db.refresh(table)
    return tables

# ---------------------------------------------------------
# Helper: Reservation direkt in der DB anlegen
# ---------------------------------------------------------
def create_test_reservation(db: Session, table_ids, reservation_time, status="CONFIRMED", guests=2):
    reservation = ReservationDB(
        customer_name="Ana",
        guests=guests,
        reservation_time=reservation_time,
        table_ids=table_ids,
        status=status,
        status_history=[{"status": status, "started_at": "2030-03-01T10:00:00"}],
        created_at=datetime(2030, 3, 1, 10, 0),
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation

def post_reservation(guests=2, reservation_time=EVENING, table_ids=None, **extra):
    payload = {"customer_name": "Ana", "guests": guests, "reservation_time": reservation_time, **extra}
    if table_ids is not None:
        payload["table_ids"] = table_ids
    return client.post("/reservations", json=payload)

def error_code(response):
    return response.json()["detail"]["errors"][0]["code"]

# =========================================================
# TEST: POST /reservations
# =========================================================
def test_create_reservation_assigns_smallest_table(setup_db):
    a, b, c = create_test_tables(setup_db)

    response = post_reservation(guests=3, customer_phone="600123123")
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    res = data["reservation"]
    assert res["table_ids"] == [b.id]
    assert res["status"] == "PENDING"
    assert res["customer_phone"] == "600123123"
    assert res["created_at"] == "2030-03-04T12:00:00"
    assert [h["status"] for h in res["status_history"]] == ["PENDING"]

def test_create_reservation_combines_tables(setup_db):
    a, b, c = create_test_tables(setup_db)

    response = post_reservation(guests=9)
    assert response.status_code == 200
    assert response.json()["reservation"]["table_ids"] == [c.id, b.id]

def test_create_reservation_with_chosen_tables(setup_db):
    a, b, c = create_test_tables(setup_db)

    response = post_reservation(guests=2, table_ids=[c.id])
    assert response.status_code == 200
    assert response.json()["reservation"]["table_ids"] == [c.id]

def test_create_reservation_outside_opening_hours(setup_db):
    create_test_tables(setup_db)

    response = post_reservation(reservation_time="2030-03-04T16:00:00")
    assert response.status_code == 400
    assert error_code(response) == "OUTSIDE_OPENING_HOURS"
    assert response.json()["detail"]["retryable"] is False

def test_create_reservation_too_short_notice(setup_db):
    create_test_tables(setup_db)
    setup_db.add(DayScheduleDB(day="monday", is_open=True, slots=[{"open": "12:00", "close": "23:00"}]))
    setup_db.commit()

    response = post_reservation(reservation_time="2030-03-04T12:30:00")
    assert response.status_code == 400
    assert error_code(response) == "TOO_SHORT_NOTICE"

def test_create_reservation_no_table(setup_db):
    create_test_tables(setup_db)

    response = post_reservation(guests=20)
    assert response.status_code == 409
    body = response.json()["detail"]
    assert body["success"] is False
    assert body["retryable"] is True
    assert body["errors"][0]["code"] == "NO_TABLE_AVAILABLE"
    assert body["alternatives"] == []

def test_create_reservation_offers_alternatives(setup_db):
    setup_db.add(TableDB(name="B", capacity=4))
    setup_db.commit()
    post_reservation(guests=4)

    response = post_reservation(guests=4, reservation_time="2030-03-04T19:30:00")
    assert response.status_code == 409
    assert response.json()["detail"]["alternatives"] == ["20:30", "21:00", "21:30", "22:00", "22:30"]

def test_double_booking_rejected(setup_db):
    a, b, c = create_test_tables(setup_db)
    assert post_reservation(table_ids=[b.id]).status_code == 200

    response = post_reservation(table_ids=[b.id], reservation_time="2030-03-04T20:00:00")
    assert response.status_code == 409
    body = response.json()["detail"]
    assert body["errors"][0]["code"] == "SLOT_UNAVAILABLE"
    assert body["errors"][0]["table_ids"] == [b.id]
    assert body["retryable"] is True

def test_auto_assignment_skips_booked_tables(setup_db):
    a, b, c = create_test_tables(setup_db)
    post_reservation(guests=3)

    response = post_reservation(guests=3, reservation_time="2030-03-04T19:30:00")
    assert response.json()["reservation"]["table_ids"] == [c.id]

def test_chosen_tables_too_small(setup_db):
    a, b, c = create_test_tables(setup_db)

    response = post_reservation(guests=5, table_ids=[a.id])
    assert response.status_code == 400
    assert error_code(response) == "INSUFFICIENT_CAPACITY"

def test_unknown_table(setup_db):
    create_test_tables(setup_db)

    response = post_reservation(table_ids=[999])
    assert response.status_code == 409
    assert error_code(response) == "SLOT_UNAVAILABLE"

def test_invalid_guests(setup_db):
    assert post_reservation(guests=0).status_code == 422

# =========================================================
# TEST: GET /reservations
# =========================================================
def test_list_reservations_filters(setup_db):
    create_test_tables(setup_db)
    create_test_reservation(setup_db, [1], datetime(2030, 3, 5, 20, 0), status="PENDING")
    create_test_reservation(setup_db, [2], datetime(2030, 3, 4, 21, 0))
    create_test_reservation(setup_db, [3], datetime(2030, 3, 4, 19, 0))

    response = client.get("/reservations")
    assert response.status_code == 200
    assert [r["reservation_time"] for r in response.json()] == [
        "2030-03-04T19:00:00", "2030-03-04T21:00:00", "2030-03-05T20:00:00"
    ]

    response = client.get("/reservations?day=2030-03-04")
    assert len(response.json()) == 2

    response = client.get("/reservations?status=PENDING")
    assert [r["table_ids"] for r in response.json()] == [[1]]

def test_get_reservation_not_found(setup_db):
    assert client.get("/reservations/999").status_code == 404

# =========================================================
# TEST: PUT /reservations/{id}/status
# =========================================================
def test_confirm_then_cancel(setup_db):
    create_test_tables(setup_db)
    res_id = post_reservation().json()["reservation"]["id"]

    response = client.put(f"/reservations/{res_id}/status", json={"status": "CONFIRMED"})
    assert response.status_code == 200
    assert response.json()["reservation"]["status"] == "CONFIRMED"

    response = client.put(f"/reservations/{res_id}/status", json={"status": "CANCELLED"})
    assert response.status_code == 200
    res = response.json()["reservation"]
    assert res["status"] == "CANCELLED"
    assert res["cancellation_reason"] == "ADMIN"
    assert res["finished_at"] == "2030-03-04T12:00:00"
    assert [h["status"] for h in res["status_history"]] == ["PENDING", "CONFIRMED", "CANCELLED"]

    response = client.put(f"/reservations/{res_id}/status", json={"status": "CONFIRMED"})
    assert response.status_code == 400
    assert error_code(response) == "INVALID_TRANSITION"

def test_seat_too_early(setup_db):
    res = create_test_reservation(setup_db, [1], datetime(2030, 3, 4, 19, 0))

    response = client.put(f"/reservations/{res.id}/status", json={"status": "SEATED"})
    assert response.status_code == 400
    assert error_code(response) == "INVALID_TRANSITION"

def test_seat_and_no_show_near_start(setup_db):
    seated = create_test_reservation(setup_db, [1], datetime(2030, 3, 4, 12, 15))
    missed = create_test_reservation(setup_db, [2], datetime(2030, 3, 4, 12, 20))

    response = client.put(f"/reservations/{seated.id}/status", json={"status": "SEATED"})
    assert response.status_code == 200
    assert response.json()["reservation"]["status"] == "SEATED"

    response = client.put(f"/reservations/{missed.id}/status", json={"status": "NO_SHOW"})
    assert response.status_code == 200
    assert response.json()["reservation"]["finished_at"] is not None

def test_cancel_with_user_reason(setup_db):
    res = create_test_reservation(setup_db, [1], datetime(2030, 3, 4, 19, 0))

    response = client.put(f"/reservations/{res.id}/status",
                          json={"status": "CANCELLED", "cancellation_reason": "USER"})
    assert response.json()["reservation"]["cancellation_reason"] == "USER"

def test_cancelled_reservation_frees_table(setup_db):
    a, b, c = create_test_tables(setup_db)
    res_id = post_reservation(table_ids=[a.id]).json()["reservation"]["id"]
    client.put(f"/reservations/{res_id}/status", json={"status": "CANCELLED"})

    response = post_reservation(table_ids=[a.id])
    assert response.status_code == 200

# =========================================================
# TEST: GET /reservations/{id}/next-statuses
# =========================================================
def test_next_statuses(setup_db):
    later = create_test_reservation(setup_db, [1], datetime(2030, 3, 4, 19, 0))
    soon = create_test_reservation(setup_db, [2], datetime(2030, 3, 4, 12, 15))

    data = client.get(f"/reservations/{later.id}/next-statuses").json()
    assert data["next_statuses"] == ["CANCELLED"]
    assert data["editable"] is True

    data = client.get(f"/reservations/{soon.id}/next-statuses").json()
    assert data["next_statuses"] == ["SEATED", "NO_SHOW", "CANCELLED"]
    assert data["editable"] is False

# =========================================================
# TEST: PUT /reservations/{id}
# =========================================================
def test_update_guests_reassigns_tables(setup_db):
    a, b, c = create_test_tables(setup_db)
    res_id = post_reservation(guests=2).json()["reservation"]["id"]

    response = client.put(f"/reservations/{res_id}", json={"guests": 5})
    assert response.status_code == 200
    res = response.json()["reservation"]
    assert res["guests"] == 5
    assert res["table_ids"] == [c.id]

def test_update_time_keeps_own_tables_free(setup_db):
    a, b, c = create_test_tables(setup_db)
    res_id = post_reservation(guests=4).json()["reservation"]["id"]

    response = client.put(f"/reservations/{res_id}", json={"reservation_time": "2030-03-04T19:30:00"})
    assert response.status_code == 200
    res = response.json()["reservation"]
    assert res["reservation_time"] == "2030-03-04T19:30:00"
    assert res["table_ids"] == [b.id]

def test_update_notes_only(setup_db):
    create_test_tables(setup_db)
    res_id = post_reservation(table_ids=[1]).json()["reservation"]["id"]

    response = client.put(f"/reservations/{res_id}", json={"notes": "Cumpleaños"})
    assert response.status_code == 200
    assert response.json()["reservation"]["notes"] == "Cumpleaños"
    assert response.json()["reservation"]["table_ids"] == [1]

def test_update_locked_reservation(setup_db):
    create_test_tables(setup_db)
    res = create_test_reservation(setup_db, [1], datetime(2030, 3, 4, 12, 45))

    response = client.put(f"/reservations/{res.id}", json={"guests": 1})
    assert response.status_code == 423
    assert error_code(response) == "RESERVATION_LOCKED"

def test_update_onto_taken_table(setup_db):
    a, b, c = create_test_tables(setup_db)
    post_reservation(table_ids=[c.id])
    res_id = post_reservation(table_ids=[b.id]).json()["reservation"]["id"]

    response = client.put(f"/reservations/{res_id}", json={"table_ids": [c.id]})
    assert response.status_code == 409
    assert error_code(response) == "SLOT_UNAVAILABLE"

# =========================================================
# TEST: DELETE /reservations/{id}
# =========================================================
def test_delete_reservation(setup_db):
    res = create_test_reservation(setup_db, [1], datetime(2030, 3, 4, 19, 0))

    assert client.delete(f"/reservations/{res.id}").status_code == 200
    assert client.get(f"/reservations/{res.id}").status_code == 404
    assert client.delete(f"/reservations/{res.id}").status_code == 404

def test_duplicate_tables_rejected(setup_db):
    a, b, c = create_test_tables(setup_db)

    response = post_reservation(guests=8, table_ids=[b.id, b.id])
    assert response.status_code == 409
    assert error_code(response) == "SLOT_UNAVAILABLE"
    assert client.get("/reservations").json() == []

def test_update_with_null_fields_keeps_values(setup_db):
    a, b, c = create_test_tables(setup_db)
    res_id = post_reservation(guests=3).json()["reservation"]["id"]

    response = client.put(f"/reservations/{res_id}", json={"reservation_time": None, "guests": None})
    assert response.status_code == 200
    res = response.json()["reservation"]
    assert res["reservation_time"] == EVENING
    assert res["guests"] == 3
    assert res["table_ids"] == [b.id]
