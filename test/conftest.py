import os
from datetime import datetime

import pytest

# Test-Umgebung setzen
os.environ["TESTING"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("BUSINESS_TIMEZONE", None)

# Montag, 4. März 2030, 12:00 Uhr
FIXED_NOW = datetime(2030, 3, 4, 12, 0)

NOW_LOCAL_USERS = [
    "routes.table_route",
    "routes.order_route",
    "routes.reservation_route",
    "routes.availability_route",
]


@pytest.fixture
def setup_db():
    from database import SessionLocal
    from models import Base

    db = SessionLocal()
    Base.metadata.drop_all(bind=db.bind)
    Base.metadata.create_all(bind=db.bind)
    yield db
    db.close()


@pytest.fixture
def fixed_now(monkeypatch):
    for module in NOW_LOCAL_USERS:
        monkeypatch.setattr(f"{module}.now_local", lambda: FIXED_NOW)
    return FIXED_NOW
