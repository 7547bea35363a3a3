from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from models.Base import Base

class ReservationDB(Base):
    __tablename__ = "reservation"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_name = Column(String)
    customer_phone = Column(String, nullable=True)
    guests = Column(Integer)
    reservation_time = Column(DateTime, index=True)
    table_ids = Column(JSON, default=list)
    status = Column(String, default="PENDING")
    status_history = Column(JSON, default=list)
    created_at = Column(DateTime)
    finished_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    order_id = Column(Integer, nullable=True)
