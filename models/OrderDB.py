from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String

from models.Base import Base

class OrderDB(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_name = Column(String)
    type = Column(String, default="DINE_IN")
    status = Column(String, default="PENDING")
    table_ids = Column(JSON, default=list)
    guests = Column(Integer, nullable=True)
    total = Column(Numeric(10, 2), default=0)
    is_paid = Column(Boolean, default=False)
    created_at = Column(DateTime)
    finished_at = Column(DateTime, nullable=True)
    status_history = Column(JSON, default=list)
    reservation_id = Column(Integer, ForeignKey("reservation.id", ondelete="SET NULL"), nullable=True)
