from sqlalchemy import Boolean, Column, Integer, String

from models.Base import Base

class TableDB(Base):
    __tablename__ = "table"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String, nullable=False)
    capacity = Column(Integer, nullable=False)
    allows_reservations = Column(Boolean, default=True, nullable=False)
    override_status = Column(String, nullable=True)
