from sqlalchemy import JSON, Boolean, Column, Date, Integer, String

from models.Base import Base

class DayScheduleDB(Base):
    __tablename__ = "day_schedule"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    day = Column(String, unique=True, nullable=False)
    is_open = Column(Boolean, default=True)
    slots = Column(JSON, default=list)

class ScheduleExceptionDB(Base):
    __tablename__ = "schedule_exception"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    slots = Column(JSON, default=list)
