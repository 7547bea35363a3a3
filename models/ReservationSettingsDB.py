from sqlalchemy import Column, Integer

from models.Base import Base

class ReservationSettingsDB(Base):
    __tablename__ = "reservation_settings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    duration = Column(Integer, default=90)
    min_booking_time = Column(Integer, default=60)
    initial_block_time = Column(Integer, default=60)
    extension_block_time = Column(Integer, default=30)
    modification_lock_time = Column(Integer, default=60)
    slot_interval = Column(Integer, default=30)
    visibility_window = Column(Integer, default=120)
