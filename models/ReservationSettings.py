from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReservationSettings(BaseModel):
    """Global reservation rules. Every value is in minutes."""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    duration: int = Field(default=90, gt=0)
    min_booking_time: int = Field(default=60, ge=0)
    initial_block_time: int = Field(default=60, ge=0)
    extension_block_time: int = Field(default=30, ge=0)
    modification_lock_time: int = Field(default=60, ge=0)
    slot_interval: int = Field(default=30, gt=0)
    visibility_window: int = Field(default=120, ge=0)

class ReservationSettingsUpdate(BaseModel):
    duration: Optional[int] = Field(default=None, gt=0)
    min_booking_time: Optional[int] = Field(default=None, ge=0)
    initial_block_time: Optional[int] = Field(default=None, ge=0)
    extension_block_time: Optional[int] = Field(default=None, ge=0)
    modification_lock_time: Optional[int] = Field(default=None, ge=0)
    slot_interval: Optional[int] = Field(default=None, gt=0)
    visibility_window: Optional[int] = Field(default=None, ge=0)
