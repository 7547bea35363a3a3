from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TableOverride(str, Enum):
    BLOCKED = "BLOCKED"

class Table(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: str
    capacity: int = Field(gt=0)
    allows_reservations: bool = True
    override_status: Optional[TableOverride] = None

class TableOverrideUpdate(BaseModel):
    override_status: Optional[TableOverride] = None
