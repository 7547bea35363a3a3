from datetime import datetime

from pydantic import BaseModel


class StatusHistory(BaseModel):
    status: str
    started_at: datetime
