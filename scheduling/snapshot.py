from dataclasses import dataclass, field
from typing import Optional

from models import (
    DEFAULT_WEEKLY_SCHEDULE,
    Order,
    Reservation,
    ReservationSettings,
    ScheduleException,
    Table,
    WeeklySchedule,
)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of everything the scheduler looks at.

    The caller loads it (see ``helper.load_snapshot``) and decides how stale
    it may get; scheduler functions never mutate it.
    """
    tables: list[Table] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)
    reservations: list[Reservation] = field(default_factory=list)
    settings: ReservationSettings = field(default_factory=ReservationSettings)
    schedule: WeeklySchedule = field(default_factory=lambda: DEFAULT_WEEKLY_SCHEDULE.model_copy(deep=True))
    exceptions: list[ScheduleException] = field(default_factory=list)

    def table_by_id(self, table_id: int) -> Optional[Table]:
        for table in self.tables:
            if table.id == table_id:
                return table
        return None
