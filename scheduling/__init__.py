from .allocator import AllocationStrategy, allocate
from .booking import assign_tables, check_bookable_time, revalidate_assignment
from .business_calendar import find_exception, interval_bounds, is_open_at, open_intervals_for
from .errors import (
    InsufficientCapacityError,
    InvalidTransitionError,
    NoTableAvailableError,
    OutsideOpeningHoursError,
    ReservationLockedError,
    SchedulingError,
    SlotUnavailableError,
    TooShortNoticeError,
)
from .lifecycle import (
    is_reservation_editable,
    next_reservation_statuses,
    transition_order,
    transition_reservation,
)
from .occupancy import (
    available_tables,
    available_tables_for_dine_in,
    overlaps,
    tables_unavailable_during,
)
from .slots import available_slots, find_available_tables
from .snapshot import Snapshot
from .table_state import TableState, TableStatus, project_all, project_status
