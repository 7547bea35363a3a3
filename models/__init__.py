from .Base import Base
from .ErrorCode import ErrorCode
from .StatusHistory import StatusHistory
from .Table import Table, TableOverride, TableOverrideUpdate
from .TableDB import TableDB
from .Order import Order, OrderCreate, OrderStatus, OrderStatusUpdate, OrderType
from .OrderDB import OrderDB
from .Reservation import (
    Reservation,
    ReservationCancellationReason,
    ReservationCreate,
    ReservationStatus,
    ReservationStatusUpdate,
    ReservationUpdate,
)
from .ReservationDB import ReservationDB
from .ReservationSettings import ReservationSettings, ReservationSettingsUpdate
from .ReservationSettingsDB import ReservationSettingsDB
from .Schedule import (
    DEFAULT_WEEKLY_SCHEDULE,
    WEEKDAYS,
    DaySchedule,
    ExceptionType,
    ScheduleException,
    TimeSlot,
    WeeklySchedule,
)
from .ScheduleDB import DayScheduleDB, ScheduleExceptionDB
