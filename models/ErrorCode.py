from enum import Enum


class ErrorCode(str, Enum):
    NO_TABLE_AVAILABLE = "NO_TABLE_AVAILABLE"
    SLOT_UNAVAILABLE = "SLOT_UNAVAILABLE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    RESERVATION_LOCKED = "RESERVATION_LOCKED"
    EXCEPTION_OVERLAP = "EXCEPTION_OVERLAP"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    OUTSIDE_OPENING_HOURS = "OUTSIDE_OPENING_HOURS"
    TOO_SHORT_NOTICE = "TOO_SHORT_NOTICE"
