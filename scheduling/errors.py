class SchedulingError(Exception):
    """Base class for booking failures the caller can recover from."""
    retryable = False


class SlotUnavailableError(SchedulingError):
    """The tables picked earlier are no longer free at commit time."""
    retryable = True

    def __init__(self, message, table_ids=None):
        super().__init__(message)
        self.table_ids = list(table_ids or [])


class NoTableAvailableError(SchedulingError):
    """No table or table combination seats the party at that time."""
    retryable = True

    def __init__(self, message, alternatives=None):
        super().__init__(message)
        self.alternatives = list(alternatives or [])


class InvalidTransitionError(SchedulingError):
    pass


class ReservationLockedError(SchedulingError):
    pass


class InsufficientCapacityError(SchedulingError):
    pass


class OutsideOpeningHoursError(SchedulingError):
    pass


class TooShortNoticeError(SchedulingError):
    retryable = True
