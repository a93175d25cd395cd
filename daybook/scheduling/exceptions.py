class InvalidSchedulingInput(ValueError):
    """Caller passed a precondition-violating value (non-positive duration, bad business hours)."""


class BookingFlowError(Exception):
    pass


class SlotUnavailable(BookingFlowError):
    """The selected slot overlaps an existing appointment and cannot be booked."""


class IllegalTransition(BookingFlowError):
    pass
