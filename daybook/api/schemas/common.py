import datetime as dt
from typing import Annotated

from pydantic import AfterValidator


def _reject_offset(value: dt.time) -> dt.time:
    if value.tzinfo is not None:
        raise ValueError("time must not carry a timezone offset")
    return value


# Appointments are wall-clock times of day; offsets like "13:00Z" are rejected with 422.
NaiveTime = Annotated[dt.time, AfterValidator(_reject_offset)]
