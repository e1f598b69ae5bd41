"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Self

from bson import ObjectId
from django.utils import formats
from django.utils.dateparse import parse_date, parse_datetime

from eventhub.domain.errors import (
    InvalidBookingIdError,
    InvalidDateError,
    InvalidEmailError,
    InvalidEventIdError,
    InvalidTimeError,
)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TIME_PATTERN = re.compile(r"^(\d{1,2})(?:[:.](\d{2}))?(?:\s*(AM|PM))?$", re.IGNORECASE)


def _parse_object_id(value: object) -> ObjectId | None:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: ObjectId

    @classmethod
    def new(cls) -> Self:
        return cls(value=ObjectId())

    @classmethod
    def from_string(cls, value: str) -> Self:
        oid = _parse_object_id(value)
        if oid is None:
            raise InvalidEventIdError()
        return cls(value=oid)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BookingId:
    """Unique identifier for a Booking."""

    value: ObjectId

    @classmethod
    def new(cls) -> Self:
        return cls(value=ObjectId())

    @classmethod
    def from_string(cls, value: str) -> Self:
        oid = _parse_object_id(value)
        if oid is None:
            raise InvalidBookingIdError()
        return cls(value=oid)

    def __str__(self) -> str:
        return str(self.value)


def slugify(value: str) -> str:
    """Reduce a title to lowercase letters, digits and single hyphens."""
    value = str(value).strip().lower()
    value = re.sub(r"[^a-z0-9\-\s]", "", value)
    value = re.sub(r"\s+", "-", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-")


@dataclass(frozen=True)
class Slug:
    """URL-safe identifier derived from an event title."""

    value: str

    def __post_init__(self) -> None:
        if not SLUG_PATTERN.match(self.value):
            raise ValueError(f"Invalid slug: {self.value!r}")

    @classmethod
    def base_for(cls, title: str, placeholder: str) -> Self:
        """Slug for ``title``, or ``placeholder`` when nothing survives slugify."""
        return cls(value=slugify(title) or placeholder)

    def with_suffix(self, counter: int) -> Self:
        if counter == 0:
            return self
        return type(self)(value=f"{self.value}-{counter}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EventDate:
    """Calendar date stored as ``YYYY-MM-DD``."""

    value: date

    @classmethod
    def parse(cls, raw: str | date | datetime) -> Self:
        """Parse loose date input, keeping only the calendar date.

        Aware datetimes are moved to UTC first. Strings are tried as ISO
        datetimes, ISO dates and then every format in DATE_INPUT_FORMATS.
        """
        if isinstance(raw, datetime):
            return cls(value=_to_date(raw))
        if isinstance(raw, date):
            return cls(value=raw)
        if not isinstance(raw, str) or not raw.strip():
            raise InvalidDateError()

        text = raw.strip()
        try:
            parsed_dt = parse_datetime(text)
            if parsed_dt is not None:
                return cls(value=_to_date(parsed_dt))
            parsed = parse_date(text)
            if parsed is not None:
                return cls(value=parsed)
        except ValueError:
            raise InvalidDateError() from None

        for fmt in formats.get_format("DATE_INPUT_FORMATS"):
            try:
                return cls(value=datetime.strptime(text, fmt).date())
            except ValueError:
                continue
        raise InvalidDateError()

    def __str__(self) -> str:
        return self.value.isoformat()


def _to_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


@dataclass(frozen=True)
class EventTime:
    """24-hour clock value stored as ``HH:MM``."""

    hour: int
    minute: int

    def __post_init__(self) -> None:
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            raise InvalidTimeError()

    @classmethod
    def parse(cls, raw: str) -> Self:
        """Accept ``H``, ``HH``, ``H:MM``, ``HH:MM`` or ``H.MM`` with optional AM/PM.

        With a meridiem the hour must be 1-12: ``12 AM`` is midnight and
        ``13:00 PM`` is rejected.
        """
        match = TIME_PATTERN.match(str(raw).strip())
        if not match:
            raise InvalidTimeError()

        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        meridiem = match.group(3)
        if meridiem:
            if not 1 <= hour <= 12:
                raise InvalidTimeError()
            if meridiem.upper() == "PM" and hour < 12:
                hour += 12
            elif meridiem.upper() == "AM" and hour == 12:
                hour = 0
        return cls(hour=hour, minute=minute)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class Email:
    """Address matching a basic ``local@domain.tld`` shape."""

    value: str

    def __post_init__(self) -> None:
        if not EMAIL_PATTERN.match(self.value):
            raise InvalidEmailError()

    def __str__(self) -> str:
        return self.value
