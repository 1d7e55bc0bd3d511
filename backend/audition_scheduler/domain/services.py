import uuid
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable

from ..models import AuditionSlot, AuditionStatus, AuditionWindow
from ..utils.time import add_minutes, minutes_between
from .errors import ValidationError


@dataclass(frozen=True)
class WindowPlan:
    start_time: time
    end_time: time
    block_length_minutes: int
    slot_times: tuple[time, ...]

    @property
    def slot_count(self) -> int:
        return len(self.slot_times)


def plan_window(*, start_time: time, end_time: time, block_length_minutes: int) -> WindowPlan:
    """
    Pure validation and slot generation for an audition window.
    Slot times run start_time, start_time + block, ... up to but excluding end_time.
    Raises ValidationError tagged with the offending field.
    """
    for field, value in (("startTime", start_time), ("endTime", end_time)):
        if value.tzinfo is not None:
            raise ValidationError(field, "time must be a local time of day without an offset")
        if value.second or value.microsecond:
            raise ValidationError(field, "time must be on a whole minute")
    if start_time >= end_time:
        raise ValidationError("startTime", "start time must be before end time")
    if block_length_minutes <= 0:
        raise ValidationError("blockLengthMinutes", "block length must be a positive number")

    total_minutes = minutes_between(start_time, end_time)
    if total_minutes < block_length_minutes or total_minutes % block_length_minutes != 0:
        raise ValidationError("blockLengthMinutes", "block length must evenly divide the total duration")

    slot_count = total_minutes // block_length_minutes
    slot_times = tuple(add_minutes(start_time, i * block_length_minutes) for i in range(slot_count))
    return WindowPlan(
        start_time=start_time,
        end_time=end_time,
        block_length_minutes=block_length_minutes,
        slot_times=slot_times,
    )


def normalize_email(email: str) -> str:
    return email.strip().lower()


EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 100


def require_email(email: str | None) -> str:
    """Return the trimmed email, rejecting blank, whitespace-only or over-long input."""
    trimmed = (email or "").strip()
    if not trimmed:
        raise ValidationError("email", "email is required")
    if len(trimmed) > EMAIL_MAX_LENGTH:
        raise ValidationError("email", f"email must be at most {EMAIL_MAX_LENGTH} characters")
    return trimmed


def check_name_length(value: str, *, field: str) -> str:
    trimmed = value.strip()
    if len(trimmed) > NAME_MAX_LENGTH:
        raise ValidationError(field, f"name must be at most {NAME_MAX_LENGTH} characters")
    return trimmed


def parse_status(value: str | AuditionStatus) -> AuditionStatus:
    """Case-insensitive conversion from the stored/wire name to AuditionStatus."""
    if isinstance(value, AuditionStatus):
        return value
    candidate = (value or "").strip().lower()
    for status in AuditionStatus:
        if status.value.lower() == candidate:
            return status
    raise ValidationError("status", "invalid status value")


@dataclass(frozen=True)
class PublicSlotView:
    slot_id: uuid.UUID
    slot_time: time
    is_available: bool


@dataclass(frozen=True)
class PublicWindowView:
    window_id: uuid.UUID
    date: date
    start_time: time
    end_time: time
    block_length_minutes: int
    slots: tuple[PublicSlotView, ...]


def project_public_view(window: AuditionWindow, slots: Iterable[AuditionSlot]) -> PublicWindowView:
    # Identity, status and notes never leave this function.
    ordered = sorted(slots, key=lambda s: s.slot_time)
    return PublicWindowView(
        window_id=window.id,
        date=window.date,
        start_time=window.start_time,
        end_time=window.end_time,
        block_length_minutes=window.block_length_minutes,
        slots=tuple(
            PublicSlotView(slot_id=s.id, slot_time=s.slot_time, is_available=s.is_available)
            for s in ordered
        ),
    )
