import datetime as dt
import uuid
from typing import Optional

from pydantic import BaseModel, field_serializer

from .domain.services import PublicWindowView
from .models import AuditionSlot, AuditionStatus, AuditionWindow


def _hhmm(value: dt.time) -> str:
    return value.isoformat(timespec="minutes")


class WindowCreate(BaseModel):
    program_year_id: uuid.UUID
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    # Range is checked by the window planner so errors stay field-tagged.
    block_length_minutes: int


class SlotRead(BaseModel):
    slot_id: uuid.UUID
    window_id: uuid.UUID
    slot_time: dt.time
    member_id: Optional[uuid.UUID]
    status: AuditionStatus
    notes: Optional[str]

    @field_serializer("slot_time")
    def _ser_time(self, value: dt.time) -> str:
        return _hhmm(value)

    @classmethod
    def from_db(cls, *, slot: AuditionSlot) -> "SlotRead":
        return cls(
            slot_id=slot.id,
            window_id=slot.window_id,
            slot_time=slot.slot_time,
            member_id=slot.member_id,
            status=slot.status,
            notes=slot.notes,
        )


class WindowRead(BaseModel):
    window_id: uuid.UUID
    program_year_id: uuid.UUID
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    block_length_minutes: int
    slots: list[SlotRead]

    @field_serializer("start_time", "end_time")
    def _ser_time(self, value: dt.time) -> str:
        return _hhmm(value)

    @classmethod
    def from_db(cls, *, window: AuditionWindow) -> "WindowRead":
        return cls(
            window_id=window.id,
            program_year_id=window.program_year_id,
            date=window.date,
            start_time=window.start_time,
            end_time=window.end_time,
            block_length_minutes=window.block_length_minutes,
            slots=[SlotRead.from_db(slot=s) for s in sorted(window.slots, key=lambda s: s.slot_time)],
        )


class PublicSlotRead(BaseModel):
    slot_id: uuid.UUID
    slot_time: dt.time
    is_available: bool

    @field_serializer("slot_time")
    def _ser_time(self, value: dt.time) -> str:
        return _hhmm(value)


class PublicWindowRead(BaseModel):
    window_id: uuid.UUID
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    block_length_minutes: int
    slots: list[PublicSlotRead]

    @field_serializer("start_time", "end_time")
    def _ser_time(self, value: dt.time) -> str:
        return _hhmm(value)

    @classmethod
    def from_view(cls, view: PublicWindowView) -> "PublicWindowRead":
        return cls(
            window_id=view.window_id,
            date=view.date,
            start_time=view.start_time,
            end_time=view.end_time,
            block_length_minutes=view.block_length_minutes,
            slots=[
                PublicSlotRead(slot_id=s.slot_id, slot_time=s.slot_time, is_available=s.is_available)
                for s in view.slots
            ],
        )


class ClaimRequest(BaseModel):
    # Blank and length limits are checked by the claim so errors stay field-tagged.
    first_name: str
    last_name: str
    email: str


class ClaimRead(BaseModel):
    slot_id: uuid.UUID
    window_id: uuid.UUID
    slot_time: dt.time
    member_id: uuid.UUID
    status: AuditionStatus

    @field_serializer("slot_time")
    def _ser_time(self, value: dt.time) -> str:
        return _hhmm(value)

    @classmethod
    def from_db(cls, *, slot: AuditionSlot) -> "ClaimRead":
        if slot.member_id is None:
            raise ValueError("slot has no assigned member")
        return cls(
            slot_id=slot.id,
            window_id=slot.window_id,
            slot_time=slot.slot_time,
            member_id=slot.member_id,
            status=slot.status,
        )


class SlotStatusUpdate(BaseModel):
    status: str


class SlotNotesUpdate(BaseModel):
    notes: Optional[str] = None
