from __future__ import annotations

import uuid
from datetime import date, time
from typing import Protocol, Sequence

from ..models import AuditionSlot, AuditionWindow, Member

# Every scoped method takes organization_id explicitly. The only unscoped
# reads are the `get_public` lookups used by unauthenticated callers; the
# organization they return scopes every call that follows.


class WindowRepository(Protocol):
    async def create_with_slots(
        self,
        *,
        organization_id: uuid.UUID,
        program_year_id: uuid.UUID,
        date: date,
        start_time: time,
        end_time: time,
        block_length_minutes: int,
        slot_times: Sequence[time],
    ) -> AuditionWindow: ...

    async def get(self, window_id: uuid.UUID, *, organization_id: uuid.UUID) -> AuditionWindow | None: ...

    async def get_public(self, window_id: uuid.UUID) -> AuditionWindow | None: ...

    async def list_by_program_year(
        self,
        program_year_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
    ) -> list[AuditionWindow]: ...

    async def delete(self, window_id: uuid.UUID, *, organization_id: uuid.UUID) -> bool: ...


class SlotRepository(Protocol):
    async def get(self, slot_id: uuid.UUID, *, organization_id: uuid.UUID) -> AuditionSlot | None: ...

    async def get_public(self, slot_id: uuid.UUID) -> AuditionSlot | None: ...

    async def list_for_window(
        self,
        window_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
    ) -> list[AuditionSlot]: ...

    async def assign_if_unassigned(
        self,
        slot_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
        member_id: uuid.UUID,
    ) -> AuditionSlot | None:
        """Atomically set member_id only while it is still null; None when the slot was already taken."""
        ...

    async def save(self, slot: AuditionSlot) -> AuditionSlot: ...


class MemberRepository(Protocol):
    async def find_by_email(self, email_normalized: str, *, organization_id: uuid.UUID) -> Member | None: ...

    async def create_if_absent(
        self,
        *,
        organization_id: uuid.UUID,
        email: str,
        email_normalized: str,
        first_name: str,
        last_name: str,
    ) -> Member:
        """Insert a member unless one with the same normalized email now exists; return whichever row wins."""
        ...
