import asyncio
import uuid
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any, AsyncIterator, Optional, Sequence

import pytest
import pytest_asyncio
from audition_scheduler.database import create_schema
from audition_scheduler.models import AuditionSlot, AuditionStatus, AuditionWindow, Member, MemberRole
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

ORG_ID = uuid.UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")
OTHER_ORG_ID = uuid.UUID("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb")
PROGRAM_YEAR_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class InMemoryStore:
    def __init__(self) -> None:
        self.windows: dict[uuid.UUID, AuditionWindow] = {}
        self.slots: dict[uuid.UUID, AuditionSlot] = {}
        self.members: dict[uuid.UUID, Member] = {}
        self.window_creates = 0

    def slots_for(self, window_id: uuid.UUID) -> list[AuditionSlot]:
        return sorted(
            (s for s in self.slots.values() if s.window_id == window_id),
            key=lambda s: s.slot_time,
        )


class FakeWindowRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

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
    ) -> AuditionWindow:
        now = _now()
        window = AuditionWindow(
            id=uuid.uuid4(),
            organization_id=organization_id,
            program_year_id=program_year_id,
            date=date,
            start_time=start_time,
            end_time=end_time,
            block_length_minutes=block_length_minutes,
            created_at=now,
            updated_at=now,
        )
        slots = [
            AuditionSlot(
                id=uuid.uuid4(),
                organization_id=organization_id,
                window_id=window.id,
                slot_time=t,
                status=AuditionStatus.PENDING,
                member_id=None,
                notes=None,
                created_at=now,
                updated_at=now,
            )
            for t in slot_times
        ]
        window.slots = slots
        self.store.window_creates += 1
        self.store.windows[window.id] = window
        for slot in slots:
            self.store.slots[slot.id] = slot
        return window

    async def get(self, window_id: uuid.UUID, *, organization_id: uuid.UUID) -> Optional[AuditionWindow]:
        window = self.store.windows.get(window_id)
        if window is None or window.organization_id != organization_id:
            return None
        return window

    async def get_public(self, window_id: uuid.UUID) -> Optional[AuditionWindow]:
        return self.store.windows.get(window_id)

    async def list_by_program_year(
        self,
        program_year_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
    ) -> list[AuditionWindow]:
        return [
            w
            for w in self.store.windows.values()
            if w.organization_id == organization_id and w.program_year_id == program_year_id
        ]

    async def delete(self, window_id: uuid.UUID, *, organization_id: uuid.UUID) -> bool:
        window = await self.get(window_id, organization_id=organization_id)
        if window is None:
            return False
        for slot in self.store.slots_for(window_id):
            del self.store.slots[slot.id]
        del self.store.windows[window_id]
        return True


class FakeSlotRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.saved: list[AuditionSlot] = []

    async def get(self, slot_id: uuid.UUID, *, organization_id: uuid.UUID) -> Optional[AuditionSlot]:
        slot = self.store.slots.get(slot_id)
        if slot is None or slot.organization_id != organization_id:
            return None
        return slot

    async def get_public(self, slot_id: uuid.UUID) -> Optional[AuditionSlot]:
        await asyncio.sleep(0)
        return self.store.slots.get(slot_id)

    async def list_for_window(
        self,
        window_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
    ) -> list[AuditionSlot]:
        return [s for s in self.store.slots_for(window_id) if s.organization_id == organization_id]

    async def assign_if_unassigned(
        self,
        slot_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
        member_id: uuid.UUID,
    ) -> Optional[AuditionSlot]:
        # Yield first so concurrent claimants interleave; the check-and-set itself never awaits.
        await asyncio.sleep(0)
        slot = self.store.slots.get(slot_id)
        if slot is None or slot.organization_id != organization_id or slot.member_id is not None:
            return None
        slot.member_id = member_id
        return slot

    async def save(self, slot: AuditionSlot) -> AuditionSlot:
        self.saved.append(slot)
        self.store.slots[slot.id] = slot
        return slot


class FakeMemberRepo:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_email(self, email_normalized: str, *, organization_id: uuid.UUID) -> Optional[Member]:
        await asyncio.sleep(0)
        for member in self.store.members.values():
            if member.organization_id == organization_id and member.email_normalized == email_normalized:
                return member
        return None

    async def create_if_absent(
        self,
        *,
        organization_id: uuid.UUID,
        email: str,
        email_normalized: str,
        first_name: str,
        last_name: str,
    ) -> Member:
        for member in self.store.members.values():
            if member.organization_id == organization_id and member.email_normalized == email_normalized:
                return member
        now = _now()
        member = Member(
            id=uuid.uuid4(),
            organization_id=organization_id,
            email=email,
            email_normalized=email_normalized,
            first_name=first_name,
            last_name=last_name,
            role=MemberRole.MEMBER,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.store.members[member.id] = member
        return member


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def window_repo(store: InMemoryStore) -> FakeWindowRepo:
    return FakeWindowRepo(store)


@pytest.fixture
def slot_repo(store: InMemoryStore) -> FakeSlotRepo:
    return FakeSlotRepo(store)


@pytest.fixture
def member_repo(store: InMemoryStore) -> FakeMemberRepo:
    return FakeMemberRepo(store)


@pytest_asyncio.fixture
async def sqlite_sessions(tmp_path: Path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'auditions.db'}", poolclass=NullPool)

    # Let SQLAlchemy own BEGIN so SAVEPOINTs nest correctly under the sqlite driver.
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    await create_schema(engine)
    try:
        yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    finally:
        await engine.dispose()
