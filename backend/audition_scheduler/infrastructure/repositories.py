from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import Any, Sequence, cast

from sqlalchemy import delete, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.repositories import MemberRepository, SlotRepository, WindowRepository
from ..models import AuditionSlot, AuditionStatus, AuditionWindow, Member, MemberRole
from ..utils.time import utc_now_naive

logger = logging.getLogger(__name__)


class SqlAlchemyWindowRepository(WindowRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

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
        now = utc_now_naive()
        window = AuditionWindow(
            organization_id=organization_id,
            program_year_id=program_year_id,
            date=date,
            start_time=start_time,
            end_time=end_time,
            block_length_minutes=block_length_minutes,
            created_at=now,
            updated_at=now,
        )
        window.slots = [
            AuditionSlot(
                organization_id=organization_id,
                slot_time=slot_time,
                status=AuditionStatus.PENDING,
                member_id=None,
                notes=None,
                created_at=now,
                updated_at=now,
            )
            for slot_time in slot_times
        ]
        # Window and slots go out in the same flush.
        self.session.add(window)
        await self.session.flush()
        return window

    async def get(self, window_id: uuid.UUID, *, organization_id: uuid.UUID) -> AuditionWindow | None:
        stmt = select(AuditionWindow).where(
            AuditionWindow.id == window_id,
            AuditionWindow.organization_id == organization_id,
        )
        return await self.session.scalar(stmt)

    async def get_public(self, window_id: uuid.UUID) -> AuditionWindow | None:
        return await self.session.scalar(select(AuditionWindow).where(AuditionWindow.id == window_id))

    async def list_by_program_year(
        self,
        program_year_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
    ) -> list[AuditionWindow]:
        stmt = (
            select(AuditionWindow)
            .where(
                AuditionWindow.organization_id == organization_id,
                AuditionWindow.program_year_id == program_year_id,
            )
            .order_by(AuditionWindow.date, AuditionWindow.start_time)
        )
        return list((await self.session.scalars(stmt)).all())

    async def delete(self, window_id: uuid.UUID, *, organization_id: uuid.UUID) -> bool:
        await self.session.execute(
            delete(AuditionSlot).where(
                AuditionSlot.window_id == window_id,
                AuditionSlot.organization_id == organization_id,
            )
        )
        result = cast(
            "CursorResult[Any]",
            await self.session.execute(
                delete(AuditionWindow).where(
                    AuditionWindow.id == window_id,
                    AuditionWindow.organization_id == organization_id,
                )
            ),
        )
        return result.rowcount > 0


class SqlAlchemySlotRepository(SlotRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, slot_id: uuid.UUID, *, organization_id: uuid.UUID) -> AuditionSlot | None:
        stmt = select(AuditionSlot).where(
            AuditionSlot.id == slot_id,
            AuditionSlot.organization_id == organization_id,
        )
        return await self.session.scalar(stmt)

    async def get_public(self, slot_id: uuid.UUID) -> AuditionSlot | None:
        return await self.session.scalar(select(AuditionSlot).where(AuditionSlot.id == slot_id))

    async def list_for_window(
        self,
        window_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
    ) -> list[AuditionSlot]:
        stmt = (
            select(AuditionSlot)
            .where(
                AuditionSlot.window_id == window_id,
                AuditionSlot.organization_id == organization_id,
            )
            .order_by(AuditionSlot.slot_time)
        )
        return list((await self.session.scalars(stmt)).all())

    async def assign_if_unassigned(
        self,
        slot_id: uuid.UUID,
        *,
        organization_id: uuid.UUID,
        member_id: uuid.UUID,
    ) -> AuditionSlot | None:
        # Single conditional UPDATE; the row count decides the winner.
        stmt = (
            update(AuditionSlot)
            .where(
                AuditionSlot.id == slot_id,
                AuditionSlot.organization_id == organization_id,
                AuditionSlot.member_id.is_(None),
            )
            .values(member_id=member_id, updated_at=utc_now_naive())
            .execution_options(synchronize_session=False)
        )
        result = cast("CursorResult[Any]", await self.session.execute(stmt))
        if result.rowcount != 1:
            return None
        refreshed = (
            select(AuditionSlot)
            .where(AuditionSlot.id == slot_id)
            .execution_options(populate_existing=True)
        )
        return await self.session.scalar(refreshed)

    async def save(self, slot: AuditionSlot) -> AuditionSlot:
        self.session.add(slot)
        await self.session.flush()
        return slot


class SqlAlchemyMemberRepository(MemberRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_email(self, email_normalized: str, *, organization_id: uuid.UUID) -> Member | None:
        stmt = select(Member).where(
            Member.organization_id == organization_id,
            Member.email_normalized == email_normalized,
        )
        return await self.session.scalar(stmt)

    async def create_if_absent(
        self,
        *,
        organization_id: uuid.UUID,
        email: str,
        email_normalized: str,
        first_name: str,
        last_name: str,
    ) -> Member:
        now = utc_now_naive()
        member = Member(
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
        try:
            async with self.session.begin_nested():
                self.session.add(member)
        except IntegrityError:
            logger.info("member insert lost race; reusing existing row for organization %s", organization_id)
            # Locking read so the winner's committed row is visible under repeatable-read.
            stmt = (
                select(Member)
                .where(
                    Member.organization_id == organization_id,
                    Member.email_normalized == email_normalized,
                )
                .with_for_update()
            )
            existing = await self.session.scalar(stmt)
            if existing is None:
                raise
            return existing
        return member
