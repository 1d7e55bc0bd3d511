from __future__ import annotations

import uuid
import datetime as dt
from enum import StrEnum
from typing import Optional

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql.sqltypes import Boolean, Date, DateTime, Integer, String, Text, Time


class Base(DeclarativeBase):
    pass


class AuditionStatus(StrEnum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    WAITLISTED = "Waitlisted"


class MemberRole(StrEnum):
    ADMIN = "Admin"
    MEMBER = "Member"


def _enum_column(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        values_callable=lambda cls: [e.value for e in cls],
        native_enum=False,
        length=32,
    )


class Member(Base):
    """Person record; audition applicants resolve to one of these by email."""

    __tablename__ = "members"
    __table_args__ = (
        UniqueConstraint("organization_id", "email_normalized", name="uq_members_org_email"),
        Index("idx_members_org", "organization_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    email_normalized: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[MemberRole] = mapped_column(
        _enum_column(MemberRole), nullable=False, default=MemberRole.MEMBER
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class AuditionWindow(Base):
    __tablename__ = "audition_windows"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="chk_windows_time"),
        CheckConstraint("block_length_minutes > 0", name="chk_windows_block"),
        Index("idx_windows_org_program_year", "organization_id", "program_year_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    program_year_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    end_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    block_length_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    slots: Mapped[list["AuditionSlot"]] = relationship(
        back_populates="window",
        order_by="AuditionSlot.slot_time",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class AuditionSlot(Base):
    __tablename__ = "audition_slots"
    __table_args__ = (
        UniqueConstraint("window_id", "slot_time", name="uq_slots_window_time"),
        Index("idx_slots_org", "organization_id"),
        Index("idx_slots_member", "member_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    window_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("audition_windows.id", ondelete="CASCADE"), nullable=False
    )
    slot_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    status: Mapped[AuditionStatus] = mapped_column(
        _enum_column(AuditionStatus),
        nullable=False,
        default=AuditionStatus.PENDING,
    )
    # Written only by the conditional claim update.
    member_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("members.id"), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    window: Mapped["AuditionWindow"] = relationship(back_populates="slots")

    @property
    def is_available(self) -> bool:
        return self.member_id is None
