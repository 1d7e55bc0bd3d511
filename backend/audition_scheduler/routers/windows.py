import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import Actor, get_current_actor, get_session, require_admin
from ..domain.errors import DomainError
from ..infrastructure.repositories import SqlAlchemySlotRepository, SqlAlchemyWindowRepository
from ..schemas import SlotRead, WindowCreate, WindowRead
from ..usecases import windows as window_usecase
from ..utils.audit_log import emit_audit_log
from .errors import audit_or_500, http_error_for

router = APIRouter(
    prefix="/audition-windows",
    tags=["audition-windows"],
    dependencies=[Depends(get_current_actor)],
)


@router.post("", response_model=WindowRead, status_code=status.HTTP_201_CREATED)
async def create_window(
    payload: WindowCreate,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_admin),
) -> WindowRead:
    window_repo = SqlAlchemyWindowRepository(session)
    async with session.begin():
        try:
            window = await window_usecase.create_window(
                window_repo,
                organization_id=actor.organization_id,
                program_year_id=payload.program_year_id,
                date=payload.date,
                start_time=payload.start_time,
                end_time=payload.end_time,
                block_length_minutes=payload.block_length_minutes,
            )
        except DomainError as exc:
            raise http_error_for(exc) from exc

    audit_or_500(
        emit_audit_log,
        action="window.created",
        initiator="admin",
        organization_id=actor.organization_id,
        window_id=window.id,
        actor_id=actor.member_id,
        extra={"slot_count": len(window.slots)},
    )
    return WindowRead.from_db(window=window)


@router.get("", response_model=List[WindowRead])
async def list_windows(
    program_year_id: uuid.UUID = Query(...),
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
) -> list[WindowRead]:
    window_repo = SqlAlchemyWindowRepository(session)
    windows = await window_usecase.list_windows(
        window_repo,
        program_year_id=program_year_id,
        organization_id=actor.organization_id,
    )
    return [WindowRead.from_db(window=w) for w in windows]


@router.get("/{window_id}", response_model=WindowRead)
async def get_window(
    window_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
) -> WindowRead:
    window_repo = SqlAlchemyWindowRepository(session)
    try:
        window = await window_usecase.get_window(
            window_repo,
            window_id=window_id,
            organization_id=actor.organization_id,
        )
    except DomainError as exc:
        raise http_error_for(exc) from exc
    return WindowRead.from_db(window=window)


@router.get("/{window_id}/slots", response_model=List[SlotRead])
async def list_window_slots(
    window_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
) -> list[SlotRead]:
    try:
        slots = await window_usecase.list_window_slots(
            SqlAlchemyWindowRepository(session),
            SqlAlchemySlotRepository(session),
            window_id=window_id,
            organization_id=actor.organization_id,
        )
    except DomainError as exc:
        raise http_error_for(exc) from exc
    return [SlotRead.from_db(slot=s) for s in slots]


@router.delete("/{window_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_window(
    window_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_admin),
) -> Response:
    window_repo = SqlAlchemyWindowRepository(session)
    async with session.begin():
        try:
            await window_usecase.delete_window(
                window_repo,
                window_id=window_id,
                organization_id=actor.organization_id,
            )
        except DomainError as exc:
            raise http_error_for(exc) from exc

    audit_or_500(
        emit_audit_log,
        action="window.deleted",
        initiator="admin",
        organization_id=actor.organization_id,
        window_id=window_id,
        actor_id=actor.member_id,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
