import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import Actor, get_session, require_admin
from ..domain.errors import DomainError
from ..infrastructure.repositories import SqlAlchemySlotRepository
from ..schemas import SlotNotesUpdate, SlotRead, SlotStatusUpdate
from ..usecases import slots as slot_usecase
from ..utils.audit_log import emit_audit_log
from .errors import audit_or_500, http_error_for

router = APIRouter(
    prefix="/audition-slots",
    tags=["audition-slots"],
    dependencies=[Depends(require_admin)],
)


@router.put("/{slot_id}/status", response_model=SlotRead)
async def update_slot_status(
    slot_id: uuid.UUID,
    payload: SlotStatusUpdate,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_admin),
) -> SlotRead:
    slot_repo = SqlAlchemySlotRepository(session)
    async with session.begin():
        try:
            slot, previous = await slot_usecase.set_slot_status(
                slot_repo,
                slot_id=slot_id,
                organization_id=actor.organization_id,
                status=payload.status,
            )
        except DomainError as exc:
            raise http_error_for(exc) from exc

    audit_or_500(
        emit_audit_log,
        action="slot.status_changed",
        initiator="admin",
        organization_id=actor.organization_id,
        window_id=slot.window_id,
        slot_id=slot.id,
        actor_id=actor.member_id,
        member_id=slot.member_id,
        status_from=previous,
        status_to=slot.status,
    )
    return SlotRead.from_db(slot=slot)


@router.put("/{slot_id}/notes", response_model=SlotRead)
async def update_slot_notes(
    slot_id: uuid.UUID,
    payload: SlotNotesUpdate,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(require_admin),
) -> SlotRead:
    slot_repo = SqlAlchemySlotRepository(session)
    async with session.begin():
        try:
            slot = await slot_usecase.set_slot_notes(
                slot_repo,
                slot_id=slot_id,
                organization_id=actor.organization_id,
                notes=payload.notes,
            )
        except DomainError as exc:
            raise http_error_for(exc) from exc

    audit_or_500(
        emit_audit_log,
        action="slot.notes_changed",
        initiator="admin",
        organization_id=actor.organization_id,
        window_id=slot.window_id,
        slot_id=slot.id,
        actor_id=actor.member_id,
        extra={"notes_cleared": slot.notes is None},
    )
    return SlotRead.from_db(slot=slot)
