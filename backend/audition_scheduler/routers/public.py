import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_session
from ..domain.errors import DomainError
from ..infrastructure.repositories import (
    SqlAlchemyMemberRepository,
    SqlAlchemySlotRepository,
    SqlAlchemyWindowRepository,
)
from ..schemas import ClaimRead, ClaimRequest, PublicWindowRead
from ..usecases import slots as slot_usecase
from ..usecases import windows as window_usecase
from ..utils.audit_log import emit_audit_log
from .errors import audit_or_500, http_error_for

# Unauthenticated: the tenant comes from the window or slot being addressed.
router = APIRouter(prefix="/public/auditions", tags=["public-auditions"])


@router.get("/{window_id}", response_model=PublicWindowRead)
async def get_public_window(
    window_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
) -> PublicWindowRead:
    try:
        view = await window_usecase.get_public_view(
            SqlAlchemyWindowRepository(session),
            SqlAlchemySlotRepository(session),
            window_id=window_id,
        )
    except DomainError as exc:
        raise http_error_for(exc) from exc
    return PublicWindowRead.from_view(view)


@router.post("/slots/{slot_id}/claim", response_model=ClaimRead)
async def claim_slot(
    slot_id: uuid.UUID,
    payload: ClaimRequest,
    session: AsyncSession = Depends(get_session),
) -> ClaimRead:
    slot_repo = SqlAlchemySlotRepository(session)
    member_repo = SqlAlchemyMemberRepository(session)
    async with session.begin():
        try:
            slot = await slot_usecase.claim_slot(
                slot_repo,
                member_repo,
                slot_id=slot_id,
                first_name=payload.first_name,
                last_name=payload.last_name,
                email=payload.email,
            )
        except DomainError as exc:
            raise http_error_for(exc) from exc

    audit_or_500(
        emit_audit_log,
        action="slot.claimed",
        initiator="applicant",
        organization_id=slot.organization_id,
        window_id=slot.window_id,
        slot_id=slot.id,
        member_id=slot.member_id,
        status_to=slot.status,
    )
    return ClaimRead.from_db(slot=slot)
