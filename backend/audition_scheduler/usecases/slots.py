import logging
import uuid

from ..domain.errors import NotFoundError, SlotAlreadyClaimedError
from ..domain.repositories import MemberRepository, SlotRepository
from ..domain.services import check_name_length, parse_status, require_email
from ..models import AuditionSlot, AuditionStatus
from ..utils.time import utc_now_naive
from .identities import resolve_identity

logger = logging.getLogger(__name__)


async def claim_slot(
    slot_repo: SlotRepository,
    member_repo: MemberRepository,
    *,
    slot_id: uuid.UUID,
    first_name: str,
    last_name: str,
    email: str,
) -> AuditionSlot:
    """
    Public sign-up for a slot. Exactly one concurrent caller wins; the rest get
    SlotAlreadyClaimedError. Losers are not queued or retried.
    """
    email = require_email(email)
    first_name = check_name_length(first_name, field="firstName")
    last_name = check_name_length(last_name, field="lastName")

    slot = await slot_repo.get_public(slot_id)
    if slot is None:
        raise NotFoundError("audition slot not found")

    member = await resolve_identity(
        member_repo,
        organization_id=slot.organization_id,
        email=email,
        first_name=first_name,
        last_name=last_name,
    )

    # Do not trust slot.member_id here: it may be stale by now.
    claimed = await slot_repo.assign_if_unassigned(
        slot.id,
        organization_id=slot.organization_id,
        member_id=member.id,
    )
    if claimed is None:
        logger.info("claim for slot %s lost: already assigned", slot_id)
        raise SlotAlreadyClaimedError("audition slot is no longer available")
    return claimed


async def get_slot(
    slot_repo: SlotRepository,
    *,
    slot_id: uuid.UUID,
    organization_id: uuid.UUID,
) -> AuditionSlot:
    slot = await slot_repo.get(slot_id, organization_id=organization_id)
    if slot is None:
        raise NotFoundError("audition slot not found")
    return slot


async def set_slot_status(
    slot_repo: SlotRepository,
    *,
    slot_id: uuid.UUID,
    organization_id: uuid.UUID,
    status: str | AuditionStatus,
) -> tuple[AuditionSlot, AuditionStatus]:
    """Returns the updated slot and the status it had before. Last write wins."""
    slot = await get_slot(slot_repo, slot_id=slot_id, organization_id=organization_id)
    parsed = parse_status(status)

    previous = slot.status
    slot.status = parsed
    slot.updated_at = utc_now_naive()
    return await slot_repo.save(slot), previous


async def set_slot_notes(
    slot_repo: SlotRepository,
    *,
    slot_id: uuid.UUID,
    organization_id: uuid.UUID,
    notes: str | None,
) -> AuditionSlot:
    slot = await get_slot(slot_repo, slot_id=slot_id, organization_id=organization_id)
    slot.notes = notes
    slot.updated_at = utc_now_naive()
    return await slot_repo.save(slot)
