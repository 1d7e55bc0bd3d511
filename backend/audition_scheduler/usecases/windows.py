import uuid
from datetime import date, time

from ..domain.errors import NotFoundError
from ..domain.repositories import SlotRepository, WindowRepository
from ..domain.services import PublicWindowView, plan_window, project_public_view
from ..models import AuditionSlot, AuditionWindow


async def create_window(
    window_repo: WindowRepository,
    *,
    organization_id: uuid.UUID,
    program_year_id: uuid.UUID,
    date: date,
    start_time: time,
    end_time: time,
    block_length_minutes: int,
) -> AuditionWindow:
    # Validation happens before anything reaches the store.
    plan = plan_window(
        start_time=start_time,
        end_time=end_time,
        block_length_minutes=block_length_minutes,
    )
    return await window_repo.create_with_slots(
        organization_id=organization_id,
        program_year_id=program_year_id,
        date=date,
        start_time=plan.start_time,
        end_time=plan.end_time,
        block_length_minutes=plan.block_length_minutes,
        slot_times=plan.slot_times,
    )


async def get_window(
    window_repo: WindowRepository,
    *,
    window_id: uuid.UUID,
    organization_id: uuid.UUID,
) -> AuditionWindow:
    window = await window_repo.get(window_id, organization_id=organization_id)
    if window is None:
        raise NotFoundError("audition window not found")
    return window


async def list_windows(
    window_repo: WindowRepository,
    *,
    program_year_id: uuid.UUID,
    organization_id: uuid.UUID,
) -> list[AuditionWindow]:
    return await window_repo.list_by_program_year(program_year_id, organization_id=organization_id)


async def list_window_slots(
    window_repo: WindowRepository,
    slot_repo: SlotRepository,
    *,
    window_id: uuid.UUID,
    organization_id: uuid.UUID,
) -> list[AuditionSlot]:
    await get_window(window_repo, window_id=window_id, organization_id=organization_id)
    return await slot_repo.list_for_window(window_id, organization_id=organization_id)


async def delete_window(
    window_repo: WindowRepository,
    *,
    window_id: uuid.UUID,
    organization_id: uuid.UUID,
) -> None:
    """Remove the window and every slot generated for it."""
    deleted = await window_repo.delete(window_id, organization_id=organization_id)
    if not deleted:
        raise NotFoundError("audition window not found")


async def get_public_view(
    window_repo: WindowRepository,
    slot_repo: SlotRepository,
    *,
    window_id: uuid.UUID,
) -> PublicWindowView:
    window = await window_repo.get_public(window_id)
    if window is None:
        raise NotFoundError("audition window not found")
    slots = await slot_repo.list_for_window(window.id, organization_id=window.organization_id)
    return project_public_view(window, slots)
