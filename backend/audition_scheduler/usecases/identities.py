import uuid

from ..domain.repositories import MemberRepository
from ..domain.services import normalize_email
from ..models import Member


async def resolve_identity(
    member_repo: MemberRepository,
    *,
    organization_id: uuid.UUID,
    email: str,
    first_name: str,
    last_name: str,
) -> Member:
    """
    Map an applicant email to its member record, creating one on first sight.
    An existing record is returned unchanged; names on the request do not overwrite it.
    """
    email_normalized = normalize_email(email)
    existing = await member_repo.find_by_email(email_normalized, organization_id=organization_id)
    if existing is not None:
        return existing
    return await member_repo.create_if_absent(
        organization_id=organization_id,
        email=email.strip(),
        email_normalized=email_normalized,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
    )
