import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Sequence

import jwt
from jwt import InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    member_id: uuid.UUID
    organization_id: uuid.UUID
    role: str


def create_access_token(
    *,
    member_id: uuid.UUID,
    organization_id: uuid.UUID,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expires_delta: timedelta | None = None,
) -> str:
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=30))
    payload = {
        "sub": str(member_id),
        "org": str(organization_id),
        "role": role,
        "iat": now,
        "exp": exp,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(
    token: str,
    *,
    secret: str,
    algorithms: Sequence[str],
) -> TokenClaims:
    try:
        payload = jwt.decode(token, secret, algorithms=list(algorithms))
    except InvalidTokenError as exc:  # includes ExpiredSignatureError
        raise ValueError("invalid token") from exc

    sub = payload.get("sub")
    org = payload.get("org")
    if sub is None or org is None:
        raise ValueError("token missing sub or org")
    try:
        return TokenClaims(
            member_id=uuid.UUID(str(sub)),
            organization_id=uuid.UUID(str(org)),
            role=str(payload.get("role") or ""),
        )
    except ValueError as exc:
        raise ValueError("token ids are not UUIDs") from exc
