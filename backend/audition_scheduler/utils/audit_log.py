from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal, Optional

from .request_id import get_request_id

AuditAction = Literal[
    "window.created",
    "window.deleted",
    "slot.claimed",
    "slot.status_changed",
    "slot.notes_changed",
]
# Applicants claim through the public routes; everything else is staff.
AuditInitiator = Literal["applicant", "admin"]


def _build_audit_logger() -> logging.Logger:
    audit = logging.getLogger("audit")
    audit.setLevel(logging.INFO)
    audit.propagate = False
    if not audit.handlers:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("%(message)s"))
        audit.addHandler(stream)
    return audit


_audit_logger = _build_audit_logger()


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def emit_audit_log(
    *,
    action: AuditAction,
    initiator: AuditInitiator,
    organization_id: uuid.UUID,
    window_id: Optional[uuid.UUID] = None,
    slot_id: Optional[uuid.UUID] = None,
    actor_id: Optional[uuid.UUID] = None,
    member_id: Optional[uuid.UUID] = None,
    status_from: Any = None,
    status_to: Any = None,
    message: Optional[str] = None,
    extra: Optional[dict[str, Any]] = None,
) -> None:
    """
    Write one JSON line to the "audit" logger.

    Fields left as None are omitted. `extra` is merged last and may add
    action-specific keys (slot counts, whether notes were cleared).
    Raises RuntimeError if the line cannot be written.
    """
    fields = {
        "organization_id": organization_id,
        "window_id": window_id,
        "slot_id": slot_id,
        "actor_id": actor_id,
        "member_id": member_id,
        "status_from": status_from,
        "status_to": status_to,
        "message": message,
        **(extra or {}),
    }
    record: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": "info",
        "action": action,
        "initiator": initiator,
        "request_id": get_request_id(),
    }
    record.update((key, _plain(value)) for key, value in fields.items() if value is not None)
    if record["request_id"] is None:
        del record["request_id"]

    try:
        _audit_logger.info(json.dumps(record, ensure_ascii=True, default=str))
    except Exception as exc:
        raise RuntimeError("failed to emit audit log") from exc
