from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TriggerKind(str, Enum):
    NEW_CLIENT = "new_client"
    NEW_CASE = "new_case"
    CASE_STATUS_CHANGE = "case_status_change"
    DOCUMENT_UPLOADED = "document_uploaded"
    FORM_SUBMITTED = "form_submitted"
    DEADLINE_APPROACHING = "deadline_approaching"
    PAYMENT_RECEIVED = "payment_received"
    APPOINTMENT_SCHEDULED = "appointment_scheduled"
    MESSAGE_RECEIVED = "message_received"


@dataclass(frozen=True, slots=True)
class TriggerEvent:
    """A domain event that may start workflows.

    The payload is passed through to conditions and actions untouched; the
    engine never persists it.
    """

    type: TriggerKind
    payload: dict[str, object] = field(default_factory=dict)
