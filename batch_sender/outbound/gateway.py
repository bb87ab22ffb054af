"""
Batch Sender
Outbound delivery abstraction

This module defines a stable SendGateway interface and the strongly-typed
outcome object every send attempt produces.

Guardrails:
- A send never raises on gateway/transport failure; it returns a failed outcome.
- duration_ms is always measured, success or failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from batch_sender.models import MessageKind

DEFAULT_MEDIA_CAPTION = "This is a test MMS message"


@dataclass(frozen=True)
class SendOutcome:
    """
    Result of a single send attempt, before persistence.

    - succeeded is True only when the gateway body says success: true
    - status_code is None when no HTTP response was received
    - detail is a short human-readable note for the logs
    """
    kind: MessageKind
    succeeded: bool
    duration_ms: int
    status_code: Optional[int] = None
    detail: str = ""


class SendGateway(Protocol):
    """
    Abstract gateway for outbound delivery.
    """
    def send_text(self, body: str) -> SendOutcome:
        """
        Deliver one text message. Must not throw in normal cases.
        """
        ...

    def send_media(self, caption: str = DEFAULT_MEDIA_CAPTION) -> SendOutcome:
        """
        Deliver one image with a caption. Must not throw in normal cases.
        """
        ...
