"""
File: batch_sender/services/dispatch_sequencer.py

Project: Batch Sender

Purpose:
Outbound dispatch job boundary.

Responsibilities:
- Own the ordered batch of text bodies (injected, not hardcoded)
- Send them one at a time in REVERSE declaration order (last declared first)
- Persist every outcome through the OutcomeStore before moving on
- Wait the pacing interval after every text send
- Finish with exactly one media send (no wait after it)

IMPORTANT:
- Gateway failures never stop the run; they are recorded as failed attempts
- A StoreError stops the run immediately (ABORTED) and is re-raised
- No retries: a failed send stays failed
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from batch_sender.config import DEFAULT_PACING_INTERVAL_SECONDS
from batch_sender.errors import StoreError
from batch_sender.outbound.gateway import DEFAULT_MEDIA_CAPTION, SendGateway, SendOutcome
from batch_sender.services.outcome_store import OutcomeStore

logger = logging.getLogger("dispatch_sequencer")

PACING_INTERVAL_SECONDS = DEFAULT_PACING_INTERVAL_SECONDS


class DispatchState(str, Enum):
    PENDING = "pending"
    SENDING = "sending"
    WAITING = "waiting"
    DONE = "done"
    ABORTED = "aborted"


@dataclass(frozen=True)
class DispatchReport:
    attempted: int
    succeeded: int
    failed: int


class DispatchSequencer:
    def __init__(
        self,
        gateway: SendGateway,
        store: OutcomeStore,
        messages: Sequence[str],
        *,
        pacing_seconds: float = PACING_INTERVAL_SECONDS,
        media_caption: str = DEFAULT_MEDIA_CAPTION,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if pacing_seconds < 0:
            raise ValueError(f"pacing_seconds must be >= 0, got {pacing_seconds}")

        self._gateway = gateway
        self._store = store
        self._messages = tuple(messages)
        self._pacing_seconds = pacing_seconds
        self._media_caption = media_caption
        self._sleep = sleep

        self._state = DispatchState.PENDING
        self._error: Optional[StoreError] = None

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def error(self) -> Optional[StoreError]:
        return self._error

    def send_order(self) -> list[str]:
        """
        The order in which text bodies hit the gateway: reverse of declaration.
        """
        return list(reversed(self._messages))

    # ------------------------------------------------------------------
    # Public job entry
    # ------------------------------------------------------------------
    def run(self) -> DispatchReport:
        if self._state is not DispatchState.PENDING:
            raise RuntimeError(f"Sequencer already ran (state={self._state.value})")

        outcomes: list[SendOutcome] = []
        try:
            logger.info("Starting text message sequence (%s messages)...", len(self._messages))
            for body in self.send_order():
                self._state = DispatchState.SENDING
                outcomes.append(self._dispatch(lambda: self._gateway.send_text(body)))

                self._state = DispatchState.WAITING
                self._sleep(self._pacing_seconds)
                self._state = DispatchState.PENDING

            logger.info("Sending final media message...")
            self._state = DispatchState.SENDING
            outcomes.append(
                self._dispatch(lambda: self._gateway.send_media(self._media_caption))
            )
        except StoreError as exc:
            self._state = DispatchState.ABORTED
            self._error = exc
            logger.error(
                "Error while recording outcomes, aborting after %s attempts: %s",
                len(outcomes) + 1,
                exc,
            )
            raise

        self._state = DispatchState.DONE
        report = DispatchReport(
            attempted=len(outcomes),
            succeeded=sum(1 for o in outcomes if o.succeeded),
            failed=sum(1 for o in outcomes if not o.succeeded),
        )
        logger.info(
            "All messages dispatched: %s attempted, %s succeeded, %s failed.",
            report.attempted,
            report.succeeded,
            report.failed,
        )
        return report

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _dispatch(self, send: Callable[[], SendOutcome]) -> SendOutcome:
        outcome = send()
        self._store.record(outcome.kind, outcome.succeeded, outcome.duration_ms)
        return outcome
