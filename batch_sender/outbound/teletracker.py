"""
File: batch_sender/outbound/teletracker.py

Project: Batch Sender

Purpose:
TeleTracker messaging API client (Integrator mode).
Supports:
- Text messages (JSON body)
- Media messages (multipart form with one JPEG attachment)

Classification rule (wire contract, do not change):
- succeeded only when HTTP 2xx AND body JSON has success === true
"""

from __future__ import annotations

import base64
import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from batch_sender.config import GatewaySettings
from batch_sender.errors import TransportError
from batch_sender.models import MessageKind
from batch_sender.outbound.gateway import DEFAULT_MEDIA_CAPTION, SendOutcome
from batch_sender.outbound.images import ImageProvider

logger = logging.getLogger("teletracker")

MEDIA_FILENAME = "image.jpg"
MEDIA_CONTENT_TYPE = "image/jpeg"
MEDIA_FIELD = "image1"


class TeleTrackerClient:
    def __init__(
        self,
        settings: GatewaySettings,
        session: Optional[requests.Session] = None,
        image_provider: Optional[ImageProvider] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._images = image_provider or ImageProvider(
            session=self._session,
            timeout_seconds=settings.timeout_seconds,
        )
        self._clock = clock

    def _auth_header(self) -> Dict[str, str]:
        raw = f"{self._settings.user}:{self._settings.password}".encode("utf-8")
        token = base64.b64encode(raw).decode("ascii")
        return {"Authorization": f"Integrator {token}"}

    def _elapsed_ms(self, start: float) -> int:
        return max(0, int(round((self._clock() - start) * 1000)))

    # ---------------------------------------------------------
    # TEXT
    # ---------------------------------------------------------
    def send_text(self, body: str) -> SendOutcome:
        payload = {
            "account_id": self._settings.account_id,
            "to_number": self._settings.to_number,
            "payload": body,
        }
        headers = {
            **self._auth_header(),
            "Content-Type": "application/json",
        }

        start = self._clock()
        try:
            resp = self._post(self._settings.text_send_url, json=payload, headers=headers)
            status_code = resp.status_code
            succeeded, detail = self._classify(resp)
        except TransportError as exc:
            succeeded, detail, status_code = False, str(exc), None

        outcome = SendOutcome(
            kind=MessageKind.TEXT,
            succeeded=succeeded,
            duration_ms=self._elapsed_ms(start),
            status_code=status_code,
            detail=detail,
        )
        if outcome.succeeded:
            logger.info('Text sent: "%s" (%s ms)', body, outcome.duration_ms)
        else:
            logger.error(
                'Failed to send text "%s" (%s ms): %s',
                body,
                outcome.duration_ms,
                outcome.detail,
            )
        return outcome

    # ---------------------------------------------------------
    # MEDIA
    # ---------------------------------------------------------
    def send_media(self, caption: str = DEFAULT_MEDIA_CAPTION) -> SendOutcome:
        start = self._clock()
        status_code = None
        try:
            image = self._images.fetch()
            form = {
                "account_id": self._settings.account_id,
                "to_number": self._settings.to_number,
                "payload": caption,
            }
            files = {MEDIA_FIELD: (MEDIA_FILENAME, image, MEDIA_CONTENT_TYPE)}

            # requests sets the multipart Content-Type (with boundary) itself
            resp = self._post(
                self._settings.media_send_url,
                data=form,
                files=files,
                headers=self._auth_header(),
            )
            status_code = resp.status_code
            succeeded, detail = self._classify(resp)
        except TransportError as exc:
            succeeded, detail = False, str(exc)

        outcome = SendOutcome(
            kind=MessageKind.MEDIA,
            succeeded=succeeded,
            duration_ms=self._elapsed_ms(start),
            status_code=status_code,
            detail=detail,
        )
        if outcome.succeeded:
            logger.info("Media sent (%s ms)", outcome.duration_ms)
        else:
            logger.error(
                "Failed to send media (%s ms): %s", outcome.duration_ms, outcome.detail
            )
        return outcome

    # ---------------------------------------------------------
    # Internal
    # ---------------------------------------------------------
    def _post(self, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.post(
                url,
                timeout=self._settings.timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc

    def _classify(self, resp: requests.Response) -> tuple[bool, str]:
        try:
            data: Any = resp.json()
        except ValueError:
            data = None

        if not 200 <= resp.status_code < 300:
            return False, f"HTTP {resp.status_code}: {self._body_excerpt(resp, data)}"

        if not isinstance(data, dict):
            return False, f"HTTP {resp.status_code}: malformed body {self._body_excerpt(resp, data)}"

        if data.get("success") is True:
            return True, f"HTTP {resp.status_code}"

        return False, f"HTTP {resp.status_code}: gateway did not assert success {data!r}"

    @staticmethod
    def _body_excerpt(resp: requests.Response, data: Any, limit: int = 200) -> str:
        text = repr(data) if data is not None else (resp.text or "")
        return text[:limit]

    def close(self) -> None:
        self._session.close()
