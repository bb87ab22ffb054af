"""
File: batch_sender/outbound/images.py

Project: Batch Sender

Purpose:
Fetch one binary image to attach to the media send.
Any unauthenticated GET source works; the default serves random JPEGs.
"""

from __future__ import annotations

from typing import Optional

import requests

from batch_sender.config import DEFAULT_IMAGE_PROVIDER_URL
from batch_sender.errors import ImageFetchError


class ImageProvider:
    def __init__(
        self,
        url: str = DEFAULT_IMAGE_PROVIDER_URL,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 30,
    ) -> None:
        self._url = url
        self._session = session or requests.Session()
        self._timeout = timeout_seconds

    @property
    def url(self) -> str:
        return self._url

    def fetch(self) -> bytes:
        try:
            resp = self._session.get(self._url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ImageFetchError(f"Image fetch from {self._url} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise ImageFetchError(
                f"Image fetch from {self._url} returned HTTP {resp.status_code}"
            )
        if not resp.content:
            raise ImageFetchError(f"Image fetch from {self._url} returned no data")

        return resp.content
