"""
File: batch_sender/outbound/factory.py

Project: Batch Sender

Purpose:
- Provide a single place to construct the outbound gateway client
- Share one requests.Session between the image fetch and the gateway calls

Design rules:
- No business logic here
- Only construction / wiring
"""

from __future__ import annotations

from typing import Optional

import requests

from batch_sender.config import GatewaySettings, RuntimeSettings
from batch_sender.outbound.images import ImageProvider
from batch_sender.outbound.teletracker import TeleTrackerClient


def build_gateway(
    settings: GatewaySettings,
    runtime: RuntimeSettings,
    session: Optional[requests.Session] = None,
) -> TeleTrackerClient:
    session = session or requests.Session()
    images = ImageProvider(
        url=runtime.image_url,
        session=session,
        timeout_seconds=settings.timeout_seconds,
    )
    return TeleTrackerClient(settings=settings, session=session, image_provider=images)
