"""
File: batch_sender/config.py

Project: Batch Sender

Purpose:
- Centralised configuration for the gateway client and the runtime.
- Keep secrets out of code via environment variables (optionally from .env).

Notes:
- Required for sending (send mode only):
  - TELETRACKER_API_BASE
  - TELETRACKER_USER
  - TELETRACKER_PASS
  - TELETRACKER_ACCOUNT_ID
  - TELETRACKER_PHONE
- Optional:
  - GATEWAY_TIMEOUT_SECONDS (defaults to 30)
  - DATABASE_URL (defaults to a local SQLite file)
  - PACING_INTERVAL_SECONDS (defaults to 7.5)
  - IMAGE_PROVIDER_URL, MESSAGES_FILE, LOG_LEVEL, LOG_FILE
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from batch_sender.errors import ConfigError

DEFAULT_DATABASE_URL = "sqlite:///database/messages.db"
DEFAULT_PACING_INTERVAL_SECONDS = 7.5
DEFAULT_GATEWAY_TIMEOUT_SECONDS = 30.0
DEFAULT_IMAGE_PROVIDER_URL = "https://picsum.photos/300"
DEFAULT_LOG_FILE = "server.log"


def load_env_file(path: Optional[str | Path] = None) -> bool:
    """
    Load variables from a .env file into the process environment.
    Values already present in the environment win.
    """
    if path is None:
        return load_dotenv(find_dotenv(usecwd=True))
    return load_dotenv(dotenv_path=path)


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(
            f"Missing required environment variable: {name}. "
            f"Set it in your .env / shell before running."
        )
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class GatewaySettings:
    api_base: str
    user: str
    password: str
    account_id: str
    to_number: str
    timeout_seconds: float = DEFAULT_GATEWAY_TIMEOUT_SECONDS

    @property
    def text_send_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/text/send"

    @property
    def media_send_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/media/send"


@dataclass(frozen=True)
class RuntimeSettings:
    database_url: str = DEFAULT_DATABASE_URL
    pacing_seconds: float = DEFAULT_PACING_INTERVAL_SECONDS
    image_url: str = DEFAULT_IMAGE_PROVIDER_URL
    messages_file: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = DEFAULT_LOG_FILE


def load_gateway_settings() -> GatewaySettings:
    return GatewaySettings(
        api_base=_require_env("TELETRACKER_API_BASE"),
        user=_require_env("TELETRACKER_USER"),
        password=_require_env("TELETRACKER_PASS"),
        account_id=_require_env("TELETRACKER_ACCOUNT_ID"),
        to_number=_require_env("TELETRACKER_PHONE"),
        timeout_seconds=_env_float(
            "GATEWAY_TIMEOUT_SECONDS", DEFAULT_GATEWAY_TIMEOUT_SECONDS
        ),
    )


def load_runtime_settings() -> RuntimeSettings:
    log_file = os.getenv("LOG_FILE")
    if log_file is None:
        log_file = DEFAULT_LOG_FILE

    return RuntimeSettings(
        database_url=os.getenv("DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL,
        pacing_seconds=_env_float(
            "PACING_INTERVAL_SECONDS", DEFAULT_PACING_INTERVAL_SECONDS
        ),
        image_url=os.getenv("IMAGE_PROVIDER_URL", "").strip()
        or DEFAULT_IMAGE_PROVIDER_URL,
        messages_file=os.getenv("MESSAGES_FILE", "").strip() or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        # empty LOG_FILE disables file logging
        log_file=log_file.strip() or None,
    )
