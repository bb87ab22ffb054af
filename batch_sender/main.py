"""
File: batch_sender/main.py

Project: Batch Sender

Purpose:
Process entry point.
Responsible only for:
- Argument parsing (default: send all, --show-summary: print statistics)
- Loading configuration (.env + environment) and failing fast on gaps
- Logging setup
- Wiring store, gateway, sequencer and the shutdown coordinator

Exit codes:
- 0  clean completion / summary printed
- 1  run aborted (store failure)
- 2  configuration error
- 99 orderly shutdown after SIGINT / SIGTERM (see shutdown.py)

Design principles:
- No business logic in this file
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Callable, Optional, Sequence

from batch_sender.config import (
    GatewaySettings,
    RuntimeSettings,
    load_env_file,
    load_gateway_settings,
    load_runtime_settings,
)
from batch_sender.errors import ConfigError, StoreError
from batch_sender.logging_setup import configure_logging
from batch_sender.outbound.factory import build_gateway
from batch_sender.outbound.gateway import SendGateway
from batch_sender.payloads import load_messages
from batch_sender.reporting import format_summary
from batch_sender.services.dispatch_sequencer import DispatchSequencer
from batch_sender.services.outcome_store import OutcomeStore
from batch_sender.shutdown import ShutdownCoordinator

logger = logging.getLogger("batch_sender")

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_CONFIG_ERROR = 2


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="batch-sender",
        description=(
            "Send the configured batch of text messages (in reverse order) "
            "plus one media message, or show delivery statistics."
        ),
    )
    parser.add_argument(
        "--show-summary",
        action="store_true",
        help="print statistics of previously recorded attempts and exit",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="path to a .env file (default: .env in the working directory)",
    )
    return parser.parse_args(argv)


# -------------------------------------------------------------------
# Modes
# -------------------------------------------------------------------
def run_summary(runtime: RuntimeSettings) -> int:
    try:
        store = OutcomeStore.from_url(runtime.database_url)
    except StoreError as exc:
        logger.error("Cannot open outcome store: %s", exc)
        return EXIT_ABORTED

    try:
        store.ensure_schema()
        summary = store.summarize()
    except StoreError as exc:
        logger.error("Cannot read message summary: %s", exc)
        return EXIT_ABORTED
    finally:
        store.close()

    for line in format_summary(summary):
        logger.info(line)
    return EXIT_OK


def run_send_all(
    runtime: RuntimeSettings,
    settings: GatewaySettings,
    *,
    shutdown: Optional[ShutdownCoordinator] = None,
    gateway: Optional[SendGateway] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    try:
        messages = load_messages(runtime.messages_file)
    except ConfigError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    try:
        store = OutcomeStore.from_url(runtime.database_url)
    except StoreError as exc:
        logger.error("Cannot open outcome store: %s", exc)
        return EXIT_ABORTED

    try:
        store.ensure_schema()
    except StoreError as exc:
        store.close()
        logger.error("Cannot open outcome store: %s", exc)
        return EXIT_ABORTED

    client = gateway or build_gateway(settings, runtime)

    if shutdown is not None:
        shutdown.register(lambda: logger.info("Closing resources..."))
        shutdown.register(store.close)
        if hasattr(client, "close"):
            shutdown.register(client.close)

    sequencer = DispatchSequencer(
        gateway=client,
        store=store,
        messages=messages,
        pacing_seconds=runtime.pacing_seconds,
        sleep=sleep,
    )

    try:
        sequencer.run()
    except StoreError as exc:
        logger.error("Error while sending messages: %s", exc)
        return EXIT_ABORTED
    finally:
        store.close()

    return EXIT_OK


# -------------------------------------------------------------------
# Entry
# -------------------------------------------------------------------
def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    load_env_file(args.env_file)

    try:
        runtime = load_runtime_settings()
    except ConfigError as exc:
        configure_logging()
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    configure_logging(runtime.log_level, runtime.log_file)

    if args.show_summary:
        return run_summary(runtime)

    try:
        settings = load_gateway_settings()
    except ConfigError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    shutdown = ShutdownCoordinator()
    shutdown.install()
    return run_send_all(runtime, settings, shutdown=shutdown)


def run() -> None:
    sys.exit(main())
