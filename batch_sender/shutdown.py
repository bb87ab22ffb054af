"""
File: batch_sender/shutdown.py

Project: Batch Sender

Purpose:
Orderly shutdown on POSIX signals.

Signals handled:
- SIGHUP: informational only, logged as a warning, the run continues
- SIGINT / SIGTERM: every registered cleanup callback runs to completion,
  then the process exits with SHUTDOWN_EXIT_CODE

The dispatch core knows nothing about this module; the entry point wires it.
"""

from __future__ import annotations

import logging
import signal
from typing import Callable, Optional

logger = logging.getLogger("shutdown")

SHUTDOWN_EXIT_CODE = 99

CleanupCallback = Callable[[], None]


class ShutdownCoordinator:
    def __init__(self, exit_code: int = SHUTDOWN_EXIT_CODE) -> None:
        self._exit_code = exit_code
        self._callbacks: list[CleanupCallback] = []
        self._shutting_down = False

    @property
    def exit_code(self) -> int:
        return self._exit_code

    def register(self, callback: CleanupCallback) -> None:
        self._callbacks.append(callback)

    def install(self) -> None:
        signal.signal(signal.SIGINT, self.handle_interrupt)
        signal.signal(signal.SIGTERM, self.handle_interrupt)
        # not available on Windows
        if hasattr(signal, "SIGHUP"):
            signal.signal(signal.SIGHUP, self.handle_hangup)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def handle_hangup(self, signum: int, frame: Optional[object] = None) -> None:
        logger.warning("SIGHUP signal received!")

    def handle_interrupt(self, signum: int, frame: Optional[object] = None) -> None:
        if self._shutting_down:
            logger.warning("Shutdown already in progress, ignoring signal %s", signum)
            return
        self._shutting_down = True

        logger.warning(
            "%s signal detected. Beginning graceful shutdown...",
            signal.Signals(signum).name,
        )
        self.run_cleanup()
        logger.info("Cleanup completed. Exiting process with code %s.", self._exit_code)
        raise SystemExit(self._exit_code)

    def run_cleanup(self) -> None:
        for callback in self._callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Cleanup step %r failed", callback)
