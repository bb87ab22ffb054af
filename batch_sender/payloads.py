"""
File: batch_sender/payloads.py

Project: Batch Sender

Purpose:
The batch of text bodies handed to the DispatchSequencer.

NOTE:
Bodies are sent in REVERSE of the order they are declared here
(or listed in MESSAGES_FILE): the last line goes out first.
"""

from __future__ import annotations

from pathlib import Path

from batch_sender.errors import ConfigError

DEFAULT_MESSAGES: tuple[str, ...] = (
    "Hello there, this is test message number one!",
    "How much does a cloud weigh on a sunny day?",
    "If cats could text, what would they even say?",
    "Message number four reporting for duty!",
    "Ever wondered where lost socks go?",
    "Beep boop... just another test message!",
    "How many tacos is too many tacos?",
    "This message is sponsored by curiosity.",
    "Testing, testing... is anyone out there?",
    "Message number ten, the grand finale!",
)


def load_messages(path: str | Path | None = None) -> tuple[str, ...]:
    """
    One body per non-blank line. No path means the built-in set.
    """
    if path is None:
        return DEFAULT_MESSAGES

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read messages file {path}: {exc}") from exc

    messages = tuple(line.strip() for line in text.splitlines() if line.strip())
    if not messages:
        raise ConfigError(f"Messages file {path} contains no messages")
    return messages
