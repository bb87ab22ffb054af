"""
Batch Sender
Summary report formatting (read-only path).
"""

from __future__ import annotations

from batch_sender.services.outcome_store import Summary


def format_summary(summary: Summary) -> list[str]:
    return [
        "--- Message Summary ---",
        f"Total sent: {summary.total}",
        f"Text: {summary.text_count}, Media: {summary.media_count}",
        f"Average duration: {summary.avg_duration_ms:.2f} ms",
        f"Success rate: {summary.success_rate_pct:.2f}%",
    ]
