"""
Batch Sender

Sends a fixed batch of text messages plus one media message through the
TeleTracker gateway, records every attempt in SQLite and reports
delivery statistics.
"""

__version__ = "0.1.0"
