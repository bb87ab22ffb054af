"""
File: batch_sender/errors.py

Project: Batch Sender

Purpose:
Project-wide error types.

Propagation rules:
- ConfigError and StoreError reach the process boundary and end the run
- TransportError / ImageFetchError never leave the gateway client;
  they are folded into a failed SendOutcome
"""

from __future__ import annotations


class BatchSenderError(RuntimeError):
    pass


class ConfigError(BatchSenderError):
    pass


class TransportError(BatchSenderError):
    pass


class ImageFetchError(TransportError):
    pass


class StoreError(BatchSenderError):
    pass
