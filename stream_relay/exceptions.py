"""
Relay domain exceptions.

Every exception carries a preset message so call sites only pass the context
(object key, missing names, vendor detail). The processor turns each of them
into an acknowledge, retry or whole-batch retry decision; none of them escape
per-message handling.
"""
from __future__ import annotations

from typing import Any


class RelayError(Exception):
    """Base class for all relay failures."""


# ── Batch level ──────────────────────────────────────────────────────────────

class MissingConfiguration(RelayError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            f"Required configuration is not set: {', '.join(missing)}."
        )


# ── Message level ────────────────────────────────────────────────────────────

class MalformedMessage(RelayError):
    def __init__(self, body: Any) -> None:
        self.body = body
        super().__init__("Message body did not contain an object key.")


class SignedUrlError(RelayError):
    def __init__(self, object_key: str) -> None:
        self.object_key = object_key
        super().__init__(f"Could not presign a read URL for '{object_key}'.")


class IngestionRequestFailed(RelayError):
    def __init__(self, object_key: str, detail: str) -> None:
        self.object_key = object_key
        self.detail = detail
        super().__init__(f"Stream copy request for '{object_key}' failed: {detail}")


class ResultStoreError(RelayError):
    def __init__(self, object_key: str) -> None:
        self.object_key = object_key
        super().__init__(f"Could not write the result record for '{object_key}'.")
