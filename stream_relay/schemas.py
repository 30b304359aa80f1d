"""
Pydantic V2 schemas for the Stream API and the result store.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from stream_relay.exceptions import MalformedMessage


class _Base(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ── Stream copy API ──────────────────────────────────────────────────────────

class CopyMeta(_Base):
    name: str
    bucket: str


class CopyRequest(_Base):
    """Body of POST /accounts/{account_id}/stream/copy."""
    url: str
    meta: CopyMeta


class IngestionStatus(_Base):
    state: str | None = None
    error_reason_code: str | None = Field(default=None, alias="errorReasonCode")
    error_reason_text: str | None = Field(default=None, alias="errorReasonText")


class IngestionJob(_Base):
    """The `result` object Stream returns for a copy request.

    `uid` is only present when Stream accepted the request; on rejection the
    reason is carried in `status`.
    """
    uid: str | None = None
    playback: dict[str, Any] | None = None
    status: IngestionStatus | None = None
    ready_to_stream: bool | None = Field(default=None, alias="readyToStream")
    meta: dict[str, Any] | None = None


# ── Result store ─────────────────────────────────────────────────────────────

class ResultRecord(_Base):
    """Value written to the key-value store under the object key."""
    uid: str
    playback: dict[str, Any] | None = None


# ── Notification body ────────────────────────────────────────────────────────

def extract_object_key(body: Any) -> str:
    """Return `body.object.key`, raising MalformedMessage when it is unusable."""
    obj = body.get("object") if isinstance(body, dict) else None
    key = obj.get("key") if isinstance(obj, dict) else None
    if not isinstance(key, str) or not key:
        raise MalformedMessage(body)
    return key
