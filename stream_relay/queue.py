"""
Queue batch bookkeeping.

A delivery adapter (Lambda handler, SQS poller) wraps the raw queue records in
QueueMessage objects, hands a MessageBatch to the processor, and afterwards
settles each message with the queue according to its disposition.
"""
from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


class Disposition(str, enum.Enum):
    PENDING = "PENDING"
    ACKED = "ACKED"
    RETRIED = "RETRIED"


@dataclass
class QueueMessage:
    id: str
    body: Any
    # Adapter-specific handle needed to settle the message (e.g. SQS receipt handle)
    receipt: str | None = None
    disposition: Disposition = Disposition.PENDING

    def ack(self) -> None:
        self._settle(Disposition.ACKED)

    def retry(self) -> None:
        self._settle(Disposition.RETRIED)

    def _settle(self, disposition: Disposition) -> None:
        # First decision wins.
        if self.disposition is not Disposition.PENDING:
            logger.debug(
                "Message %s already %s, ignoring %s",
                self.id, self.disposition.value, disposition.value,
            )
            return
        self.disposition = disposition


@dataclass
class MessageBatch:
    messages: list[QueueMessage] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)

    def retry_all(self) -> None:
        for message in self.messages:
            message.retry()

    def acked(self) -> list[QueueMessage]:
        return [m for m in self.messages if m.disposition is Disposition.ACKED]

    def not_acked(self) -> list[QueueMessage]:
        """Messages that must go back to the queue (retried or never settled)."""
        return [m for m in self.messages if m.disposition is not Disposition.ACKED]


def decode_body(raw: Any) -> Any:
    """Decode a JSON message body; undecodable text is returned unchanged."""
    if not isinstance(raw, (str, bytes)):
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Message body is not JSON: %.200r", raw)
        return raw
