"""
Batch processor — relays R2 upload notifications to Cloudflare Stream.

Per message:
  1. Read the object key from the notification body (missing → ack and drop).
  2. Presign a 15 minute GET URL for the object.
  3. Ask Stream to copy the video from that URL.
  4. On success, write {uid, playback} under the object key, then ack.
     On rejection or any error, retry the message.

Messages are processed one after another, in delivery order. A failure on one
message never stops the rest of the batch.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from stream_relay.config import Settings
from stream_relay.exceptions import MalformedMessage, MissingConfiguration
from stream_relay.queue import Disposition, MessageBatch, QueueMessage
from stream_relay.schemas import IngestionJob, ResultRecord, extract_object_key

logger = logging.getLogger(__name__)


# ── Capabilities ─────────────────────────────────────────────────────────────

class UrlSigner(Protocol):
    async def presign_get(self, object_key: str) -> str: ...


class IngestionClient(Protocol):
    async def copy_from_url(self, url: str, *, name: str, bucket: str) -> IngestionJob: ...


class ResultStore(Protocol):
    async def put(self, object_key: str, record: ResultRecord) -> None: ...


@dataclass
class BatchOutcome:
    acked: int = 0
    retried: int = 0
    retried_all: bool = False


class BatchProcessor:
    def __init__(
        self,
        settings: Settings,
        signer: UrlSigner,
        ingestion: IngestionClient,
        store: ResultStore,
    ) -> None:
        self.settings = settings
        self.signer = signer
        self.ingestion = ingestion
        self.store = store

    async def process_batch(self, batch: MessageBatch) -> BatchOutcome:
        try:
            self.settings.require_bindings()
        except MissingConfiguration as exc:
            logger.error("%s Retrying all %d messages.", exc, len(batch))
            batch.retry_all()
            return BatchOutcome(retried=len(batch), retried_all=True)

        for message in batch.messages:
            await self.process_message(message)

        outcome = BatchOutcome(
            acked=sum(1 for m in batch.messages if m.disposition is Disposition.ACKED),
            retried=sum(1 for m in batch.messages if m.disposition is Disposition.RETRIED),
        )
        logger.info(
            "Batch done: %d messages, %d acked, %d retried",
            len(batch), outcome.acked, outcome.retried,
        )
        return outcome

    async def process_message(self, message: QueueMessage) -> None:
        logger.info("Processing message: %s", message.id)
        try:
            object_key = extract_object_key(message.body)
        except MalformedMessage:
            logger.error(
                "Message %s body did not contain an object key. "
                "Acknowledging to remove from queue: %.500r",
                message.id, message.body,
            )
            message.ack()
            return

        bucket = self.settings.r2_source_bucket
        try:
            presigned_url = await self.signer.presign_get(object_key)
            job = await self.ingestion.copy_from_url(
                presigned_url, name=object_key, bucket=bucket,
            )

            if not job.uid:
                status = job.status
                logger.error(
                    "Stream rejected copy of '%s' (message %s). Status: %s. Error: %s",
                    object_key,
                    message.id,
                    status.error_reason_code if status else None,
                    status.error_reason_text if status else None,
                )
                message.retry()
                return

            logger.info(
                "Initiated upload for '%s'. Stream is fetching from the presigned URL. "
                "Video UID: %s",
                object_key, job.uid,
            )
            # Ack only after the record is durable; a crash in between means
            # redelivery and an overwrite with the same key.
            await self.store.put(object_key, ResultRecord(uid=job.uid, playback=job.playback))
            message.ack()
        except Exception:
            logger.exception(
                "Unexpected error while processing message %s (object '%s')",
                message.id, object_key,
            )
            message.retry()
