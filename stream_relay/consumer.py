"""
SQS polling worker — long-running alternative to the Lambda handler.

Runs as a separate process:  python -m stream_relay.consumer

Each loop long-polls up to SQS_MAX_MESSAGES notifications, runs them through
the processor as one batch, then settles them with SQS:
  acked    → delete_message
  retried  → left alone, so the queue's visibility timeout sets the backoff;
             change_message_visibility(QUEUE_RETRY_DELAY_SECONDS) when that is set
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from stream_relay.config import Settings
from stream_relay.dependencies import build_processor, get_settings
from stream_relay.exceptions import MissingConfiguration
from stream_relay.kv import close_redis_client
from stream_relay.processor import BatchOutcome, BatchProcessor
from stream_relay.queue import Disposition, MessageBatch, QueueMessage, decode_body

logger = logging.getLogger(__name__)


class SQSBatchConsumer:
    def __init__(self, settings: Settings, processor: BatchProcessor, sqs: Any) -> None:
        self.settings = settings
        self.processor = processor
        self.sqs = sqs

    async def receive_batch(self) -> MessageBatch:
        response = await self.sqs.receive_message(
            QueueUrl=self.settings.sqs_queue_url,
            MaxNumberOfMessages=self.settings.sqs_max_messages,
            WaitTimeSeconds=self.settings.sqs_wait_time_seconds,
        )
        return MessageBatch([
            QueueMessage(
                id=msg["MessageId"],
                body=decode_body(msg.get("Body")),
                receipt=msg["ReceiptHandle"],
            )
            for msg in response.get("Messages", [])
        ])

    async def settle(self, batch: MessageBatch) -> None:
        for message in batch.messages:
            try:
                if message.disposition is Disposition.ACKED:
                    await self.sqs.delete_message(
                        QueueUrl=self.settings.sqs_queue_url,
                        ReceiptHandle=message.receipt,
                    )
                elif self.settings.queue_retry_delay_seconds is not None:
                    await self.sqs.change_message_visibility(
                        QueueUrl=self.settings.sqs_queue_url,
                        ReceiptHandle=message.receipt,
                        VisibilityTimeout=self.settings.queue_retry_delay_seconds,
                    )
            except (BotoCoreError, ClientError) as exc:
                # The message reappears once its visibility timeout expires.
                logger.error("Could not settle SQS message %s: %s", message.id, exc)

    async def run_once(self) -> BatchOutcome | None:
        batch = await self.receive_batch()
        if not batch.messages:
            return None
        outcome = await self.processor.process_batch(batch)
        await self.settle(batch)
        return outcome

    async def run_forever(self) -> None:
        logger.info("Polling %s", self.settings.sqs_queue_url)
        while True:
            try:
                await self.run_once()
            except (BotoCoreError, ClientError) as exc:
                logger.error("SQS receive failed: %s", exc)
                await asyncio.sleep(self.settings.sqs_wait_time_seconds)


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s: %(message)s")
    settings = get_settings()
    if not settings.sqs_queue_url:
        raise MissingConfiguration(["SQS_QUEUE_URL"])

    session = aioboto3.Session(region_name=settings.aws_region)
    async with session.client("sqs") as sqs:
        consumer = SQSBatchConsumer(settings, build_processor(settings), sqs)
        try:
            await consumer.run_forever()
        finally:
            await close_redis_client()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Consumer stopped")
