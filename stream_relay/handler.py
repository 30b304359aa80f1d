"""
AWS Lambda handler — R2 upload notifications delivered through SQS.

Triggered by an SQS event source mapping with ReportBatchItemFailures enabled.
Each SQS record body is one R2 event notification:

  {"account": "...", "action": "PutObject", "bucket": "...",
   "object": {"key": "videos/clip.mp4", "size": 1234, "eTag": "..."}, ...}

Every record the processor does not acknowledge is returned in
``batchItemFailures`` so SQS redelivers only those records.

Environment variables: see stream_relay.config.Settings.
"""
from __future__ import annotations

import asyncio
import logging

from stream_relay import dependencies
from stream_relay.kv import close_redis_client
from stream_relay.queue import MessageBatch, QueueMessage, decode_body

logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s: %(message)s")
logger = logging.getLogger(__name__)


def handler(event: dict, context: object) -> dict:
    """Lambda entry point, one SQS batch per invocation."""
    batch = batch_from_sqs_event(event)
    asyncio.run(_process(batch))
    failures = [{"itemIdentifier": m.id} for m in batch.not_acked()]
    if failures:
        logger.info("Returning %d of %d records to the queue", len(failures), len(batch))
    return {"batchItemFailures": failures}


def batch_from_sqs_event(event: dict) -> MessageBatch:
    messages = [
        QueueMessage(
            id=record.get("messageId", ""),
            body=decode_body(record.get("body")),
            receipt=record.get("receiptHandle"),
        )
        for record in event.get("Records", [])
    ]
    return MessageBatch(messages)


async def _process(batch: MessageBatch) -> None:
    settings = dependencies.get_settings()
    try:
        await dependencies.build_processor(settings).process_batch(batch)
    finally:
        # The pool is bound to this invocation's event loop.
        await close_redis_client()
