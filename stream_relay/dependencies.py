"""
Wires the processor to the real R2, Stream and Redis clients.
"""
from __future__ import annotations

from stream_relay.config import Settings
from stream_relay.kv import RedisResultStore, get_redis_client
from stream_relay.processor import BatchProcessor
from stream_relay.s3 import R2UrlSigner
from stream_relay.stream import StreamCopyClient


def get_settings() -> Settings:
    return Settings()


def build_processor(settings: Settings) -> BatchProcessor:
    return BatchProcessor(
        settings,
        signer=R2UrlSigner(settings),
        ingestion=StreamCopyClient(settings),
        store=RedisResultStore(get_redis_client(settings.redis_url)),
    )
