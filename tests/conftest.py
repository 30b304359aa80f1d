from typing import Any

import pytest

from stream_relay.config import Settings
from stream_relay.exceptions import ResultStoreError
from stream_relay.processor import BatchProcessor
from stream_relay.queue import Disposition, MessageBatch, QueueMessage
from stream_relay.schemas import IngestionJob, ResultRecord


def make_settings(**overrides: Any) -> Settings:
    values = {
        "r2_source_bucket": "uploads",
        "r2_access_key_id": "test-access-key",
        "r2_secret_access_key": "test-secret-key",
        "cloudflare_account_id": "acct123",
        "cloudflare_api_token": "test-token",
        "sqs_queue_url": "https://sqs.us-east-1.amazonaws.com/123456789012/r2-uploads",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_batch(*bodies: tuple[str, Any]) -> MessageBatch:
    return MessageBatch([QueueMessage(id=mid, body=body, receipt=f"rh-{mid}") for mid, body in bodies])


class FakeSigner:
    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.calls: list[str] = []
        self.fail_for = fail_for or set()

    async def presign_get(self, object_key: str) -> str:
        self.calls.append(object_key)
        if object_key in self.fail_for:
            raise RuntimeError("signing exploded")
        return f"https://acct123.r2.cloudflarestorage.com/uploads/{object_key}?X-Amz-Expires=900"


class FakeIngestion:
    def __init__(self, jobs: dict[str, IngestionJob] | None = None) -> None:
        self.calls: list[dict[str, str]] = []
        self.jobs = jobs or {}

    async def copy_from_url(self, url: str, *, name: str, bucket: str) -> IngestionJob:
        self.calls.append({"url": url, "name": name, "bucket": bucket})
        return self.jobs.get(
            name,
            IngestionJob(uid=f"uid-{name}", playback={"hls": f"https://stream/{name}.m3u8"}),
        )


class FakeStore:
    """Records writes and checks the owning message is still unsettled at write time."""

    def __init__(self, fail: bool = False) -> None:
        self.records: dict[str, ResultRecord] = {}
        self.writes = 0
        self.fail = fail
        self.pending_message: QueueMessage | None = None

    async def put(self, object_key: str, record: ResultRecord) -> None:
        if self.fail:
            raise ResultStoreError(object_key)
        if self.pending_message is not None:
            assert self.pending_message.disposition is Disposition.PENDING
        self.records[object_key] = record
        self.writes += 1


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def ingestion() -> FakeIngestion:
    return FakeIngestion()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def processor(settings, signer, ingestion, store) -> BatchProcessor:
    return BatchProcessor(settings, signer=signer, ingestion=ingestion, store=store)
