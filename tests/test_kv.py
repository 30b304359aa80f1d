import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from stream_relay.exceptions import ResultStoreError
from stream_relay.kv import RedisResultStore
from stream_relay.schemas import ResultRecord


class DictRedis:
    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.fail = fail

    async def set(self, key: str, value: str) -> bool:
        if self.fail:
            raise RedisConnectionError("Connection refused")
        self.data[key] = value
        return True


@pytest.mark.asyncio
async def test_put_stores_json_under_object_key() -> None:
    client = DictRedis()

    await RedisResultStore(client).put("video1.mp4", ResultRecord(uid="abc123", playback={"hls": "h", "dash": "d"}))

    assert client.data == {"video1.mp4": '{"uid":"abc123","playback":{"hls":"h","dash":"d"}}'}


@pytest.mark.asyncio
async def test_put_leaves_out_missing_playback() -> None:
    client = DictRedis()

    await RedisResultStore(client).put("video2.mp4", ResultRecord(uid="abc123"))

    assert client.data["video2.mp4"] == '{"uid":"abc123"}'
    assert "playback" not in json.loads(client.data["video2.mp4"])


@pytest.mark.asyncio
async def test_put_overwrites() -> None:
    client = DictRedis()
    store = RedisResultStore(client)

    await store.put("k", ResultRecord(uid="old"))
    await store.put("k", ResultRecord(uid="new"))

    assert json.loads(client.data["k"]) == {"uid": "new"}


@pytest.mark.asyncio
async def test_redis_error_is_wrapped() -> None:
    with pytest.raises(ResultStoreError) as exc_info:
        await RedisResultStore(DictRedis(fail=True)).put("k", ResultRecord(uid="u"))
    assert exc_info.value.object_key == "k"
