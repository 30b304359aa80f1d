"""
R2 presigned URLs — read access for Cloudflare Stream to pull uploaded objects.

R2 speaks the S3 API, so the standard aioboto3 presigner is pointed at the
account's R2 endpoint. Signing is local: no request reaches R2 here.
"""
from __future__ import annotations

import logging

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from stream_relay.config import Settings
from stream_relay.exceptions import SignedUrlError

logger = logging.getLogger(__name__)

SIGNED_URL_EXPIRY_SECONDS = 900  # 15 min

_R2_CLIENT_CONFIG = Config(signature_version="s3v4", s3={"addressing_style": "path"})


def _r2_session(settings: Settings) -> aioboto3.Session:
    return aioboto3.Session(
        aws_access_key_id=settings.r2_access_key_id,
        aws_secret_access_key=settings.r2_secret_access_key,
        region_name="auto",
    )


class R2UrlSigner:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def presign_get(self, object_key: str) -> str:
        """Return a presigned GET URL for the object, valid for 15 minutes."""
        try:
            async with _r2_session(self.settings).client(
                "s3",
                endpoint_url=self.settings.r2_endpoint_url,
                config=_R2_CLIENT_CONFIG,
            ) as s3:
                url: str = await s3.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.settings.r2_source_bucket, "Key": object_key},
                    ExpiresIn=SIGNED_URL_EXPIRY_SECONDS,
                )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Presign failed for key %s: %s", object_key, exc)
            raise SignedUrlError(object_key) from exc
        return url
