from pydantic_settings import BaseSettings, SettingsConfigDict

from stream_relay.exceptions import MissingConfiguration


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── R2 source bucket ─────────────────────────────────────────────────────
    r2_source_bucket: str = ""
    r2_access_key_id: str = ""
    r2_secret_access_key: str = ""

    # ── Cloudflare Stream ────────────────────────────────────────────────────
    cloudflare_account_id: str = ""
    cloudflare_api_token: str = ""
    cloudflare_api_base_url: str = "https://api.cloudflare.com/client/v4"
    stream_request_timeout_seconds: float = 30.0

    # ── Result store ─────────────────────────────────────────────────────────
    redis_url: str = "redis://localhost:6379/0"

    # ── SQS (polling consumer only) ──────────────────────────────────────────
    sqs_queue_url: str = ""
    aws_region: str = "us-east-1"
    sqs_max_messages: int = 10  # SQS hard limit per receive
    sqs_wait_time_seconds: int = 20
    # Unset: retried messages wait out the queue's own visibility timeout
    queue_retry_delay_seconds: int | None = None

    @property
    def r2_endpoint_url(self) -> str:
        return f"https://{self.cloudflare_account_id}.r2.cloudflarestorage.com"

    def missing_bindings(self) -> list[str]:
        """Return env var names of required settings that are empty."""
        required = {
            "R2_SOURCE_BUCKET": self.r2_source_bucket,
            "R2_ACCESS_KEY_ID": self.r2_access_key_id,
            "R2_SECRET_ACCESS_KEY": self.r2_secret_access_key,
            "CLOUDFLARE_ACCOUNT_ID": self.cloudflare_account_id,
            "CLOUDFLARE_API_TOKEN": self.cloudflare_api_token,
        }
        return [name for name, value in required.items() if not value]

    def require_bindings(self) -> None:
        missing = self.missing_bindings()
        if missing:
            raise MissingConfiguration(missing)
