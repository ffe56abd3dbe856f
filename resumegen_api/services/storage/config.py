"""
Object storage configuration.

Read once from the environment at startup and handed to ObjectStorageClient.
Works against AWS S3 as well as S3-compatible stores such as MinIO, where the
API server and the browser may reach the store on different addresses.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BUCKET = "resumegen-exports"
DEFAULT_REGION = "us-east-1"
# Seven days, also the longest lifetime SigV4 accepts for a presigned URL
DEFAULT_URL_TTL_SECONDS = 7 * 24 * 60 * 60


def _optional(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


@dataclass(frozen=True)
class StorageConfig:
    """Settings for the export bucket."""

    bucket: str = DEFAULT_BUCKET
    region: str = DEFAULT_REGION

    # Address the API process uses for writes (None = provider default)
    endpoint: Optional[str] = None
    # Address baked into presigned URLs handed to browsers
    public_endpoint: Optional[str] = None

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    url_ttl_seconds: int = DEFAULT_URL_TTL_SECONDS

    def __post_init__(self):
        if self.url_ttl_seconds <= 0:
            raise ValueError("url_ttl_seconds must be positive")
        if self.url_ttl_seconds > DEFAULT_URL_TTL_SECONDS:
            raise ValueError(
                f"url_ttl_seconds must not exceed {DEFAULT_URL_TTL_SECONDS} (7 days)"
            )

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            bucket=_optional("AWS_S3_BUCKET") or DEFAULT_BUCKET,
            region=_optional("AWS_REGION") or DEFAULT_REGION,
            endpoint=_optional("AWS_ENDPOINT"),
            public_endpoint=_optional("AWS_PUBLIC_ENDPOINT"),
            access_key_id=_optional("AWS_ACCESS_KEY_ID"),
            secret_access_key=_optional("AWS_SECRET_ACCESS_KEY"),
            url_ttl_seconds=int(
                _optional("AWS_S3_URL_TTL_SECONDS") or DEFAULT_URL_TTL_SECONDS
            ),
        )

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    @property
    def signing_endpoint(self) -> Optional[str]:
        """Endpoint used when computing presigned URLs."""
        return self.public_endpoint or self.endpoint
