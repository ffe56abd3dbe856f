"""
Object storage client for generated exports.

Uploads file bytes to the export bucket and returns a time-limited presigned
download URL. Supports split endpoints: writes go to the address the API
process can reach, while presigned URLs are computed against the address the
browser can reach (e.g. MinIO behind docker networking).
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional
from urllib.parse import urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .config import StorageConfig

logger = logging.getLogger(__name__)

# Error signatures S3 and S3-compatible stores use for a missing bucket
BUCKET_NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchBucket"})
# Raised by CreateBucket when another process won the race
BUCKET_ALREADY_CREATED_CODES = frozenset(
    {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}
)


def _is_aws_endpoint(endpoint: Optional[str]) -> bool:
    """True for the provider default and explicit *.amazonaws.com endpoints."""
    if not endpoint:
        return True
    host = urlparse(endpoint).hostname or ""
    return host == "amazonaws.com" or host.endswith(".amazonaws.com")


class BucketState(str, Enum):
    EXISTS = "exists"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True)
class BucketProbe:
    """Outcome of a HeadBucket call."""

    state: BucketState
    cause: Optional[BaseException] = None


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _http_status(exc: ClientError) -> Optional[int]:
    return exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def classify_bucket_error(exc: BaseException) -> BucketProbe:
    """Map a HeadBucket failure to MISSING or FAILED.

    Only ClientErrors carrying a 404 status or one of the known not-found
    codes mean the bucket is absent. Anything else (403, network errors,
    missing credentials) is a failure the caller must see.
    """
    if isinstance(exc, ClientError):
        if _http_status(exc) == 404 or _error_code(exc) in BUCKET_NOT_FOUND_CODES:
            return BucketProbe(BucketState.MISSING)
    return BucketProbe(BucketState.FAILED, cause=exc)


def _format_timestamp(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class UploadResult:
    url: str
    key: str
    expires_at: datetime

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "key": self.key,
            "expiresAt": _format_timestamp(self.expires_at),
        }


class ObjectStorageClient:
    """Uploads export artifacts and signs download links for them.

    boto3 clients are created on first use, so a missing credential chain
    only surfaces when a call is actually made.
    """

    def __init__(
        self,
        config: StorageConfig,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._client = None
        self._signing_client = None

    @property
    def bucket(self) -> str:
        return self.config.bucket

    def _build_client(self, endpoint: Optional[str]):
        kwargs = {"region_name": self.config.region}
        if self.config.has_static_credentials:
            kwargs["aws_access_key_id"] = self.config.access_key_id
            kwargs["aws_secret_access_key"] = self.config.secret_access_key
        if endpoint:
            # S3-compatible stores generally need path-style addressing
            kwargs["endpoint_url"] = endpoint
            kwargs["config"] = Config(
                signature_version="s3v4", s3={"addressing_style": "path"}
            )
        else:
            kwargs["config"] = Config(signature_version="s3v4")
        return boto3.client("s3", **kwargs)

    @property
    def client(self):
        """Client used for every call that reaches the store."""
        if self._client is None:
            self._client = self._build_client(self.config.endpoint)
            if not self.config.has_static_credentials:
                logger.info("S3 client using default credential chain")
        return self._client

    @property
    def signing_client(self):
        """Client used only to compute presigned URLs."""
        if self._signing_client is None:
            if self.config.public_endpoint:
                self._signing_client = self._build_client(self.config.public_endpoint)
            else:
                self._signing_client = self.client
        return self._signing_client

    def probe_bucket(self) -> BucketProbe:
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            return classify_bucket_error(e)
        return BucketProbe(BucketState.EXISTS)

    def _create_bucket(self) -> bool:
        params = {"Bucket": self.bucket}
        # AWS rejects an explicit us-east-1 constraint; non-AWS stores ignore it
        region = self.config.region
        if _is_aws_endpoint(self.config.endpoint) and region != "us-east-1":
            params["CreateBucketConfiguration"] = {
                "LocationConstraint": region
            }
        try:
            self.client.create_bucket(**params)
        except ClientError as e:
            if _error_code(e) not in BUCKET_ALREADY_CREATED_CODES:
                raise
            logger.info(f"Bucket '{self.bucket}' was created concurrently")
            return False
        logger.info(f"Created bucket '{self.bucket}'")
        return True

    def ensure_bucket(self) -> bool:
        """Create the export bucket if it is missing.

        Returns:
            bool: True if this call created the bucket.

        Raises:
            Any non not-found error from HeadBucket, unmodified.
        """
        probe = self.probe_bucket()
        if probe.state is BucketState.EXISTS:
            return False
        if probe.state is BucketState.FAILED:
            raise probe.cause
        return self._create_bucket()

    def generate_download_url(self, key: str) -> str:
        return self.signing_client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=self.config.url_ttl_seconds,
        )

    def upload(
        self, key: str, body: bytes, content_type: str = "application/octet-stream"
    ) -> UploadResult:
        """
        Write bytes under key, replacing any existing object, and sign a GET.

        Args:
            key: Object key, e.g. "exports/<user>/<document>.pdf"
            body: File bytes, sent in a single PutObject
            content_type: MIME type stored with the object

        Returns:
            UploadResult: presigned url, key and url expiry
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        self.ensure_bucket()
        self.client.put_object(
            Bucket=self.bucket, Key=key, Body=body, ContentType=content_type
        )
        logger.info(f"Uploaded {len(body)} bytes to s3://{self.bucket}/{key}")

        expires_at = self._clock() + timedelta(seconds=self.config.url_ttl_seconds)
        url = self.generate_download_url(key)
        return UploadResult(url=url, key=key, expires_at=expires_at)
