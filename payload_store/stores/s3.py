"""
S3-backed payload store.

Offloaded payloads are written as single S3 objects: strings as
``text/plain``, everything else as compact ``application/json``. The token
returned to the engine is an S3 URL (default), an object ARN, or a
``{"store": "s3", "bucket": ..., "key": ...}`` dict depending on ``format``.
"""

import json
import math
import uuid
from typing import Any, Callable, Dict, Optional, Union

import boto3
from aws_lambda_powertools import Logger

from ..core.errors import (
    InvalidReferenceError,
    PayloadStoreError,
    StoreConfigurationError,
    UnsupportedTypeError,
)
from ..core.logger import create_logger
from ..core.models import LoadArgs, StoreArgs
from ..utils.size_utils import to_json
from .base import Store
from .s3_urls import (
    URL_FORMATS,
    S3Object,
    format_s3_arn,
    format_s3_url,
    is_s3_arn,
    is_s3_url,
    parse_s3_arn,
    parse_s3_url,
)

KeyMaker = Union[str, Callable[[StoreArgs], str]]

REFERENCE_FORMATS = ("url", "arn", "object") + URL_FORMATS


def uuid_key(args: StoreArgs) -> str:
    return str(uuid.uuid4())


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class S3Store(Store):
    """Store that offloads payloads to an S3 bucket.

    Example:
        >>> store = S3Store(bucket="my-payload-bucket", format="arn")
        >>> token = store.store(StoreArgs(payload={"big": "..."}, byte_size=13))
        >>> token
        'arn:aws:s3:::my-payload-bucket/0b6f...'
    """

    name = "s3"

    def __init__(
        self,
        bucket: str,
        key: Optional[KeyMaker] = None,
        format: str = "url",
        max_size: float = math.inf,
        client: Any = None,
        logger: Optional[Logger] = None,
    ):
        """Initialize the store.

        Args:
            bucket: Bucket that receives offloaded payloads. References are
                only loaded from this bucket.
            key: Object key, or a callable building one from the StoreArgs.
                Defaults to a random UUID per payload.
            format: Token format: ``"url"`` (``s3://bucket/key``), ``"arn"``,
                ``"object"`` or any name in ``URL_FORMATS``
            max_size: Largest payload (bytes) this store accepts; 0 disables
                storing entirely
            client: boto3 S3 client (defaults to ``boto3.client("s3")``)
            logger: powertools Logger
        """
        if not _is_non_empty_str(bucket):
            raise StoreConfigurationError(
                "Invalid bucket", f"must be a non-empty string, got {bucket!r}"
            )
        if format not in REFERENCE_FORMATS:
            raise StoreConfigurationError(
                f"Unknown reference format '{format}'",
                f"expected one of {', '.join(REFERENCE_FORMATS)}",
            )
        if max_size < 0:
            raise StoreConfigurationError("max_size must be non-negative")

        self.bucket = bucket
        self.key = key if key is not None else uuid_key
        self.reference_format = "s3-global-path" if format == "url" else format
        self.max_size = max_size
        self.client = client or boto3.client("s3")
        self.logger = logger or create_logger()

    # ---------------------------------------------------------- private helpers
    def _locate(self, reference: Any) -> Optional[S3Object]:
        """Resolve a token into an S3 location, or None if it is not S3-shaped."""
        if isinstance(reference, dict):
            tag = reference.get("store")
            if tag is not None and tag != self.name:
                return None

            bucket, key = reference.get("bucket"), reference.get("key")
            if not (_is_non_empty_str(bucket) and _is_non_empty_str(key)):
                if tag == self.name:
                    raise InvalidReferenceError(
                        reference, "S3 references require non-empty 'bucket' and 'key'"
                    )
                return None
            return S3Object(bucket, key, reference.get("region"))

        if is_s3_arn(reference):
            return parse_s3_arn(reference)
        if is_s3_url(reference):
            return parse_s3_url(reference)
        return None

    def _resolve_key(self, args: StoreArgs) -> str:
        key = self.key(args) if callable(self.key) else self.key
        if not _is_non_empty_str(key):
            raise StoreConfigurationError(
                "Invalid key", f"must be a non-empty string, got {key!r}"
            )
        return key

    def _format_reference(self, s3_object: S3Object) -> Union[str, Dict[str, Any]]:
        if self.reference_format == "arn":
            return format_s3_arn(s3_object)
        if self.reference_format == "object":
            reference = {"store": self.name, "bucket": s3_object.bucket, "key": s3_object.key}
            if s3_object.region:
                reference["region"] = s3_object.region
            return reference
        return format_s3_url(s3_object, self.reference_format)

    @staticmethod
    def _serialize(payload: Any) -> Dict[str, Any]:
        if isinstance(payload, str):
            return {"Body": payload.encode("utf-8"), "ContentType": "text/plain"}
        try:
            body = to_json(payload)
        except (TypeError, ValueError) as exc:
            raise UnsupportedTypeError(type(payload).__name__, str(exc)) from exc
        return {"Body": body.encode("utf-8"), "ContentType": "application/json"}

    # ------------------------------------------------------------------- load
    def can_load(self, args: LoadArgs) -> bool:
        if args.reference is None:
            return False
        s3_object = self._locate(args.reference)
        return s3_object is not None and s3_object.bucket == self.bucket

    def load(self, args: LoadArgs) -> Any:
        s3_object = self._locate(args.reference)
        if s3_object is None:
            raise InvalidReferenceError(args.reference, "not an S3 reference")

        self.logger.debug(
            "Loading payload from S3",
            extra={"bucket": s3_object.bucket, "key": s3_object.key},
        )
        obj = self.client.get_object(Bucket=s3_object.bucket, Key=s3_object.key)
        body = obj["Body"].read().decode("utf-8")
        content_type = (obj.get("ContentType") or "").split(";")[0].strip()

        if content_type == "application/json":
            return json.loads(body)
        if content_type == "text/plain":
            return body
        raise PayloadStoreError(
            "Unsupported content type",
            f"s3://{s3_object.bucket}/{s3_object.key} has ContentType '{content_type}'",
        )

    # ------------------------------------------------------------------ store
    def can_store(self, args: StoreArgs) -> bool:
        if self.max_size == 0:
            return False
        if args.byte_size > self.max_size:
            return False
        return args.payload is not None

    def store(self, args: StoreArgs) -> Union[str, Dict[str, Any]]:
        key = self._resolve_key(args)
        self.logger.debug(
            "Storing payload in S3",
            extra={"bucket": self.bucket, "key": key, "byte_size": args.byte_size},
        )

        self.client.put_object(Bucket=self.bucket, Key=key, **self._serialize(args.payload))

        region = getattr(self.client.meta, "region_name", None)
        return self._format_reference(S3Object(self.bucket, key, region))

    # ----------------------------------------------------------------- delete
    def can_delete(self, args: LoadArgs) -> bool:
        return self.can_load(args)

    def delete(self, args: LoadArgs) -> None:
        s3_object = self._locate(args.reference)
        if s3_object is None:
            raise InvalidReferenceError(args.reference, "not an S3 reference")

        self.logger.debug(
            "Deleting payload from S3",
            extra={"bucket": s3_object.bucket, "key": s3_object.key},
        )
        self.client.delete_object(Bucket=s3_object.bucket, Key=s3_object.key)
