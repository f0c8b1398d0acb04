"""
S3 location parsing and formatting.

Supported URL shapes (``<scheme>`` is ``s3``, ``http`` or ``https``):

    s3://<bucket>/<key>                                   s3-global-path
    <scheme>://s3.amazonaws.com/<bucket>/<key>            *-legacy-path
    <scheme>://s3.<region>.amazonaws.com/<bucket>/<key>   *-region-path
    <scheme>://<bucket>.s3.amazonaws.com/<key>            *-legacy-virtual-hosted
    <scheme>://<bucket>.s3.<region>.amazonaws.com/<key>   *-region-virtual-hosted

plus object ARNs ``arn:aws:s3:::<bucket>/<key>``.

See https://docs.aws.amazon.com/AmazonS3/latest/userguide/VirtualHosting.html
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from ..core.errors import InvalidReferenceError, StoreConfigurationError

URL_FORMATS = (
    "s3-global-path",
    "s3-legacy-path",
    "s3-region-path",
    "s3-legacy-virtual-hosted",
    "s3-region-virtual-hosted",
    "https-legacy-path",
    "https-region-path",
    "https-legacy-virtual-hosted",
    "https-region-virtual-hosted",
)

_SCHEMES = ("s3", "http", "https")

# Order matters: the global path pattern matches almost anything, so it is
# tried last and only for the s3:// scheme.
_REGION_VIRTUAL_HOSTED = re.compile(
    r"^(?P<bucket>[^/]+?)\.s3\.(?P<region>[^./]+)\.amazonaws\.com/(?P<key>.+)$"
)
_LEGACY_VIRTUAL_HOSTED = re.compile(r"^(?P<bucket>[^/]+?)\.s3\.amazonaws\.com/(?P<key>.+)$")
_REGION_PATH = re.compile(
    r"^s3\.(?P<region>[^./]+)\.amazonaws\.com/(?P<bucket>[^/]+)/(?P<key>.+)$"
)
_LEGACY_PATH = re.compile(r"^s3\.amazonaws\.com/(?P<bucket>[^/]+)/(?P<key>.+)$")
_GLOBAL_PATH = re.compile(r"^(?P<bucket>[^/]+)/(?P<key>.+)$")

_OBJECT_ARN = re.compile(r"^arn:aws[a-z-]*:s3:::(?P<bucket>[^/]+)/(?P<key>.+)$")


@dataclass(frozen=True)
class S3Object:
    """Location of an S3 object."""

    bucket: str
    key: str
    region: Optional[str] = None


# ──────────────────────────────────────────────────────────────────────────────
# URLs
# ──────────────────────────────────────────────────────────────────────────────
def _match_url(value: Any) -> Optional[S3Object]:
    if not isinstance(value, str):
        return None
    scheme, sep, rest = value.partition("://")
    if not sep or scheme.lower() not in _SCHEMES:
        return None

    for pattern in (_REGION_VIRTUAL_HOSTED, _LEGACY_VIRTUAL_HOSTED, _REGION_PATH, _LEGACY_PATH):
        match = pattern.match(rest)
        if match:
            groups = match.groupdict()
            return S3Object(groups["bucket"], groups["key"], groups.get("region"))

    if scheme.lower() == "s3":
        match = _GLOBAL_PATH.match(rest)
        if match:
            return S3Object(match.group("bucket"), match.group("key"))
    return None


def is_s3_url(value: Any) -> bool:
    return _match_url(value) is not None


def parse_s3_url(url: str) -> S3Object:
    """
    Parse an S3 URL into bucket, key and (when present) region.

    Raises:
        InvalidReferenceError: If the URL is not a supported S3 URL

    Examples:
        >>> parse_s3_url("s3://my-bucket/path/to/payload.json")
        S3Object(bucket='my-bucket', key='path/to/payload.json', region=None)
        >>> parse_s3_url("https://my-bucket.s3.eu-west-1.amazonaws.com/k")
        S3Object(bucket='my-bucket', key='k', region='eu-west-1')
    """
    s3_object = _match_url(url)
    if s3_object is None:
        raise InvalidReferenceError(url, "unsupported S3 URL format")
    return s3_object


def format_s3_url(s3_object: S3Object, url_format: str = "s3-global-path") -> str:
    """Render an S3 location in one of :data:`URL_FORMATS`."""
    if url_format not in URL_FORMATS:
        raise StoreConfigurationError(
            f"Unknown S3 URL format '{url_format}'",
            f"expected one of {', '.join(URL_FORMATS)}",
        )

    bucket, key, region = s3_object.bucket, s3_object.key, s3_object.region
    scheme, _, style = url_format.partition("-")

    if "region" in style and not region:
        raise StoreConfigurationError(
            f"Region is required for region-specific URL format '{url_format}'"
        )

    if style == "global-path":
        return f"{scheme}://{bucket}/{key}"
    if style == "legacy-path":
        return f"{scheme}://s3.amazonaws.com/{bucket}/{key}"
    if style == "region-path":
        return f"{scheme}://s3.{region}.amazonaws.com/{bucket}/{key}"
    if style == "legacy-virtual-hosted":
        return f"{scheme}://{bucket}.s3.amazonaws.com/{key}"
    return f"{scheme}://{bucket}.s3.{region}.amazonaws.com/{key}"


# ──────────────────────────────────────────────────────────────────────────────
# ARNs
# ──────────────────────────────────────────────────────────────────────────────
def is_s3_arn(value: Any) -> bool:
    return isinstance(value, str) and _OBJECT_ARN.match(value) is not None


def parse_s3_arn(arn: str) -> S3Object:
    match = _OBJECT_ARN.match(arn) if isinstance(arn, str) else None
    if not match:
        raise InvalidReferenceError(arn, "not an S3 object ARN")
    return S3Object(match.group("bucket"), match.group("key"))


def format_s3_arn(s3_object: S3Object) -> str:
    return f"arn:aws:s3:::{s3_object.bucket}/{s3_object.key}"
