"""Comparison of the live state of a bucket with its desired state."""

from __future__ import annotations

from ...models import BucketSpec
from .service import MinioService


def detect_drift(service: MinioService, spec: BucketSpec) -> list[str]:
    """List the bucket properties whose live value differs from the spec.

    Returns:
        Drifted property names among `bucket`, `versioning`,
        `anonymous_access`, `quota` and `retention`. A missing bucket is
        reported alone since its properties cannot be read.
    """
    if not service.bucket_exists(spec.name):
        return ["bucket"]

    drifted = []
    if service.bucket_get_versioning(spec.name) != spec.effective_versioning:
        drifted.append("versioning")
    if service.bucket_get_anonymous_access(spec.name) != spec.anonymous_read_access:
        drifted.append("anonymous_access")
    if service.bucket_get_quota(spec.name) != spec.quota:
        drifted.append("quota")
    # Retention is only managed on locked buckets
    if spec.lock and service.bucket_get_default_retention(spec.name) != spec.retention:
        drifted.append("retention")
    return drifted
