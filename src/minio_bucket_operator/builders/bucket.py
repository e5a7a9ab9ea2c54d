"""Builder for bucket specs."""

from __future__ import annotations

from typing import Any

from ..models import BucketRetention, BucketSpec, RetentionMode


class BucketSpecError(ValueError):
    """The bucket custom resource spec is invalid."""


def _get_bool(spec: dict[str, Any], key: str) -> bool:
    value = spec.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise BucketSpecError(f"{key} must be a boolean")
    return value


def create_retention_from_spec(retention: dict[str, Any] | None) -> BucketRetention | None:
    """Create a retention from the `retention` field of a bucket spec.

    The mode is read from `type`, or `mode` when `type` is absent.
    """
    if retention is None:
        return None
    if not isinstance(retention, dict):
        raise BucketSpecError("retention must be an object")

    validity = retention.get("validity")
    if isinstance(validity, bool) or not isinstance(validity, int) or validity <= 0:
        raise BucketSpecError("retention.validity must be a positive number of days")

    raw_mode = retention.get("type", retention.get("mode"))
    if not isinstance(raw_mode, str):
        raise BucketSpecError("retention.type is required")
    mode = RetentionMode.parse(raw_mode)
    if mode is None:
        allowed = ", ".join(m.value for m in RetentionMode)
        raise BucketSpecError(f"retention.type must be one of {allowed}, got '{raw_mode}'")

    return BucketRetention(validity=validity, mode=mode)


def create_bucket_spec_from_crd(spec: dict[str, Any]) -> BucketSpec:
    """Create a bucket spec from a MinioBucket custom resource spec.

    Args:
        spec: MinioBucket CRD spec

    Returns:
        Validated bucket spec

    Raises:
        BucketSpecError: If a field is missing or invalid
    """
    name = spec.get("name")
    if not name or not isinstance(name, str):
        raise BucketSpecError("bucket name is required")

    instance = spec.get("instance")
    if not instance or not isinstance(instance, str):
        raise BucketSpecError("instance is required")

    secret = spec.get("secret")
    if not secret or not isinstance(secret, str):
        raise BucketSpecError("secret is required")

    quota = spec.get("quota")
    if quota is not None and (isinstance(quota, bool) or not isinstance(quota, int) or quota < 0):
        raise BucketSpecError("quota must be a non-negative number of bytes")

    return BucketSpec(
        name=name,
        instance=instance,
        secret=secret,
        anonymous_read_access=_get_bool(spec, "anonymous_read_access"),
        versioning=_get_bool(spec, "versioning"),
        quota=quota,
        lock=_get_bool(spec, "lock"),
        retention=create_retention_from_spec(spec.get("retention")),
    )
