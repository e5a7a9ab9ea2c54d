"""Domain models for MinIO buckets and their users."""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from enum import Enum

from .constants import POLICY_NAME_PREFIX, SECRET_BUCKET_ACCESS_LEN, SECRET_BUCKET_SECRET_LEN

_ALPHANUMERIC = string.ascii_letters + string.digits


def rand_str(length: int) -> str:
    """Generate a random alphanumeric string of the given length."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


class RetentionMode(str, Enum):
    """Object lock retention mode."""

    COMPLIANCE = "compliance"
    GOVERNANCE = "governance"

    @classmethod
    def parse(cls, value: str) -> RetentionMode | None:
        """Map a mode string to a known mode, case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class BucketRetention:
    """Default retention applied to new objects of a locked bucket."""

    validity: int
    mode: RetentionMode


@dataclass(frozen=True)
class RetentionStatus:
    """Observed default retention of a bucket.

    `retention` is set when the cluster reports an enabled retention with a
    known mode. `unrecognized_mode` keeps the raw mode when the cluster
    reports an enabled retention the operator does not know about.
    """

    retention: BucketRetention | None = None
    unrecognized_mode: str | None = None

    @property
    def is_unrecognized(self) -> bool:
        return self.unrecognized_mode is not None


@dataclass(frozen=True)
class BucketSpec:
    """Desired state of a bucket."""

    name: str
    instance: str = ""
    secret: str = ""
    anonymous_read_access: bool = False
    versioning: bool = False
    quota: int | None = None
    lock: bool = False
    retention: BucketRetention | None = None

    @property
    def policy_name(self) -> str:
        return f"{POLICY_NAME_PREFIX}{self.name}"

    @property
    def effective_versioning(self) -> bool:
        # Object lock requires versioning
        return self.versioning or self.lock


@dataclass(frozen=True)
class MinioUser:
    """Credentials of a MinIO user."""

    username: str
    password: str

    @classmethod
    def generate(cls) -> MinioUser:
        """Generate a user with random credentials."""
        return cls(
            username=rand_str(SECRET_BUCKET_ACCESS_LEN),
            password=rand_str(SECRET_BUCKET_SECRET_LEN),
        )

    def __repr__(self) -> str:
        return f"MinioUser(username={self.username!r}, password='***')"
