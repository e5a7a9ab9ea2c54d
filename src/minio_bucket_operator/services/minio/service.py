"""MinIO bucket, policy and user administration."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from typing import Any, TypeVar

import requests

from ...models import BucketRetention, BucketSpec, MinioUser, RetentionMode, RetentionStatus
from ...utils.errors import sanitize_text
from .base import CommandTransport
from .errors import (
    ApplyPolicyFailed,
    AttachPolicyFailed,
    CreateUserFailed,
    MakeBucketFailed,
    MalformedOutput,
    SetAnonymousAccessFailed,
    SetQuotaFailed,
    SetRetentionFailed,
    SetVersioningFailed,
)
from .mc import McTransport, temp_dir
from .records import (
    ActionResult,
    AnonymousAccessInfo,
    BucketEntry,
    PolicyEntities,
    PolicyInfo,
    PolicyListEntry,
    QuotaInfo,
    RetentionInfo,
    UserListEntry,
    VersioningInfo,
    decode_records,
    ensure_success,
    single_record,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")

ANONYMOUS_DOWNLOAD = "download"
ANONYMOUS_PRIVATE = "private"


def canonical_json(value: Any) -> str:
    """Serialize a JSON value in a stable form suitable for comparisons."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"))


def parse_retention_validity(validity: str) -> int:
    """Parse the validity printed by `mc retention info`, e.g. `10DAYS`.

    Raises:
        MalformedOutput: If the value is not a number of days
    """
    value = validity.strip().lower().replace("days", "").strip()
    try:
        return int(value)
    except ValueError as e:
        raise MalformedOutput(f"Unexpected retention validity '{validity}'") from e


class MinioService:
    """Manage a MinIO cluster through an admin command transport."""

    def __init__(self, endpoint: str, transport: CommandTransport):
        self.endpoint = endpoint.rstrip("/")
        self.transport = transport

    @classmethod
    def from_credentials(cls, endpoint: str, access_key: str, secret_key: str) -> MinioService:
        """Create a service driving the `mc` client with admin credentials."""
        return cls(endpoint, McTransport(endpoint, access_key, secret_key))

    def __repr__(self) -> str:
        return f"MinioService(endpoint={self.endpoint!r})"

    @property
    def alias(self) -> str:
        return self.transport.alias

    def is_ready(self) -> bool:
        """Check if the MinIO cluster is ready to respond to requests."""
        timeout = float(os.getenv("HEALTH_CHECK_TIMEOUT_SECONDS", "5"))
        try:
            r = requests.get(f"{self.endpoint}/minio/health/live", timeout=timeout)
        except requests.RequestException as e:
            logger.info(f"Minio not ready yet, check failed with error {e}")
            return False

        if r.status_code == 200:
            logger.info("Minio is ready!")
            return True

        logger.info(f"Minio not ready yet, check failed with status code {r.status_code}")
        return False

    def absolute_bucket_name(self, name: str) -> str:
        """Get bucket name prefixed by the mc alias."""
        return f"{self.alias}/{name}"

    def _exec(self, args: list[str], record_cls: type[R], redact: Sequence[str] = ()) -> list[R]:
        raw = self.transport.execute(args, redact=redact)
        try:
            return decode_records(raw, record_cls)
        except MalformedOutput as e:
            e.stdout = sanitize_text(e.stdout, redact)
            logger.error(f"{e.message} (stdout={e.stdout})")
            raise

    def _exec_action(
        self,
        args: list[str],
        error_cls: type,
        message: str,
        redact: Sequence[str] = (),
    ) -> None:
        ensure_success(self._exec(args, ActionResult, redact), error_cls, message)

    # Buckets

    def buckets_list(self) -> list[BucketEntry]:
        """Get the list of buckets."""
        return self._exec(["ls", self.alias], BucketEntry)

    def bucket_exists(self, name: str) -> bool:
        return any(b.bucket_name == name for b in self.buckets_list())

    def bucket_apply(self, spec: BucketSpec) -> None:
        """Apply the desired configuration of a bucket.

        An existing bucket is kept and only its properties are updated. Steps
        run in order and the first failure aborts the remaining ones; nothing
        already applied is rolled back.

        Raises:
            MakeBucketFailed: If the bucket could not be created
            SetVersioningFailed, SetAnonymousAccessFailed, SetQuotaFailed,
            SetRetentionFailed: If a property could not be set
        """
        args = ["mb", self.absolute_bucket_name(spec.name), "-p"]
        if spec.lock:
            # Object lock can only be enabled when the bucket is created
            args.append("--with-lock")
        self._exec_action(args, MakeBucketFailed, f"Failed to create bucket {spec.name}")

        self.bucket_set_versioning(spec.name, spec.effective_versioning)
        self.bucket_set_anonymous_access(spec.name, spec.anonymous_read_access)
        self.bucket_set_quota(spec.name, spec.quota)
        if spec.lock:
            self.bucket_set_default_retention(spec.name, spec.retention)

    def bucket_set_versioning(self, bucket: str, enable: bool) -> None:
        self._exec_action(
            ["version", "enable" if enable else "suspend", self.absolute_bucket_name(bucket)],
            SetVersioningFailed,
            f"Failed to set versioning of bucket {bucket}",
        )

    def bucket_get_versioning(self, bucket: str) -> bool:
        """Get current bucket versioning status."""
        records = self._exec(["version", "info", self.absolute_bucket_name(bucket)], VersioningInfo)
        return single_record(records, "version info").enabled

    def bucket_set_anonymous_access(self, bucket: str, access: bool) -> None:
        target = f"{self.absolute_bucket_name(bucket)}/*"
        self._exec_action(
            ["anonymous", "set", ANONYMOUS_DOWNLOAD if access else ANONYMOUS_PRIVATE, target],
            SetAnonymousAccessFailed,
            f"Failed to set anonymous access of bucket {bucket}",
        )

    def bucket_get_anonymous_access(self, bucket: str) -> bool:
        """Get current bucket anonymous access status."""
        target = f"{self.absolute_bucket_name(bucket)}/*"
        records = self._exec(["anonymous", "get", target], AnonymousAccessInfo)
        return single_record(records, "anonymous get").permission == ANONYMOUS_DOWNLOAD

    def bucket_set_quota(self, bucket: str, quota: int | None) -> None:
        """Set bucket quota, in bytes. `None` removes the quota."""
        bucket_name = self.absolute_bucket_name(bucket)
        if quota is not None:
            args = ["quota", "set", bucket_name, "--size", f"{quota}B"]
        else:
            args = ["quota", "clear", bucket_name]
        self._exec_action(args, SetQuotaFailed, f"Failed to set quota of bucket {bucket}")

    def bucket_get_quota(self, bucket: str) -> int | None:
        """Get current bucket quota, in bytes."""
        records = self._exec(["quota", "info", self.absolute_bucket_name(bucket)], QuotaInfo)
        return single_record(records, "quota info").quota

    def bucket_set_default_retention(self, bucket: str, retention: BucketRetention | None) -> None:
        """Set bucket default retention. `None` removes it.

        The bucket must have been created with object lock.
        """
        bucket_name = self.absolute_bucket_name(bucket)
        if retention is not None:
            args = [
                "retention",
                "set",
                "--default",
                retention.mode.value,
                f"{retention.validity}d",
                bucket_name,
            ]
        else:
            args = ["retention", "clear", "--default", bucket_name]
        self._exec_action(args, SetRetentionFailed, f"Failed to set retention of bucket {bucket}")

    def bucket_inspect_default_retention(self, bucket: str) -> RetentionStatus:
        """Get bucket default retention, keeping unknown modes distinct.

        Raises:
            MalformedOutput: If the command prints no record or an invalid validity
        """
        records = self._exec(
            ["retention", "info", self.absolute_bucket_name(bucket), "--default"],
            RetentionInfo,
        )
        info = single_record(records, "retention info")

        if info.mode is None or info.validity is None or info.enabled is None:
            return RetentionStatus()
        if info.enabled.lower() != "enabled":
            return RetentionStatus()

        validity = parse_retention_validity(info.validity)
        mode = RetentionMode.parse(info.mode)
        if mode is None:
            logger.error(f"Unknown retention type: {info.mode.lower()}")
            return RetentionStatus(unrecognized_mode=info.mode)

        return RetentionStatus(retention=BucketRetention(validity=validity, mode=mode))

    def bucket_get_default_retention(self, bucket: str) -> BucketRetention | None:
        """Get bucket default retention. Unknown retention modes read as `None`."""
        return self.bucket_inspect_default_retention(bucket).retention

    # Policies

    def policy_apply(self, name: str, content: str) -> None:
        """Create or replace a policy."""
        with tempfile.NamedTemporaryFile("w", suffix=".json", dir=temp_dir()) as policy_file:
            policy_file.write(content)
            policy_file.flush()
            self._exec_action(
                ["admin", "policy", "create", self.alias, name, policy_file.name],
                ApplyPolicyFailed,
                f"Failed to apply policy {name}",
            )

    def policy_list(self) -> list[str]:
        """Get the list of existing policies."""
        return [p.policy for p in self._exec(["admin", "policy", "list", self.alias], PolicyListEntry)]

    def policy_content(self, name: str) -> str:
        """Get the content of a given policy, in canonical JSON form."""
        records = self._exec(["admin", "policy", "info", self.alias, name], PolicyInfo)
        return canonical_json(single_record(records, "admin policy info").policy)

    # Users

    def user_apply(self, user: MinioUser) -> None:
        """Create a user, or update the password of an existing one."""
        self._exec_action(
            ["admin", "user", "add", self.alias, user.username, user.password],
            CreateUserFailed,
            f"Failed to create user {user.username}",
            redact=(user.password,),
        )

    def user_list(self) -> list[str]:
        """Get the list of users."""
        return [u.access_key for u in self._exec(["admin", "user", "list", self.alias], UserListEntry)]

    def policy_attach_get_user_list(self, user: MinioUser) -> list[str]:
        """Get the policies attached to a user."""
        records = self._exec(
            ["admin", "policy", "entities", self.alias, "--user", user.username],
            PolicyEntities,
        )
        mappings = single_record(records, "admin policy entities").user_mappings
        if mappings:
            return mappings[0]
        return []

    def policy_attach_user(self, user: MinioUser, policy: str) -> bool:
        """Attach a policy to a user.

        Returns:
            True if the policy was attached, False if it already was
        """
        if policy in self.policy_attach_get_user_list(user):
            return False

        self._exec_action(
            ["admin", "policy", "attach", self.alias, policy, "--user", user.username],
            AttachPolicyFailed,
            f"Failed to attach policy {policy} to user {user.username}",
        )
        return True
