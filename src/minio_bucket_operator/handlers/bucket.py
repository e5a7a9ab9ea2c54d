"""Handler for MinioBucket CRD."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Any

import kopf
from kubernetes import client

from .. import metrics
from ..builders.bucket import BucketSpecError, create_bucket_spec_from_crd
from ..builders.instance import InstanceSpecError
from ..builders.policy import render_bucket_policy
from ..constants import API_GROUP_VERSION, KIND_BUCKET
from ..models import BucketSpec, MinioUser
from ..services.minio import MakeBucketFailed, MinioError, MinioService, detect_drift
from ..tracing import trace_span
from ..utils.conditions import (
    clear_failure_conditions,
    set_apply_failed_condition,
    set_creation_failed_condition,
    set_instance_not_ready_condition,
    set_ready_condition,
)
from ..utils.errors import LookupFailed, sanitize_exception
from ..utils.events import (
    emit_bucket_applied,
    emit_credentials_created,
    emit_drift_detected,
    emit_validate_succeeded,
)
from ..utils.secrets import KubernetesSecretStore, SecretAlreadyExistsError, get_or_create_bucket_user
from .base import BaseHandler
from .shared import get_core_api, resolve_instance_service

logger = logging.getLogger(__name__)


def apply_bucket(service: MinioService, bucket: BucketSpec, user: MinioUser) -> None:
    """Make sure a bucket, its policy and its user match the desired configuration.

    Raises:
        MinioError: On the first failing step, earlier steps stay applied
    """
    logger.debug("Create or update bucket...")
    service.bucket_apply(bucket)

    policy_name = bucket.policy_name
    logger.debug(f"Create or update policy '{policy_name}'...")
    service.policy_apply(policy_name, render_bucket_policy(bucket.name))

    logger.debug(f"Create or update user '{user.username}'...")
    service.user_apply(user)

    logger.debug(f"Attach policy '{policy_name}' to user...")
    service.policy_attach_user(user, policy_name)

    logger.debug("Successfully applied desired configuration!")


class BucketHandler(BaseHandler):
    """Handler for MinioBucket resources."""

    def __init__(self):
        super().__init__(KIND_BUCKET)

    def _parse_spec(self, spec: dict[str, Any], meta: dict[str, Any]) -> BucketSpec:
        try:
            return create_bucket_spec_from_crd(spec)
        except BucketSpecError as e:
            self.handle_validation_error(meta, str(e))

    def _fail(
        self,
        patch: kopf.Patch,
        meta: dict[str, Any],
        conditions: list[dict[str, Any]],
        exists: bool | None = None,
    ) -> None:
        status_data: dict[str, Any] = {"conditions": conditions}
        if exists is not None:
            status_data["exists"] = exists
        self.update_resource_status(patch, meta, status_data)

    def reconcile(
        self,
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Run one reconciliation pass for a MinioBucket resource."""
        namespace = meta.get("namespace", "default")
        name = meta.get("name", "unknown")
        conditions = status.get("conditions", [])

        with trace_span("reconcile_bucket", kind=KIND_BUCKET, attributes={"bucket.name": spec.get("name") or name}):
            bucket = self._parse_spec(spec, meta)
            emit_validate_succeeded(meta)
            self.log_info(meta, f"Apply configuration for bucket {bucket.name}", reason="Reconcile", bucket_name=bucket.name)

            try:
                service = resolve_instance_service(bucket.instance, namespace)
            except (LookupFailed, InstanceSpecError, client.exceptions.ApiException) as e:
                self._fail(patch, meta, set_instance_not_ready_condition(conditions, sanitize_exception(e)))
                raise

            with trace_span("bootstrap_credentials", kind=KIND_BUCKET):
                try:
                    store = KubernetesSecretStore(get_core_api(), namespace)
                    user, created = get_or_create_bucket_user(store, bucket.secret, bucket.name)
                except (LookupFailed, SecretAlreadyExistsError, client.exceptions.ApiException) as e:
                    message = f"Failed to get credentials from secret {bucket.secret}: {sanitize_exception(e)}"
                    self._fail(patch, meta, set_apply_failed_condition(conditions, message))
                    raise
            if created:
                emit_credentials_created(meta, bucket.secret)
                self.log_info(meta, f"Created secret {bucket.secret} for bucket {bucket.name}",
                              reason="CredentialsCreated", bucket_name=bucket.name)

            with trace_span("apply_bucket", kind=KIND_BUCKET):
                try:
                    apply_bucket(service, bucket, user)
                except MakeBucketFailed as e:
                    metrics.bucket_operations_total.labels(operation="apply", result="failed").inc()
                    message = sanitize_exception(e)
                    self._fail(patch, meta, set_creation_failed_condition(conditions, message), exists=False)
                    raise
                except MinioError as e:
                    metrics.bucket_operations_total.labels(operation="apply", result="failed").inc()
                    message = sanitize_exception(e)
                    self._fail(patch, meta, set_apply_failed_condition(conditions, message))
                    raise
            metrics.bucket_operations_total.labels(operation="apply", result="success").inc()
            emit_bucket_applied(meta, bucket.name)

            conditions = clear_failure_conditions(conditions)
            conditions = set_ready_condition(conditions, True, f"Bucket {bucket.name} is ready")
            self.update_resource_status(patch, meta, {
                "bucketName": bucket.name,
                "policyName": bucket.policy_name,
                "exists": True,
                "lastSyncTime": datetime.now(timezone.utc).isoformat(),
                "conditions": conditions,
            })
            self.log_info(meta, f"Successfully applied desired configuration for bucket {bucket.name}",
                          reason="Reconciled", bucket_name=bucket.name)

    def check_drift(
        self,
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Compare the live bucket with its spec and re-apply when they differ."""
        namespace = meta.get("namespace", "default")
        bucket = self._parse_spec(spec, meta)

        with trace_span("check_drift", kind=KIND_BUCKET, attributes={"bucket.name": bucket.name}):
            service = resolve_instance_service(bucket.instance, namespace)
            drifted = detect_drift(service, bucket)

        if not drifted:
            return

        for resource_type in drifted:
            metrics.drift_detected_total.labels(kind=KIND_BUCKET, resource_type=resource_type).inc()
        self.log_info(meta, f"Drift detected for bucket {bucket.name}: {', '.join(drifted)}",
                      reason="DriftDetected", bucket_name=bucket.name, drifted=drifted)
        emit_drift_detected(meta, bucket.name, drifted)
        self.reconcile(spec, meta, status, patch)


# Global handler instance
_handler = BucketHandler()


@kopf.on.create(API_GROUP_VERSION, KIND_BUCKET)
@kopf.on.update(API_GROUP_VERSION, KIND_BUCKET)
@kopf.on.resume(API_GROUP_VERSION, KIND_BUCKET)
def handle_bucket(
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle MinioBucket reconciliation. Deletion is not supported."""
    _handler.reconcile_with_metrics(meta, lambda: _handler.reconcile(spec, meta, status, patch))


@kopf.timer(
    API_GROUP_VERSION,
    KIND_BUCKET,
    interval=int(os.getenv("DRIFT_CHECK_INTERVAL_SECONDS", "300")),
    initial_delay=int(os.getenv("DRIFT_CHECK_INTERVAL_SECONDS", "300")),
)
def handle_bucket_drift(
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Periodically re-derive the live bucket state and repair drift."""
    _handler.reconcile_with_metrics(meta, lambda: _handler.check_drift(spec, meta, status, patch))
