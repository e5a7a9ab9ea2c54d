"""Kubernetes events emitted for custom resources."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    API_GROUP_VERSION,
    EVENT_REASON_BUCKET_APPLIED,
    EVENT_REASON_CREDENTIALS_CREATED,
    EVENT_REASON_DRIFT_DETECTED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_VALIDATE_SUCCEEDED,
    KIND_BUCKET,
)


def emit_event(meta: dict[str, Any], reason: str, message: str, event_type: str = "Normal", kind: str = KIND_BUCKET) -> None:
    """Post an event attached to the resource described by `meta`."""
    body = {"apiVersion": API_GROUP_VERSION, "kind": kind, "metadata": meta}
    kopf.event(body, type=event_type, reason=reason, message=message)


def emit_validate_succeeded(meta: dict[str, Any], kind: str = KIND_BUCKET) -> None:
    emit_event(meta, EVENT_REASON_VALIDATE_SUCCEEDED, "Spec validated", kind=kind)


def emit_bucket_applied(meta: dict[str, Any], bucket_name: str) -> None:
    emit_event(meta, EVENT_REASON_BUCKET_APPLIED, f"Bucket {bucket_name} configuration applied")


def emit_credentials_created(meta: dict[str, Any], secret_name: str) -> None:
    emit_event(meta, EVENT_REASON_CREDENTIALS_CREATED, f"Generated bucket user credentials in secret {secret_name}")


def emit_drift_detected(meta: dict[str, Any], bucket_name: str, drifted: list[str]) -> None:
    emit_event(
        meta,
        EVENT_REASON_DRIFT_DETECTED,
        f"Bucket {bucket_name} drifted: {', '.join(drifted)}",
        event_type="Warning",
    )


def emit_reconcile_failed(meta: dict[str, Any], message: str, kind: str = KIND_BUCKET) -> None:
    emit_event(meta, EVENT_REASON_RECONCILE_FAILED, message, event_type="Warning", kind=kind)
