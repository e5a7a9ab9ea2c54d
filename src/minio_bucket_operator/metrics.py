"""Prometheus metrics for the MinIO Bucket Operator."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

reconcile_total = Counter(
    "minio_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "minio_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
)

mc_command_total = Counter(
    "minio_operator_mc_command_total",
    "Total number of mc invocations",
    ["command", "result"],
)

mc_command_duration_seconds = Histogram(
    "minio_operator_mc_command_duration_seconds",
    "Duration of mc invocations in seconds, alias setup included",
    ["command"],
)

api_call_total = Counter(
    "minio_operator_api_call_total",
    "Total number of Kubernetes API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "minio_operator_api_call_duration_seconds",
    "Duration of Kubernetes API calls in seconds",
    ["api_type", "operation"],
)

bucket_operations_total = Counter(
    "minio_operator_bucket_operations_total",
    "Total number of bucket operations",
    ["operation", "result"],
)

drift_detected_total = Counter(
    "minio_operator_drift_detected_total",
    "Total number of drifts detected between desired and live state",
    ["kind", "resource_type"],
)

credentials_created_total = Counter(
    "minio_operator_credentials_created_total",
    "Total number of bucket user credentials generated",
)
