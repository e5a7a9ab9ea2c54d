"""Status condition helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import (
    COND_APPLY_FAILED,
    COND_CREATION_FAILED,
    COND_INSTANCE_NOT_READY,
    COND_READY,
)


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: bool,
    reason: str,
    message: str,
) -> list[dict[str, Any]]:
    """Return conditions with one condition added or replaced.

    The transition time only moves when the condition status changes.
    """
    status_str = "True" if status else "False"
    now = datetime.now(timezone.utc).isoformat()

    updated = []
    found = False
    for cond in conditions:
        if cond.get("type") != condition_type:
            updated.append(cond)
            continue
        found = True
        transition_time = cond.get("lastTransitionTime", now) if cond.get("status") == status_str else now
        updated.append({
            "type": condition_type,
            "status": status_str,
            "reason": reason,
            "message": message,
            "lastTransitionTime": transition_time,
        })

    if not found:
        updated.append({
            "type": condition_type,
            "status": status_str,
            "reason": reason,
            "message": message,
            "lastTransitionTime": now,
        })
    return updated


def set_ready_condition(conditions: list[dict[str, Any]], ready: bool, message: str) -> list[dict[str, Any]]:
    reason = "ReconcileSucceeded" if ready else "ReconcileFailed"
    return update_condition(conditions, COND_READY, ready, reason, message)


def set_instance_not_ready_condition(conditions: list[dict[str, Any]], message: str) -> list[dict[str, Any]]:
    conditions = update_condition(conditions, COND_INSTANCE_NOT_READY, True, "InstanceNotReady", message)
    return set_ready_condition(conditions, False, message)


def set_creation_failed_condition(conditions: list[dict[str, Any]], message: str) -> list[dict[str, Any]]:
    conditions = update_condition(conditions, COND_CREATION_FAILED, True, "CreationFailed", message)
    return set_ready_condition(conditions, False, message)


def set_apply_failed_condition(conditions: list[dict[str, Any]], message: str) -> list[dict[str, Any]]:
    conditions = update_condition(conditions, COND_APPLY_FAILED, True, "ApplyFailed", message)
    return set_ready_condition(conditions, False, message)


def clear_failure_conditions(conditions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Mark the failure conditions as resolved after a successful pass."""
    for condition_type in (COND_INSTANCE_NOT_READY, COND_CREATION_FAILED, COND_APPLY_FAILED):
        if any(c.get("type") == condition_type for c in conditions):
            conditions = update_condition(conditions, condition_type, False, "Resolved", "")
    return conditions
