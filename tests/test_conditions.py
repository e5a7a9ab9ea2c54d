"""Tests for status condition helpers."""

from minio_bucket_operator.utils.conditions import (
    clear_failure_conditions,
    set_apply_failed_condition,
    set_ready_condition,
    update_condition,
)


def by_type(conditions):
    return {c["type"]: c for c in conditions}


def test_add_condition():
    conditions = update_condition([], "Ready", True, "ReconcileSucceeded", "ok")

    assert conditions == [{
        "type": "Ready",
        "status": "True",
        "reason": "ReconcileSucceeded",
        "message": "ok",
        "lastTransitionTime": conditions[0]["lastTransitionTime"],
    }]


def test_transition_time_kept_while_status_unchanged():
    conditions = [{"type": "Ready", "status": "True", "reason": "x", "message": "", "lastTransitionTime": "earlier"}]

    unchanged = set_ready_condition(conditions, True, "still ready")
    changed = set_ready_condition(conditions, False, "broken")

    assert unchanged[0]["lastTransitionTime"] == "earlier"
    assert unchanged[0]["message"] == "still ready"
    assert changed[0]["lastTransitionTime"] != "earlier"


def test_failure_sets_ready_false():
    conditions = by_type(set_apply_failed_condition([], "quota failed"))

    assert conditions["ApplyFailed"]["status"] == "True"
    assert conditions["Ready"]["status"] == "False"
    assert conditions["Ready"]["message"] == "quota failed"


def test_clear_failure_conditions():
    conditions = clear_failure_conditions(set_apply_failed_condition([], "quota failed"))

    assert by_type(conditions)["ApplyFailed"]["status"] == "False"
    assert "CreationFailed" not in by_type(conditions)
