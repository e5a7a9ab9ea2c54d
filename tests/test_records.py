"""Tests for typed mc output records."""

import pytest

from minio_bucket_operator.services.minio import MakeBucketFailed, MalformedOutput
from minio_bucket_operator.services.minio.records import (
    ActionResult,
    BucketEntry,
    PolicyEntities,
    PolicyInfo,
    QuotaInfo,
    RetentionInfo,
    UserListEntry,
    VersioningInfo,
    decode_records,
    ensure_success,
    single_record,
)


def test_bucket_entry_strips_trailing_separator():
    entries = decode_records(
        [{"status": "success", "type": "folder", "key": "photos/"}, {"status": "success", "key": "raw"}],
        BucketEntry,
    )
    assert [e.bucket_name for e in entries] == ["photos", "raw"]


@pytest.mark.parametrize(
    "raw,enabled",
    [
        ({"versioning": {"status": "Enabled"}}, True),
        ({"versioning": {"status": "enabled"}}, True),
        ({"versioning": {"status": "Suspended"}}, False),
        ({"op": "info"}, False),
    ],
)
def test_versioning_info(raw, enabled):
    assert decode_records([raw], VersioningInfo)[0].enabled is enabled


def test_quota_info_optional():
    assert decode_records([{"status": "success"}], QuotaInfo)[0].quota is None
    assert decode_records([{"quota": 42300}], QuotaInfo)[0].quota == 42300


def test_quota_info_rejects_bool():
    with pytest.raises(MalformedOutput):
        decode_records([{"quota": True}], QuotaInfo)


def test_retention_info_fields_are_optional():
    info = decode_records([{"status": "success"}], RetentionInfo)[0]
    assert info == RetentionInfo(enabled=None, mode=None, validity=None)


def test_policy_info_keeps_document():
    doc = {"Version": "2012-10-17", "Statement": []}
    assert decode_records([{"policyInfo": {"Policy": doc}}], PolicyInfo)[0].policy == doc


def test_user_list_entry():
    assert decode_records([{"accessKey": "bob", "userStatus": "enabled"}], UserListEntry)[0].access_key == "bob"


def test_policy_entities():
    raw = {"result": {"userMappings": [{"user": "bob", "policies": ["bucket-a", "readonly"]}]}}
    assert decode_records([raw], PolicyEntities)[0].user_mappings == [["bucket-a", "readonly"]]
    assert decode_records([{"result": {}}], PolicyEntities)[0].user_mappings is None


@pytest.mark.parametrize(
    "raw,record_cls",
    [
        ({"key": "a/"}, BucketEntry),
        ({"status": 1}, ActionResult),
        ({"policyInfo": {}}, PolicyInfo),
        ({"result": {"userMappings": [{"policies": [1]}]}}, PolicyEntities),
        ("not an object", ActionResult),
    ],
)
def test_invalid_records_are_malformed(raw, record_cls):
    with pytest.raises(MalformedOutput):
        decode_records([raw], record_cls)


def test_ensure_success():
    ensure_success([ActionResult("success")], MakeBucketFailed, "mb")

    with pytest.raises(MakeBucketFailed, match="no result"):
        ensure_success([], MakeBucketFailed, "mb")
    with pytest.raises(MakeBucketFailed, match="status 'error'"):
        ensure_success([ActionResult("error"), ActionResult("success")], MakeBucketFailed, "mb")


def test_single_record_requires_a_record():
    assert single_record([1, 2], "cmd") == 1
    with pytest.raises(MalformedOutput):
        single_record([], "quota info")


def test_malformed_record_keeps_output():
    with pytest.raises(MalformedOutput) as exc_info:
        decode_records([{"status": "success", "key": "a/"}, {"key": "b/"}], BucketEntry)

    assert exc_info.value.stdout.splitlines() == [
        '{"status": "success", "key": "a/"}',
        '{"key": "b/"}',
    ]
