"""Tests for the MinioInstance handler."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import kopf
import pytest

from minio_bucket_operator.handlers.instance import handle_instance, instance_check_interval
from minio_bucket_operator.utils.cache import get_cached_object, make_cache_key, set_cached_object
from minio_bucket_operator.utils.errors import SecretNotFoundError

META = {"name": "my-minio", "namespace": "storage", "generation": 1}
BODY = {"spec": {"endpoint": "http://minio.storage:9000", "credentials": "minio-admin"}, "metadata": META}


@pytest.fixture
def mock_create_service():
    with patch("minio_bucket_operator.handlers.instance.get_core_api"), \
            patch("minio_bucket_operator.handlers.instance.create_service_from_instance") as mock:
        mock.return_value = MagicMock(endpoint="http://minio.storage:9000")
        yield mock


def run(kopf_patch, body=BODY, status=None):
    handle_instance(body=body, meta=META, status=status or {}, patch=kopf_patch)


def ready_condition(kopf_patch):
    return next(c for c in kopf_patch.status["conditions"] if c["type"] == "Ready")


def test_reachable_instance(mock_create_service, kopf_patch, mock_event):
    mock_create_service.return_value.is_ready.return_value = True

    run(kopf_patch)

    assert kopf_patch.status["connected"] is True
    assert kopf_patch.status["lastConnectTime"]
    assert ready_condition(kopf_patch)["status"] == "True"


def test_unreachable_instance(mock_create_service, kopf_patch, mock_event):
    mock_create_service.return_value.is_ready.return_value = False

    run(kopf_patch)

    assert kopf_patch.status["connected"] is False
    assert ready_condition(kopf_patch)["status"] == "False"
    assert "not reachable" in ready_condition(kopf_patch)["message"]


def test_missing_credentials(mock_create_service, kopf_patch, mock_event):
    mock_create_service.side_effect = SecretNotFoundError("minio-admin", "storage")

    run(kopf_patch)

    assert kopf_patch.status["connected"] is False
    assert "minio-admin" in ready_condition(kopf_patch)["message"]


def test_invalid_instance(kopf_patch, mock_event):
    with patch("minio_bucket_operator.handlers.instance.get_core_api"):
        with pytest.raises(kopf.PermanentError):
            run(kopf_patch, body={"spec": {"credentials": "minio-admin"}})


def test_update_invalidates_cached_instance(mock_create_service, kopf_patch, mock_event):
    mock_create_service.return_value.is_ready.return_value = True
    key = make_cache_key("MinioInstance", "storage", "my-minio")
    set_cached_object(key, {"spec": {"endpoint": "http://old:9000"}})

    run(kopf_patch)

    assert get_cached_object(key) is None


def test_check_interval_is_independent_of_drift_interval(monkeypatch):
    monkeypatch.setenv("DRIFT_CHECK_INTERVAL_SECONDS", "900")
    monkeypatch.delenv("INSTANCE_CHECK_INTERVAL_SECONDS", raising=False)
    assert instance_check_interval() == 60.0

    monkeypatch.setenv("INSTANCE_CHECK_INTERVAL_SECONDS", "15")
    assert instance_check_interval() == 15.0
