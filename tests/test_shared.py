"""Tests for handler helpers."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from kubernetes import client

from minio_bucket_operator.handlers.shared import get_instance_with_cache, resolve_instance_service
from minio_bucket_operator.utils.errors import InstanceNotFoundError

INSTANCE = {"spec": {"endpoint": "http://minio:9000", "credentials": "minio-admin"}}


def test_instance_lookup_is_cached():
    api = MagicMock()
    api.get_namespaced_custom_object.return_value = INSTANCE

    assert get_instance_with_cache(api, "my-minio", "default") == INSTANCE
    assert get_instance_with_cache(api, "my-minio", "default") == INSTANCE

    api.get_namespaced_custom_object.assert_called_once_with(
        group="communiquons.org",
        version="v1",
        namespace="default",
        plural="minioinstances",
        name="my-minio",
    )


def test_cache_expires(monkeypatch):
    monkeypatch.setenv("INSTANCE_CACHE_TTL_SECONDS", "-1")
    api = MagicMock()
    api.get_namespaced_custom_object.return_value = INSTANCE

    get_instance_with_cache(api, "my-minio", "default")
    get_instance_with_cache(api, "my-minio", "default")

    assert api.get_namespaced_custom_object.call_count == 2


def test_missing_instance():
    api = MagicMock()
    api.get_namespaced_custom_object.side_effect = client.exceptions.ApiException(status=404)

    with pytest.raises(InstanceNotFoundError, match="my-minio"):
        get_instance_with_cache(api, "my-minio", "default")


def test_api_errors_propagate():
    api = MagicMock()
    api.get_namespaced_custom_object.side_effect = client.exceptions.ApiException(status=403)

    with pytest.raises(client.exceptions.ApiException):
        get_instance_with_cache(api, "my-minio", "default")


def test_resolve_instance_service(mock_core_api):
    api = MagicMock()
    api.get_namespaced_custom_object.return_value = INSTANCE
    mock_core_api.read_namespaced_secret.return_value = MagicMock(
        data={"accessKey": "YWRtaW4=", "secretKey": "YWRtaW5wYXNz"}
    )

    with patch("minio_bucket_operator.handlers.shared.get_k8s_client", return_value=api), \
            patch("minio_bucket_operator.handlers.shared.get_core_api", return_value=mock_core_api):
        service = resolve_instance_service("my-minio", "default")

    assert service.endpoint == "http://minio:9000"
    assert service.transport.access_key == "admin"
    assert service.transport.secret_key == "adminpass"
