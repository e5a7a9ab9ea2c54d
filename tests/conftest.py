"""
Pytest configuration and fixtures
"""
from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from fake_mc import FakeMc
from minio_bucket_operator.services.minio import MinioService
from minio_bucket_operator.utils.cache import invalidate_cache
from minio_bucket_operator.utils.secrets import SecretAlreadyExistsError


class FakeSecretStore:
    """Dict backed secret store with the create-uniqueness of the API server."""

    def __init__(self, secrets=None):
        self.secrets = dict(secrets or {})
        self.created = []

    def get(self, name):
        values = self.secrets.get(name)
        return dict(values) if values is not None else None

    def create(self, name, values):
        if name in self.secrets:
            raise SecretAlreadyExistsError(name)
        self.secrets[name] = dict(values)
        self.created.append(name)
        return dict(values)

    def require(self, name):
        return self.secrets[name]


# ============================================
# MinIO Fixtures
# ============================================

@pytest.fixture
def fake_mc():
    return FakeMc()


@pytest.fixture
def service(fake_mc):
    return MinioService("http://minio.test:9000", fake_mc)


@pytest.fixture
def secret_store():
    return FakeSecretStore()


# ============================================
# Kubernetes Fixtures
# ============================================

@pytest.fixture
def kopf_patch():
    """Stand-in for kopf.Patch, only the status part is used by handlers."""
    return SimpleNamespace(status={})


@pytest.fixture
def mock_event():
    with patch("kopf.event") as mock:
        yield mock


@pytest.fixture
def bucket_meta():
    return {"name": "my-bucket-cr", "namespace": "default", "generation": 3}


@pytest.fixture
def mock_core_api():
    return MagicMock()


@pytest.fixture(autouse=True)
def clear_instance_cache():
    invalidate_cache()
    yield
    invalidate_cache()


@pytest.fixture
def event_reasons(mock_event):
    """Reasons of the events posted so far, in order."""
    return lambda: [c.kwargs["reason"] for c in mock_event.call_args_list]
