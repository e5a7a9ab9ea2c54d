"""Kubernetes secret access and bucket user credentials bootstrap."""

from __future__ import annotations

import base64
import logging
import time
from collections.abc import Mapping
from typing import Any

from kubernetes import client

from .. import metrics
from ..constants import (
    CREATED_BY_VALUE,
    LABEL_CREATED_BY,
    SECRET_BUCKET_ACCESS_KEY,
    SECRET_BUCKET_SECRET_KEY,
)
from ..models import MinioUser
from .errors import SecretKeyMissingError, SecretNotFoundError

logger = logging.getLogger(__name__)


class SecretAlreadyExistsError(Exception):
    """A secret with the same name was created concurrently."""


def decode_secret_data(secret: Any) -> dict[str, str]:
    """Decode the base64 values of a V1Secret."""
    data = secret.data or {}
    return {key: base64.b64decode(value).decode("utf-8") for key, value in data.items()}


def read_secret_str(values: Mapping[str, str], name: str, key: str) -> str:
    """Read a value of a decoded secret.

    Raises:
        SecretKeyMissingError: If the key is not present
    """
    if key not in values:
        raise SecretKeyMissingError(name, key)
    return values[key]


class KubernetesSecretStore:
    """Key/value secret store backed by Secrets of one namespace."""

    def __init__(self, core_api: client.CoreV1Api, namespace: str):
        self.core_api = core_api
        self.namespace = namespace

    def get(self, name: str) -> dict[str, str] | None:
        """Read a secret, or None if it does not exist."""
        start_time = time.time()
        try:
            secret = self.core_api.read_namespaced_secret(name=name, namespace=self.namespace)
            metrics.api_call_total.labels(api_type="k8s", operation="get_secret", result="success").inc()
        except client.exceptions.ApiException as e:
            if e.status == 404:
                metrics.api_call_total.labels(api_type="k8s", operation="get_secret", result="not_found").inc()
                return None
            metrics.api_call_total.labels(api_type="k8s", operation="get_secret", result="error").inc()
            raise
        finally:
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation="get_secret").observe(
                time.time() - start_time
            )
        return decode_secret_data(secret)

    def create(self, name: str, values: Mapping[str, str]) -> dict[str, str]:
        """Create a secret made of string key / value pairs.

        Raises:
            SecretAlreadyExistsError: If a secret with this name already exists
        """
        body = client.V1Secret(
            metadata=client.V1ObjectMeta(
                name=name,
                namespace=self.namespace,
                labels={LABEL_CREATED_BY: CREATED_BY_VALUE},
            ),
            string_data=dict(values),
        )
        start_time = time.time()
        try:
            self.core_api.create_namespaced_secret(namespace=self.namespace, body=body)
            metrics.api_call_total.labels(api_type="k8s", operation="create_secret", result="success").inc()
        except client.exceptions.ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation="create_secret", result="error").inc()
            if e.status == 409:
                raise SecretAlreadyExistsError(f"Secret {name} already exists in namespace {self.namespace}") from e
            raise
        finally:
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation="create_secret").observe(
                time.time() - start_time
            )
        return dict(values)

    def require(self, name: str) -> dict[str, str]:
        """Read a secret that must exist.

        Raises:
            SecretNotFoundError: If the secret does not exist
        """
        values = self.get(name)
        if values is None:
            raise SecretNotFoundError(name, self.namespace)
        return values


def get_secret_value(core_api: client.CoreV1Api, namespace: str, name: str, key: str) -> str:
    """Get a single value from a secret.

    Raises:
        SecretNotFoundError: If the secret does not exist
        SecretKeyMissingError: If the key is not present in the secret
    """
    values = KubernetesSecretStore(core_api, namespace).require(name)
    return read_secret_str(values, name, key)


def user_from_secret(values: Mapping[str, str], name: str) -> MinioUser:
    return MinioUser(
        username=read_secret_str(values, name, SECRET_BUCKET_ACCESS_KEY),
        password=read_secret_str(values, name, SECRET_BUCKET_SECRET_KEY),
    )


def get_or_create_bucket_user(store: Any, secret_name: str, bucket_name: str) -> tuple[MinioUser, bool]:
    """Get the user of a bucket, generating and storing it on first use.

    Credentials are generated at most once: an existing secret is always
    reused. When another writer creates the secret between the read and the
    create, its credentials win.

    Args:
        store: Secret store with `get(name)` and `create(name, values)`
        secret_name: Name of the secret holding the bucket user
        bucket_name: Bucket name, for logging

    Returns:
        The user and whether it was created by this call
    """
    values = store.get(secret_name)
    if values is not None:
        return user_from_secret(values, secret_name), False

    logger.info(f"Needs to create the secret {secret_name} for the bucket {bucket_name}")
    new_user = MinioUser.generate()
    try:
        values = store.create(
            secret_name,
            {
                SECRET_BUCKET_ACCESS_KEY: new_user.username,
                SECRET_BUCKET_SECRET_KEY: new_user.password,
            },
        )
    except SecretAlreadyExistsError:
        logger.warning(f"Secret {secret_name} was created concurrently, using the existing credentials")
        values = store.get(secret_name)
        if values is None:
            raise
        return user_from_secret(values, secret_name), False

    metrics.credentials_created_total.inc()
    return user_from_secret(values, secret_name), True
