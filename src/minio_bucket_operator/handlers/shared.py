"""Shared utilities for handlers."""

from __future__ import annotations

import time
from typing import Any

from kubernetes import client, config

from .. import metrics
from ..builders.instance import create_service_from_instance
from ..constants import API_GROUP, API_VERSION, KIND_INSTANCE, PLURAL_INSTANCES
from ..services.minio import MinioService
from ..utils.cache import get_cached_object, make_cache_key, set_cached_object
from ..utils.errors import InstanceNotFoundError
from ..utils.secrets import KubernetesSecretStore


def load_k8s_config() -> None:
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client."""
    load_k8s_config()
    return client.CustomObjectsApi()


def get_core_api() -> client.CoreV1Api:
    """Get Kubernetes CoreV1Api client, used for secrets."""
    load_k8s_config()
    return client.CoreV1Api()


def get_instance_with_cache(api: Any, instance_name: str, namespace: str) -> dict[str, Any]:
    """Get MinioInstance custom object with caching.

    Args:
        api: Kubernetes CustomObjectsApi instance
        instance_name: Name of the instance
        namespace: Namespace of the instance

    Returns:
        MinioInstance custom object

    Raises:
        InstanceNotFoundError: If the instance does not exist
        client.exceptions.ApiException: On any other API error
    """
    cache_key = make_cache_key(KIND_INSTANCE, namespace, instance_name)
    cached_instance = get_cached_object(cache_key)

    if cached_instance is not None:
        metrics.api_call_total.labels(api_type="k8s", operation="get_instance", result="cache_hit").inc()
        return cached_instance

    start_time = time.time()
    try:
        instance_obj = api.get_namespaced_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURAL_INSTANCES,
            name=instance_name,
        )
        metrics.api_call_total.labels(api_type="k8s", operation="get_instance", result="success").inc()
        set_cached_object(cache_key, instance_obj)
        return instance_obj
    except client.exceptions.ApiException as e:
        metrics.api_call_total.labels(api_type="k8s", operation="get_instance", result="error").inc()
        if e.status == 404:
            raise InstanceNotFoundError(instance_name, namespace) from e
        raise
    finally:
        duration = time.time() - start_time
        metrics.api_call_duration_seconds.labels(api_type="k8s", operation="get_instance").observe(duration)


def resolve_instance_service(instance_name: str, namespace: str) -> MinioService:
    """Resolve a MinioInstance reference to a service using its admin credentials."""
    instance_obj = get_instance_with_cache(get_k8s_client(), instance_name, namespace)
    return create_service_from_instance(instance_obj, KubernetesSecretStore(get_core_api(), namespace))
