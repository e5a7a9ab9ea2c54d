"""Builder for MinIO services from MinioInstance resources."""

from __future__ import annotations

from typing import Any

from ..constants import SECRET_INSTANCE_ACCESS_KEY, SECRET_INSTANCE_SECRET_KEY
from ..services.minio import MinioService
from ..utils.secrets import KubernetesSecretStore, read_secret_str


class InstanceSpecError(ValueError):
    """The MinioInstance custom resource spec is invalid."""


def create_service_from_instance(instance_obj: dict[str, Any], secrets: KubernetesSecretStore) -> MinioService:
    """Create a MinIO service from a MinioInstance object.

    Args:
        instance_obj: MinioInstance custom object
        secrets: Store holding the instance credentials secret

    Raises:
        InstanceSpecError: If endpoint or credentials are missing
        SecretNotFoundError: If the credentials secret does not exist
        SecretKeyMissingError: If a credential key is missing from the secret
    """
    instance_spec = instance_obj.get("spec", {})
    endpoint = instance_spec.get("endpoint")
    credentials = instance_spec.get("credentials")
    if not endpoint:
        raise InstanceSpecError("instance endpoint is required")
    if not credentials:
        raise InstanceSpecError("instance credentials secret is required")

    values = secrets.require(credentials)
    return MinioService.from_credentials(
        endpoint,
        read_secret_str(values, credentials, SECRET_INSTANCE_ACCESS_KEY),
        read_secret_str(values, credentials, SECRET_INSTANCE_SECRET_KEY),
    )
