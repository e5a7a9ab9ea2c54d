"""Handler for MinioInstance CRD."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any

import kopf

from ..builders.instance import InstanceSpecError, create_service_from_instance
from ..constants import API_GROUP_VERSION, KIND_INSTANCE
from ..tracing import trace_span
from ..utils.cache import invalidate_cache, make_cache_key
from ..utils.conditions import set_ready_condition
from ..utils.errors import LookupFailed
from ..utils.events import emit_validate_succeeded
from ..utils.secrets import KubernetesSecretStore
from .base import BaseHandler
from .shared import get_core_api


def instance_check_interval() -> float:
    """Seconds between two readiness checks of an instance."""
    return float(os.getenv("INSTANCE_CHECK_INTERVAL_SECONDS", "60"))


class InstanceHandler(BaseHandler):
    """Handler for MinioInstance resources.

    Instances are only read by bucket reconciliations; this handler reports
    whether the endpoint answers and the credentials secret is usable.
    """

    def __init__(self):
        super().__init__(KIND_INSTANCE)

    def reconcile(
        self,
        body: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        namespace = meta.get("namespace", "default")
        name = meta.get("name", "unknown")
        conditions = status.get("conditions", [])

        # Buckets must see endpoint or credentials changes right away
        invalidate_cache(make_cache_key(KIND_INSTANCE, namespace, name))

        with trace_span("reconcile_instance", kind=KIND_INSTANCE, attributes={"instance.name": name}):
            try:
                service = create_service_from_instance(dict(body), KubernetesSecretStore(get_core_api(), namespace))
            except InstanceSpecError as e:
                self.handle_validation_error(meta, str(e))
            except LookupFailed as e:
                self.log_warning(meta, f"Instance {name} credentials unavailable: {e}", reason="CredentialsUnavailable")
                self.update_resource_status(patch, meta, {
                    "connected": False,
                    "conditions": set_ready_condition(conditions, False, str(e)),
                })
                return

            emit_validate_succeeded(meta, kind=KIND_INSTANCE)
            connected = service.is_ready()

        message = "Instance is ready" if connected else f"Instance endpoint {service.endpoint} is not reachable"
        self.update_resource_status(patch, meta, {
            "connected": connected,
            "lastConnectTime": datetime.now(timezone.utc).isoformat() if connected else None,
            "conditions": set_ready_condition(conditions, connected, message),
        })
        if connected:
            self.log_info(meta, message, reason="InstanceReady")
        else:
            self.log_warning(meta, message, reason="InstanceNotReady")


_handler = InstanceHandler()


@kopf.on.create(API_GROUP_VERSION, KIND_INSTANCE)
@kopf.on.update(API_GROUP_VERSION, KIND_INSTANCE)
@kopf.on.resume(API_GROUP_VERSION, KIND_INSTANCE)
@kopf.timer(API_GROUP_VERSION, KIND_INSTANCE, interval=instance_check_interval())
def handle_instance(
    body: kopf.Body,
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle MinioInstance reconciliation."""
    _handler.reconcile_with_metrics(meta, lambda: _handler.reconcile(body, meta, status, patch))
