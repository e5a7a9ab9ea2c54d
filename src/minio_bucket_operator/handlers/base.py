"""Base class for custom resource handlers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

import kopf

from .. import metrics
from ..utils.errors import sanitize_exception
from ..utils.events import emit_reconcile_failed

T = TypeVar("T")


class BaseHandler:
    """Logging, metrics and status helpers shared by handlers."""

    def __init__(self, kind: str):
        self.kind = kind
        self.logger = logging.getLogger(f"minio_bucket_operator.handlers.{kind.lower()}")

    def _log(
        self,
        level: int,
        meta: dict[str, Any],
        message: str,
        error: BaseException | None = None,
        **fields: Any,
    ) -> None:
        extra = {
            "kind": self.kind,
            "namespace": meta.get("namespace"),
            "resource_name": meta.get("name"),
            **fields,
        }
        if error is not None:
            extra["error"] = sanitize_exception(error)
        self.logger.log(level, message, extra=extra)

    def log_info(self, meta: dict[str, Any], message: str, **fields: Any) -> None:
        self._log(logging.INFO, meta, message, **fields)

    def log_warning(self, meta: dict[str, Any], message: str, **fields: Any) -> None:
        self._log(logging.WARNING, meta, message, **fields)

    def log_error(self, meta: dict[str, Any], message: str, error: BaseException | None = None, **fields: Any) -> None:
        self._log(logging.ERROR, meta, message, error=error, **fields)

    def handle_validation_error(self, meta: dict[str, Any], message: str) -> NoReturn:
        """Reject an invalid spec until the resource is changed."""
        self.log_error(meta, f"Invalid spec: {message}", reason="ValidationFailed")
        emit_reconcile_failed(meta, message, kind=self.kind)
        raise kopf.PermanentError(message)

    def update_resource_status(self, patch: kopf.Patch, meta: dict[str, Any], status_data: dict[str, Any]) -> None:
        patch.status.update({**status_data, "observedGeneration": meta.get("generation", 0)})

    def reconcile_with_metrics(self, meta: dict[str, Any], reconcile: Callable[[], T]) -> T:
        """Run a reconciliation, recording its outcome and duration.

        Errors are logged and re-raised so kopf schedules another pass.
        """
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()
        start_time = time.time()
        try:
            result = reconcile()
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
            return result
        except kopf.PermanentError:
            metrics.reconcile_total.labels(kind=self.kind, result="failed").inc()
            raise
        except Exception as e:
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            message = f"Failed to apply desired configuration: {sanitize_exception(e)}"
            self.log_error(meta, message, error=e, reason="ReconcileFailed")
            emit_reconcile_failed(meta, message, kind=self.kind)
            raise
        finally:
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(time.time() - start_time)
