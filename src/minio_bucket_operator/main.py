"""Main entry point for the MinIO Bucket Operator."""

from __future__ import annotations

import os
from typing import Any

import kopf
from prometheus_client import start_http_server

from . import handlers  # noqa: F401
from . import logging as structured_logging


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    # Set up structured JSON logging
    structured_logging.setup_structured_logging()

    # Configure persistence
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = 0
    settings.networking.request_timeout = 30.0
    # One reconciliation at a time
    settings.execution.max_workers = 1

    # Start metrics HTTP server on port 8080
    metrics_port = int(os.getenv("METRICS_PORT", "8080"))
    start_http_server(metrics_port)


def run() -> None:
    """Run the operator, scoped to WATCH_NAMESPACE when set."""
    namespace = os.getenv("WATCH_NAMESPACE")
    if namespace:
        kopf.run(namespaces=[namespace], standalone=True)
    else:
        kopf.run(clusterwide=True, standalone=True)


if __name__ == "__main__":
    run()
