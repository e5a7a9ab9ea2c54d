"""Base MinIO admin transport interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class CommandTransport(Protocol):
    """Protocol for executing admin commands against a MinIO cluster.

    `alias` is the name under which the cluster is addressed in command
    arguments, e.g. `<alias>/<bucket>`.
    """

    alias: str

    def execute(self, args: list[str], redact: Sequence[str] = ()) -> list[dict[str, Any]]:
        """Run one command and return the JSON records it printed, in order.

        Values in `redact` must not appear in logs or error details.
        """
        ...
