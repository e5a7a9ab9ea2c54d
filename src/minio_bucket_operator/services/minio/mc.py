"""MinIO admin transport executing the `mc` command line client."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
import time
from collections.abc import Sequence
from typing import Any

from ... import metrics
from ...constants import MC_ALIAS_NAME, MC_DEFAULT_TIMEOUT_SECONDS, MC_EXE
from ...utils.errors import sanitize_args, sanitize_text
from .errors import AuthContextFailed, CommandError, CommandFailed, MalformedOutput

logger = logging.getLogger(__name__)


def temp_dir() -> str | None:
    """Directory where temporary files should be created, if overridden."""
    return os.getenv("TEMP_DIR") or None


def parse_json_lines(stdout: str) -> list[dict[str, Any]]:
    """Decode line-delimited JSON output.

    Raises:
        MalformedOutput: If any non-blank line is not valid JSON
    """
    records = []
    for line in stdout.splitlines():
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise MalformedOutput(f"Invalid JSON line in mc output: {e}", stdout=stdout) from e
    return records


def command_label(args: Sequence[str], alias: str) -> str:
    """Metric label for a command: its leading verbs, without targets or flags.

    `["admin", "policy", "attach", "<alias>", "bucket-b", ...]` gives
    `admin policy attach`.
    """
    verbs = []
    for arg in args:
        if arg.startswith(alias) or arg.startswith("-"):
            break
        verbs.append(arg)
    return " ".join(verbs)


class McTransport:
    """Run `mc` commands against a single MinIO cluster.

    Every call gets its own throwaway config directory holding only the alias
    for this cluster, so concurrent calls never share credentials or state.
    """

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        alias: str = MC_ALIAS_NAME,
        mc_exe: str | None = None,
        timeout: float | None = None,
    ):
        self.endpoint = endpoint
        self.access_key = access_key
        self.secret_key = secret_key
        self.alias = alias
        self.mc_exe = mc_exe or os.getenv("MC_EXE", MC_EXE)
        self.timeout = timeout if timeout is not None else float(
            os.getenv("MC_TIMEOUT_SECONDS", str(MC_DEFAULT_TIMEOUT_SECONDS))
        )

    def __repr__(self) -> str:
        return f"McTransport(endpoint={self.endpoint!r}, access_key={self.access_key!r})"

    def _secrets(self, redact: Sequence[str] = ()) -> tuple[str, ...]:
        return (self.secret_key, *redact)

    def _run(self, config_dir: str, args: list[str]) -> subprocess.CompletedProcess:
        cmd = [self.mc_exe, "--config-dir", config_dir, "--json", *args]
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=self.timeout,
            check=False,
        )

    def _run_checked(
        self,
        config_dir: str,
        args: list[str],
        error_cls: type[CommandError],
        what: str,
        redact: Sequence[str] = (),
    ) -> str:
        secrets = self._secrets(redact)
        safe_args = sanitize_args(args, secrets)
        try:
            res = self._run(config_dir, args)
        except subprocess.TimeoutExpired as e:
            logger.error(f"{what} timed out after {self.timeout}s (args={safe_args})")
            raise error_cls(f"{what} timed out after {self.timeout}s") from e
        except OSError as e:
            logger.error(f"Failed to spawn {self.mc_exe}: {e}")
            raise error_cls(f"Failed to spawn {self.mc_exe}: {e}") from e

        stdout = sanitize_text(res.stdout or "", secrets)
        stderr = sanitize_text(res.stderr or "", secrets)
        if res.returncode != 0:
            logger.error(
                f"{what} failed (status code {res.returncode}, stderr={stderr}, stdout={stdout})",
                extra={"mc_args": safe_args},
            )
            raise error_cls(f"{what} failed with status code {res.returncode}", stdout=stdout, stderr=stderr)

        logger.debug(f"{what} stdout='{stdout}' stderr='{stderr}'", extra={"mc_args": safe_args})
        return res.stdout or ""

    def execute(self, args: list[str], redact: Sequence[str] = ()) -> list[dict[str, Any]]:
        """Set up the alias then run `mc --json <args>`.

        Args:
            args: mc arguments, e.g. ["version", "info", "<alias>/bucket"]
            redact: Values to hide from logs and error details

        Returns:
            The JSON records printed by mc, in order. Empty output gives an
            empty list.

        Raises:
            AuthContextFailed: If the alias could not be configured
            CommandFailed: If the command exits with a non-zero status or times out
            MalformedOutput: If a line of output is not valid JSON
        """
        command = command_label(args, self.alias)
        logger.debug(f"exec mc command with args {sanitize_args(args, self._secrets(redact))}")

        start_time = time.time()
        result = "error"
        try:
            with tempfile.TemporaryDirectory(prefix="mc-", dir=temp_dir()) as config_dir:
                self._run_checked(
                    config_dir,
                    ["alias", "set", self.alias, self.endpoint, self.access_key, self.secret_key],
                    AuthContextFailed,
                    "Configuring mc alias",
                )
                stdout = self._run_checked(config_dir, args, CommandFailed, f"mc {command}", redact)

            if not stdout.strip():
                logger.info(f"mc {command} returned no result")
                records: list[dict[str, Any]] = []
            else:
                try:
                    records = parse_json_lines(stdout)
                except MalformedOutput as e:
                    e.stdout = sanitize_text(e.stdout, self._secrets(redact))
                    logger.error(f"mc {command} printed invalid output: {e.message}")
                    raise
            result = "success"
            return records
        finally:
            metrics.mc_command_total.labels(command=command, result=result).inc()
            metrics.mc_command_duration_seconds.labels(command=command).observe(time.time() - start_time)
