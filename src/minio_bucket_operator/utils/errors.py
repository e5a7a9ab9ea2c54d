"""Error helpers shared by handlers and services."""

from __future__ import annotations

from collections.abc import Iterable

REDACTED = "***"


class LookupFailed(Exception):
    """A resource referenced by a bucket could not be resolved."""


class InstanceNotFoundError(LookupFailed):
    def __init__(self, name: str, namespace: str):
        super().__init__(f"MinioInstance {name} not found in namespace {namespace}")
        self.name = name
        self.namespace = namespace


class SecretNotFoundError(LookupFailed):
    def __init__(self, name: str, namespace: str):
        super().__init__(f"Secret {name} not found in namespace {namespace}")
        self.name = name
        self.namespace = namespace


class SecretKeyMissingError(LookupFailed):
    def __init__(self, name: str, key: str):
        super().__init__(f"The key '{key}' is not present in the secret {name}")
        self.name = name
        self.key = key


def sanitize_text(text: str, secrets: Iterable[str]) -> str:
    """Replace every occurrence of the given secrets in a text."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def sanitize_args(args: Iterable[str], secrets: Iterable[str]) -> list[str]:
    """Return command arguments with secret values redacted."""
    secret_set = {s for s in secrets if s}
    return [REDACTED if arg in secret_set else sanitize_text(arg, secret_set) for arg in args]


def sanitize_exception(e: BaseException, secrets: Iterable[str] = ()) -> str:
    """Render an exception for logs and status conditions without leaking secrets."""
    message = str(e) or type(e).__name__
    return sanitize_text(message, secrets)
