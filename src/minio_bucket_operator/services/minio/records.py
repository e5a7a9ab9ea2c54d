"""Typed views of the JSON records printed by `mc --json`."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from .errors import MalformedOutput, OperationFailed

STATUS_SUCCESS = "success"


R = TypeVar("R")


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = data[key]
    if not isinstance(value, kind):
        raise TypeError(f"field '{key}' has unexpected type {type(value).__name__}")
    return value


def _optional(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, kind):
        raise TypeError(f"field '{key}' has unexpected type {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ActionResult:
    """Generic record returned by mutating commands."""

    status: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActionResult:
        return cls(status=_require(data, "status", str))

    @property
    def success(self) -> bool:
        return self.status == STATUS_SUCCESS


@dataclass(frozen=True)
class BucketEntry:
    """One entry of `mc ls <alias>`."""

    status: str
    key: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BucketEntry:
        return cls(status=_require(data, "status", str), key=_require(data, "key", str))

    @property
    def bucket_name(self) -> str:
        # Directory entries carry a trailing separator
        return self.key[:-1] if self.key.endswith("/") else self.key


@dataclass(frozen=True)
class VersioningInfo:
    status: str | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VersioningInfo:
        versioning = _optional(data, "versioning", dict)
        if versioning is None:
            return cls(status=None)
        return cls(status=_require(versioning, "status", str))

    @property
    def enabled(self) -> bool:
        return self.status is not None and self.status.lower() == "enabled"


@dataclass(frozen=True)
class AnonymousAccessInfo:
    permission: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnonymousAccessInfo:
        return cls(permission=_require(data, "permission", str))


@dataclass(frozen=True)
class QuotaInfo:
    quota: int | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuotaInfo:
        quota = _optional(data, "quota", int)
        if isinstance(quota, bool):
            raise TypeError("field 'quota' has unexpected type bool")
        return cls(quota=quota)


@dataclass(frozen=True)
class RetentionInfo:
    enabled: str | None
    mode: str | None
    validity: str | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RetentionInfo:
        return cls(
            enabled=_optional(data, "enabled", str),
            mode=_optional(data, "mode", str),
            validity=_optional(data, "validity", str),
        )


@dataclass(frozen=True)
class PolicyListEntry:
    policy: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyListEntry:
        return cls(policy=_require(data, "policy", str))


@dataclass(frozen=True)
class PolicyInfo:
    policy: Any

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyInfo:
        info = _require(data, "policyInfo", dict)
        return cls(policy=info["Policy"])


@dataclass(frozen=True)
class UserListEntry:
    access_key: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserListEntry:
        return cls(access_key=_require(data, "accessKey", str))


@dataclass(frozen=True)
class PolicyEntities:
    """Policies mapped to the queried user, one list per user mapping."""

    user_mappings: list[list[str]] | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyEntities:
        result = _require(data, "result", dict)
        mappings = _optional(result, "userMappings", list)
        if mappings is None:
            return cls(user_mappings=None)

        user_mappings = []
        for mapping in mappings:
            policies = _require(mapping, "policies", list)
            if not all(isinstance(p, str) for p in policies):
                raise TypeError("field 'policies' must only contain strings")
            user_mappings.append(list(policies))
        return cls(user_mappings=user_mappings)


def decode_records(raw: Sequence[dict[str, Any]], record_cls: type[R]) -> list[R]:
    """Decode raw JSON objects into records of the requested type.

    Raises:
        MalformedOutput: If any object does not match the record type. The
            records are attached as `stdout`, one JSON document per line.
    """
    records = []
    for index, item in enumerate(raw):
        try:
            if not isinstance(item, dict):
                raise TypeError(f"expected an object, got {type(item).__name__}")
            records.append(record_cls.from_dict(item))  # type: ignore[attr-defined]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedOutput(
                f"Record {index} is not a valid {record_cls.__name__}: {e}",
                stdout="\n".join(json.dumps(r, default=str) for r in raw),
            ) from e
    return records


def ensure_success(records: Sequence[ActionResult], error_cls: type[OperationFailed], message: str) -> None:
    """Check that the first record of a mutating command reports success.

    Raises:
        error_cls: If there is no record or the first one is not a success
    """
    if not records:
        raise error_cls(f"{message}: command returned no result")
    if not records[0].success:
        raise error_cls(f"{message}: status '{records[0].status}'")


def single_record(records: Sequence[R], command: str) -> R:
    """Return the only record expected from an info command.

    Raises:
        MalformedOutput: If the command returned no record
    """
    if not records:
        raise MalformedOutput(f"'{command}' returned no record")
    return records[0]
