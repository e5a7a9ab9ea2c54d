"""MinIO administration through the `mc` command line client."""

from .base import CommandTransport
from .drift import detect_drift
from .errors import (
    ApplyPolicyFailed,
    AttachPolicyFailed,
    AuthContextFailed,
    CommandError,
    CommandFailed,
    CreateUserFailed,
    MakeBucketFailed,
    MalformedOutput,
    MinioError,
    OperationFailed,
    SetAnonymousAccessFailed,
    SetQuotaFailed,
    SetRetentionFailed,
    SetVersioningFailed,
)
from .mc import McTransport
from .service import MinioService

__all__ = [
    "CommandTransport",
    "McTransport",
    "MinioService",
    "detect_drift",
    "MinioError",
    "CommandError",
    "AuthContextFailed",
    "CommandFailed",
    "MalformedOutput",
    "OperationFailed",
    "MakeBucketFailed",
    "SetVersioningFailed",
    "SetAnonymousAccessFailed",
    "SetQuotaFailed",
    "SetRetentionFailed",
    "ApplyPolicyFailed",
    "CreateUserFailed",
    "AttachPolicyFailed",
]
