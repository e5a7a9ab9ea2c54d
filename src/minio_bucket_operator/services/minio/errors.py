"""Errors raised while driving the MinIO admin client."""

from __future__ import annotations


class MinioError(Exception):
    """Base class for MinIO administration errors."""

    def __init__(self, message: str, stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.message = message
        self.stdout = stdout
        self.stderr = stderr


class CommandError(MinioError):
    """The admin client could not be run or its output could not be read."""


class AuthContextFailed(CommandError):
    """Setting the mc alias for the call failed."""


class CommandFailed(CommandError):
    """The mc command exited with a non-zero status or timed out."""


class MalformedOutput(CommandError):
    """The mc command produced output that does not match the expected records."""


class OperationFailed(MinioError):
    """The command ran but did not report success."""


class MakeBucketFailed(OperationFailed):
    pass


class SetVersioningFailed(OperationFailed):
    pass


class SetAnonymousAccessFailed(OperationFailed):
    pass


class SetQuotaFailed(OperationFailed):
    pass


class SetRetentionFailed(OperationFailed):
    pass


class ApplyPolicyFailed(OperationFailed):
    pass


class CreateUserFailed(OperationFailed):
    pass


class AttachPolicyFailed(OperationFailed):
    pass
