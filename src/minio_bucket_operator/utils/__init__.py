"""Utility functions for the MinIO Bucket Operator."""

from .cache import (
    get_cached_object,
    invalidate_cache,
    make_cache_key,
    set_cached_object,
)
from .conditions import (
    set_apply_failed_condition,
    set_creation_failed_condition,
    set_instance_not_ready_condition,
    set_ready_condition,
    update_condition,
)
from .errors import sanitize_exception
from .events import emit_event
from .secrets import get_or_create_bucket_user, get_secret_value

__all__ = [
    "update_condition",
    "set_ready_condition",
    "set_instance_not_ready_condition",
    "set_creation_failed_condition",
    "set_apply_failed_condition",
    "emit_event",
    "get_secret_value",
    "get_or_create_bucket_user",
    "sanitize_exception",
    "get_cached_object",
    "set_cached_object",
    "invalidate_cache",
    "make_cache_key",
]
