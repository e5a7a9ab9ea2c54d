"""Kubernetes operator reconciling MinIO buckets, policies and users."""

__version__ = "0.1.0"
