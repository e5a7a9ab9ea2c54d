"""Builders turning custom resource specs into service objects."""
