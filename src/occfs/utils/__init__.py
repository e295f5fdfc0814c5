"""Utilities shared across OccFS: debug tracing and logging setup."""
