"""Shared: request context, telemetry and utilities used across layers."""
