"""Shared: enums, telemetry, and utilities used across layers."""
