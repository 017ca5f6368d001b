"""Shared: identity context, telemetry, and small utilities."""
