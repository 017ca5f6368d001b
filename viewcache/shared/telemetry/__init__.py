"""Telemetry: logging setup and tracing helpers."""

from viewcache.shared.telemetry.logging import setup_logging
from viewcache.shared.telemetry.tracing import add_span_attributes, traced

__all__ = ["add_span_attributes", "setup_logging", "traced"]
