"""Utility modules."""

from rentdesk.utils.logging import setup_logging
from rentdesk.utils.tracing import MutationTracer

__all__ = ["setup_logging", "MutationTracer"]
