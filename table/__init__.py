"""Session driver: runs hands end to end against decision providers."""

from .session import HandSummary, TableSession

__all__ = ["HandSummary", "TableSession"]
