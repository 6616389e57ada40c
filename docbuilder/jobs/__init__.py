"""Documentation generator jobs."""

from .update_job import UpdateJob

__all__ = ["UpdateJob"]
