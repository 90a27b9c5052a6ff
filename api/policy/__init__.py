"""Authorization and mutation rules for bugs."""

from .bug_policy import BugPolicy, can_modify

__all__ = ["BugPolicy", "can_modify"]
