"""Utility modules."""

from .log import Log
from .error import describe_error, first_line

__all__ = ["Log", "describe_error", "first_line"]
