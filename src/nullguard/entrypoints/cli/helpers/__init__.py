"""CLI helpers for NULLGUARD: status-line emitters and option parsers."""

from .log_level_parser import parse_log_level
from .messages import error, success, warn

__all__ = ["error", "parse_log_level", "success", "warn"]
