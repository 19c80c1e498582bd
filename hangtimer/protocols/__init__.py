"""Protocol package."""

from .model import (
    Protocol,
    InvalidProtocolError,
    total_duration,
    estimate_duration,
    format_time,
)
from .catalog import BUILTIN_PROTOCOLS, get_builtin, is_builtin

__all__ = [
    "Protocol",
    "InvalidProtocolError",
    "total_duration",
    "estimate_duration",
    "format_time",
    "BUILTIN_PROTOCOLS",
    "get_builtin",
    "is_builtin",
]
