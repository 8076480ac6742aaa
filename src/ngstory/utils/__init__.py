"""ngstory utility modules."""

from .errors import (
    ErrorCategory,
    ErrorInfo,
    classify_exception,
    error_internal,
    format_error,
    handle_exception,
    is_debug_mode,
    set_debug_mode,
)
from .files import atomic_write_text, detect_indent, dump_json_like

__all__ = [
    # Error handling
    "ErrorCategory",
    "ErrorInfo",
    "format_error",
    "handle_exception",
    "classify_exception",
    "error_internal",
    "set_debug_mode",
    "is_debug_mode",
    # File helpers
    "atomic_write_text",
    "detect_indent",
    "dump_json_like",
]
