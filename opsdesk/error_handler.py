"""Outermost error handling for maintenance tasks."""
from typing import Any, Dict, List, Tuple
import logging
import sys

logger = logging.getLogger(__name__)

# Attributes that drivers and transports attach to their exceptions
_DIAGNOSTIC_ATTRS = ("code", "codeName", "smtp_code", "smtp_error", "response", "details", "missing")


def diagnostic_fields(exc: BaseException) -> List[Tuple[str, Any]]:
    fields = []
    for name in _DIAGNOSTIC_ATTRS:
        value = getattr(exc, name, None)
        if value in (None, "", [], {}):
            continue
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        fields.append((name, value))
    return fields


class ErrorHandler:
    def __init__(self, stream=None) -> None:
        self.stream = stream

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> int:
        """Report a failure to the operator and return the process exit code."""
        out = self.stream or sys.stderr
        logger.error("Task failed: %s", exc, exc_info=True)
        print("", file=out)
        print("=" * 60, file=out)
        print(f"❌ {(context or {}).get('task', 'Task')} failed!", file=out)
        print("=" * 60, file=out)
        print(f"Error: {exc}", file=out)
        for name, value in diagnostic_fields(exc):
            print(f"  {name}: {value}", file=out)
        return 1
