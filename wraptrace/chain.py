"""Access to error chains through the unwrap and stack capture capabilities.

An error takes part in a chain through two optional methods:

- ``unwrap()`` returns the wrapped (inner) error, or None.
- ``stack_trace()`` returns the frames captured for that error, newest call
  first. Each entry is either text in the form ``"function\\n\\tfile:line"``,
  a :class:`traceback.FrameSummary`, or any object whose ``str()`` gives that
  text.

Native Python exceptions without these methods are adapted: the inner error
is ``__cause__`` (or ``__context__`` unless suppressed) and the frames come
from ``__traceback__``. An exception that was never raised has no traceback
and thus no captured frames.
"""

from __future__ import annotations

import sys
import traceback
from traceback import FrameSummary
from typing import Any, TextIO

from .logging import logger

__all__ = [
    "unwrap",
    "stack_trace",
    "has_stack_trace",
    "message",
    "walk",
    "frame_text",
    "dump_errors",
]

# Separator between function name and source location in raw frame text
FRAME_DELIMITER = "\n\t"


def _safe_string(value, what, func=str):
    try:
        return func(value)
    except Exception:
        return f"<{what} {func.__name__}() failed>"


def message(err: Any) -> str:
    """The error's message as shown in the merged trace."""
    return _safe_string(err, "exception")


def unwrap(err: Any) -> Any:
    """Return the error wrapped by err, or None at the end of the chain."""
    if err is None:
        return None
    method = getattr(err, "unwrap", None)
    if callable(method):
        try:
            return method()
        except Exception:
            logger.exception(f"Error unwrapping {type(err).__name__}")
            return None
    if isinstance(err, BaseException):
        return err.__cause__ or None if err.__suppress_context__ else err.__context__
    return None


def has_stack_trace(err: Any, *, tracebacks: bool = True) -> bool:
    """Check whether err exposes captured frames."""
    if callable(getattr(err, "stack_trace", None)):
        return True
    return (
        tracebacks
        and isinstance(err, BaseException)
        and err.__traceback__ is not None
    )


def stack_trace(err: Any, *, tracebacks: bool = True) -> list | None:
    """Return the raw frame entries captured for err, newest call first.

    Returns None when err has no capture capability, which is different
    from an empty capture.
    """
    method = getattr(err, "stack_trace", None)
    if callable(method):
        try:
            return list(method() or ())
        except Exception:
            logger.exception(f"Error extracting stack trace of {type(err).__name__}")
            return None
    if tracebacks and isinstance(err, BaseException) and err.__traceback__:
        # extract_tb lists the outermost call first
        return list(reversed(traceback.extract_tb(err.__traceback__)))
    return None


def frame_text(entry: Any) -> str:
    """Render a raw frame entry as ``"function\\n\\tfile:line"`` text."""
    if isinstance(entry, str):
        return entry
    if isinstance(entry, FrameSummary):
        return f"{entry.name}{FRAME_DELIMITER}{entry.filename}:{entry.lineno}"
    return _safe_string(entry, "frame")


def walk(err: Any) -> list:
    """List the chain from err inwards, outermost first.

    The walk stops at the first error seen twice, which can only happen with
    unusual ``__context__`` cycles.
    """
    chain = []
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        chain.append(err)
        err = unwrap(err)
    return chain


def dump_errors(
    err: Any, indent: int = 0, *, file: TextIO | None = None, tracebacks: bool = True
) -> None:
    """Print the type, capability and message of each error in the chain.

    Each level is indented by one more space than the error wrapping it.
    Useful for finding out why a chain does not merge as expected.
    """
    if file is None:
        file = sys.stdout
    for depth, e in enumerate(walk(err), start=indent):
        tracer = has_stack_trace(e, tracebacks=tracebacks)
        name = type(e).__name__
        print(f"{' ' * depth}({name}; trace={tracer}){message(e)}", file=file)
