"""Merged stack traces of wrapped error chains.

Every error in a chain may carry its own captured stack. Errors wrapped at
nested call sites share most of their frames, so printing each capture in
full repeats the common ancestors once per error. :func:`extract` merges the
captures so that each error contributes only its unique frames and the
shared ancestors appear once, at the end.

Output of ``str(extract(err))`` for a chain of three errors::

    error C
            path/to/mymodule.py:30
    error B
            path/to/mymodule.py:26
    error A
            path/to/mymodule.py:22
            path/to/mymodule.py:12
            path/to/main.py:4

``format(trace, "+")`` adds the function name of each frame group.
"""

from __future__ import annotations

from collections import namedtuple
from collections.abc import Iterator
from typing import Any

from .chain import FRAME_DELIMITER, frame_text, message, stack_trace, walk
from .logging import logger

__all__ = ["Frame", "StackTrace", "extract", "merge", "parse_frame", "render"]

# Message that produced the frame, function name and "file:line" source
Frame = namedtuple("Frame", ["message", "function", "source"], defaults=[""])

# Prefix of source lines in text output
SOURCE_INDENT = "\t"


class StackTrace(tuple):
    """Frames from innermost (newest) to outermost (oldest).

    Immutable; an empty trace means no frames were captured.
    """

    __slots__ = ()

    def __repr__(self):
        return f"StackTrace({list(self)!r})"

    def entries(self, function_names: bool = False) -> Iterator[tuple[str, str]]:
        """Yield ``(kind, text)`` display items, kind being message, function or source.

        A message is shown when it changes from the previous frame, with the
        inner message stripped if it was appended as ``": inner"``. Function
        names are shown when the message or function changes. Every source
        location is shown.
        """
        prev_msg = ""
        prev_func = ""
        for frame in self:
            if frame.message != prev_msg:
                msg = frame.message
                if msg.endswith(": " + prev_msg):
                    msg = msg[: len(msg) - len(prev_msg) - 2]
                yield "message", msg

            if function_names and (
                frame.message != prev_msg or frame.function != prev_func
            ):
                yield "function", frame.function

            if frame.source:
                yield "source", frame.source

            prev_msg = frame.message
            prev_func = frame.function

    def lines(self, function_names: bool = False) -> list[str]:
        """Text lines of the trace, source lines indented by a tab."""
        return [
            SOURCE_INDENT + text if kind == "source" else text
            for kind, text in self.entries(function_names)
        ]

    def __str__(self):
        return "\n".join(self.lines())

    def __format__(self, format_spec: str) -> str:
        """Format like the error formatting verbs.

        ``""`` and ``"v"`` list frames, ``"+"`` and ``"+v"`` also list
        function names, ``"s"`` gives ``str()``. Anything else gives an
        empty string.
        """
        verbose = format_spec.startswith("+")
        verb = format_spec[1:] if verbose else format_spec
        if verb in ("", "v"):
            return "\n".join(self.lines(function_names=verbose))
        if verb == "s":
            return str(self)
        return ""


def parse_frame(text: str) -> tuple[str, str] | None:
    """Split raw frame text into function name and source location.

    Returns None for text without the delimiter, e.g. a single-line entry.
    """
    parts = text.split(FRAME_DELIMITER)
    if len(parts) < 2:
        return None
    return parts[0], parts[1]


def merge(own: list[Frame], inner: list[Frame]) -> StackTrace:
    """Combine an error's own frames with the trace of the error it wraps.

    The first own frame (in order) that also appears in inner marks where the
    two captures reconverge. Inner is cut just before the first occurrence of
    that frame and own is appended in full.

    Note that the first match wins: an early own frame that happens to match
    a late inner frame cuts inner there even if a later own frame would have
    kept more of it.
    """
    if not inner:
        return StackTrace(own)
    cut = _reconvergence(own, inner)
    if cut is not None:
        inner = inner[:cut]
    return StackTrace([*inner, *own])


def _reconvergence(own: list[Frame], inner: list[Frame]) -> int | None:
    for frame in own:
        for j, other in enumerate(inner):
            if frame.function == other.function and frame.source == other.source:
                return j
    return None


def _own_frames(err: Any, entries: list) -> list[Frame]:
    msg = message(err)
    frames = []
    for entry in entries:
        parsed = parse_frame(frame_text(entry))
        if parsed is None:
            name = type(err).__name__
            logger.debug(f"Skipping unparseable frame of {name}: {entry!r}")
            continue
        frames.append(Frame(msg, *parsed))
    return frames


def extract(err: Any, *, tracebacks: bool = True) -> StackTrace:
    """Extract the merged stack trace of err and the errors it wraps.

    Errors without captured frames are skipped over. With ``tracebacks``
    disabled, native exceptions only count when they define
    ``stack_trace()``.
    """
    trace = StackTrace()
    # Innermost error first, each merged over the trace of those it wraps
    for e in reversed(walk(err)):
        entries = stack_trace(e, tracebacks=tracebacks)
        if entries is None:
            continue
        trace = merge(_own_frames(e, entries), trace)
    return trace


def render(trace: StackTrace, function_names: bool = False) -> str:
    """Render a trace as text, optionally with function names."""
    return "\n".join(trace.lines(function_names))
