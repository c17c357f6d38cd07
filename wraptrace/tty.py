from __future__ import annotations

import re
import sys
import threading
from typing import Any, TextIO

from .trace import StackTrace, extract

ESC = "\x1b["
RESET = f"{ESC}0m"
DIM = f"{ESC}2m"
BOLD = f"{ESC}1m"
MESSAGE = f"{ESC}31m"  # Red for error messages
FUNC = f"{ESC}38;5;153m"  # Light blue (xterm256 LightSkyBlue1) for function names
LOCFN = f"{ESC}32m"  # Green for source file
LOC_LINENO = f"{ESC}90m"  # Dark grey for :lineno

LINE_PREFIX = f"{DIM}│{RESET} "
EOL = f"\n{LINE_PREFIX}"  # End of line: newline, add prefix
SOURCE_INDENT = "    "

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

# Store the original hooks for unload
_original_excepthook = None
_original_threading_excepthook = None


def load() -> None:
    """Print merged traces for all unhandled exceptions.

    Replaces sys.excepthook and threading.excepthook. Call unload() to
    restore the original handlers.
    """
    global _original_excepthook, _original_threading_excepthook

    if _original_excepthook is None:
        _original_excepthook = sys.excepthook

    if _original_threading_excepthook is None:
        _original_threading_excepthook = threading.excepthook

    def _wraptrace_excepthook(exc_type, exc_value, exc_tb):
        try:
            tty_trace(exc_value)
        except Exception:
            # Fall back to original excepthook on any error
            if _original_excepthook:
                _original_excepthook(exc_type, exc_value, exc_tb)
            else:
                sys.__excepthook__(exc_type, exc_value, exc_tb)

    def _wraptrace_threading_excepthook(args):  # pragma: no cover (pytest intercepts)
        try:
            tty_trace(args.exc_value)
        except Exception:
            if _original_threading_excepthook:
                _original_threading_excepthook(args)
            else:
                sys.__excepthook__(args.exc_type, args.exc_value, args.exc_traceback)

    sys.excepthook = _wraptrace_excepthook
    threading.excepthook = _wraptrace_threading_excepthook


def unload() -> None:
    """Restore the exception handlers replaced by load()."""
    global _original_excepthook, _original_threading_excepthook

    if _original_excepthook is not None:
        sys.excepthook = _original_excepthook
        _original_excepthook = None

    if _original_threading_excepthook is not None:
        threading.excepthook = _original_threading_excepthook
        _original_threading_excepthook = None


def tty_trace(
    err: Any = None,
    trace: StackTrace | None = None,
    *,
    file: TextIO | None = None,
    msg: str | None = None,
    function_names: bool = True,
    **extract_args: Any,
) -> None:
    """Print a merged stack trace for terminal output.

    Args:
        err: The error to trace. If None, uses the current exception.
        trace: Pre-extracted trace. If provided, err is ignored.
        file: Output file. Defaults to sys.stderr.
        msg: Optional header line printed before the trace.
        function_names: Show function names above source locations.
        **extract_args: Additional arguments passed to extract().
    """
    if trace is None:
        trace = extract(err or sys.exc_info()[1], **extract_args)

    if file is None:
        file = sys.stderr

    is_tty = file.isatty() if hasattr(file, "isatty") else False

    output = ""
    if msg:
        output += f"{BOLD}{msg.rstrip()}{RESET}\n"
    for kind, text in trace.entries(function_names):
        # Multi-line messages keep the prefix on every line
        lines = [_format_entry(kind, line) for line in text.split("\n")]
        output += LINE_PREFIX + EOL.join(lines) + "\n"
    output += RESET

    if not is_tty:
        # Strip all ANSI escape sequences for non-TTY output
        output = ANSI_ESCAPE_RE.sub("", output)

    file.write(output)


def _format_entry(kind: str, text: str) -> str:
    if kind == "message":
        return f"{MESSAGE}{text}{RESET}"
    if kind == "function":
        return f"{FUNC}{text}{RESET}"
    # Source location, dim the line number
    path, sep, lineno = text.rpartition(":")
    if not sep or not lineno.isdigit():
        return f"{SOURCE_INDENT}{LOCFN}{text}{RESET}"
    return f"{SOURCE_INDENT}{LOCFN}{path}{LOC_LINENO}:{lineno}{RESET}"
