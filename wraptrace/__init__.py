from .chain import dump_errors
from .html import html_trace
from .trace import Frame, StackTrace, extract, render
from .tty import load, tty_trace, unload

__all__ = [
    "extract",
    "render",
    "Frame",
    "StackTrace",
    "dump_errors",
    "tty_trace",
    "html_trace",
    "load",
    "unload",
]
