# type: ignore
# ruff: noqa
"""Error types and call chains used by the tests.

TracedError captures the stack where it is created, the way error wrapping
libraries do. wrap() wraps an error with a message prefix and a new capture.
"""

import sys
import traceback


class TracedError(Exception):
    def __init__(self, message, cause=None, *, depth=1):
        super().__init__(message)
        self.cause = cause
        # extract_stack lists the outermost call first
        self.frames = list(reversed(traceback.extract_stack(sys._getframe(depth))))

    def unwrap(self):
        return self.cause

    def stack_trace(self):
        return self.frames


class Wrapper(Exception):
    """Wraps an error without capturing any frames."""

    def __init__(self, message, cause):
        super().__init__(message)
        self.cause = cause

    def unwrap(self):
        return self.cause


class RawTraced(Exception):
    """Error with hand-written frame text."""

    def __init__(self, message, entries, cause=None):
        super().__init__(message)
        self.entries = entries
        self.cause = cause

    def unwrap(self):
        return self.cause

    def stack_trace(self):
        return self.entries


class BrokenTracer(Exception):
    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause

    def unwrap(self):
        return self.cause

    def stack_trace(self):
        raise RuntimeError("capture unavailable")


class BrokenStr(RawTraced):
    def __str__(self):
        raise ValueError("no message")


def wrap(err, message):
    return TracedError(f"{message}: {err}", err, depth=2)


def func_a():
    return wrap(func_b(), "error A")


def func_b():
    return wrap(func_c(), "error B")


def func_c():
    return TracedError("error C")


def _raise_value_error():
    raise ValueError("inner problem")


def native_chain():
    try:
        _raise_value_error()
    except ValueError as e:
        raise RuntimeError("outer problem") from e


def native_context():
    try:
        _raise_value_error()
    except ValueError:
        raise RuntimeError("while handling")


def native_suppressed():
    try:
        _raise_value_error()
    except ValueError:
        raise RuntimeError("suppressed") from None
