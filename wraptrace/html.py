from __future__ import annotations

import sys
from importlib.resources import files
from typing import Any, cast

from html5tagger import E  # type: ignore[import]

from .trace import StackTrace, extract

style = files(cast(str, __package__)).joinpath("style.css").read_text(encoding="UTF-8")


def html_trace(
    err: Any = None,
    trace: StackTrace | None = None,
    *,
    msg: str | None = None,
    function_names: bool = True,
    include_css: bool = True,
    **extract_args: Any,
) -> Any:
    """Render a merged stack trace as an HTML fragment.

    Each distinct message opens a section; the frames below it list function
    names (when enabled) and source locations. Returns an html5tagger
    document, use str() to get the markup.
    """
    if trace is None:
        trace = extract(err or sys.exc_info()[1], **extract_args)
    with E.div(class_="wraptrace") as doc:
        if include_css:
            doc._style(style)
        if msg:
            doc.h2(msg)
        _render_entries(doc, trace, function_names)
    return doc


def _render_entries(doc: Any, trace: StackTrace, function_names: bool) -> None:
    # Group the display items under the message that introduced them
    sections: list[tuple[str | None, list[tuple[str, str]]]] = [(None, [])]
    for kind, text in trace.entries(function_names):
        if kind == "message":
            sections.append((text, []))
        else:
            sections[-1][1].append((kind, text))

    for message, items in sections:
        if message is None and not items:
            continue
        with doc.div(class_="section"):
            if message is not None:
                doc.h3(message, class_="message")
            if not items:
                continue
            with doc.ul(class_="frames"):
                for kind, text in items:
                    if kind == "function":
                        doc.li(E.span(text, class_="frame-function"))
                    else:
                        doc.li(_source_location(text))


def _source_location(text: str) -> Any:
    path, sep, lineno = text.rpartition(":")
    if sep and lineno.isdigit():
        lineno_span = E.span(f":{lineno}", class_="frame-lineno")
        return E.span(path, lineno_span, class_="frame-location")
    return E.span(text, class_="frame-location")
