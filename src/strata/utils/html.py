"""HTML escaping for strata output.

``write_escaped_html`` is the default escape hook: it is handed the sink and
the bytes of an escapable value, and writes them with the five HTML special
characters replaced by entities. Every other byte passes through unchanged
and in order.

``html_escape`` is the text counterpart, for host code that builds strings.

Complexity: O(n) single pass in both cases.

"""

from __future__ import annotations

import re
from typing import Any, Protocol, runtime_checkable

_ESCAPE_BYTES: dict[bytes, bytes] = {
    b"&": b"&amp;",
    b"'": b"&apos;",
    b"<": b"&lt;",
    b">": b"&gt;",
    b'"': b"&quot;",
}

_ESCAPE_RE = re.compile(rb"[&'<>\"]")

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "'": "&apos;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
    }
)


@runtime_checkable
class Sink(Protocol):
    """Append-only byte sink: ``io.BytesIO``, ``sys.stdout.buffer``, ..."""

    def write(self, data: bytes, /) -> Any: ...


def write_escaped_html(sink: Sink, data: bytes) -> None:
    """Write ``data`` to ``sink`` with HTML special characters escaped.

    Unescaped runs between special characters are written as slices of the
    input, so nothing is buffered beyond the current run.

    Example:
        >>> buf = io.BytesIO()
        >>> write_escaped_html(buf, b"a < b & 'c'")
        >>> buf.getvalue()
        b'a &lt; b &amp; &apos;c&apos;'
    """
    last = 0
    for match in _ESCAPE_RE.finditer(data):
        start = match.start()
        if start > last:
            sink.write(data[last:start])
        sink.write(_ESCAPE_BYTES[match.group()])
        last = start + 1
    if last < len(data):
        sink.write(data[last:])


def html_escape(value: Any) -> str:
    """HTML-escape a value converted to text.

    Example:
        >>> html_escape('<a href="x">')
        '&lt;a href=&quot;x&quot;&gt;'
    """
    return str(value).translate(_ESCAPE_TABLE)
