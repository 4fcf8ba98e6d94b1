"""Streaming output -- write straight to any byte sink.

``Template.run()`` writes bytes to an object with ``write()`` as the
document is walked; nothing is buffered except deferred blocks. Here the
sink records every write so the chunks can be inspected.

Run:
    python app.py
"""

import sys

from strata import Template
from strata.nodes import Const, For, Segment, Text, Var


class ChunkSink:
    """Byte sink that keeps every write."""

    def __init__(self) -> None:
        self.chunks: list[bytes] = []

    def write(self, data: bytes) -> int:
        self.chunks.append(bytes(data))
        return len(data)


def rows():
    """A stream: drained once by the loop."""
    yield {"name": "Revenue", "value": "$1.2M"}
    yield {"name": "Users", "value": "45,000"}
    yield {"name": "Churn", "value": "<2%"}


def field(name: str) -> Var:
    return Var(2, (Segment(Const("row")), Segment(Const(name))))


template = Template(
    [
        Text(1, b"<table>\n"),
        For(
            2,
            Var(2, (Segment(Const("rows")),)),
            "row",
            (
                Text(2, b"<tr><td>"),
                Var(2, (Segment(Const("n")),)),
                Text(2, b"</td><td>"),
                field("name"),
                Text(2, b"</td><td>"),
                field("value"),
                Text(2, b"</td></tr>\n"),
            ),
            index="n",
            start=1,
        ),
        Text(3, b"</table>\n"),
    ],
    name="report",
)

sink = ChunkSink()
template.run(sink, {"rows": rows()})
chunks = sink.chunks
output = b"".join(chunks).decode("utf-8")


def main() -> None:
    print(f"Streamed {len(chunks)} writes:\n")
    for i, chunk in enumerate(chunks):
        print(f"[write {i}] {chunk!r}")
    print("\n--- Straight to stdout ---\n")
    template.run(sys.stdout.buffer, {"rows": rows()})
    sys.stdout.flush()


if __name__ == "__main__":
    main()
