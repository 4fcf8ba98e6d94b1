"""Fixtures for strata render benchmarks.

Documents are built once per session; contexts cover the three sizes the
render benchmarks are grouped by.

Run with: pytest benchmarks/ --benchmark-only
"""

from __future__ import annotations

import pytest

from strata import Environment, Template
from strata.nodes import Compare, Const, Defer, For, If, Segment, Text, Var


def path(*steps: object, lineno: int = 1) -> Var:
    return Var(lineno, tuple(Segment(Const(step)) for step in steps))


@pytest.fixture(scope="session")
def env() -> Environment:
    return Environment(globals={"site": {"name": "Bench", "url": "https://example.com"}})


@pytest.fixture(scope="session")
def minimal_template(env: Environment) -> Template:
    return env.from_nodes([Text(1, b"Hello, "), path("name"), Text(1, b"!")], name="minimal")


@pytest.fixture(scope="session")
def list_template(env: Environment) -> Template:
    row = (
        Text(3, b"<li"),
        If(3, path("item", "active"), (Text(3, b' class="on"'),)),
        Text(3, b">"),
        path("n", lineno=3),
        Text(3, b". "),
        path("item", "title", lineno=3),
        If(
            4,
            path("item", "price"),
            (Text(4, b" (sale)"),),
            op=Compare.LT,
            right=Const(10),
        ),
        Text(4, b"</li>\n"),
    )
    return env.from_nodes(
        [
            Defer(1, (Text(1, b"<!-- "), path("site", "name"), Text(1, b" -->\n"))),
            Text(2, b"<ul>\n"),
            For(2, path("items", lineno=2), "item", row, index="n", start=1),
            Text(5, b"</ul>\n"),
        ],
        name="list",
    )


def _items(count: int) -> list[dict[str, object]]:
    return [
        {"title": f"Item <{i}> & co", "price": i % 20, "active": i % 3 == 0}
        for i in range(count)
    ]


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return {"items": _items(10)}


@pytest.fixture(scope="session")
def medium_context() -> dict[str, object]:
    return {"items": _items(100)}


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return {"items": _items(1000)}
