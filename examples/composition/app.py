"""Composition -- templates as values, loops and deferred output.

A page template renders a list of cards. Each card is a template used as a
value: ``card`` runs against the loop's scope, ``footer`` is bound to its
own context with ``nested()``. A deferred block appends the script tags
after the rest of the page.

Run:
    python app.py
"""

from strata import Environment
from strata.nodes import Compare, Const, Defer, For, If, Segment, Text, Var


def path(*names: str, lineno: int = 1) -> Var:
    return Var(lineno, tuple(Segment(Const(name)) for name in names))


env = Environment(globals={"site": "Strata Demo"})

# <div class="card">{{ item.name }}{% if item.stock < 1 %} (sold out){% end %}</div>
card = env.from_nodes(
    [
        Text(1, b'<div class="card">'),
        path("item", "name"),
        If(
            1,
            path("item", "stock"),
            (Text(1, b" (sold out)"),),
            op=Compare.LT,
            right=Const(1),
        ),
        Text(1, b"</div>\n"),
    ],
    name="card",
)

# <footer>{{ site }} &middot; {{ year }}</footer>
footer = env.from_nodes(
    [Text(1, b"<footer>"), path("site"), Text(1, b" &middot; "), path("year"), Text(1, b"</footer>\n")],
    name="footer",
)

page = env.from_nodes(
    [
        Defer(1, (Text(1, b'<script src="/app.js"></script>\n'),)),
        Text(2, b"<h1>"),
        path("site", lineno=2),
        Text(2, b"</h1>\n"),
        For(
            3,
            path("products", lineno=3),
            "item",
            (path("card", lineno=4),),
            empty=(Text(5, b"<p>No products</p>\n"),),
        ),
        path("footer", lineno=6),
    ],
    name="page",
)

products = [
    {"name": "Lamp", "stock": 3},
    {"name": "Desk & Chair", "stock": 0},
]

output = page.render(
    {
        "products": products,
        "card": card,
        "footer": footer.nested({"year": 2026}),
    }
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
