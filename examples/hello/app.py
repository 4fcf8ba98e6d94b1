"""Hello World -- the simplest strata example.

Build a two-node document by hand and render it with a context scope.
A parser would normally produce the nodes.

Run:
    python app.py
"""

from strata import Environment
from strata.nodes import Const, Segment, Text, Var

env = Environment()

# Hello, {{ name }}!
template = env.from_nodes(
    [
        Text(1, b"Hello, "),
        Var(1, (Segment(Const("name")),)),
        Text(1, b"!"),
    ],
    name="hello",
)

# Render with context
output = template.render({"name": "World"})


def main() -> None:
    print(output)
    print()

    # Multiple renders with different context; values are HTML-escaped
    for name in ["Strata", "<Python>"]:
        print(template.render({"name": name}))


if __name__ == "__main__":
    main()
