"""Tests for the composition example."""


class TestCompositionApp:
    """Verify templates used as values, loops and deferred output."""

    def test_cards(self, example_app) -> None:
        assert '<div class="card">Lamp</div>' in example_app.output
        assert '<div class="card">Desk &amp; Chair (sold out)</div>' in example_app.output

    def test_globals_reach_nested_templates(self, example_app) -> None:
        assert example_app.output.startswith("<h1>Strata Demo</h1>\n")
        assert "<footer>Strata Demo &middot; 2026</footer>" in example_app.output

    def test_deferred_script_comes_last(self, example_app) -> None:
        assert example_app.output.endswith('<script src="/app.js"></script>\n')

    def test_empty_branch(self, example_app) -> None:
        result = example_app.page.render(
            {"products": [], "card": example_app.card, "footer": None}
        )
        assert result == (
            "<h1>Strata Demo</h1>\n<p>No products</p>\n"
            '<script src="/app.js"></script>\n'
        )
