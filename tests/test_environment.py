"""Test Environment configuration in the strata runtime."""

import pytest

from strata import Environment, Template, UndefinedError, write_escaped_html

from .builders import text, var


class TestDefaults:
    def test_defaults(self, env: Environment) -> None:
        assert env.strict is False
        assert env.escape is write_escaped_html
        assert env.globals == {}
        assert env.max_nesting_depth == 50

    def test_from_nodes_applies_settings(self) -> None:
        env = Environment(strict=True, escape=None, max_nesting_depth=7)
        t = env.from_nodes([var("x")], name="page")
        assert isinstance(t, Template)
        assert t.name == "page"
        assert t.strict is True
        assert t.escape is None

    def test_default_escaping(self, env: Environment) -> None:
        assert env.from_nodes([var("x")]).render({"x": "<b>"}) == "&lt;b&gt;"

    def test_escaping_disabled(self, raw_env: Environment) -> None:
        assert raw_env.from_nodes([var("x")]).render({"x": "<b>"}) == "<b>"

    def test_strict_environment(self, strict_env: Environment) -> None:
        with pytest.raises(UndefinedError):
            strict_env.from_nodes([var("x")]).render({})


class TestGlobals:
    def test_globals_are_the_outermost_scope(self) -> None:
        env = Environment(globals={"site": "Example"})
        t = env.from_nodes([var("site"), text(": "), var("title")])
        assert t.render({"title": "Home"}) == "Example: Home"

    def test_context_shadows_globals(self) -> None:
        env = Environment(globals={"title": "default"})
        assert env.from_nodes([var("title")]).render({"title": "mine"}) == "mine"

    def test_global_callable(self) -> None:
        from .builders import call

        env = Environment(globals={"upper": str.upper})
        assert env.from_nodes([var(call("upper", var("name")))]).render({"name": "ann"}) == "ANN"

    def test_add_global(self, env: Environment) -> None:
        env.add_global("site", "S")
        assert env.from_nodes([var("site")]).render() == "S"

    def test_add_global_is_copy_on_write(self, env: Environment) -> None:
        before = env.from_nodes([var("site")])
        old_globals = env.globals
        env.add_global("site", "S")
        assert env.globals is not old_globals
        assert old_globals == {}
        assert before.render() == ""

    def test_globals_are_copied_at_construction(self) -> None:
        source = {"a": 1}
        env = Environment(globals=source)
        source["a"] = 2
        assert env.globals == {"a": 1}


class TestValidation:
    def test_nesting_depth_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="max_nesting_depth"):
            Environment(max_nesting_depth=0)

    def test_escape_must_be_callable(self) -> None:
        with pytest.raises(ValueError, match="escape"):
            Environment(escape="html")

    def test_strict_must_be_bool(self) -> None:
        with pytest.raises(ValueError, match="strict"):
            Environment(strict="yes")
