"""Tests for strata strict mode.

Strict templates raise for any path that does not resolve. Non-strict
templates (the default) render nothing for it, but only "not found" and
"nil receiver" misses are absorbed:

1. Undefined first segments render nothing / raise UndefinedError
2. Undefined later segments render nothing / raise UndefinedError
3. Lookups into nil render nothing / raise NilReceiverError
4. Wrong arguments and private members raise in both modes
5. Error messages include the path, template name, line and suggestions
"""

from __future__ import annotations

import pytest

from strata import (
    ArgumentMismatchError,
    Environment,
    InaccessibleMemberError,
    NilReceiverError,
    UndefinedError,
)
from strata.environment import terminal

from .builders import call, text, var


class TestUndefinedError:
    """Test UndefinedError behavior in strict mode."""

    def test_undefined_raises_error(self, strict_env: Environment) -> None:
        with pytest.raises(UndefinedError) as exc_info:
            strict_env.from_nodes([var("undefined_var")]).render({})
        assert "undefined_var" in str(exc_info.value)

    def test_error_includes_path(self, strict_env: Environment) -> None:
        with pytest.raises(UndefinedError) as exc_info:
            strict_env.from_nodes([var("user", "email")]).render({"user": {}})
        assert exc_info.value.path == "user.email"

    def test_error_includes_template_name(self, strict_env: Environment) -> None:
        with pytest.raises(UndefinedError) as exc_info:
            strict_env.from_nodes([var("missing", lineno=4)], name="test.html").render({})
        error = exc_info.value
        assert error.template == "test.html"
        assert error.lineno == 4
        assert "test.html:4" in terminal.strip_colors(str(error))

    def test_did_you_mean(self, strict_env: Environment) -> None:
        with pytest.raises(UndefinedError) as exc_info:
            strict_env.from_nodes([var("titl")]).render({"title": "x"})
        assert "Did you mean 'title'?" in terminal.strip_colors(str(exc_info.value))

    def test_no_suggestion_without_close_match(self, strict_env: Environment) -> None:
        with pytest.raises(UndefinedError) as exc_info:
            strict_env.from_nodes([var("zzz")]).render({"title": "x"})
        assert "Did you mean" not in str(exc_info.value)

    def test_defined_variables_work(self, strict_env: Environment) -> None:
        assert strict_env.from_nodes([var("name")]).render({"name": "World"}) == "World"

    def test_none_is_defined(self, strict_env: Environment) -> None:
        assert strict_env.from_nodes([var("v")]).render({"v": None}) == ""


class TestNonStrict:
    """Non-strict templates absorb not-found and nil-receiver misses."""

    def test_undefined_renders_nothing(self, env: Environment) -> None:
        t = env.from_nodes([text("["), var("missing"), text("]")])
        assert t.render({}) == "[]"

    def test_undefined_later_segment(self, env: Environment) -> None:
        assert env.from_nodes([var("user", "email")]).render({"user": {}}) == ""

    def test_nil_receiver(self, env: Environment) -> None:
        assert env.from_nodes([var("user", "name")]).render({"user": None}) == ""

    def test_miss_stops_the_path(self, env: Environment) -> None:
        t = env.from_nodes([var("a", "b", "c", "d")])
        assert t.render({"a": {"b": None}}) == ""


class TestAlwaysRaised:
    """Misses neither mode absorbs."""

    @pytest.mark.parametrize("strict", [False, True])
    def test_argument_mismatch(self, strict: bool, user) -> None:
        t = Environment(strict=strict).from_nodes([var("user", call("initials", "extra"))])
        with pytest.raises(ArgumentMismatchError):
            t.render({"user": user})

    @pytest.mark.parametrize("strict", [False, True])
    def test_inaccessible_member(self, strict: bool, user) -> None:
        t = Environment(strict=strict).from_nodes([var("user", "_password")])
        with pytest.raises(InaccessibleMemberError) as exc_info:
            t.render({"user": user})
        assert "hunter2" not in str(exc_info.value)


class TestNilReceiver:
    """Lookups into nil in strict mode."""

    def test_nil_receiver_error(self, strict_env: Environment) -> None:
        with pytest.raises(NilReceiverError) as exc_info:
            strict_env.from_nodes([var("user", "name")]).render({"user": None})
        assert exc_info.value.path == "user.name"
