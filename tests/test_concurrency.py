"""Tests for running one template from many threads."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from strata import NestingDepthError, Template
from strata.render_context import get_render_context

from .builders import defer, for_, text, var


class TestConcurrentRuns:
    """Templates are immutable; every run keeps its own state."""

    def test_parallel_renders(self) -> None:
        body = [var("x"), text(",")]
        t = Template([text("<"), for_(var("items"), "x", body), defer(var("tag")), text(">")])

        def work(n: int) -> str:
            return t.render({"items": list(range(n)), "tag": f"#{n}"})

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(work, range(50)))

        for n, result in enumerate(results):
            expected = "<" + "".join(f"{i}," for i in range(n)) + f">#{n}"
            assert result == expected

    def test_render_context_is_per_thread(self) -> None:
        seen = []

        def probe_context():
            ctx = get_render_context()
            seen.append(ctx.template_name if ctx else None)
            return ""

        from .builders import call

        pages = [Template([var(call("probe"))], name=f"page{i}") for i in range(8)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(lambda p: p.render({"probe": probe_context}), pages))

        assert sorted(seen) == sorted(f"page{i}" for i in range(8))
        assert get_render_context() is None

    def test_depth_limit_in_threads(self) -> None:
        t = Template([var("self")], max_nesting_depth=3)

        def work(_: int) -> type:
            with pytest.raises(NestingDepthError) as exc_info:
                t.render({"self": t})
            return type(exc_info.value)

        with ThreadPoolExecutor(max_workers=4) as pool:
            assert set(pool.map(work, range(8))) == {NestingDepthError}
