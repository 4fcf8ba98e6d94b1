"""Concurrent render benchmarks: one template, many threads.

Run with: pytest benchmarks/test_benchmark_concurrent.py --benchmark-only
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from pytest_benchmark.fixture import BenchmarkFixture

from strata import Template


@pytest.mark.benchmark(group="concurrent:medium")
@pytest.mark.parametrize("workers", [1, 4, 8])
def test_render_concurrent(
    benchmark: BenchmarkFixture,
    list_template: Template,
    medium_context: dict[str, object],
    workers: int,
) -> None:
    def run() -> list[str]:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda _: list_template.render(medium_context), range(32)))

    results = benchmark(run)
    assert len(set(results)) == 1
