"""Pytest configuration and fixtures for strata tests."""

import pytest

from strata import Environment


@pytest.fixture
def env():
    """Create a basic strata Environment (non-strict, HTML escaping)."""
    return Environment()


@pytest.fixture
def strict_env():
    """Create an Environment whose templates raise on any resolution miss."""
    return Environment(strict=True)


@pytest.fixture
def raw_env():
    """Create an Environment with escaping disabled."""
    return Environment(escape=None)


@pytest.fixture
def user():
    """A small object graph for attribute and call tests."""

    class Address:
        def __init__(self, city: str):
            self.city = city

    class User:
        def __init__(self, name: str, city: str):
            self.name = name
            self.address = Address(city)
            self._password = "hunter2"

        def greet(self, other: str) -> str:
            return f"Hello {other}, I am {self.name}"

        def initials(self) -> str:
            return "".join(part[0] for part in self.name.split())

    return User("Ada Lovelace", "London")


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
