"""Pytest configuration and fixtures for curly tests."""

import pytest

from curly import Environment


@pytest.fixture
def env():
    """Create a basic curly Environment."""
    return Environment()


@pytest.fixture
def env_strict():
    """Create an Environment that raises on unknown helpers and partials."""
    return Environment(strict=True)


@pytest.fixture
def env_raw():
    """Create an Environment with HTML escaping disabled."""
    return Environment(no_escape=True)


@pytest.fixture
def env_with_partials():
    """Create an Environment with a few registered partials."""
    env = Environment()
    env.register_partials(
        {
            "greeting": "hi",
            "user": "{{name}} <{{email}}>",
            "row": "[{{@index}}:{{label}}]",
        }
    )
    return env


def assert_contains(result: str, *expected_parts: str) -> None:
    """Assert rendered output contains all expected parts."""
    for part in expected_parts:
        assert part in result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {result!r}"
        )
