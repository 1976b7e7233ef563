# conftest.py - shared fixtures
import difflib
import random

import pytest


def _unified_diff(before: str, after: str) -> str:
    return "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            "a/file",
            "b/file",
        )
    )


@pytest.fixture
def unified_diff():
    """difflib unified diff between two texts, with ---/+++ headers."""
    return _unified_diff


@pytest.fixture
def numbered_text():
    """'line 1' .. 'line n', newline-terminated."""

    def _make(n: int = 20) -> str:
        return "".join(f"line {i}\n" for i in range(1, n + 1))

    return _make


@pytest.fixture
def random_lines():
    """Ten distinct pseudo-random lines, same for every run."""
    rng = random.Random(1234)
    return [f"value_{n} = compute({n})" for n in rng.sample(range(100000), 10)]
