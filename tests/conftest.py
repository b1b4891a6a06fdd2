"""Pytest fixtures for middleware tests."""

from typing import List

import pytest

from middleware import Context


@pytest.fixture
def log() -> List[str]:
    """Ordered record of what each middleware did."""
    return []


@pytest.fixture
def ctx() -> Context:
    """Fresh context for a single run."""
    return Context()
