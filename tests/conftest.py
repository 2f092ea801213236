"""Shared pytest fixtures for schema_decorators tests."""

from __future__ import annotations

import pytest

from schema_decorators import SchemaRegistry


@pytest.fixture
def registry() -> SchemaRegistry:
    """Isolated registry so classes defined inside a test never leak."""
    return SchemaRegistry()


@pytest.fixture
def log_lines() -> list[str]:
    return []
