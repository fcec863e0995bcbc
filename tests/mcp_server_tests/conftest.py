"""Pytest configuration for MCP server tests."""

import pytest


# The mcp package runs on anyio; keep its tests on the asyncio backend
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"
