"""Pytest configuration and fixtures for tagscope tests."""

import pytest

from tagscope import (
    ResolverConfig,
    ScopeResolver,
    TagInvocation,
)


@pytest.fixture
def resolver():
    """Create a ScopeResolver with the default configuration."""
    return ScopeResolver()


@pytest.fixture
def uncached_resolver():
    """Create a ScopeResolver with memoization disabled."""
    return ScopeResolver(config=ResolverConfig(cache_size=0))


@pytest.fixture
def invocation():
    """A tag invocation location for diagnostics."""
    return TagInvocation("c:forEach", template_name="list.jsp", lineno=12, col_offset=4)
