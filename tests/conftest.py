"""
Shared pytest fixtures for the lspstatus test suite.
"""

import pytest

from tests.factories import Recorder, StatusTestFactory


@pytest.fixture
def status_factory():
    """Factory for documents, registries and catalogs."""
    return StatusTestFactory()


@pytest.fixture
def recorder():
    """Callable that counts its invocations; connect it to a Signal."""
    return Recorder()


@pytest.fixture
def python_catalog(status_factory):
    """Catalog with a single Python server."""
    return status_factory.catalog(("Py", ["python"]))
