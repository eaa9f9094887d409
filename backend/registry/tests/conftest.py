"""Shared fixtures for registry tests."""

import pytest

from registry.directory.store import ServerDirectory
from registry.tests.helpers import FakeProbe


@pytest.fixture
def directory() -> ServerDirectory:
    return ServerDirectory()


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()
