"""Shared pytest fixtures for diwire-automock tests."""

import pytest
from diwire import Container

from diwire_automock.doubles import MockRepository
from diwire_automock.factory import MockFactory
from diwire_automock.registry import MockRegistry

pytest_plugins = ["diwire_automock.integrations.pytest_plugin"]


@pytest.fixture()
def container() -> Container:
    """Default container; protocol keys resolve only once published."""
    return Container()


@pytest.fixture()
def repository() -> MockRepository:
    return MockRepository()


@pytest.fixture()
def factory(repository: MockRepository) -> MockFactory:
    return MockFactory(repository)


@pytest.fixture()
def registry() -> MockRegistry:
    return MockRegistry()
