"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from string_analyzer.config import Settings
from string_analyzer.main import create_app
from string_analyzer.store import StringStore


@pytest.fixture
def store():
    """Fresh in-memory store for each test."""
    store = StringStore("sqlite://")
    yield store
    store.close()


@pytest.fixture
def client(store):
    """Test client bound to an app that serves the test's store."""
    app = create_app(settings=Settings(), store=store)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def seeded_store(store):
    """Store holding a small mix of palindromes and plain text."""
    for value in ["racecar", "hello", "race car", "A man, a plan, a canal: Panama", "ab", "abcd"]:
        store.insert(value)
    return store
