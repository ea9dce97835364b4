"""Shared fixtures for the flexobject test-suite."""

from typing import List

import pytest

from models import Car, TestObject


@pytest.fixture
def test_object():
    return TestObject()


@pytest.fixture
def car():
    return Car()


@pytest.fixture
def recorder():
    """Callable that records every property name it is notified with."""

    class Recorder:
        def __init__(self):
            self.names: List[str] = []

        def __call__(self, name: str) -> None:
            self.names.append(name)

    return Recorder()
