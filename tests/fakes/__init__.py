"""Test doubles for persisted operations tests."""
from .fake_getter import CountingGetter
from .fake_request import FakeRequest

__all__ = ["CountingGetter", "FakeRequest"]
