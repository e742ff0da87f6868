"""
Shared fixtures
"""
import pytest

from tests.helpers import FakeGmailClient


@pytest.fixture
def fake_client():
    return FakeGmailClient()
