"""
Tests for managed label get-or-create
"""
from unittest.mock import MagicMock

import pytest
from autoreply.label_manager import LabelManager, LabelNotFoundError
from googleapiclient.errors import HttpError

from tests.helpers import make_http_error


class TestEnsureLabel:
    """Test LabelManager.ensure_label"""

    def test_creates_missing_label(self, fake_client):
        label_id = LabelManager(fake_client).ensure_label("Auto Replied")

        assert fake_client.created_labels == ["Auto Replied"]
        assert any(l["id"] == label_id for l in fake_client.labels)

    def test_second_call_returns_same_id(self, fake_client):
        """Second create conflicts and falls back to the existing label"""
        manager = LabelManager(fake_client)

        first = manager.ensure_label("Auto Replied")
        second = manager.ensure_label("Auto Replied")

        assert first == second
        assert fake_client.created_labels == ["Auto Replied"]
        assert [l["name"] for l in fake_client.labels].count("Auto Replied") == 1

    def test_existing_label_reused(self, fake_client):
        fake_client.labels.append({"id": "Label_42", "name": "Auto Replied"})

        assert LabelManager(fake_client).ensure_label("Auto Replied") == "Label_42"
        assert fake_client.created_labels == []

    def test_other_errors_propagate(self):
        client = MagicMock()
        client.create_label.side_effect = make_http_error(403)

        with pytest.raises(HttpError):
            LabelManager(client).ensure_label("Auto Replied")
        client.list_labels.assert_not_called()

    def test_conflict_without_listed_label(self):
        client = MagicMock()
        client.create_label.side_effect = make_http_error(409)
        client.list_labels.return_value = [{"id": "Label_1", "name": "Something Else"}]

        with pytest.raises(LabelNotFoundError):
            LabelManager(client).ensure_label("Auto Replied")
