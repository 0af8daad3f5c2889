"""Tests for the MCP tool functions."""

from unittest.mock import MagicMock

import pytest

from syndic8_mcp_server.api.client import Syndic8Client
from syndic8_mcp_server.exceptions import RemoteFault, Syndic8Error, TransportError
from syndic8_mcp_server.tools import directory, subscriptions


@pytest.fixture
def mock_client():
    """Create a mock Syndic8 client."""
    client = MagicMock(spec=Syndic8Client)
    client.keys = ["sitename", "dataurl"]
    return client


class TestErrorResponse:
    def test_remote_fault(self):
        assert directory.error_response(RemoteFault(4, "No such user")) == {
            "error": True,
            "message": "No such user",
            "code": "REMOTE_FAULT",
            "fault_code": 4,
        }

    def test_transport_error(self):
        response = directory.error_response(TransportError("timed out"))
        assert response["code"] == "TRANSPORT_ERROR"
        assert response["message"] == "Error: timed out"

    def test_generic_error(self):
        assert directory.error_response(Syndic8Error("boom"))["code"] == "SYNDIC8_ERROR"


class TestDirectoryTools:
    def test_search_feeds(self, mock_client):
        mock_client.find_feeds.return_value = [11]
        mock_client.feed_info.return_value = [
            {"sitename": "Cooking Daily", "dataurl": "http://e.com/c.rss", "x": 1}
        ]

        result = directory.search_feeds(mock_client, "cooking", limit=5)

        mock_client.find_feeds.assert_called_once_with("cooking", max_results=5)
        mock_client.feed_info.assert_called_once_with([11])
        assert result == [
            {
                "feed_id": "11",
                "fields": {"sitename": "Cooking Daily", "dataurl": "http://e.com/c.rss"},
            }
        ]

    def test_search_feeds_pairs_ids_with_records(self, mock_client):
        mock_client.find_feeds.return_value = [11, 12]
        mock_client.feed_info.return_value = [{"sitename": "A"}, {"sitename": "B"}]

        result = directory.search_feeds(mock_client, "cooking")

        assert [feed["feed_id"] for feed in result] == ["11", "12"]
        assert [feed["fields"]["sitename"] for feed in result] == ["A", "B"]

    def test_search_feeds_no_matches(self, mock_client):
        mock_client.find_feeds.return_value = []
        assert directory.search_feeds(mock_client, "xyzzy") == []
        mock_client.feed_info.assert_not_called()

    def test_search_feeds_fault(self, mock_client):
        mock_client.find_feeds.side_effect = RemoteFault(1, "Bad query")
        result = directory.search_feeds(mock_client, "(")
        assert result[0]["error"] is True
        assert result[0]["code"] == "REMOTE_FAULT"

    def test_get_feed_info_empty(self, mock_client):
        assert directory.get_feed_info(mock_client, []) == []
        mock_client.feed_info.assert_not_called()

    def test_get_feed_info(self, mock_client):
        mock_client.feed_info.return_value = [{"sitename": "x"}]
        assert directory.get_feed_info(mock_client, ["1"], ["sitename"]) == [{"sitename": "x"}]
        mock_client.feed_info.assert_called_once_with(["1"], ["sitename"])

    def test_get_changed_feeds_parses_dates(self, mock_client):
        from datetime import date

        mock_client.changed_feeds.return_value = []
        directory.get_changed_feeds(mock_client, "2004-01-01", "2004-01-31")
        mock_client.changed_feeds.assert_called_once_with(date(2004, 1, 1), date(2004, 1, 31))

    def test_get_changed_feeds_open_ended(self, mock_client):
        from datetime import date

        mock_client.changed_feeds.return_value = []
        directory.get_changed_feeds(mock_client, "2004-01-01")
        mock_client.changed_feeds.assert_called_once_with(date(2004, 1, 1), None)

    def test_get_changed_feeds_bad_date(self, mock_client):
        result = directory.get_changed_feeds(mock_client, "last tuesday")
        assert result[0]["code"] == "INVALID_INPUT"
        mock_client.changed_feeds.assert_not_called()

    def test_get_directory_stats(self, mock_client):
        mock_client.feed_count.return_value = 500
        mock_client.last_feed.return_value = 812
        assert directory.get_directory_stats(mock_client) == {
            "feed_count": 500,
            "last_feed_id": 812,
        }

    def test_get_directory_stats_error(self, mock_client):
        mock_client.feed_count.side_effect = TransportError("HTTP 502")
        assert directory.get_directory_stats(mock_client)["code"] == "TRANSPORT_ERROR"

    def test_browse_categories(self, mock_client):
        mock_client.category_schemes.return_value = ["NIF"]
        mock_client.category_roots.return_value = ["Health"]
        mock_client.category_children.return_value = ["Fitness"]
        mock_client.feeds_in_category.return_value = [1, 2]

        assert directory.browse_categories(mock_client) == {"schemes": ["NIF"]}
        assert directory.browse_categories(mock_client, "NIF") == {
            "scheme": "NIF",
            "categories": ["Health"],
        }
        assert directory.browse_categories(mock_client, "NIF", "Health") == {
            "scheme": "NIF",
            "category": "Health",
            "children": ["Fitness"],
            "feed_ids": [1, 2],
        }

    def test_get_feed_states(self, mock_client):
        mock_client.states.return_value = {"Dead": "Feed is dead"}
        assert directory.get_feed_states(mock_client) == {"Dead": "Feed is dead"}

    def test_get_feed_states_numeric_codes(self, mock_client):
        mock_client.states.return_value = {1: "Syndicated"}
        assert directory.get_feed_states(mock_client) == {"1": "Syndicated"}

    def test_ping_site(self, mock_client):
        mock_client.ping.return_value = {"flerror": False}
        result = directory.ping_site(mock_client, "Pablotron", "http://pablotron.org/")
        assert result == {"success": True, "response": {"flerror": False}}
        mock_client.extended_ping.assert_not_called()

    def test_ping_site_extended(self, mock_client):
        mock_client.extended_ping.return_value = {"flerror": False}
        directory.ping_site(
            mock_client, "Pablotron", "http://pablotron.org/", "http://pablotron.org/rss/"
        )
        mock_client.extended_ping.assert_called_once_with(
            "Pablotron", "http://pablotron.org/", 0, "http://pablotron.org/rss/"
        )


class TestSubscriptionTools:
    def test_get_subscription_lists(self, mock_client):
        mock_client.subscription_lists.return_value = [{"id": 17, "name": "Links"}]
        assert subscriptions.get_subscription_lists(mock_client) == [{"id": 17, "name": "Links"}]

    def test_get_subscription_lists_unauthenticated(self, mock_client):
        mock_client.subscription_lists.side_effect = RemoteFault(2, "Login required")
        result = subscriptions.get_subscription_lists(mock_client)
        assert result == [
            {"error": True, "message": "Login required", "code": "REMOTE_FAULT", "fault_code": 2}
        ]

    def test_get_subscribed_feeds(self, mock_client):
        mock_client.subscribed.return_value = [{"sitename": "x"}]
        mock_client.subscribed_categories.return_value = [{"scheme": "NIF", "category": "PDA"}]

        result = subscriptions.get_subscribed_feeds(mock_client, 17)

        mock_client.subscribed.assert_called_once_with(17, ["sitename", "dataurl"])
        assert result == {
            "list_id": 17,
            "feeds": [{"sitename": "x"}],
            "categories": [{"scheme": "NIF", "category": "PDA"}],
        }

    def test_create_subscription_list(self, mock_client):
        mock_client.create_subscription_list.return_value = 17
        result = subscriptions.create_subscription_list(mock_client, "Links", public=True)
        mock_client.create_subscription_list.assert_called_once_with("Links", True)
        assert result["success"] is True
        assert result["id"] == 17

    def test_subscribe_and_unsubscribe(self, mock_client):
        assert subscriptions.subscribe_feed(mock_client, 0, "42")["success"] is True
        mock_client.subscribe_feed.assert_called_once_with(0, "42", False)
        assert subscriptions.unsubscribe_feed(mock_client, 0, "42")["success"] is True
        mock_client.unsubscribe_feed.assert_called_once_with(0, "42")

    def test_subscribe_feed_error(self, mock_client):
        mock_client.subscribe_feed.side_effect = RemoteFault(3, "No PersonalList option")
        assert subscriptions.subscribe_feed(mock_client, 0, "42")["code"] == "REMOTE_FAULT"

    @pytest.mark.parametrize("deleted", [True, False])
    def test_delete_subscription_list(self, mock_client, deleted):
        mock_client.delete_subscription_list.return_value = deleted
        result = subscriptions.delete_subscription_list(mock_client, 17)
        assert result["success"] is deleted
        assert result["id"] == 17
