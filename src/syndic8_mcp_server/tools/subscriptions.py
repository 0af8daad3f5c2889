"""Subscription list MCP tools for Syndic8."""

import logging
from typing import Any

from syndic8_mcp_server.api.client import Syndic8Client
from syndic8_mcp_server.api.models import OperationResult
from syndic8_mcp_server.exceptions import Syndic8Error
from syndic8_mcp_server.tools.directory import error_response

logger = logging.getLogger(__name__)


def get_subscription_lists(client: Syndic8Client) -> list[dict[str, Any]]:
    """Get the logged-in user's subscription lists.

    Returns:
        List of lists with id, name, and public/private status
    """
    try:
        return client.subscription_lists()
    except Syndic8Error as e:
        logger.error("Failed to get subscription lists: %s", e)
        return [error_response(e)]


def get_subscribed_feeds(
    client: Syndic8Client,
    list_id: int,
) -> dict[str, Any]:
    """Get feeds and categories on a subscription list.

    Args:
        client: Syndic8 API client
        list_id: Subscription list ID (0 is the public list)

    Returns:
        Dict with the list's feeds and category subscriptions
    """
    try:
        return {
            "list_id": list_id,
            "feeds": client.subscribed(list_id, client.keys),
            "categories": client.subscribed_categories(list_id),
        }
    except Syndic8Error as e:
        logger.error("Failed to get subscriptions of list %s: %s", list_id, e)
        return error_response(e)


def create_subscription_list(
    client: Syndic8Client,
    name: str,
    public: bool = False,
) -> dict[str, Any]:
    """Create a new subscription list.

    Returns:
        Operation result with the new list ID
    """
    try:
        list_id = client.create_subscription_list(name, public)
        return OperationResult(
            success=True,
            message=f"Created subscription list {name!r}",
            id=list_id,
        ).model_dump(mode="json")
    except Syndic8Error as e:
        logger.error("Failed to create subscription list %r: %s", name, e)
        return error_response(e)


def subscribe_feed(
    client: Syndic8Client,
    list_id: int,
    feed_id: str,
    auto_suggest: bool = False,
) -> dict[str, Any]:
    """Add a feed to a subscription list.

    Args:
        client: Syndic8 API client
        list_id: Subscription list ID (0 is the public list)
        feed_id: Feed ID or feed URL
        auto_suggest: Suggest the feed to Syndic8 if the URL is unknown

    Returns:
        Operation result
    """
    try:
        client.subscribe_feed(list_id, feed_id, auto_suggest)
        return OperationResult(
            success=True,
            message=f"Subscribed list {list_id} to feed {feed_id}",
        ).model_dump(mode="json")
    except Syndic8Error as e:
        logger.error("Failed to subscribe list %s to %s: %s", list_id, feed_id, e)
        return error_response(e)


def unsubscribe_feed(
    client: Syndic8Client,
    list_id: int,
    feed_id: str,
) -> dict[str, Any]:
    """Remove a feed from a subscription list."""
    try:
        client.unsubscribe_feed(list_id, feed_id)
        return OperationResult(
            success=True,
            message=f"Unsubscribed list {list_id} from feed {feed_id}",
        ).model_dump(mode="json")
    except Syndic8Error as e:
        logger.error("Failed to unsubscribe list %s from %s: %s", list_id, feed_id, e)
        return error_response(e)


def delete_subscription_list(
    client: Syndic8Client,
    list_id: int,
) -> dict[str, Any]:
    """Delete a subscription list."""
    try:
        deleted = client.delete_subscription_list(list_id)
    except Syndic8Error as e:
        logger.error("Failed to delete subscription list %s: %s", list_id, e)
        return error_response(e)

    if deleted:
        return OperationResult(
            success=True, message=f"Deleted subscription list {list_id}", id=list_id
        ).model_dump(mode="json")
    return OperationResult(
        success=False, message=f"Syndic8 did not delete list {list_id}", id=list_id
    ).model_dump(mode="json")
