"""Feed directory MCP tools for Syndic8."""

import logging
from datetime import date
from typing import Any

from syndic8_mcp_server.api.client import Syndic8Client
from syndic8_mcp_server.api.models import FeedSummary
from syndic8_mcp_server.exceptions import RemoteFault, Syndic8Error, TransportError

logger = logging.getLogger(__name__)


def error_response(e: Syndic8Error) -> dict[str, Any]:
    """Convert a Syndic8 exception into an MCP error payload."""
    if isinstance(e, RemoteFault):
        return {
            "error": True,
            "message": e.fault_string,
            "code": "REMOTE_FAULT",
            "fault_code": e.fault_code,
        }
    if isinstance(e, TransportError):
        return {"error": True, "message": str(e), "code": "TRANSPORT_ERROR"}
    return {"error": True, "message": str(e), "code": "SYNDIC8_ERROR"}


def search_feeds(
    client: Syndic8Client,
    query: str,
    limit: int = 20,
) -> list[dict[str, Any]]:
    """Search the Syndic8 directory.

    Args:
        client: Syndic8 API client
        query: Free-text search string
        limit: Maximum number of feeds to return (-1 for no limit)

    Returns:
        List of feeds with feed_id and the client's configured fields
    """
    try:
        feed_ids = client.find_feeds(query, max_results=limit)
        if not feed_ids:
            return []
        records = client.feed_info(feed_ids)
        return [
            FeedSummary.from_record(feed_id, record, client.keys).model_dump(mode="json")
            for feed_id, record in zip(feed_ids, records)
        ]
    except Syndic8Error as e:
        logger.error("Failed to search feeds for %r: %s", query, e)
        return [error_response(e)]


def get_feed_info(
    client: Syndic8Client,
    feed_ids: list[str],
    fields: list[str] | None = None,
) -> list[dict[str, Any]]:
    """Get records for specific feeds.

    Args:
        client: Syndic8 API client
        feed_ids: Feed IDs to look up
        fields: Fields to return (default: client's configured fields)

    Returns:
        One raw feed record per ID
    """
    if not feed_ids:
        return []

    try:
        return client.feed_info(feed_ids, fields)
    except Syndic8Error as e:
        logger.error("Failed to get feed info: %s", e)
        return [error_response(e)]


def get_changed_feeds(
    client: Syndic8Client,
    start_date: str,
    end_date: str | None = None,
) -> list[dict[str, Any]]:
    """Get feeds changed within a date range.

    Args:
        client: Syndic8 API client
        start_date: First day, ISO format (YYYY-MM-DD)
        end_date: Last day, ISO format (default: today)

    Returns:
        Records of the feeds that changed
    """
    try:
        start = date.fromisoformat(start_date)
        end = date.fromisoformat(end_date) if end_date else None
    except ValueError as e:
        return [{"error": True, "message": f"Invalid date: {e}", "code": "INVALID_INPUT"}]

    try:
        return client.changed_feeds(start, end)
    except Syndic8Error as e:
        logger.error("Failed to get changed feeds: %s", e)
        return [error_response(e)]


def get_directory_stats(client: Syndic8Client) -> dict[str, Any]:
    """Get the size of the Syndic8 feed table.

    Returns:
        Dict with feed_count and last_feed_id
    """
    try:
        return {
            "feed_count": client.feed_count(),
            "last_feed_id": client.last_feed(),
        }
    except Syndic8Error as e:
        logger.error("Failed to get directory stats: %s", e)
        return error_response(e)


def browse_categories(
    client: Syndic8Client,
    scheme: str | None = None,
    category: str | None = None,
) -> dict[str, Any]:
    """Walk the Syndic8 category schemes.

    Without a scheme, lists the schemes. With a scheme, lists its root
    categories. With a scheme and a category, lists the subcategories and the
    feeds filed under that category.
    """
    try:
        if scheme is None:
            return {"schemes": client.category_schemes()}
        if category is None:
            return {"scheme": scheme, "categories": client.category_roots(scheme)}
        return {
            "scheme": scheme,
            "category": category,
            "children": client.category_children(scheme, category),
            "feed_ids": client.feeds_in_category(scheme, category),
        }
    except Syndic8Error as e:
        logger.error("Failed to browse categories: %s", e)
        return error_response(e)


def get_feed_states(client: Syndic8Client) -> dict[str, Any]:
    """Get the feed state codes and their descriptions."""
    try:
        return {str(code): name for code, name in client.states().items()}
    except Syndic8Error as e:
        logger.error("Failed to get feed states: %s", e)
        return error_response(e)


def ping_site(
    client: Syndic8Client,
    site_name: str,
    site_url: str,
    data_url: str | None = None,
) -> dict[str, Any]:
    """Notify Syndic8 that a site was updated.

    Uses the extended ping when the feed URL is known.

    Returns:
        The service acknowledgement under ``response``
    """
    try:
        if data_url:
            response = client.extended_ping(site_name, site_url, 0, data_url)
        else:
            response = client.ping(site_name, site_url)
        return {"success": True, "response": response}
    except Syndic8Error as e:
        logger.error("Failed to ping %s: %s", site_url, e)
        return error_response(e)
