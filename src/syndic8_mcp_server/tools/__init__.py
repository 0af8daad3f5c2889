"""MCP tools for Syndic8 operations."""

from syndic8_mcp_server.tools.directory import (
    browse_categories,
    get_changed_feeds,
    get_directory_stats,
    get_feed_info,
    get_feed_states,
    ping_site,
    search_feeds,
)
from syndic8_mcp_server.tools.subscriptions import (
    create_subscription_list,
    delete_subscription_list,
    get_subscribed_feeds,
    get_subscription_lists,
    subscribe_feed,
    unsubscribe_feed,
)

__all__ = [
    "browse_categories",
    "create_subscription_list",
    "delete_subscription_list",
    "get_changed_feeds",
    "get_directory_stats",
    "get_feed_info",
    "get_feed_states",
    "get_subscribed_feeds",
    "get_subscription_lists",
    "ping_site",
    "search_feeds",
    "subscribe_feed",
    "unsubscribe_feed",
]
