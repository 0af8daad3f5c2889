"""Syndic8 MCP Server - Main entry point."""

import argparse
import logging
import threading
from collections.abc import Callable
from typing import Any

import anyio
from mcp.server.fastmcp import FastMCP

from syndic8_mcp_server import __version__
from syndic8_mcp_server.api.client import Syndic8Client
from syndic8_mcp_server.config import get_settings
from syndic8_mcp_server.exceptions import ConfigurationError, Syndic8Error
from syndic8_mcp_server.tools import directory, subscriptions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("syndic8-mcp")

# Global client instance (initialized lazily)
_client: Syndic8Client | None = None
_client_lock = threading.Lock()


def get_client() -> Syndic8Client:
    """Get or create the Syndic8 API client.

    Returns:
        Initialized Syndic8Client instance.

    Raises:
        ConfigurationError: If only one of username and password is set.
        ClientConnectionError: If the configured endpoint is invalid.
    """
    global _client
    with _client_lock:
        if _client is None:
            settings = get_settings()
            if (settings.syndic8_username is None) != (settings.syndic8_password is None):
                raise ConfigurationError(
                    "SYNDIC8_USERNAME and SYNDIC8_PASSWORD must be set together"
                )
            _client = Syndic8Client(
                username=settings.syndic8_username,
                password=settings.syndic8_password,
                endpoint=settings.syndic8_endpoint,
                timeout=settings.request_timeout,
            )
            _client.max_results = settings.default_max_results
        return _client


async def run_tool(tool: Callable[..., Any], *, as_list: bool = False, **kwargs: Any) -> Any:
    """Run a tool function with the shared client in a worker thread.

    Syndic8 calls block on HTTP, so they stay off the event loop. Client
    setup failures are returned as error payloads like any other tool error.

    Args:
        tool: Tool function taking the client as its first argument
        as_list: Wrap a setup error in a list, for tools that return lists
        **kwargs: Tool arguments

    Returns:
        The tool's result, or an error payload.
    """

    def call() -> Any:
        try:
            client = get_client()
        except Syndic8Error as e:
            logger.error("Failed to initialize Syndic8 client: %s", e)
            error = directory.error_response(e)
            return [error] if as_list else error
        return tool(client, **kwargs)

    return await anyio.to_thread.run_sync(call)


def create_server(host: str = "127.0.0.1", port: int = 8000) -> FastMCP:
    """Create and configure the MCP server with all tools.

    Args:
        host: Host to bind for HTTP mode
        port: Port for HTTP mode

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP("syndic8", host=host, port=port)

    # Register all tools
    @server.tool()
    async def search_feeds(query: str, limit: int = 20) -> list[dict[str, Any]]:
        """Search the Syndic8 feed directory.

        Use this tool to find RSS/Atom feeds about a topic. Each result includes
        the feed's site name, site URL, feed (data) URL, and description.

        Args:
            query: Free-text search string (e.g. "cooking")
            limit: Maximum number of feeds to return (default: 20, -1 for all)

        Returns:
            List of feeds with feed_id and fields
        """
        return await run_tool(directory.search_feeds, as_list=True, query=query, limit=limit)

    @server.tool()
    async def get_feed_info(
        feed_ids: list[str],
        fields: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Get directory records for specific feeds.

        Args:
            feed_ids: Feed IDs (from search_feeds or browse_categories)
            fields: Field names to return (default: sitename, siteurl, dataurl, description)

        Returns:
            One record per feed ID
        """
        return await run_tool(
            directory.get_feed_info, as_list=True, feed_ids=feed_ids, fields=fields
        )

    @server.tool()
    async def get_changed_feeds(start_date: str, end_date: str | None = None) -> list[dict[str, Any]]:
        """List feeds whose directory entry changed within a date range.

        Args:
            start_date: First day, YYYY-MM-DD
            end_date: Last day, YYYY-MM-DD (default: today)

        Returns:
            Records of the changed feeds
        """
        return await run_tool(
            directory.get_changed_feeds, as_list=True, start_date=start_date, end_date=end_date
        )

    @server.tool()
    async def get_directory_stats() -> dict[str, Any]:
        """Get the number of feeds in Syndic8 and the highest feed ID."""
        return await run_tool(directory.get_directory_stats)

    @server.tool()
    async def browse_categories(
        scheme: str | None = None,
        category: str | None = None,
    ) -> dict[str, Any]:
        """Browse Syndic8 category schemes.

        Call without arguments to list schemes, with a scheme to list its root
        categories, and with a scheme and category to list subcategories and
        the feeds filed under it.

        Args:
            scheme: Category scheme (e.g. "NIF")
            category: Category within the scheme (e.g. "Health")
        """
        return await run_tool(directory.browse_categories, scheme=scheme, category=category)

    @server.tool()
    async def get_feed_states() -> dict[str, Any]:
        """Get the feed state codes used by Syndic8 and what they mean."""
        return await run_tool(directory.get_feed_states)

    @server.tool()
    async def ping_site(site_name: str, site_url: str, data_url: str | None = None) -> dict[str, Any]:
        """Notify Syndic8 that a site has new content.

        Args:
            site_name: Name of the site
            site_url: URL of the site
            data_url: Optional URL of the site's feed
        """
        return await run_tool(
            directory.ping_site, site_name=site_name, site_url=site_url, data_url=data_url
        )

    @server.tool()
    async def get_subscription_lists() -> list[dict[str, Any]]:
        """Get your Syndic8 subscription lists (requires credentials)."""
        return await run_tool(subscriptions.get_subscription_lists, as_list=True)

    @server.tool()
    async def get_subscribed_feeds(list_id: int) -> dict[str, Any]:
        """Get the feeds and categories on one of your subscription lists.

        Args:
            list_id: Subscription list ID (0 is your public list)
        """
        return await run_tool(subscriptions.get_subscribed_feeds, list_id=list_id)

    @server.tool()
    async def create_subscription_list(name: str, public: bool = False) -> dict[str, Any]:
        """Create a new subscription list (requires credentials).

        Args:
            name: Name of the list
            public: Whether other users can see the list
        """
        return await run_tool(subscriptions.create_subscription_list, name=name, public=public)

    @server.tool()
    async def subscribe_feed(list_id: int, feed_id: str, auto_suggest: bool = False) -> dict[str, Any]:
        """Add a feed to one of your subscription lists.

        Args:
            list_id: Subscription list ID (0 is your public list)
            feed_id: Feed ID or feed URL
            auto_suggest: Suggest the feed to Syndic8 if the URL is unknown
        """
        return await run_tool(
            subscriptions.subscribe_feed,
            list_id=list_id,
            feed_id=feed_id,
            auto_suggest=auto_suggest,
        )

    @server.tool()
    async def unsubscribe_feed(list_id: int, feed_id: str) -> dict[str, Any]:
        """Remove a feed from one of your subscription lists."""
        return await run_tool(subscriptions.unsubscribe_feed, list_id=list_id, feed_id=feed_id)

    @server.tool()
    async def delete_subscription_list(list_id: int) -> dict[str, Any]:
        """Delete one of your subscription lists and everything on it."""
        return await run_tool(subscriptions.delete_subscription_list, list_id=list_id)

    return server


# Default server instance for module-level access
mcp = create_server()


# =============================================================================
# Entry Point
# =============================================================================


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    CLI arguments override environment variable settings.
    """
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Syndic8 MCP Server - Connect AI applications to the Syndic8 feed directory",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"syndic8-mcp {__version__}",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=settings.mcp_transport,
        help=f"Transport mode (default: {settings.mcp_transport}, env: MCP_TRANSPORT)",
    )
    parser.add_argument(
        "--host",
        default=settings.mcp_host,
        help=f"Host to bind HTTP server (default: {settings.mcp_host}, env: MCP_HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.mcp_port,
        help=f"Port for HTTP server (default: {settings.mcp_port}, env: MCP_PORT)",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Run the Syndic8 MCP server."""
    args = parse_args()

    logger.info("Starting Syndic8 MCP Server v%s", __version__)
    logger.info("Transport: %s", args.transport)

    if args.transport == "stdio":
        mcp.run()
    else:
        server = create_server(host=args.host, port=args.port)
        logger.info("HTTP Server: http://%s:%d", args.host, args.port)
        logger.info("SSE endpoint: http://%s:%d/sse", args.host, args.port)
        server.run(transport="sse")


if __name__ == "__main__":
    main()
