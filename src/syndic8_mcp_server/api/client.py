"""Syndic8 XML-RPC API client."""

import hashlib
import logging
import xmlrpc.client
from datetime import date
from types import TracebackType
from typing import Any
from xml.parsers.expat import ExpatError

import httpx
from pydantic import TypeAdapter, ValidationError

from syndic8_mcp_server import __version__
from syndic8_mcp_server.api.models import FeedRecord, FeedState, QueryOperator, Toolkit
from syndic8_mcp_server.exceptions import ClientConnectionError, RemoteFault, TransportError

logger = logging.getLogger(__name__)

# Syndic8 XML-RPC endpoint
SYNDIC8_HOST = "www.syndic8.com"
SYNDIC8_PATH = "/xmlrpc.php"
SYNDIC8_PORT = 80
DEFAULT_ENDPOINT = f"http://{SYNDIC8_HOST}:{SYNDIC8_PORT}{SYNDIC8_PATH}"

# Methods without a namespace are looked up under this one
NAMESPACE = "syndic8"

DEFAULT_KEYS = ["sitename", "siteurl", "dataurl", "description"]
DEFAULT_SORT_FIELD = "sitename"
UNLIMITED = -1

DATE_FORMAT = "%Y-%m-%d"

_feed_states = TypeAdapter(list[FeedState])
_toolkits = TypeAdapter(list[Toolkit])


def hash_password(password: str) -> str:
    """Hash a password the way Syndic8 expects it (hex MD5)."""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


class Syndic8Client:
    """Synchronous client for the Syndic8 XML-RPC interface.

    The username and password are optional and only needed for the
    authenticated methods (subscription lists, categorization, user
    management). The service enforces authorization; the client forwards
    whatever credentials it holds.

    ``keys``, ``max_results`` and ``sort_field`` may be changed between calls
    and are read each time a method needs them.
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: int = 30,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the Syndic8 client.

        Args:
            username: Syndic8 user ID
            password: Syndic8 password, hashed immediately and never stored
            endpoint: XML-RPC endpoint URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``)

        Raises:
            ClientConnectionError: If the endpoint is invalid or the HTTP
                client cannot be created.
        """
        self.username = username
        self.password_hash = hash_password(password) if password is not None else None

        self.keys: list[str] = list(DEFAULT_KEYS)
        self.max_results: int = UNLIMITED
        self.sort_field: str = DEFAULT_SORT_FIELD

        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL as e:
            raise ClientConnectionError(f"Invalid endpoint {endpoint!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ClientConnectionError(f"Invalid endpoint {endpoint!r}")

        self.endpoint = url
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "text/xml",
                "User-Agent": f"syndic8-mcp/{__version__}",
            },
        )
        logger.info("Syndic8 client initialized for %s", self.endpoint)

    def __enter__(self) -> "Syndic8Client":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()

    # =========================================================================
    # Call Primitive
    # =========================================================================

    def _call(self, method: str, *args: Any) -> Any:
        """Call a remote method and return its decoded result.

        Args:
            method: Method name; prefixed with ``syndic8.`` unless it already
                contains a namespace
            *args: Positional XML-RPC parameters

        Returns:
            The decoded result value, unchanged.

        Raises:
            RemoteFault: If the service returns an XML-RPC fault.
            TransportError: If the request fails or the response is not a
                valid XML-RPC response.
        """
        method_name = method if "." in method else f"{NAMESPACE}.{method}"
        payload = xmlrpc.client.dumps(args, method_name, allow_none=True)
        logger.debug("Calling %s with %d argument(s)", method_name, len(args))

        try:
            response = self._client.post(self.endpoint, content=payload.encode("utf-8"))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(f"HTTP {e.response.status_code} from {method_name}") from e
        except httpx.HTTPError as e:
            raise TransportError(str(e)) from e

        try:
            params, _ = xmlrpc.client.loads(response.content)
        except xmlrpc.client.Fault as e:
            raise RemoteFault(e.faultCode, e.faultString) from e
        except (ExpatError, xmlrpc.client.ResponseError, ValueError, TypeError) as e:
            raise TransportError(f"Malformed response from {method_name}: {e}") from e

        if not params:
            raise TransportError(f"Empty response from {method_name}")
        return params[0]

    def _credentials(self) -> tuple[str | None, str | None]:
        return self.username, self.password_hash

    @staticmethod
    def _as_int(value: Any, method: str) -> int:
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise TransportError(f"Expected an integer from {method}, got {value!r}") from e

    # =========================================================================
    # Search
    # =========================================================================

    def find(self, query: str) -> list[FeedRecord]:
        """Search feeds and return their records.

        Runs FindFeeds sorted by ``sort_field`` and capped at ``max_results``,
        then fetches ``keys`` for every match with GetFeedInfo.

        Args:
            query: Free-text search string

        Returns:
            List of feed records, or an empty list if nothing matched.

        Raises:
            Syndic8Error: If either call fails.
        """
        feed_ids = self._call("FindFeeds", query, self.sort_field, self.max_results)
        if not feed_ids:
            return []
        return self._call("GetFeedInfo", feed_ids, self.keys)

    def find_feeds(
        self,
        query: str,
        sort_field: str | None = None,
        max_results: int | None = None,
    ) -> list[Any]:
        """Return IDs of feeds matching ``query``.

        Args:
            query: Free-text search string
            sort_field: Field to sort by (default: ``sort_field``)
            max_results: Result cap (default: ``max_results``, -1 for no cap)

        Returns:
            List of feed IDs.
        """
        if sort_field is None:
            sort_field = self.sort_field
        if max_results is None:
            max_results = self.max_results
        return self._call("FindFeeds", query, sort_field, max_results)

    def find_sites(self, query: str) -> list[Any]:
        """Return IDs of feeds whose SiteURL matches ``query``."""
        return self._call("FindSites", query)

    def find_users(self, query: str) -> list[Any]:
        """Return IDs of users whose text fields match ``query``."""
        return self._call("FindUsers", query)

    def query_feeds(
        self,
        match_field: str,
        operator: QueryOperator,
        value: Any,
        sort_field: str | None = None,
    ) -> list[Any]:
        """Return IDs of feeds whose ``match_field`` relates to ``value``.

        Args:
            match_field: Feed field to test
            operator: One of ``<, >, <=, >=, !=, =, like, regexp``
            value: Value to compare against
            sort_field: Field to sort by (default: ``sort_field``)

        Returns:
            List of feed IDs.
        """
        if sort_field is None:
            sort_field = self.sort_field
        return self._call("QueryFeeds", match_field, operator, value, sort_field)

    # =========================================================================
    # Categories
    # =========================================================================

    def category_schemes(self) -> list[str]:
        """Return the supported category schemes."""
        return self._call("GetCategorySchemes")

    def category_roots(self, scheme: str) -> list[str]:
        """Return the top-level category names of ``scheme``."""
        return self._call("GetCategoryRoots", scheme)

    def category_tree(self, scheme: str) -> Any:
        """Return every known category of ``scheme``."""
        return self._call("GetCategoryTree", scheme)

    def category_children(self, scheme: str, category: str) -> list[str]:
        """Return the immediate children of ``category``."""
        return self._call("GetCategoryChildren", scheme, category)

    def feeds_in_category(self, scheme: str, category: str) -> list[Any]:
        """Return IDs of the feeds filed under ``category`` in ``scheme``."""
        return self._call("GetFeedsInCategory", scheme, category)

    # =========================================================================
    # Feeds
    # =========================================================================

    def changed_feeds(
        self,
        start_date: date,
        end_date: date | None = None,
        check_fields: list[str] | None = None,
        ret_fields: list[str] | None = None,
    ) -> list[FeedRecord]:
        """Return feeds where a checked field changed between two dates.

        Args:
            start_date: First day of the change window
            end_date: Last day of the window (default: today)
            check_fields: Fields to check for changes (default: every field
                reported by GetFeedFields)
            ret_fields: Fields to return for each feed (default: ``keys``)

        Returns:
            List of feed records.

        Raises:
            Syndic8Error: If a call fails.
        """
        start_str = start_date.strftime(DATE_FORMAT)
        end_str = (end_date or date.today()).strftime(DATE_FORMAT)
        if check_fields is None:
            check_fields = self.fields()
        if ret_fields is None:
            ret_fields = self.keys

        return self._call("GetChangedFeeds", check_fields, start_str, end_str, ret_fields)

    def feed_count(self) -> int:
        """Return the number of feeds in the Syndic8 feed table."""
        return self._as_int(self._call("GetFeedCount"), "GetFeedCount")

    size = feed_count

    def fields(self) -> list[str]:
        """Return the feed field names known to Syndic8."""
        return self._call("GetFeedFields")

    def feed_info(self, feed_ids: list[Any], fields: list[str] | None = None) -> list[FeedRecord]:
        """Return one record per feed ID.

        Args:
            feed_ids: Feed IDs to look up
            fields: Fields to return (default: ``keys``)

        Returns:
            List of feed records.
        """
        if fields is None:
            fields = self.keys
        return self._call("GetFeedInfo", feed_ids, fields)

    def last_feed(self) -> Any:
        """Return the highest assigned feed ID."""
        return self._call("GetLastFeed")

    # =========================================================================
    # Lookup Tables
    # =========================================================================

    def states(self) -> dict[str | int, str]:
        """Return a mapping of feed state codes to descriptions.

        Raises:
            TransportError: If the rows lack ``state`` or ``name``.
        """
        rows = self._call("GetFeedStates")
        try:
            states = _feed_states.validate_python(rows)
        except ValidationError as e:
            raise TransportError(f"Unexpected GetFeedStates response: {e}") from e
        return {row.state: row.name for row in states}

    def toolkits(self) -> dict[str | int, str]:
        """Return a mapping of toolkit IDs to names.

        Raises:
            TransportError: If the rows lack ``id`` or ``name``.
        """
        rows = self._call("GetToolkits")
        try:
            toolkits = _toolkits.validate_python(rows)
        except ValidationError as e:
            raise TransportError(f"Unexpected GetToolkits response: {e}") from e
        return {row.id: row.name for row in toolkits}

    def licenses(self) -> list[dict[str, Any]]:
        return self._call("GetLicenses")

    def location_schemes(self) -> list[str]:
        return self._call("GetLocationSchemes")

    def user_info(self, user_id: str) -> dict[str, Any]:
        """Return the users-table record of ``user_id``."""
        return self._call("GetUserInfo", user_id)

    # =========================================================================
    # Editing (Categorizer / Editor roles)
    # =========================================================================

    def set_feed_category(self, feed_id: Any, scheme: str, category: str) -> Any:
        """Set a feed's category within ``scheme``. Requires the Categorizer role."""
        return self._call("SetFeedCategory", *self._credentials(), feed_id, scheme, category)

    def set_feed_location(self, feed_id: Any, scheme: str, location: str) -> Any:
        """Set a feed's location within ``scheme``. Requires the Categorizer role."""
        return self._call("SetFeedLocation", *self._credentials(), feed_id, scheme, location)

    def set_user_location(self, user_id: str, location: str) -> Any:
        """Set a user's location. Requires the Editor role."""
        return self._call("SetUserLocation", *self._credentials(), user_id, location)

    def suggest_data_url(self, data_url: str) -> Any:
        """Register ``data_url`` as a feed unless known; return its feed ID."""
        return self._call("SuggestDataURL", data_url, self.username)

    def suggest_site_url(self, site_url: str) -> Any:
        """Register ``site_url`` as a feed unless known; return its feed ID."""
        return self._call("SuggestSiteURL", site_url, self.username)

    # =========================================================================
    # Weblog Ping Service
    # =========================================================================

    def ping(self, site_name: str, site_url: str) -> Any:
        """Notify Syndic8 that ``site_url`` changed."""
        return self._call("weblogUpdates.Ping", site_name, site_url)

    def extended_ping(self, site_name: str, site_url: str, unused: Any, data_url: str) -> Any:
        """Notify Syndic8 that ``site_url`` and its feed at ``data_url`` changed."""
        return self._call("weblogUpdates.ExtendedPing", site_name, site_url, unused, data_url)

    # =========================================================================
    # Users
    # =========================================================================

    def create_user(
        self,
        user_id: str,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        roles: str,
        options: str,
        email_site_info: bool,
        home_page: str,
        style_sheet: str,
        vcard: str,
    ) -> bool:
        """Create a Syndic8 user. Requires the CreateUser option.

        Returns:
            True if the service reports success.
        """
        result = self._call(
            "CreateUser",
            *self._credentials(),
            user_id,
            first_name,
            last_name,
            email,
            password,
            roles,
            options,
            email_site_info,
            home_page,
            style_sheet,
            vcard,
        )
        return self._as_int(result, "CreateUser") == 1

    # =========================================================================
    # Subscription Lists (PersonalList option)
    # =========================================================================

    def create_subscription_list(self, list_name: str, public: bool = False) -> int:
        """Create a subscription list and return its ID.

        Args:
            list_name: Name of the new list
            public: Whether the list is visible to other users

        Returns:
            New list ID.
        """
        result = self._call("CreateSubscriptionList", *self._credentials(), list_name, public)
        return self._as_int(result, "CreateSubscriptionList")

    def create_subscription_list_from_html(
        self, list_name: str, public: bool, html_url: str, auto_suggest: bool
    ) -> list[dict[str, Any]]:
        """Create a list holding the feeds referenced by an HTML page.

        Returns:
            One status record per feed found on the page.
        """
        return self._call(
            "CreateSubscriptionListFromHTML",
            *self._credentials(),
            list_name,
            public,
            html_url,
            auto_suggest,
        )

    def create_subscription_list_from_opml(
        self, list_name: str, public: bool, opml_url: str, auto_suggest: bool
    ) -> list[dict[str, Any]]:
        """Create a list holding the feeds of an OPML document.

        Returns:
            One status record per OPML outline.
        """
        return self._call(
            "CreateSubscriptionListFromOPML",
            *self._credentials(),
            list_name,
            public,
            opml_url,
            auto_suggest,
        )

    def delete_subscription_list(self, list_id: int) -> bool:
        """Delete a subscription list and everything on it."""
        result = self._call("DeleteSubscriptionList", *self._credentials(), list_id)
        return self._as_int(result, "DeleteSubscriptionList") == 1

    def subscribed(self, list_id: int, field_names: list[str] | None = None) -> list[FeedRecord]:
        """Return feeds on a list, whether subscribed directly or by category."""
        return self._call("GetSubscribed", *self._credentials(), list_id, field_names)

    def subscribed_categories(self, list_id: int) -> list[dict[str, Any]]:
        """Return the scheme/category pairs a list is subscribed to."""
        return self._call("GetSubscribedCategories", *self._credentials(), list_id)

    def subscription_lists(self) -> list[dict[str, Any]]:
        """Return the user's subscription lists (id, name, public/private)."""
        return self._call("GetSubscriptionLists", *self._credentials())

    def set_subscription_list_info(self, list_id: int, new_values: dict[str, Any]) -> Any:
        """Update stored values (name, public, ...) of a list."""
        return self._call("SetSubscriptionListInfo", *self._credentials(), list_id, new_values)

    def subscribe_category(self, list_id: int, scheme: str, category: str) -> Any:
        """Subscribe a list (0 is the public list) to a category of feeds."""
        return self._call("SubscribeCategory", *self._credentials(), scheme, category, list_id)

    def unsubscribe_category(self, list_id: int, scheme: str, category: str) -> Any:
        return self._call("UnSubscribeCategory", *self._credentials(), scheme, category, list_id)

    def subscribe_feed(self, list_id: int, feed_id: Any, auto_suggest: bool) -> Any:
        """Subscribe a list to a feed.

        Args:
            list_id: List ID (0 is the public list)
            feed_id: Feed ID or data URL
            auto_suggest: Suggest the feed if ``feed_id`` is an unknown URL

        Returns:
            Raw service acknowledgement.
        """
        return self._call("SubscribeFeed", *self._credentials(), feed_id, list_id, auto_suggest)

    def unsubscribe_feed(self, list_id: int, feed_id: Any) -> Any:
        return self._call("UnSubscribeFeed", *self._credentials(), feed_id, list_id)
