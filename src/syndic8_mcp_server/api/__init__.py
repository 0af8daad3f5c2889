"""Syndic8 XML-RPC client and data models."""

from syndic8_mcp_server.api.client import Syndic8Client
from syndic8_mcp_server.api.models import (
    FeedRecord,
    FeedState,
    FeedSummary,
    OperationResult,
    QueryOperator,
    Toolkit,
)

__all__ = [
    "FeedRecord",
    "FeedState",
    "FeedSummary",
    "OperationResult",
    "QueryOperator",
    "Syndic8Client",
    "Toolkit",
]
