"""Pydantic models for the Syndic8 XML-RPC API."""

from typing import Any, Literal

from pydantic import BaseModel, Field

# Feed records are returned as-is; their fields depend on the requested keys.
FeedRecord = dict[str, Any]

# Relationships accepted by QueryFeeds
QueryOperator = Literal["<", ">", "<=", ">=", "!=", "=", "like", "regexp"]

# =============================================================================
# Lookup Table Models
# =============================================================================


class FeedState(BaseModel):
    """Row from GetFeedStates."""

    state: str | int
    name: str


class Toolkit(BaseModel):
    """Row from GetToolkits."""

    id: str | int
    name: str


# =============================================================================
# MCP Tool Response Models
# =============================================================================


class FeedSummary(BaseModel):
    """Feed record projected onto the client's configured keys."""

    feed_id: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, feed_id: Any, record: FeedRecord, keys: list[str]) -> "FeedSummary":
        """Create from a feed ID and its raw record, keeping only ``keys``."""
        return cls(
            feed_id=str(feed_id) if feed_id is not None else None,
            fields={key: record.get(key) for key in keys},
        )


class OperationResult(BaseModel):
    """Outcome of a state-changing MCP tool."""

    success: bool
    message: str
    id: int | None = None
