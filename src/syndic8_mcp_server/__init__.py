"""Syndic8 MCP Server - Model Context Protocol integration for the Syndic8 feed directory."""

__version__ = "0.2.0"
