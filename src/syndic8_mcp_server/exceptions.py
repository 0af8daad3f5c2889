"""Custom exceptions for Syndic8 MCP Server."""


class Syndic8Error(Exception):
    """Base exception for Syndic8 MCP Server."""


class RemoteFault(Syndic8Error):
    """Syndic8 answered the call with an XML-RPC fault.

    Attributes:
        fault_code: Fault code reported by the service.
        fault_string: Fault message reported by the service.
    """

    def __init__(self, fault_code: int, fault_string: str) -> None:
        super().__init__(f"XML-RPC: {fault_code}: {fault_string}")
        self.fault_code = fault_code
        self.fault_string = fault_string


class TransportError(Syndic8Error):
    """The call did not produce a usable XML-RPC response."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Error: {reason}")
        self.reason = reason


class ClientConnectionError(TransportError):
    """The connection handle to the Syndic8 endpoint could not be created."""


class ConfigurationError(Syndic8Error):
    """Invalid or missing configuration."""
