"""Shared error types for the MCP servers."""


class MCPServerError(Exception):
    """Base error for all server-side failures."""


class ConfigurationError(MCPServerError):
    """Required configuration (e.g. an API key) is missing or invalid."""


class ToolRegistrationError(MCPServerError):
    """A tool could not be added to a registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool already registered: {name}")


class SessionError(MCPServerError):
    """A session table operation violated its invariants."""

    def __init__(self, session_id: str, detail: str = "") -> None:
        self.session_id = session_id
        self.detail = detail
        msg = f"Session error for {session_id}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
