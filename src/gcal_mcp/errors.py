"""
Error taxonomy for calendar tools.

Every failure a tool call can produce derives from CalendarToolError so the
server can turn it into a failed tool response with a readable message.
"""

from typing import Optional


class CalendarToolError(Exception):
    """Base class for errors surfaced to the calling client."""

    code = "tool_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
        }


class InvalidArguments(CalendarToolError):
    """
    Tool arguments do not satisfy the tool's schema.

    errors is a list of (field, problem) pairs.
    """

    code = "invalid_arguments"

    def __init__(self, tool: str, errors: list[tuple[str, str]]):
        self.tool = tool
        self.errors = errors
        details = "; ".join(f"{field}: {problem}" for field, problem in errors)
        super().__init__(f"Invalid arguments for {tool}: {details}")

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "tool": self.tool,
            "fields": [{"field": f, "problem": p} for f, p in self.errors],
        }


class UnknownTool(CalendarToolError):
    code = "unknown_tool"

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Unknown tool: {tool}")


class AccountNotFound(CalendarToolError):
    code = "account_not_found"

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class NoAccountsConfigured(CalendarToolError):
    code = "no_accounts"

    def __init__(self):
        super().__init__("No authenticated accounts found")


class CalendarNotFound(CalendarToolError):
    code = "calendar_not_found"

    def __init__(self, calendar_id: str, reason: Optional[str] = None):
        self.calendar_id = calendar_id
        self.reason = reason
        message = f"Calendar {calendar_id} not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RemoteOperationFailed(CalendarToolError):
    """Google Calendar API call failed; wraps the provider's message."""

    code = "remote_error"

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"Failed to {action}: {reason}")


class NoCredentialsFound(Exception):
    """No token files on disk at startup."""

    def __init__(self, tokens_dir):
        self.tokens_dir = tokens_dir
        super().__init__(
            f"No tokens found in {tokens_dir}. "
            "Please run with 'auth <account-id>' first."
        )


class AuthorizationError(Exception):
    """Interactive authorization could not be completed."""
    pass
