"""
Error taxonomy shared by the gateway, the route guard and the tools.
"""

from typing import Optional


class DashboardError(Exception):
    """Base class for every error the dashboard surfaces to a user."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class SessionExpired(DashboardError):
    """Backend answered 401 or no valid session is stored."""

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(message)


class RequestFailed(DashboardError):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        return f"{self.message} (Status: {self.status})"


class NetworkUnavailable(DashboardError):
    """No HTTP response at all (connection refused, DNS, timeout)."""

    def __init__(self, message: str = "Backend is unreachable. Check network connection."):
        super().__init__(message)


class ValidationError(DashboardError):
    """Client-side input check failed; nothing was sent."""


class MissingContext(DashboardError):
    """A page needs a selected warehouse and none is stored."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "No warehouse selected.")
