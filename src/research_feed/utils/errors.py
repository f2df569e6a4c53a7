"""
Unified error handling for research-feed.
"""

import logging

logger = logging.getLogger(__name__)


class ResearchFeedError(Exception):
    """Base exception for research-feed errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}. {self.suggestion}"
        return self.message


class NetworkFailure(ResearchFeedError):
    """Transport-level failure (connection refused, timeout, DNS...)."""
    pass


class ApiStatusError(ResearchFeedError):
    """The backend answered with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(message or format_api_error(status_code), suggestion)
        self.status_code = status_code


class AuthenticationError(ApiStatusError):
    """Missing or expired session token (401)."""
    pass


class ResponseFormatError(ResearchFeedError):
    """The backend returned a payload that does not match the expected shape."""
    pass


class ValidationFailure(ResearchFeedError):
    """Malformed input from the caller."""
    pass


class InvalidPage(ValidationFailure):
    """Page number outside of the available range."""
    pass


class StaleResponseDiscarded(ResearchFeedError):
    """A response arrived for a request that has since been superseded.

    Internal control-flow outcome, never shown to the user.
    """

    def __init__(self, sequence: int, latest: int):
        super().__init__(
            f"Discarded response #{sequence}; latest request is #{latest}"
        )
        self.sequence = sequence
        self.latest = latest


class ConfigurationError(ResearchFeedError):
    """Configuration error."""
    pass


def handle_error(error: Exception, operation: str = "operation") -> str:
    """
    Turn an exception into a single user-facing line.

    Args:
        error: The exception that occurred
        operation: Name of the operation that failed

    Returns:
        User-friendly error message with suggestions
    """
    logger.error(f"Error in {operation}: {error}")

    if isinstance(error, AuthenticationError):
        return (
            "Error: Authentication failed. "
            "Please check RESEARCH_FEED_API_TOKEN is set and still valid."
        )

    if isinstance(error, NetworkFailure):
        return (
            "Error: Could not reach the research feed server. "
            "Please check RESEARCH_FEED_API_URL and your network connection."
        )

    if isinstance(error, ResearchFeedError):
        return f"Error: {error}"

    return f"Error in {operation}: {type(error).__name__} - {error}"


def format_api_error(status_code: int, message: str = "") -> str:
    """Format an API error with appropriate message."""
    error_messages = {
        400: "Bad request. Please check your filter parameters.",
        401: "Authentication required. Please set RESEARCH_FEED_API_TOKEN.",
        403: "Access denied. You don't have permission to perform this action.",
        404: "Resource not found. Please check the paper id.",
        422: "The server rejected the request parameters.",
        429: "Rate limit exceeded. Please wait before making more requests.",
        500: "Research feed server error. Please try again later.",
        503: "Research feed service unavailable. Please try again later.",
    }

    default_message = f"API error (status {status_code})"
    base_message = error_messages.get(status_code, default_message)

    if message:
        return f"Error: {base_message} Details: {message}"
    return f"Error: {base_message}"
