"""Utility modules for research-feed."""

from .errors import (
    ApiStatusError,
    AuthenticationError,
    ConfigurationError,
    InvalidPage,
    NetworkFailure,
    ResearchFeedError,
    ResponseFormatError,
    StaleResponseDiscarded,
    ValidationFailure,
    format_api_error,
    handle_error,
)

__all__ = [
    "ApiStatusError",
    "AuthenticationError",
    "ConfigurationError",
    "InvalidPage",
    "NetworkFailure",
    "ResearchFeedError",
    "ResponseFormatError",
    "StaleResponseDiscarded",
    "ValidationFailure",
    "format_api_error",
    "handle_error",
]
