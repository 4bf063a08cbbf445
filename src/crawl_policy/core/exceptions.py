"""
Custom exceptions for the crawl traversal policy engine.

All exceptions inherit from CrawlPolicyError so callers can catch
everything raised by this package in one place.

Exception Hierarchy:
    CrawlPolicyError (base)
    ├── ConfigurationError
    │   └── PolicyNotFoundError
    ├── QueueError
    └── EventFeedError
"""

from typing import Any


class CrawlPolicyError(Exception):
    """
    Base exception for all crawl policy errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(CrawlPolicyError):
    """
    Error in policy or settings configuration.

    Raised when:
    - A policy field holds a value outside its enumeration
    - A decision is asked of a policy whose fetch or freshness is malformed
    - Configuration file is missing or malformed
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class PolicyNotFoundError(ConfigurationError):
    """
    Error when a named policy is required but not registered.

    Plain catalog lookups return None instead; this is only raised
    by strict lookups.
    """

    def __init__(
        self,
        message: str,
        name: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["name"] = name
        super().__init__(message, details=details)
        self.name = name


# =============================================================================
# Collaborator Errors
# =============================================================================


class QueueError(CrawlPolicyError):
    """Error in traversal queue bookkeeping."""

    pass


class EventFeedError(CrawlPolicyError):
    """
    Error while reading an event feed or the event store.

    Wraps failures raised by the requestor or store collaborators.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.url = url
