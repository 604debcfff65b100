"""
Error handling for node execution

Implements:
- Error classification (for log lines and error records)
- NodeOperationError carrying the failing item index

Every failure is handled the same way: no retries, no backoff.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    """Classification of errors for reporting."""
    CREDENTIAL_MISSING = "credential_missing"
    CREDENTIAL_INVALID = "credential_invalid"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    VALIDATION_ERROR = "validation_error"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERMISSION_DENIED = "permission_denied"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Structured error information for logging."""
    category: ErrorCategory
    message: str
    suggestion: Optional[str] = None


class ErrorClassifier:
    """Classifies errors by matching well-known fragments of their message."""

    STATUS_CATEGORIES = {
        401: ErrorCategory.CREDENTIAL_INVALID,
        403: ErrorCategory.PERMISSION_DENIED,
        404: ErrorCategory.RESOURCE_NOT_FOUND,
        422: ErrorCategory.VALIDATION_ERROR,
        429: ErrorCategory.RATE_LIMITED,
    }

    PATTERNS = {
        ErrorCategory.CREDENTIAL_MISSING: [
            "no onetap credential", "missing credential", "api key is required"
        ],
        ErrorCategory.CREDENTIAL_INVALID: [
            "unauthorized", "invalid api key", "authentication failed"
        ],
        ErrorCategory.RATE_LIMITED: [
            "rate limit", "too many requests"
        ],
        ErrorCategory.TIMEOUT: [
            "timeout", "timed out"
        ],
        ErrorCategory.NETWORK_ERROR: [
            "connection refused", "connection reset", "network unreachable",
            "name or service not known", "ssl", "certificate"
        ],
        ErrorCategory.VALIDATION_ERROR: [
            "validation", "invalid date", "could not get parameter", "is required"
        ],
        ErrorCategory.RESOURCE_NOT_FOUND: [
            "not found", "does not exist"
        ],
        ErrorCategory.PERMISSION_DENIED: [
            "permission denied", "forbidden", "not allowed"
        ],
        ErrorCategory.EXTERNAL_SERVICE_ERROR: [
            "internal server error", "bad gateway", "service unavailable"
        ],
    }

    SUGGESTIONS = {
        ErrorCategory.CREDENTIAL_MISSING: "Configure the OneTap API credential on the node.",
        ErrorCategory.CREDENTIAL_INVALID: "Check the OneTap API key and the selected environment.",
        ErrorCategory.RATE_LIMITED: "Wait a moment and try again, or reduce request frequency.",
        ErrorCategory.NETWORK_ERROR: "Check your network connection and the OneTap base URL.",
        ErrorCategory.TIMEOUT: "The OneTap API took too long to answer. Try again later.",
        ErrorCategory.VALIDATION_ERROR: "Check the node parameters match the expected format.",
        ErrorCategory.RESOURCE_NOT_FOUND: "Verify the profile, list, participant or passport ID.",
        ErrorCategory.PERMISSION_DENIED: "Check the API key has access to this organization.",
        ErrorCategory.EXTERNAL_SERVICE_ERROR: "The OneTap API is having issues. Try again later.",
        ErrorCategory.UNKNOWN: "An unexpected error occurred. Check the logs for details.",
    }

    @classmethod
    def classify(cls, error: Exception) -> ErrorContext:
        """Classify an error and return structured context."""
        category = cls.STATUS_CATEGORIES.get(getattr(error, "status_code", None))

        if category is None:
            status_code = getattr(error, "status_code", None)
            if isinstance(status_code, int) and status_code >= 500:
                category = ErrorCategory.EXTERNAL_SERVICE_ERROR

        if category is None:
            error_str = str(error).lower()
            category = ErrorCategory.UNKNOWN
            for candidate, patterns in cls.PATTERNS.items():
                if any(pattern in error_str for pattern in patterns):
                    category = candidate
                    break

        return ErrorContext(
            category=category,
            message=str(error),
            suggestion=cls.SUGGESTIONS.get(category),
        )


class NodeOperationError(RuntimeError):
    """
    A node failed while processing one of its input items.

    Raised when failure tolerance is off; aborts the remaining items.
    """

    def __init__(
        self,
        node_id: str,
        message: str,
        item_index: Optional[int] = None,
        description: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.node_id = node_id
        self.message = message
        self.item_index = item_index
        self.description = description
        self.cause = cause

    def __str__(self) -> str:
        if self.item_index is None:
            return self.message
        return f"{self.message} [item {self.item_index}]"
