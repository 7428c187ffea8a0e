"""
Custom exceptions for the comment guard.

Only configuration problems and notification delivery failures are errors.
A blocked submission is a control outcome raised to the host pipeline.
"""

from typing import Optional, Dict, Any


class GuardError(Exception):
    """Base exception for all comment guard errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize guard error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(GuardError):
    """Error in guard configuration."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            error_code="CONFIGURATION_ERROR",
            details={"config_key": config_key, **kwargs}
        )


class NotificationDeliveryError(GuardError):
    """The mail transport failed to deliver an operator notification."""

    def __init__(
        self,
        message: str,
        recipient: Optional[str] = None,
        transport: Optional[str] = None,
        **kwargs
    ):
        """Initialize delivery error.

        Args:
            message: Error message
            recipient: Address the notification was meant for
            transport: Name of the mail transport that failed
            **kwargs: Additional error details
        """
        super().__init__(
            message,
            error_code="NOTIFICATION_DELIVERY_ERROR",
            details={
                "recipient": recipient,
                "transport": transport,
                **kwargs
            }
        )


class SubmissionBlocked(GuardError):
    """Signals the host pipeline to reject a submission.

    Carries the user-facing message and title, the HTTP-like status code and
    the scan result that triggered the block.
    """

    def __init__(
        self,
        message: str,
        title: str = "",
        status_code: int = 403,
        result: Optional[Any] = None
    ):
        details = {"status_code": status_code}
        if result is not None:
            details["field"] = result.field.value
        super().__init__(message, error_code="SUBMISSION_BLOCKED", details=details)
        self.title = title
        self.status_code = status_code
        self.result = result

    def __str__(self) -> str:
        return self.message
