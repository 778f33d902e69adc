"""Custom exception classes for the UniPortal authentication service.

Expected failures (bad input, blocked accounts, invalid tokens) are reported
as result objects, not exceptions. The classes below are raised and handled
internally, at the seams where a lower layer has to abort a unit of work.
"""


class UniPortalError(Exception):
    """Base exception for all UniPortal errors."""

    pass


class ConfigurationError(UniPortalError):
    """Raised when there is a configuration error."""

    pass


class NotificationError(UniPortalError):
    """Raised when the email provider rejects or fails a delivery."""

    pass


class UserAlreadyExistsError(UniPortalError):
    """Raised when trying to store a user whose email is already taken."""

    def __init__(self, email: str):
        """Initialize the exception.

        Args:
            email: The email address that is already registered.
        """
        self.email = email
        super().__init__(f"User '{email}' already exists")


class TokenConsumptionError(UniPortalError):
    """Raised when a recovery token could not be marked as used.

    This happens when another request consumed the same token between
    validation and consumption.
    """

    def __init__(self, message: str):
        """Initialize the exception.

        Args:
            message: User-facing reason for the failure.
        """
        self.message = message
        super().__init__(message)
