"""Exceptions raised by the Instapaper client."""

from typing import Optional


class InstapaperError(Exception):
    """Base class for all client errors."""


class AuthenticationError(InstapaperError):
    """Credentials were rejected, or an authenticated call was made without a token."""


class ApiError(InstapaperError):
    """An API call failed: bad status, unreadable body, or transport error."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 error_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code

    def __str__(self):
        parts = []
        if self.status_code is not None:
            parts.append(f"HTTP {self.status_code}")
        if self.error_code is not None:
            parts.append(f"error {self.error_code}")
        if parts:
            return f"{self.message} ({', '.join(parts)})"
        return self.message
