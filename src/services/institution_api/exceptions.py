# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Custom exceptions for the institution REST API client.

This module defines the exception hierarchy for backend calls:
- InstitutionAPIError: Base exception for all backend errors
- InstitutionAPIConnectionError: The backend could not be reached
- InstitutionNotFoundError: The requested record does not exist
"""


class InstitutionAPIError(Exception):
    """Error from the institution REST API.

    Raised when the backend returns a non-2xx status, an envelope with
    ``success: false``, or a body that cannot be parsed.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code from API response.
        response_body: Raw response body if available.
        details: Optional dictionary with additional error context.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        details: dict | None = None,
    ):
        """Initialize API error.

        Args:
            message: Human-readable error description.
            status_code: HTTP status code from API response.
            response_body: Raw response body if available.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with status code."""
        base = f"{self.message}"
        if self.status_code:
            base = f"[{self.status_code}] {base}"
        if self.details:
            base = f"{base} - Details: {self.details}"
        return base


class InstitutionAPIConnectionError(InstitutionAPIError):
    """The backend could not be reached."""

    pass


class InstitutionNotFoundError(InstitutionAPIError):
    """The requested institution or classroom does not exist."""

    pass
