# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institution REST API client.

This package provides the httpx implementation of the institution
workflow's backend contract.

Usage:
    from src.services.institution_api import InstitutionAPIClient

    async with InstitutionAPIClient() as client:
        record = await client.get_institution("inst-1")
"""

from src.services.institution_api.client import InstitutionAPIClient
from src.services.institution_api.exceptions import (
    InstitutionAPIConnectionError,
    InstitutionAPIError,
    InstitutionNotFoundError,
)

__all__ = [
    "InstitutionAPIClient",
    "InstitutionAPIConnectionError",
    "InstitutionAPIError",
    "InstitutionNotFoundError",
]
