# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institution REST API client.

This module provides an async HTTP client for the institution and
classroom resources of the school platform backend.

Every response is wrapped in an envelope:

    {"success": true, "message": "...", "data": {...}}

The client unwraps ``data`` and raises InstitutionAPIError when the
status is not 2xx or ``success`` is false.

Example:
    async with InstitutionAPIClient() as client:
        record = await client.get_institution("inst-1")
        await client.delete_classroom("c-2")
"""

import logging
from typing import Any

import httpx

from src.core.config.settings import BackendSettings, get_settings
from src.domains.institution.models import (
    ClassroomRecord,
    InstitutionRecord,
    InstitutionUpdateRequest,
)
from src.domains.institution.ports import InstitutionBackend
from src.services.institution_api.exceptions import (
    InstitutionAPIConnectionError,
    InstitutionAPIError,
    InstitutionNotFoundError,
)

logger = logging.getLogger(__name__)


class InstitutionAPIClient(InstitutionBackend):
    """Async HTTP client for the institution REST API.

    Attributes:
        institutions_url: Base URL of the institutions resource.
        classrooms_url: Base URL of the classrooms resource.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        settings: BackendSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Backend settings. Defaults to the application settings.
            transport: Optional httpx transport (used by tests).
        """
        settings = settings or get_settings().backend
        self.institutions_url = settings.institutions_url.rstrip("/")
        self.classrooms_url = settings.classrooms_url.rstrip("/")
        self.timeout = settings.timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "InstitutionAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # Institutions
    # =========================================================================

    async def get_institution(self, institution_id: str) -> InstitutionRecord:
        """Fetch an institution with its users and classrooms.

        Raises:
            InstitutionNotFoundError: If the institution does not exist.
            InstitutionAPIError: If the API returns an error.
        """
        data = await self._request("GET", f"{self.institutions_url}/{institution_id}")
        return InstitutionRecord.model_validate(data)

    async def update_institution(
        self,
        institution_id: str,
        request: InstitutionUpdateRequest,
    ) -> InstitutionRecord:
        """Update an institution's fields and director reference.

        Args:
            institution_id: Institution to update.
            request: Update payload.

        Returns:
            Updated institution.

        Raises:
            InstitutionAPIError: If the API returns an error.
        """
        logger.debug(
            "Updating institution: id=%s, director=%s",
            institution_id,
            request.director_id,
        )
        data = await self._request(
            "PUT",
            f"{self.institutions_url}/{institution_id}",
            json=request.model_dump(by_alias=True, mode="json"),
        )
        logger.info("Updated institution: id=%s", institution_id)
        return InstitutionRecord.model_validate(data)

    # =========================================================================
    # Classrooms
    # =========================================================================

    async def delete_classroom(self, classroom_id: str) -> None:
        """Soft-delete a classroom."""
        await self._request("DELETE", f"{self.classrooms_url}/{classroom_id}")
        logger.info("Deleted classroom: id=%s", classroom_id)

    async def restore_classroom(self, classroom_id: str) -> ClassroomRecord:
        """Restore a soft-deleted classroom."""
        data = await self._request("PATCH", f"{self.classrooms_url}/{classroom_id}/restore")
        logger.info("Restored classroom: id=%s", classroom_id)
        return ClassroomRecord.model_validate(data)

    async def update_classroom(
        self,
        classroom_id: str,
        fields: dict[str, Any],
    ) -> ClassroomRecord:
        """Update a classroom's name, age, capacity and color."""
        data = await self._request(
            "PUT",
            f"{self.classrooms_url}/{classroom_id}",
            json=fields,
        )
        logger.info("Updated classroom: id=%s", classroom_id)
        return ClassroomRecord.model_validate(data)

    async def create_classroom(
        self,
        institution_id: str,
        fields: dict[str, Any],
    ) -> ClassroomRecord:
        """Create a classroom in an institution."""
        data = await self._request(
            "POST",
            self.classrooms_url,
            json={**fields, "institutionId": institution_id},
        )
        classroom = ClassroomRecord.model_validate(data)
        logger.info(
            "Created classroom: id=%s, institution=%s",
            classroom.classroom_id,
            institution_id,
        )
        return classroom

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    async def _request(
        self,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and unwrap the response envelope.

        Args:
            method: HTTP method.
            url: Absolute URL.
            json: Optional JSON body.

        Returns:
            The envelope's ``data`` (None for empty responses).

        Raises:
            InstitutionAPIConnectionError: If the backend is unreachable.
            InstitutionNotFoundError: On 404.
            InstitutionAPIError: On other errors.
        """
        try:
            response = await self._get_client().request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.error("Institution API connection error: %s", str(e))
            raise InstitutionAPIConnectionError(
                message=f"Error de conexión con el backend: {str(e)}",
                details={"error_type": type(e).__name__, "url": url},
            ) from e

        if response.status_code == 404:
            raise InstitutionNotFoundError(
                message=f"Recurso no encontrado: {url}",
                status_code=response.status_code,
                response_body=response.text,
            )

        if not response.is_success:
            logger.error(
                "Institution API error: %s %s -> %d",
                method,
                url,
                response.status_code,
            )
            raise InstitutionAPIError(
                message=f"Error {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                response_body=response.text,
            )

        if not response.content:
            return None

        try:
            envelope = response.json()
        except ValueError as e:
            raise InstitutionAPIError(
                message="Respuesta inválida del backend",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        if not isinstance(envelope, dict):
            logger.error("Unexpected response body from %s %s: %s", method, url, response.text[:200])
            raise InstitutionAPIError(
                message="Respuesta inválida del backend",
                status_code=response.status_code,
                response_body=response.text,
            )

        if not envelope.get("success", False):
            raise InstitutionAPIError(
                message=envelope.get("message") or "La operación en la API falló.",
                status_code=response.status_code,
                response_body=response.text,
            )

        return envelope.get("data")
