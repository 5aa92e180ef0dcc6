# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the institution REST API client."""

import json

import httpx
import pytest

from src.core.config.settings import BackendSettings
from src.domains.institution.models import ClassroomStatus
from src.services.institution_api import (
    InstitutionAPIClient,
    InstitutionAPIConnectionError,
    InstitutionAPIError,
    InstitutionNotFoundError,
)

BACKEND = BackendSettings(
    institutions_url="http://backend.test/api/v1/institutions/",
    classrooms_url="http://backend.test/api/v1/classrooms",
)

CLASSROOM = {
    "classroomId": "c-1",
    "classroomName": "Patitos",
    "classroomAge": "3",
    "capacity": 20,
    "color": "#FF0000",
    "status": "ACTIVE",
}


def _envelope(data, success: bool = True, message: str = "OK") -> dict:
    return {"success": success, "message": message, "data": data}


def _client(handler) -> InstitutionAPIClient:
    return InstitutionAPIClient(settings=BACKEND, transport=httpx.MockTransport(handler))


class TestInstitutionCalls:
    """Tests for institution endpoints."""

    @pytest.mark.asyncio
    async def test_get_institution(self, institution_json) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert str(request.url) == "http://backend.test/api/v1/institutions/inst-1"
            return httpx.Response(200, json=_envelope(institution_json))

        async with _client(handler) as client:
            record = await client.get_institution("inst-1")

        assert record.institution_id == "inst-1"
        assert len(record.classrooms) == 3
        assert record.classrooms[2].status == ClassroomStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_update_institution_sends_camel_case(self, valid_draft, institution_json) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_envelope(institution_json))

        async with _client(handler) as client:
            await client.update_institution("inst-1", valid_draft.to_update_request("dir-2"))

        assert seen["method"] == "PUT"
        assert seen["body"]["directorId"] == "dir-2"
        assert seen["body"]["institutionInformation"]["codeInstitution"] == "12345678"
        assert seen["body"]["schedules"][0]["type"] == "MAÑANA"


class TestClassroomCalls:
    """Tests for classroom endpoints."""

    @pytest.mark.asyncio
    async def test_delete_with_empty_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            assert request.url.path == "/api/v1/classrooms/c-1"
            return httpx.Response(204)

        async with _client(handler) as client:
            assert await client.delete_classroom("c-1") is None

    @pytest.mark.asyncio
    async def test_restore(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PATCH"
            assert request.url.path == "/api/v1/classrooms/c-1/restore"
            return httpx.Response(200, json=_envelope(CLASSROOM))

        async with _client(handler) as client:
            classroom = await client.restore_classroom("c-1")

        assert classroom.name == "Patitos"

    @pytest.mark.asyncio
    async def test_create_includes_institution_id(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json=_envelope(CLASSROOM))

        fields = {"classroomName": "Patitos", "classroomAge": "3", "capacity": 20, "color": "#FF0000"}
        async with _client(handler) as client:
            await client.create_classroom("inst-1", fields)

        assert seen["method"] == "POST"
        assert seen["path"] == "/api/v1/classrooms"
        assert seen["body"] == {**fields, "institutionId": "inst-1"}


class TestErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="stack trace")

        async with _client(handler) as client:
            with pytest.raises(InstitutionAPIError) as exc_info:
                await client.update_classroom("c-1", {})

        assert exc_info.value.status_code == 500
        assert exc_info.value.response_body == "stack trace"
        assert str(exc_info.value) == "[500] Error 500: Internal Server Error"

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        async with _client(handler) as client:
            with pytest.raises(InstitutionNotFoundError):
                await client.get_institution("missing")

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_envelope(None, success=False, message="Aula duplicada"))

        async with _client(handler) as client:
            with pytest.raises(InstitutionAPIError, match="Aula duplicada"):
                await client.create_classroom("inst-1", {})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[1, 2], "ok", 42])
    async def test_non_object_body(self, body) -> None:
        """Test a JSON body that is not an envelope object is rejected."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        async with _client(handler) as client:
            with pytest.raises(InstitutionAPIError, match="Respuesta inválida") as exc_info:
                await client.get_institution("inst-1")

        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(InstitutionAPIConnectionError) as exc_info:
                await client.delete_classroom("c-1")

        assert exc_info.value.details["error_type"] == "ConnectError"


class TestLifecycle:
    """Tests for client construction and closing."""

    def test_uses_application_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("BACKEND_INSTITUTIONS_URL", "http://api.example.com/institutions/")

        client = InstitutionAPIClient()

        assert client.institutions_url == "http://api.example.com/institutions"
        assert client.classrooms_url == "http://localhost:9080/api/v1/classrooms"

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        client = _client(lambda request: httpx.Response(204))

        await client.delete_classroom("c-1")
        await client.close()
        await client.close()
