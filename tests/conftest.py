# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across the unit tests:
- Sample backend records (institution, classrooms, users)
- A draft that passes every wizard step
- Mock collaborators (backend, confirmation prompter, notifier)
"""

from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.config.settings import clear_settings_cache
from src.domains.institution.models import (
    ClassroomRecord,
    ClassroomStatus,
    InstitutionDraft,
    InstitutionRecord,
    UserRecord,
)
from src.domains.institution.ports import (
    ConfirmationPrompter,
    InstitutionBackend,
    Notifier,
)


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Make every test load settings from its own environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Sample Records
# =============================================================================


@pytest.fixture
def institution_json() -> dict[str, Any]:
    """Backend institution payload that passes every wizard step."""
    return {
        "institutionId": "inst-1",
        "institutionInformation": {
            "institutionName": "Colegio San Martín",
            "codeInstitution": "12345678",
            "modularCode": "1234567",
            "institutionType": "PUBLICA",
            "institutionLevel": "INICIAL",
            "gender": "MIXTO",
            "slogan": "Educar para servir",
            "logoUrl": "https://example.com/logo.png",
        },
        "address": {
            "department": "Lima",
            "province": "Lima",
            "district": "San Borja",
            "street": "Av. Principal 123",
            "postalCode": "15036",
        },
        "contactMethods": [{"type": "EMAIL", "value": "contacto@colegio.edu.pe"}],
        "gradingType": "VIGESIMAL",
        "classroomType": "POR_EDAD",
        "schedules": [
            {"type": "MAÑANA", "entryTime": "07:30", "exitTime": "12:30"},
        ],
        "classrooms": [
            {"classroomId": "c-1", "classroomName": "Patitos", "classroomAge": "3", "capacity": 20, "color": "#FF0000", "status": "ACTIVE"},
            {"classroomId": "c-2", "classroomName": "Ositos", "classroomAge": "4", "capacity": 25, "color": "#00FF00", "status": "ACTIVE"},
            {"classroomId": "c-3", "classroomName": "Leones", "classroomAge": "5", "capacity": 22, "color": "#0000FF", "status": "INACTIVE"},
        ],
        "director": {
            "userId": "dir-1",
            "firstName": "Ana",
            "lastName": "Quispe",
            "documentType": "DNI",
            "documentNumber": "45678912",
            "phone": "987654321",
            "email": "ana@colegio.edu.pe",
            "role": "DIRECTOR",
            "status": "ACTIVE",
            "institutionId": "inst-1",
        },
        "auxiliaries": [{"userId": "aux-1", "role": "AUXILIAR", "status": "ACTIVE"}],
        "ugel": "UGEL 07",
        "dre": "DRE Lima",
    }


@pytest.fixture
def sample_record(institution_json) -> InstitutionRecord:
    """Create a sample institution record."""
    return InstitutionRecord.model_validate(institution_json)


@pytest.fixture
def valid_draft(sample_record) -> InstitutionDraft:
    """Create a draft that passes every wizard step."""
    return InstitutionDraft.from_record(sample_record)


@pytest.fixture
def sample_classrooms() -> list[ClassroomRecord]:
    """Create sample classroom records (c-3 is inactive)."""
    return [
        ClassroomRecord(classroom_id="c-1", name="Patitos", age="3", capacity=20, color="#FF0000"),
        ClassroomRecord(classroom_id="c-2", name="Ositos", age="4", capacity=25, color="#00FF00"),
        ClassroomRecord(
            classroom_id="c-3",
            name="Leones",
            age="5",
            capacity=22,
            color="#0000FF",
            status=ClassroomStatus.INACTIVE,
        ),
    ]


@pytest.fixture
def director_candidate() -> UserRecord:
    """Create an unassigned active director."""
    return UserRecord(
        user_id="dir-2",
        first_name="Luis",
        last_name="Mamani",
        document_type="DNI",
        document_number="71234567",
        email="luis.mamani@example.com",
        role="DIRECTOR",
        status="ACTIVE",
    )


# =============================================================================
# Mock Collaborators
# =============================================================================


@pytest.fixture
def mock_backend(sample_record):
    """Create a mock institution backend that succeeds on every call."""
    backend = AsyncMock(spec=InstitutionBackend)
    backend.update_institution.return_value = sample_record
    backend.delete_classroom.return_value = None
    backend.restore_classroom.return_value = sample_record.classrooms[2]
    backend.update_classroom.return_value = sample_record.classrooms[0]
    backend.create_classroom.return_value = sample_record.classrooms[0]
    return backend


@pytest.fixture
def mock_prompter():
    """Create a confirmation prompter that always accepts."""
    prompter = AsyncMock(spec=ConfirmationPrompter)
    prompter.confirm_action.return_value = True
    return prompter


@pytest.fixture
def mock_notifier():
    """Create a mock notifier."""
    return MagicMock(spec=Notifier)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
