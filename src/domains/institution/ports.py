# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Collaborators consumed by the institution edit workflow.

This module defines the abstract contracts the workflow depends on:
- InstitutionBackend: persistence of institutions and classrooms
- ConfirmationPrompter: asks the user to confirm an action
- Notifier: user feedback on progress, success and failure

Implementations must be async where the contract is async. The REST
implementation of InstitutionBackend lives in
``src.services.institution_api``.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.domains.institution.models import (
    ClassroomRecord,
    InstitutionRecord,
    InstitutionUpdateRequest,
)
from src.utils.logging import get_logger


class InstitutionBackend(ABC):
    """Backend operations used to load and reconcile an institution."""

    @abstractmethod
    async def get_institution(self, institution_id: str) -> InstitutionRecord:
        """Fetch an institution with its classrooms and users."""
        ...

    @abstractmethod
    async def update_institution(
        self,
        institution_id: str,
        request: InstitutionUpdateRequest,
    ) -> InstitutionRecord:
        """Update the institution's fields and director reference."""
        ...

    @abstractmethod
    async def delete_classroom(self, classroom_id: str) -> None:
        """Soft-delete a classroom."""
        ...

    @abstractmethod
    async def restore_classroom(self, classroom_id: str) -> ClassroomRecord:
        """Restore a soft-deleted classroom."""
        ...

    @abstractmethod
    async def update_classroom(
        self,
        classroom_id: str,
        fields: dict[str, Any],
    ) -> ClassroomRecord:
        """Update a classroom's editable fields."""
        ...

    @abstractmethod
    async def create_classroom(
        self,
        institution_id: str,
        fields: dict[str, Any],
    ) -> ClassroomRecord:
        """Create a classroom in the institution."""
        ...


class ConfirmationPrompter(ABC):
    """Asks the user to confirm an action."""

    @abstractmethod
    async def confirm_action(self, title: str, message: str) -> bool:
        """Return True if the user accepted."""
        ...


class Notifier(ABC):
    """User feedback channel."""

    @abstractmethod
    def notify_progress(self, message: str) -> None: ...

    @abstractmethod
    def notify_success(self, message: str) -> None: ...

    @abstractmethod
    def notify_failure(self, message: str) -> None: ...


class LoggingNotifier(Notifier):
    """Notifier that writes feedback to the structured log."""

    def __init__(self) -> None:
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    def notify_progress(self, message: str) -> None:
        self.logger.info("progress", message=message)

    def notify_success(self, message: str) -> None:
        self.logger.info("success", message=message)

    def notify_failure(self, message: str) -> None:
        self.logger.warning("failure", message=message)
