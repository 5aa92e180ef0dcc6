# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reconciliation of a staged institution edit with the backend.

The committer turns the draft, the staged classroom changes and the
staged director replacement into an ordered sequence of backend calls:

1. Update the institution (fields and director reference)
2. Delete classrooms marked deleted
3. Restore classrooms marked restored
4. Update edited classrooms with no pending delete or restore
5. Create new classrooms

Only a failure of step 1 fails the commit. Classroom call failures are
recorded in the CommitReport and never stop later calls. Calls are
awaited one after the other so the backend sees them in this order.

Example:
    committer = ReconciliationCommitter(backend)
    report = await committer.commit(draft, tracker, staging)
    if report.status is CommitStatus.PARTIAL:
        for outcome in report.failures:
            print(outcome.error)
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.domains.institution.classrooms import ClassroomDiffTracker
from src.domains.institution.director import DirectorReassignmentStaging
from src.domains.institution.exceptions import PrimaryCommitError, SubOperationError
from src.domains.institution.models import InstitutionDraft, InstitutionRecord
from src.domains.institution.ports import InstitutionBackend
from src.utils.logging import get_logger

logger = get_logger(__name__)


class OperationKind(str, Enum):
    """Classroom operations issued during reconciliation, in issue order."""

    DELETE = "delete"
    RESTORE = "restore"
    UPDATE = "update"
    CREATE = "create"


class CommitStatus(str, Enum):
    """Overall outcome of a commit that passed the institution update."""

    COMPLETED = "completed"
    PARTIAL = "partial"


@dataclass
class OperationOutcome:
    """Result of one classroom call.

    Attributes:
        operation: Kind of call issued.
        classroom_id: Classroom involved, None for creations.
        classroom_name: Classroom name at commit time.
        ok: Whether the call succeeded.
        error: Failure recorded for the call, if any.
    """

    operation: OperationKind
    classroom_id: str | None
    classroom_name: str = ""
    ok: bool = True
    error: SubOperationError | None = None


@dataclass
class CommitReport:
    """Result of a reconciliation.

    ``succeeded`` is True whenever the institution update went through,
    even if classroom calls failed. ``status`` tells the two cases apart.

    Attributes:
        institution: Institution as returned by the update call.
        outcomes: One entry per classroom call, in issue order.
        succeeded: Top-level success flag.
    """

    institution: InstitutionRecord
    outcomes: list[OperationOutcome] = field(default_factory=list)
    succeeded: bool = True

    @property
    def failures(self) -> list[OperationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def status(self) -> CommitStatus:
        return CommitStatus.PARTIAL if self.failures else CommitStatus.COMPLETED

    def summary(self) -> str:
        """Spanish summary of failed classroom calls, for the user."""
        if not self.failures:
            return ""
        lines = [
            f"{len(self.failures)} operación(es) de aulas fallaron:",
            *(
                f"- {_OPERATION_LABELS[o.operation]} {o.classroom_name or o.classroom_id}: "
                f"{o.error.message if o.error else 'error desconocido'}"
                for o in self.failures
            ),
        ]
        return "\n".join(lines)


_OPERATION_LABELS = {
    OperationKind.DELETE: "Eliminar aula",
    OperationKind.RESTORE: "Restaurar aula",
    OperationKind.UPDATE: "Actualizar aula",
    OperationKind.CREATE: "Crear aula",
}


class ReconciliationCommitter:
    """Commits a staged institution edit through an InstitutionBackend.

    Attributes:
        backend: Backend receiving the calls.
    """

    def __init__(self, backend: InstitutionBackend) -> None:
        self.backend = backend

    async def commit(
        self,
        draft: InstitutionDraft,
        tracker: ClassroomDiffTracker,
        staging: DirectorReassignmentStaging,
    ) -> CommitReport:
        """Apply the staged edit.

        On success the tracker is reset, the new-classroom list emptied and
        the director replacement promoted, whatever the classroom call
        outcomes.

        Args:
            draft: Institution draft to send.
            tracker: Staged classroom changes.
            staging: Staged director replacement.

        Returns:
            CommitReport with one outcome per classroom call.

        Raises:
            PrimaryCommitError: If the institution update fails. No other
                call is issued and staged state is left untouched.
        """
        institution_id = draft.institution_id
        director_id = staging.effective_director_id()
        log = logger.bind(institution_id=institution_id)

        request = draft.to_update_request(director_id)
        try:
            institution = await self.backend.update_institution(institution_id, request)
        except Exception as e:
            log.error("Institution update failed", error=str(e))
            raise PrimaryCommitError(
                f"Error al actualizar institución: {_error_message(e)}",
                institution_id=institution_id,
                details={"error_type": type(e).__name__},
            ) from e

        log.info("Institution updated", director_id=director_id)
        report = CommitReport(institution=institution)

        for classroom_id in sorted(tracker.deleted):
            await self._run(
                report,
                OperationKind.DELETE,
                classroom_id,
                tracker.get(classroom_id).name,
                lambda cid=classroom_id: self.backend.delete_classroom(cid),
            )

        for classroom_id in sorted(tracker.restored):
            await self._run(
                report,
                OperationKind.RESTORE,
                classroom_id,
                tracker.get(classroom_id).name,
                lambda cid=classroom_id: self.backend.restore_classroom(cid),
            )

        for classroom in tracker.pending_updates():
            await self._run(
                report,
                OperationKind.UPDATE,
                classroom.classroom_id,
                classroom.name,
                lambda c=classroom: self.backend.update_classroom(c.classroom_id, c.to_fields()),
            )

        for classroom in tracker.new_classrooms:
            await self._run(
                report,
                OperationKind.CREATE,
                None,
                classroom.name,
                lambda c=classroom: self.backend.create_classroom(institution_id, c.to_fields()),
            )

        tracker.reset()
        tracker.discard_new()
        staging.commit()

        log.info(
            "Institution edit committed",
            status=report.status.value,
            operations=len(report.outcomes),
            failures=len(report.failures),
        )
        return report

    async def _run(
        self,
        report: CommitReport,
        operation: OperationKind,
        classroom_id: str | None,
        classroom_name: str,
        call: Callable[[], Awaitable[Any]],
    ) -> None:
        """Issue one classroom call and record its outcome."""
        outcome = OperationOutcome(
            operation=operation,
            classroom_id=classroom_id,
            classroom_name=classroom_name,
        )
        try:
            await call()
        except Exception as e:
            outcome.ok = False
            outcome.error = SubOperationError(
                _error_message(e),
                operation=operation.value,
                classroom_id=classroom_id,
                details={"error_type": type(e).__name__},
            )
            logger.warning(
                "Classroom operation failed",
                operation=operation.value,
                classroom_id=classroom_id,
                classroom_name=classroom_name,
                error=str(e),
            )
        else:
            logger.debug(
                "Classroom operation succeeded",
                operation=operation.value,
                classroom_id=classroom_id,
            )
        report.outcomes.append(outcome)


def _error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or type(error).__name__
