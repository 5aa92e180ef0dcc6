# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institution edit session.

InstitutionEditSession owns the state of one edit wizard: the draft, the
step gate, the staged classroom changes and the staged director
replacement. The UI layer calls its methods from user callbacks and reads
its state to render.

Example:
    session = InstitutionEditSession.open(record, backend, prompter, notifier)
    session.dispatch(SetField("information", "slogan", "Educar para servir"))
    await session.delete_classroom("c-2")
    while not session.gate.is_terminal:
        if not session.next_step():
            break
    report = await session.submit()
    session.close()
"""

from typing import Any, Self

from src.domains.institution.actions import DraftAction, reduce
from src.domains.institution.classrooms import ClassroomDiffTracker
from src.domains.institution.committer import (
    CommitReport,
    CommitStatus,
    ReconciliationCommitter,
)
from src.domains.institution.director import DirectorReassignmentStaging
from src.domains.institution.exceptions import PrimaryCommitError, StepValidationError
from src.domains.institution.models import (
    ClassroomDraft,
    InstitutionDraft,
    InstitutionRecord,
    UserRecord,
)
from src.domains.institution.ports import (
    ConfirmationPrompter,
    InstitutionBackend,
    LoggingNotifier,
    Notifier,
)
from src.domains.institution.steps import StepGate
from src.utils.logging import ContextTokens, bind_context, get_logger, reset_context

logger = get_logger(__name__)

DIRECTOR_STAGED_MESSAGE = "Director seleccionado. Se aplicará el cambio al actualizar la institución."


class InstitutionEditSession:
    """One edit wizard session over an institution snapshot.

    Attributes:
        record: Institution as loaded when the session opened.
        draft: Current immutable draft.
        gate: Step sequencer and render state.
        classrooms: Staged classroom changes.
        director: Staged director replacement.
        info_message: Transient informational message for the UI.
    """

    def __init__(
        self,
        record: InstitutionRecord,
        backend: InstitutionBackend,
        prompter: ConfirmationPrompter,
        notifier: Notifier | None = None,
        gate: StepGate | None = None,
    ) -> None:
        self.record = record
        self.draft = InstitutionDraft.from_record(record)
        self.gate = gate or StepGate()
        self.classrooms = ClassroomDiffTracker(record.classrooms)
        self.director = DirectorReassignmentStaging(record.director)
        self.info_message: str | None = None

        self._prompter = prompter
        self._notifier = notifier or LoggingNotifier()
        self._committer = ReconciliationCommitter(backend)
        self._submitting = False
        self._log_tokens: ContextTokens | None = None

    @classmethod
    def open(
        cls,
        record: InstitutionRecord,
        backend: InstitutionBackend,
        prompter: ConfirmationPrompter,
        notifier: Notifier | None = None,
    ) -> Self:
        """Start a session seeded from an institution record.

        Binds ``institution_id`` to the log context until ``close()``.
        """
        session = cls(record, backend, prompter, notifier)
        session._log_tokens = bind_context(institution_id=record.institution_id)
        logger.info("Edit session opened", classrooms=len(record.classrooms))
        return session

    def close(self) -> None:
        """Discard the session and unbind its log context."""
        if self._log_tokens is None:
            return
        logger.info("Edit session closed", changed=self.classrooms.has_changes)
        reset_context(self._log_tokens)
        self._log_tokens = None

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    # =========================================================================
    # Draft and navigation
    # =========================================================================

    def dispatch(self, action: DraftAction) -> InstitutionDraft:
        """Apply a draft action and return the new draft."""
        self.draft = reduce(self.draft, action)
        return self.draft

    def blur(self, field_name: str) -> None:
        self.gate.blur(field_name)

    def next_step(self) -> bool:
        return self.gate.next(self.draft)

    def prev_step(self) -> None:
        self.gate.prev()

    def visible_errors(self) -> dict[str, str]:
        return self.gate.visible_errors(self.draft)

    # =========================================================================
    # Classrooms
    # =========================================================================

    def add_classroom(self, classroom: ClassroomDraft | None = None) -> int:
        return self.classrooms.add_new(classroom)

    def edit_classroom(self, classroom_id: str, **changes: Any) -> ClassroomDraft:
        return self.classrooms.edit(classroom_id, **changes)

    async def delete_classroom(self, classroom_id: str) -> bool:
        """Stage a classroom delete after user confirmation.

        Returns:
            True if the delete was staged.
        """
        classroom = self.classrooms.get(classroom_id)
        confirmed = await self._prompter.confirm_action(
            "Eliminar aula",
            f'¿Estás seguro de eliminar el aula "{classroom.name}"?',
        )
        if not confirmed:
            return False
        self.classrooms.mark_deleted(classroom_id)
        return True

    async def restore_classroom(self, classroom_id: str) -> bool:
        """Stage a classroom restore after user confirmation.

        Returns:
            True if the restore was staged.
        """
        classroom = self.classrooms.get(classroom_id)
        confirmed = await self._prompter.confirm_action(
            "Restaurar aula",
            f'¿Estás seguro de restaurar el aula "{classroom.name}"?',
        )
        if not confirmed:
            return False
        self.classrooms.mark_restored(classroom_id)
        return True

    # =========================================================================
    # Director
    # =========================================================================

    def select_director(self, candidate: UserRecord) -> None:
        self.director.select(candidate)
        self.draft = self.draft.model_copy(
            update={"director": self.director.effective_director()}
        )
        self.info_message = DIRECTOR_STAGED_MESSAGE

    def cancel_director_change(self) -> None:
        self.director.cancel()
        self.draft = self.draft.model_copy(
            update={"director": self.director.effective_director()}
        )
        self.info_message = None

    # =========================================================================
    # Submit
    # =========================================================================

    async def submit(self) -> CommitReport | None:
        """Validate, confirm and commit the edit.

        Returns:
            The CommitReport, or None if validation failed, the user
            declined or the institution update failed. In the last case
            the error is kept on the gate and the draft is retained.
            A submit issued while another one is in flight also
            returns None.
        """
        if self._submitting:
            logger.info("Submit ignored, another submit is in progress")
            return None
        self._submitting = True
        try:
            return await self._submit()
        finally:
            self._submitting = False

    async def _submit(self) -> CommitReport | None:
        try:
            self.gate.submit(self.draft)
        except StepValidationError as e:
            logger.info("Submit blocked by validation", step=e.step)
            return None

        name = self.draft.information.institution_name
        confirmed = await self._prompter.confirm_action(
            "¿Actualizar institución?",
            f'Se actualizará la institución "{name}" con todos los cambios realizados.',
        )
        if not confirmed:
            return None

        self.gate.step_error = None
        try:
            self._notifier.notify_progress("Actualizando institución...")
            report = await self._committer.commit(self.draft, self.classrooms, self.director)
        except PrimaryCommitError as e:
            self.gate.step_error = e.message
            self._notifier.notify_failure(e.message)
            return None

        self.record = report.institution
        self._notifier.notify_success(
            f'La institución "{name}" ha sido actualizada exitosamente'
        )
        if report.status is CommitStatus.PARTIAL:
            self._notifier.notify_failure(report.summary())
        return report
