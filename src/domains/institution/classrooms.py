# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Staged classroom changes for the institution edit workflow.

ClassroomDiffTracker owns the classrooms of one edit session. Persisted
classrooms are tracked by id against the baseline snapshot taken when the
session opened; classrooms added during the session have no id and live
in a separate append-only list.

Each persisted classroom has at most one pending lifecycle change
(deleted or restored), so a classroom can never be both. Field edits are
tracked separately.

Example:
    >>> tracker = ClassroomDiffTracker(record.classrooms)
    >>> tracker.mark_deleted("c-1")
    >>> tracker.mark_restored("c-1")
    >>> tracker.deleted, tracker.restored
    (frozenset(), frozenset({'c-1'}))
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from src.domains.institution.exceptions import ClassroomStateError, UnknownClassroomError
from src.domains.institution.models import (
    ClassroomDraft,
    ClassroomRecord,
    ClassroomStatus,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)


class ClassroomChange(str, Enum):
    """Pending change of a classroom in the current session."""

    UNCHANGED = "unchanged"
    EDITED = "edited"
    DELETED = "deleted"
    RESTORED = "restored"
    NEW = "new"


_EDITABLE_FIELDS = frozenset({"name", "age", "capacity", "color"})


def to_draft(classroom: ClassroomRecord | ClassroomDraft) -> ClassroomDraft:
    """Build a local working copy of a classroom."""
    if isinstance(classroom, ClassroomDraft):
        return classroom
    return ClassroomDraft(
        classroom_id=classroom.classroom_id,
        name=classroom.name,
        age=classroom.age,
        capacity=classroom.capacity,
        color=classroom.color,
        status=classroom.status,
    )


class ClassroomDiffTracker:
    """Tracks edited, deleted, restored and new classrooms of a session.

    Attributes:
        _baseline: Classrooms as they were when the session opened.
        _classrooms: Local working copies of the persisted classrooms.
        _lifecycle: Pending delete or restore per classroom id.
        _edited: Ids of classrooms with local field edits.
        _new: Classrooms added in this session (no id yet).
    """

    def __init__(self, baseline: Iterable[ClassroomRecord | ClassroomDraft]) -> None:
        """Take the baseline snapshot.

        Args:
            baseline: Persisted classrooms of the institution.

        Raises:
            ValueError: If a baseline classroom has no id.
        """
        self._baseline: dict[str, ClassroomDraft] = {}
        for classroom in baseline:
            draft = to_draft(classroom)
            if draft.classroom_id is None:
                raise ValueError("Baseline classrooms must have an id")
            self._baseline[draft.classroom_id] = draft

        self._classrooms: dict[str, ClassroomDraft] = dict(self._baseline)
        self._lifecycle: dict[str, ClassroomChange] = {}
        self._edited: set[str] = set()
        self._new: list[ClassroomDraft] = []

    # =========================================================================
    # Diff sets
    # =========================================================================

    @property
    def edited(self) -> frozenset[str]:
        return frozenset(self._edited)

    @property
    def deleted(self) -> frozenset[str]:
        return self._with_lifecycle(ClassroomChange.DELETED)

    @property
    def restored(self) -> frozenset[str]:
        return self._with_lifecycle(ClassroomChange.RESTORED)

    @property
    def new_classrooms(self) -> tuple[ClassroomDraft, ...]:
        return tuple(self._new)

    @property
    def has_changes(self) -> bool:
        return bool(self._edited or self._lifecycle or self._new)

    def _with_lifecycle(self, change: ClassroomChange) -> frozenset[str]:
        return frozenset(cid for cid, mark in self._lifecycle.items() if mark is change)

    # =========================================================================
    # Views
    # =========================================================================

    def get(self, classroom_id: str) -> ClassroomDraft:
        """Current working copy of a persisted classroom.

        Raises:
            UnknownClassroomError: If the id is not in the baseline.
        """
        self._require_known(classroom_id)
        return self._classrooms[classroom_id]

    def baseline(self, classroom_id: str) -> ClassroomDraft:
        """Classroom as it was when the session opened."""
        self._require_known(classroom_id)
        return self._baseline[classroom_id]

    @property
    def classrooms(self) -> list[ClassroomDraft]:
        """Persisted classrooms in baseline order, then new ones."""
        return [*self._classrooms.values(), *self._new]

    @property
    def active_classrooms(self) -> list[ClassroomDraft]:
        return [c for c in self._classrooms.values() if c.status == ClassroomStatus.ACTIVE]

    @property
    def inactive_classrooms(self) -> list[ClassroomDraft]:
        return [c for c in self._classrooms.values() if c.status == ClassroomStatus.INACTIVE]

    def change_for(self, classroom_id: str) -> ClassroomChange:
        """Pending change of a persisted classroom.

        A pending delete or restore takes precedence over a field edit.
        """
        self._require_known(classroom_id)
        if classroom_id in self._lifecycle:
            return self._lifecycle[classroom_id]
        if classroom_id in self._edited:
            return ClassroomChange.EDITED
        return ClassroomChange.UNCHANGED

    def pending_updates(self) -> list[ClassroomDraft]:
        """Edited classrooms with no pending delete or restore."""
        return [
            self._classrooms[cid]
            for cid in self._classrooms
            if cid in self._edited and cid not in self._lifecycle
        ]

    # =========================================================================
    # Staging
    # =========================================================================

    def mark_edited(self, classroom_id: str) -> None:
        """Record that a persisted classroom has local field edits.

        Raises:
            UnknownClassroomError: If the id is not in the baseline.
            ClassroomStateError: If a delete or restore is pending.
        """
        self._require_known(classroom_id)
        pending = self._lifecycle.get(classroom_id)
        if pending is not None:
            raise ClassroomStateError(
                f"Classroom {classroom_id} has a pending {pending.value} and cannot be edited",
                details={"classroom_id": classroom_id, "pending": pending.value},
            )
        self._edited.add(classroom_id)

    def edit(self, classroom_id: str, **changes: Any) -> ClassroomDraft:
        """Apply local field edits to a persisted classroom and mark it edited.

        Args:
            classroom_id: Classroom to edit.
            **changes: New values for name, age, capacity or color.

        Returns:
            Updated working copy.

        Raises:
            ValueError: If a non-editable field is given.
            UnknownClassroomError: If the id is not in the baseline.
            ClassroomStateError: If a delete or restore is pending.
        """
        _check_editable(changes)
        self.mark_edited(classroom_id)
        current = self._classrooms[classroom_id]
        updated = ClassroomDraft.model_validate({**current.model_dump(), **changes})
        self._classrooms[classroom_id] = updated
        logger.debug("Classroom edited locally", classroom_id=classroom_id, fields=sorted(changes))
        return updated

    def mark_deleted(self, classroom_id: str) -> None:
        """Stage a soft delete; the classroom shows as inactive.

        Raises:
            UnknownClassroomError: If the id is not in the baseline.
        """
        self._require_known(classroom_id)
        self._lifecycle[classroom_id] = ClassroomChange.DELETED
        self._set_status(classroom_id, ClassroomStatus.INACTIVE)

    def mark_restored(self, classroom_id: str) -> None:
        """Stage a restore; the classroom shows as active.

        Raises:
            UnknownClassroomError: If the id is not in the baseline.
        """
        self._require_known(classroom_id)
        self._lifecycle[classroom_id] = ClassroomChange.RESTORED
        self._set_status(classroom_id, ClassroomStatus.ACTIVE)

    def add_new(self, classroom: ClassroomDraft | None = None) -> int:
        """Append a classroom without backend identity.

        Args:
            classroom: Classroom to add. A blank one is added if omitted.

        Returns:
            Index of the classroom in the new-classrooms list.

        Raises:
            ValueError: If the classroom already has an id.
        """
        classroom = classroom or ClassroomDraft()
        if not classroom.is_new:
            raise ValueError("New classrooms must not have an id")
        self._new.append(classroom)
        return len(self._new) - 1

    def update_new(self, index: int, **changes: Any) -> ClassroomDraft:
        """Apply field edits to a classroom of the new-classrooms list."""
        _check_editable(changes)
        current = self._new[index]
        updated = ClassroomDraft.model_validate({**current.model_dump(), **changes})
        self._new[index] = updated
        return updated

    def remove_new(self, index: int) -> ClassroomDraft:
        """Drop a classroom from the new-classrooms list."""
        return self._new.pop(index)

    def discard_new(self) -> None:
        """Empty the new-classrooms list."""
        self._new.clear()

    def reset(self) -> None:
        """Clear the edited, deleted and restored sets.

        The working copies become the new baseline.
        """
        self._baseline = dict(self._classrooms)
        self._lifecycle.clear()
        self._edited.clear()

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _require_known(self, classroom_id: str) -> None:
        if classroom_id not in self._baseline:
            raise UnknownClassroomError(classroom_id)

    def _set_status(self, classroom_id: str, status: ClassroomStatus) -> None:
        current = self._classrooms[classroom_id]
        self._classrooms[classroom_id] = current.model_copy(update={"status": status})


def _check_editable(changes: dict[str, Any]) -> None:
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Non-editable classroom fields: {', '.join(sorted(unknown))}")
