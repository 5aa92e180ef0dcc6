# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Staged director replacement.

Selecting a new director does not contact the backend. The candidate is
kept as a pending replacement and sent as the institution's director
reference when the edit is committed.
"""

from collections.abc import Iterable

from src.domains.institution.models import DirectorInfo, UserRecord
from src.utils.logging import get_logger

logger = get_logger(__name__)

DIRECTOR_ROLE = "DIRECTOR"
ACTIVE_STATUS = "ACTIVE"


def available_directors(
    users: Iterable[UserRecord],
    current_director_id: str | None = None,
    search: str = "",
) -> list[UserRecord]:
    """Filter users that can be assigned as director.

    A candidate is an active user with the director role, not assigned to
    any institution and not the current director. The search term matches
    the full name, e-mail or document number, case-insensitively.

    Args:
        users: Users to choose from.
        current_director_id: Director currently assigned, excluded.
        search: Optional search term.

    Returns:
        Matching candidates in input order.
    """
    term = search.strip().lower()
    candidates = []
    for user in users:
        if user.role != DIRECTOR_ROLE or user.status != ACTIVE_STATUS:
            continue
        if user.institution_id:
            continue
        if current_director_id and user.user_id == current_director_id:
            continue
        if term and not (
            term in user.full_name.lower()
            or term in user.email.lower()
            or term in user.document_number
        ):
            continue
        candidates.append(user)
    return candidates


class DirectorReassignmentStaging:
    """Holds an optional pending director replacement.

    Attributes:
        baseline: Director assigned when the session opened, if any.
        pending: Selected replacement, if any.
    """

    def __init__(self, baseline: UserRecord | None = None) -> None:
        self.baseline = baseline
        self.pending: UserRecord | None = None

    @property
    def is_pending(self) -> bool:
        return self.pending is not None

    def select(self, candidate: UserRecord) -> None:
        """Stage a candidate as the replacement director."""
        self.pending = candidate
        logger.debug("Director replacement staged", candidate_id=candidate.user_id)

    def cancel(self) -> None:
        """Drop the pending replacement."""
        self.pending = None

    def effective_director_id(self) -> str:
        """Director id to send on institution update.

        Returns:
            The pending candidate's id, else the baseline director's id,
            else an empty string.
        """
        if self.pending is not None:
            return self.pending.user_id
        if self.baseline is not None:
            return self.baseline.user_id
        return ""

    def effective_director(self) -> DirectorInfo:
        """Display data of the director that will be committed."""
        user = self.pending or self.baseline
        if user is None:
            return DirectorInfo()
        return DirectorInfo(
            first_name=user.first_name,
            last_name=user.last_name,
            document_type=user.document_type,
            document_number=user.document_number,
            phone=user.phone,
            email=user.email,
        )

    def commit(self) -> None:
        """Promote the pending candidate to baseline after a successful update."""
        if self.pending is not None:
            self.baseline = self.pending
            self.pending = None
