# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Draft actions and reducer.

Every change the user makes to the institution draft is expressed as a
discrete action. ``reduce`` applies one action to a draft and returns a
new draft; drafts are never mutated in place.

Example:
    >>> draft = reduce(draft, SetField("information", "modular_code", "1234567"))
    >>> draft = reduce(draft, AddRow("schedules"))
    >>> draft = reduce(draft, UpdateRow("schedules", 1, "entry_time", "13:30"))
"""

from dataclasses import dataclass
from typing import Any, Literal

from src.domains.institution.models import (
    ContactMethod,
    InstitutionDraft,
    Schedule,
)

Section = Literal["information", "address", "director"]
Scalar = Literal["grading_type", "classroom_type", "ugel", "dre"]
RowSection = Literal["contact_methods", "schedules"]

_BLANK_ROWS = {
    "contact_methods": ContactMethod,
    "schedules": Schedule,
}


@dataclass(frozen=True)
class SetField:
    """Set a field of a nested section (information, address, director)."""

    section: Section
    field: str
    value: Any


@dataclass(frozen=True)
class SetScalar:
    """Set a top-level scalar (grading/classroom type, UGEL, DRE)."""

    field: Scalar
    value: str


@dataclass(frozen=True)
class AddRow:
    """Append a blank contact or schedule row."""

    section: RowSection


@dataclass(frozen=True)
class UpdateRow:
    """Set a field of one contact or schedule row."""

    section: RowSection
    index: int
    field: str
    value: Any


@dataclass(frozen=True)
class RemoveRow:
    """Remove one contact or schedule row."""

    section: RowSection
    index: int


DraftAction = SetField | SetScalar | AddRow | UpdateRow | RemoveRow


def reduce(draft: InstitutionDraft, action: DraftAction) -> InstitutionDraft:
    """Apply an action to a draft.

    Args:
        draft: Current draft.
        action: Change to apply.

    Returns:
        New draft with the change applied.

    Raises:
        ValueError: If the action names an unknown field.
        IndexError: If a row index is out of range.
    """
    match action:
        case SetField(section=section, field=field, value=value):
            current = getattr(draft, section)
            _check_field(current, field)
            updated = current.model_validate(
                {**current.model_dump(), field: value}
            )
            return draft.model_copy(update={section: updated})

        case SetScalar(field=field, value=value):
            _check_field(draft, field)
            return draft.model_copy(update={field: value})

        case AddRow(section=section):
            rows = getattr(draft, section)
            return draft.model_copy(update={section: (*rows, _BLANK_ROWS[section]())})

        case UpdateRow(section=section, index=index, field=field, value=value):
            rows = list(getattr(draft, section))
            row = rows[index]
            _check_field(row, field)
            rows[index] = row.model_validate({**row.model_dump(), field: value})
            return draft.model_copy(update={section: tuple(rows)})

        case RemoveRow(section=section, index=index):
            rows = list(getattr(draft, section))
            del rows[index]
            return draft.model_copy(update={section: tuple(rows)})

    raise ValueError(f"Unsupported draft action: {action!r}")


def _check_field(model: Any, field: str) -> None:
    if field not in type(model).model_fields:
        raise ValueError(f"{type(model).__name__} has no field '{field}'")
