# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shift schedule validation.

An institution works in at most two shifts, one per shift type, and each
entry must fit inside its shift's canonical window:

- MORNING (MAÑANA): 07:00 to 13:00
- AFTERNOON (TARDE): 13:00 to 18:00

Only complete entries (shift type, entry and exit time set) take part in
this check. Partially filled rows are reported by the step-level
required-field check instead.

Example:
    >>> violation = validate_schedules([
    ...     Schedule(shift_type=ShiftType.MORNING, entry_time="07:00", exit_time="13:00"),
    ...     Schedule(shift_type=ShiftType.MORNING, entry_time="08:00", exit_time="12:00"),
    ... ])
    >>> violation.structural
    True
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from src.domains.institution.models import Schedule, ShiftType

MAX_SHIFTS = 2

_TIME = re.compile(r"([0-9]{1,2}):([0-9]{2})(?::[0-9]{2})?")


@dataclass(frozen=True)
class ShiftWindow:
    """Canonical bounds of a shift, in minutes since midnight."""

    start: int
    end: int

    @property
    def start_label(self) -> str:
        return _format_minutes(self.start)

    @property
    def end_label(self) -> str:
        return _format_minutes(self.end)


SHIFT_WINDOWS: dict[ShiftType, ShiftWindow] = {
    ShiftType.MORNING: ShiftWindow(start=7 * 60, end=13 * 60),
    ShiftType.AFTERNOON: ShiftWindow(start=13 * 60, end=18 * 60),
}

_SHIFT_LABELS = {
    ShiftType.MORNING: "mañana",
    ShiftType.AFTERNOON: "tarde",
}


@dataclass(frozen=True)
class ScheduleViolation:
    """First rule broken by a schedule list.

    Attributes:
        message: Error message to show on the academic configuration step.
        shift_type: Shift of the offending entry, None for list-level rules.
        structural: True for cross-entry rules (count, duplicates).
    """

    message: str
    shift_type: ShiftType | None = None
    structural: bool = False


def to_minutes(value: str) -> int | None:
    """Convert an ``HH:MM`` or ``HH:MM:SS`` string to minutes since midnight.

    Seconds are ignored.

    Returns:
        Minutes, or None if the value is not a valid time of day.
    """
    match = _TIME.fullmatch(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def _format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def validate_schedule_time(
    shift_type: ShiftType,
    entry_time: str,
    exit_time: str,
) -> str | None:
    """Validate one entry against its shift window.

    Args:
        shift_type: Shift of the entry.
        entry_time: Entry time as ``HH:MM`` or ``HH:MM:SS``.
        exit_time: Exit time as ``HH:MM`` or ``HH:MM:SS``.

    Returns:
        Error message, or None when the entry fits its window.
    """
    if not entry_time or not exit_time:
        return "Debe ingresar ambas horas"

    entry = to_minutes(entry_time)
    exit_ = to_minutes(exit_time)
    if entry is None or exit_ is None:
        return "Formato de hora inválido"

    if entry >= exit_:
        return "La hora de entrada debe ser antes que la de salida"

    window = SHIFT_WINDOWS.get(shift_type)
    if window is None:
        return "Tipo de turno inválido"

    label = _SHIFT_LABELS[shift_type]
    if entry < window.start:
        return f"El turno {label} debe iniciar desde las {window.start_label}"
    if exit_ > window.end:
        return f"El turno {label} debe terminar hasta las {window.end_label}"
    if entry >= window.end:
        return f"La hora de entrada debe ser antes de las {window.end_label}"
    return None


def validate_schedules(schedules: Iterable[Schedule]) -> ScheduleViolation | None:
    """Validate the full schedule list of an institution.

    Checks run in order and the first violation wins: at least one
    complete entry, at most two, no repeated shift type, then each
    entry's window.

    Args:
        schedules: All schedule rows of the draft.

    Returns:
        The first violation found, or None when the list is valid.
    """
    complete = [s for s in schedules if s.is_complete]

    if not complete:
        return ScheduleViolation("Debe agregar al menos un horario", structural=True)

    if len(complete) > MAX_SHIFTS:
        return ScheduleViolation(
            "Solo se permiten máximo 2 turnos (Mañana y Tarde)",
            structural=True,
        )

    seen: set[ShiftType] = set()
    for schedule in complete:
        if schedule.shift_type in seen:
            return ScheduleViolation(
                "No puede haber turnos duplicados. Solo un turno Mañana y/o un turno Tarde",
                shift_type=schedule.shift_type,
                structural=True,
            )
        seen.add(schedule.shift_type)

    for schedule in complete:
        error = validate_schedule_time(
            schedule.shift_type,
            schedule.entry_time,
            schedule.exit_time,
        )
        if error:
            return ScheduleViolation(
                f"Turno {schedule.shift_type.value}: {error}",
                shift_type=schedule.shift_type,
            )

    return None
