# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the wizard step gate."""

import pytest

from src.domains.institution.actions import AddRow, SetField, SetScalar, UpdateRow, reduce
from src.domains.institution.exceptions import (
    StepTransitionError,
    StepValidationError,
    StructuralValidationError,
)
from src.domains.institution.models import InstitutionDraft, WizardStep
from src.domains.institution.steps import (
    STEP_ERROR,
    StepGate,
    check_academic_config,
    check_address_contact,
    check_basic_info,
)


@pytest.fixture
def gate() -> StepGate:
    """Create a step gate at step 1."""
    return StepGate()


def _at_final_step(gate: StepGate) -> StepGate:
    gate.jump_to_step(WizardStep.FINAL)
    return gate


class TestStepChecks:
    """Tests for the per-step aggregate validators."""

    def test_valid_draft_passes_every_step(self, valid_draft, gate) -> None:
        """Test the sample draft validates on every step."""
        for step in WizardStep:
            assert gate.check(valid_draft, step).ok, step

    def test_modular_code_error_only(self, valid_draft) -> None:
        """Test an 8-digit code and 6-digit modular code report only the modular code."""
        draft = reduce(valid_draft, SetField("information", "code_institution", "12345678"))
        draft = reduce(draft, SetField("information", "modular_code", "123456"))

        result = check_basic_info(draft)

        assert result.errors == {
            "modularCode": "El código modular debe tener exactamente 7 dígitos",
        }

    def test_contact_fields_indexed(self, valid_draft) -> None:
        """Test contact errors are keyed by row index."""
        draft = reduce(valid_draft, AddRow("contact_methods"))
        draft = reduce(draft, UpdateRow("contact_methods", 1, "type", "TELEFONO"))
        draft = reduce(draft, UpdateRow("contact_methods", 1, "value", "812345678"))

        result = check_address_contact(draft)

        assert result.errors == {"contactValue_1": "Debe comenzar con 9"}
        assert result.structural_error is None

    def test_no_contact_is_structural(self, valid_draft) -> None:
        """Test the at-least-one-contact rule is a structural error."""
        draft = reduce(valid_draft, UpdateRow("contact_methods", 0, "value", ""))

        result = check_address_contact(draft)

        assert result.structural_error == "Debe agregar al menos un método de contacto"

    def test_partial_schedule_row_required_fields(self, valid_draft) -> None:
        """Test a partially filled schedule row reports its missing fields."""
        draft = reduce(valid_draft, AddRow("schedules"))
        draft = reduce(draft, UpdateRow("schedules", 1, "entry_time", "13:30"))

        result = check_academic_config(draft)

        assert result.errors == {
            "scheduleType_1": "Debe seleccionar un turno",
            "exitTime_1": "Debe ingresar ambas horas",
        }

    def test_blank_schedule_row_ignored(self, valid_draft) -> None:
        """Test a blank schedule row adds no errors."""
        draft = reduce(valid_draft, AddRow("schedules"))

        assert check_academic_config(draft).ok


class TestStepGateNavigation:
    """Tests for next/prev/jump."""

    def test_next_advances_when_valid(self, valid_draft, gate) -> None:
        """Test next() advances when the step validates."""
        assert gate.next(valid_draft)
        assert gate.current_step == WizardStep.ADDRESS_CONTACT
        assert gate.step_error is None

    def test_next_refuses_when_invalid(self, valid_draft, gate) -> None:
        """Test next() never advances on a failing step."""
        draft = reduce(valid_draft, SetField("information", "modular_code", "123456"))

        assert not gate.next(draft)
        assert gate.current_step == WizardStep.BASIC_INFO
        assert gate.step_error == STEP_ERROR

    def test_next_touches_step_fields(self, valid_draft, gate) -> None:
        """Test a failed next() makes every error of the step visible."""
        draft = reduce(valid_draft, SetField("information", "modular_code", "123456"))

        gate.next(draft)

        assert gate.visible_errors(draft) == {
            "modularCode": "El código modular debe tener exactamente 7 dígitos",
        }

    def test_untouched_errors_hidden(self, valid_draft, gate) -> None:
        """Test errors stay hidden until the field is blurred."""
        draft = reduce(valid_draft, SetScalar("ugel", ""))

        assert gate.visible_errors(draft) == {}
        gate.blur("ugel")
        assert gate.visible_errors(draft) == {"ugel": "La UGEL es requerida"}

    def test_walks_all_steps(self, valid_draft, gate) -> None:
        """Test a valid draft reaches the final step and stays there."""
        for _ in range(4):
            assert gate.next(valid_draft)

        assert gate.is_terminal
        assert gate.next(valid_draft)
        assert gate.current_step == WizardStep.FINAL

    def test_prev(self, valid_draft, gate) -> None:
        """Test prev() goes back without validating and stops at step 1."""
        gate.next(valid_draft)
        gate.step_error = "old"

        gate.prev()
        assert gate.current_step == WizardStep.BASIC_INFO
        assert gate.step_error is None

        gate.prev()
        assert gate.current_step == WizardStep.BASIC_INFO

    def test_jump_to_unknown_step(self, gate) -> None:
        with pytest.raises(StepTransitionError):
            gate.jump_to_step(9)


class TestStepGateSubmit:
    """Tests for submit-time re-validation."""

    def test_submit_only_at_final_step(self, valid_draft, gate) -> None:
        """Test submit is refused before the last step."""
        with pytest.raises(StepTransitionError):
            gate.submit(valid_draft)

    def test_submit_valid(self, valid_draft, gate) -> None:
        """Test submit passes for a valid draft."""
        _at_final_step(gate).submit(valid_draft)

        assert gate.step_error is None
        assert gate.current_step == WizardStep.FINAL

    def test_submit_jumps_to_first_failing_step(self, valid_draft, gate) -> None:
        """Test submit moves to the first failing step and explains why."""
        draft = reduce(valid_draft, SetField("address", "district", "Distrito 9"))

        with pytest.raises(StepValidationError) as exc_info:
            _at_final_step(gate).submit(draft)

        assert exc_info.value.step == 2
        assert exc_info.value.field_errors == {"district": "Solo se permiten letras"}
        assert gate.current_step == WizardStep.ADDRESS_CONTACT
        assert gate.step_error == (
            "Hay errores en el Paso 2: Dirección y Contacto. Por favor, revise los campos."
        )
        assert gate.touched["district"]

    def test_submit_duplicate_shift_is_structural(self, valid_draft, gate) -> None:
        """Test a duplicate shift blocks submit with the schedule message."""
        draft = reduce(valid_draft, AddRow("schedules"))
        draft = reduce(draft, UpdateRow("schedules", 1, "shift_type", "MAÑANA"))
        draft = reduce(draft, UpdateRow("schedules", 1, "entry_time", "08:00"))
        draft = reduce(draft, UpdateRow("schedules", 1, "exit_time", "12:00"))

        with pytest.raises(StructuralValidationError) as exc_info:
            _at_final_step(gate).submit(draft)

        assert exc_info.value.step == 3
        assert gate.current_step == WizardStep.ACADEMIC_CONFIG
        assert gate.step_error == (
            "Hay errores en el Paso 3: Configuración Académica. "
            "No puede haber turnos duplicados. Solo un turno Mañana y/o un turno Tarde"
        )

    def test_submit_does_not_recheck_final_step(self, valid_draft, gate) -> None:
        """Test submit re-validates steps 1-3 only."""
        draft = reduce(valid_draft, SetScalar("dre", ""))

        _at_final_step(gate).submit(draft)

        assert gate.current_step == WizardStep.FINAL


class TestFieldErrors:
    """Tests for the full error map."""

    def test_empty_draft_reports_required_fields(self) -> None:
        """Test a blank draft reports required fields of every step."""
        errors = StepGate().field_errors(InstitutionDraft(institution_id="inst-1"))

        assert errors["institutionName"] == "El nombre es requerido"
        assert errors["department"] == "El departamento es requerido"
        assert errors["contactType_0"] == "Debe seleccionar un tipo de contacto"
        assert errors["gradingType"] == "Debe seleccionar un tipo de calificación"
        assert errors["ugel"] == "La UGEL es requerida"
        assert "postalCode" not in errors
