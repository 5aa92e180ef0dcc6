# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Wizard step validation and navigation.

This module provides:
- StepCheck: the result of validating one step of a draft
- Per-step aggregate validators for the edit workflow
- StepGate: the step sequencer that only advances on a valid step

Field keys follow the names the UI uses for its inputs; row fields carry
their index (``contactValue_0``, ``entryTime_1``).

Example:
    >>> gate = StepGate()
    >>> gate.next(draft)
    False
    >>> gate.visible_errors(draft)
    {'modularCode': 'El código modular debe tener exactamente 7 dígitos'}
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

from src.domains.institution import validators as v
from src.domains.institution.exceptions import (
    StepTransitionError,
    StepValidationError,
    StructuralValidationError,
)
from src.domains.institution.models import InstitutionDraft, WizardStep
from src.domains.institution.schedules import validate_schedules
from src.utils.logging import get_logger

logger = get_logger(__name__)

STEP_ERROR = "Por favor, corrija los errores antes de continuar"


@dataclass(frozen=True)
class StepCheck:
    """Outcome of validating one wizard step.

    Attributes:
        fields: Every field checked by the step, mapped to its error
            message or None. The keys are the fields to mark as touched.
        structural_error: Cross-field rule violation, if any.
    """

    fields: Mapping[str, str | None] = field(default_factory=dict)
    structural_error: str | None = None

    @property
    def errors(self) -> dict[str, str]:
        """Only the failing fields."""
        return {name: error for name, error in self.fields.items() if error}

    @property
    def ok(self) -> bool:
        return not self.errors and self.structural_error is None


StepValidator = Callable[[InstitutionDraft], StepCheck]


# =============================================================================
# Step validators (edit workflow)
# =============================================================================


def check_basic_info(draft: InstitutionDraft) -> StepCheck:
    info = draft.information
    return StepCheck(
        fields={
            "institutionName": v.validate_institution_name(info.institution_name),
            "codeInstitution": v.validate_code_institution(info.code_institution),
            "modularCode": v.validate_modular_code(info.modular_code),
            "institutionType": v.validate_institution_type(info.institution_type),
            "institutionLevel": v.validate_institution_level(info.institution_level),
            "gender": v.validate_gender(info.gender),
            "slogan": v.validate_slogan(info.slogan),
            "logoUrl": v.validate_logo_url(info.logo_url),
        }
    )


def check_address_contact(draft: InstitutionDraft) -> StepCheck:
    address = draft.address
    fields: dict[str, str | None] = {
        "department": v.validate_department(address.department),
        "province": v.validate_province(address.province),
        "district": v.validate_district(address.district),
        "postalCode": v.validate_postal_code(address.postal_code),
        "street": v.validate_street(address.street),
    }
    for index, contact in enumerate(draft.contact_methods):
        fields[f"contactType_{index}"] = v.validate_contact_type(contact.type)
        fields[f"contactValue_{index}"] = v.validate_contact_value(contact.type, contact.value)

    return StepCheck(
        fields=fields,
        structural_error=v.validate_at_least_one_contact(draft.contact_methods),
    )


def check_academic_config(draft: InstitutionDraft) -> StepCheck:
    """Grading/classroom type, partially filled schedule rows, shift windows."""
    fields: dict[str, str | None] = {
        "gradingType": v.validate_grading_type(draft.grading_type),
        "classroomType": v.validate_classroom_type(draft.classroom_type),
    }
    for index, schedule in enumerate(draft.schedules):
        if schedule.is_blank:
            continue
        fields[f"scheduleType_{index}"] = (
            None if schedule.shift_type else "Debe seleccionar un turno"
        )
        fields[f"entryTime_{index}"] = None if schedule.entry_time else "Debe ingresar ambas horas"
        fields[f"exitTime_{index}"] = None if schedule.exit_time else "Debe ingresar ambas horas"

    violation = validate_schedules(draft.schedules)
    return StepCheck(
        fields=fields,
        structural_error=violation.message if violation else None,
    )


def check_director(draft: InstitutionDraft) -> StepCheck:
    """The edit workflow changes directors through staging only."""
    return StepCheck()


def check_final_config(draft: InstitutionDraft) -> StepCheck:
    return StepCheck(
        fields={
            "ugel": v.validate_ugel(draft.ugel),
            "dre": v.validate_dre(draft.dre),
        }
    )


EDIT_STEP_VALIDATORS: dict[WizardStep, StepValidator] = {
    WizardStep.BASIC_INFO: check_basic_info,
    WizardStep.ADDRESS_CONTACT: check_address_contact,
    WizardStep.ACADEMIC_CONFIG: check_academic_config,
    WizardStep.DIRECTOR: check_director,
    WizardStep.FINAL: check_final_config,
}

# Steps with hard structural invariants, re-checked before submitting
EDIT_SUBMIT_STEPS = (
    WizardStep.BASIC_INFO,
    WizardStep.ADDRESS_CONTACT,
    WizardStep.ACADEMIC_CONFIG,
)

_SUBMIT_ERRORS = {
    WizardStep.BASIC_INFO: "Hay errores en el Paso 1: Información Básica. Por favor, revise los campos.",
    WizardStep.ADDRESS_CONTACT: "Hay errores en el Paso 2: Dirección y Contacto. Por favor, revise los campos.",
    WizardStep.ACADEMIC_CONFIG: "Hay errores en el Paso 3: Configuración Académica.",
    WizardStep.DIRECTOR: "Hay errores en el Paso 4: Director. Por favor, complete todos los campos.",
    WizardStep.FINAL: "Hay errores en el Paso 5: Configuración Final. Por favor, complete los campos.",
}


# =============================================================================
# Step gate
# =============================================================================


class StepGate:
    """Finite-state sequencer over the wizard steps.

    Advances only when the active step validates. Keeps the state the UI
    renders: current step, touched fields and the step-level error.

    Attributes:
        current_step: Active step.
        touched: Fields whose errors should be shown.
        step_error: Step-level error message, if any.
    """

    def __init__(
        self,
        validators: Mapping[WizardStep, StepValidator] | None = None,
        submit_steps: Iterable[WizardStep] = EDIT_SUBMIT_STEPS,
    ) -> None:
        """Initialize the gate at the first step.

        Args:
            validators: Aggregate validator per step. Defaults to the edit
                workflow's validators.
            submit_steps: Steps re-validated, in order, before submitting.
        """
        self._validators = dict(validators or EDIT_STEP_VALIDATORS)
        self._submit_steps = tuple(submit_steps)
        self.current_step = WizardStep.BASIC_INFO
        self.touched: dict[str, bool] = {}
        self.step_error: str | None = None

    @property
    def is_terminal(self) -> bool:
        """Whether the gate is at the last step, where submit is allowed."""
        return self.current_step == WizardStep.FINAL

    def check(self, draft: InstitutionDraft, step: WizardStep | None = None) -> StepCheck:
        """Run the aggregate validator of a step (default: the current one)."""
        step = WizardStep(step or self.current_step)
        validator = self._validators.get(step)
        return validator(draft) if validator else StepCheck()

    def blur(self, field_name: str) -> None:
        """Mark a field as touched so its error renders."""
        self.touched[field_name] = True

    def next(self, draft: InstitutionDraft) -> bool:
        """Advance to the next step if the current one validates.

        All fields of the step are marked as touched first, so a failed
        attempt shows every error of the step.

        Args:
            draft: Current draft.

        Returns:
            True if the gate advanced.
        """
        result = self.check(draft)
        for name in result.fields:
            self.touched[name] = True

        if not result.ok:
            self.step_error = STEP_ERROR
            logger.debug(
                "Step blocked",
                step=int(self.current_step),
                errors=sorted(result.errors),
                structural_error=result.structural_error,
            )
            return False

        self.step_error = None
        if not self.is_terminal:
            self.current_step = WizardStep(self.current_step + 1)
        return True

    def prev(self) -> None:
        """Go back one step without validating."""
        self.step_error = None
        if self.current_step > WizardStep.BASIC_INFO:
            self.current_step = WizardStep(self.current_step - 1)

    def jump_to_step(self, step: int) -> None:
        """Move to an arbitrary step.

        Raises:
            StepTransitionError: If the step does not exist.
        """
        try:
            self.current_step = WizardStep(step)
        except ValueError as e:
            raise StepTransitionError(f"Unknown wizard step: {step}") from e

    def submit(self, draft: InstitutionDraft) -> None:
        """Re-validate the submit steps before committing.

        On the first failing step the gate jumps to it, marks its fields
        as touched and records an explanatory error.

        Args:
            draft: Draft about to be committed.

        Raises:
            StepTransitionError: If the gate is not at the last step.
            StepValidationError: If a submit step does not validate.
        """
        if not self.is_terminal:
            raise StepTransitionError(
                f"Submit is only allowed at step {int(WizardStep.FINAL)}",
                details={"current_step": int(self.current_step)},
            )

        for step in self._submit_steps:
            result = self.check(draft, step)
            if result.ok:
                continue

            message = _SUBMIT_ERRORS[step]
            if result.structural_error:
                message = f"{message} {result.structural_error}"
            elif step == WizardStep.ACADEMIC_CONFIG:
                message = f"{message} Por favor, revise los campos."

            self.jump_to_step(step)
            for name in result.fields:
                self.touched[name] = True
            self.step_error = message

            error_cls = StepValidationError
            if result.structural_error and not result.errors:
                error_cls = StructuralValidationError
            raise error_cls(message, step=int(step), field_errors=result.errors)

        self.step_error = None

    def field_errors(self, draft: InstitutionDraft) -> dict[str, str]:
        """Errors of every field across all steps."""
        errors: dict[str, str] = {}
        for step in WizardStep:
            errors.update(self.check(draft, step).errors)
        return errors

    def visible_errors(self, draft: InstitutionDraft) -> dict[str, str]:
        """Errors of the touched fields only."""
        return {
            name: error
            for name, error in self.field_errors(draft).items()
            if self.touched.get(name)
        }
