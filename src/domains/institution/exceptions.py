# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions for the institution edit workflow.

This module defines the exception hierarchy of the workflow:
- InstitutionWorkflowError: Base exception for all workflow errors
- StepValidationError: A wizard step does not validate
- StructuralValidationError: A cross-field rule of a step is violated
- StepTransitionError: A wizard operation is not allowed in the current step
- ClassroomTrackingError: Staged classroom changes cannot be applied
- PrimaryCommitError: The institution update failed, nothing was committed
- SubOperationError: A classroom call failed during reconciliation
"""


class InstitutionWorkflowError(Exception):
    """Base exception for all institution workflow errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        """Initialize workflow error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class StepValidationError(InstitutionWorkflowError):
    """A wizard step failed its aggregate validation.

    Attributes:
        step: Number of the failing step.
        field_errors: Field name to error message for the failing fields.
    """

    def __init__(
        self,
        message: str,
        step: int,
        field_errors: dict[str, str] | None = None,
        details: dict | None = None,
    ):
        """Initialize step validation error.

        Args:
            message: Human-readable error description.
            step: Number of the failing step.
            field_errors: Field name to error message for the failing fields.
            details: Optional dictionary with additional error context.
        """
        self.step = step
        self.field_errors = field_errors or {}
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with the step number."""
        return f"[step {self.step}] {self.message}"


class StructuralValidationError(StepValidationError):
    """A cross-field rule of a step is violated (duplicate shifts, no contact)."""

    pass


class StepTransitionError(InstitutionWorkflowError):
    """Raised when a wizard operation is not allowed in the current step."""

    pass


class ClassroomTrackingError(InstitutionWorkflowError):
    """Base exception for staged classroom change errors."""

    pass


class UnknownClassroomError(ClassroomTrackingError):
    """Raised when a classroom id is not part of the baseline snapshot.

    Attributes:
        classroom_id: The id that was not found.
    """

    def __init__(self, classroom_id: str, details: dict | None = None):
        """Initialize unknown classroom error.

        Args:
            classroom_id: The id that was not found.
            details: Optional dictionary with additional error context.
        """
        self.classroom_id = classroom_id
        super().__init__(f"Classroom {classroom_id} is not part of this institution", details)


class ClassroomStateError(ClassroomTrackingError):
    """Raised when a change conflicts with a pending delete or restore."""

    pass


class PrimaryCommitError(InstitutionWorkflowError):
    """The institution update call failed; no classroom call was issued.

    Attributes:
        institution_id: Institution that could not be updated.
    """

    def __init__(
        self,
        message: str,
        institution_id: str,
        details: dict | None = None,
    ):
        """Initialize primary commit error.

        Args:
            message: Human-readable error description.
            institution_id: Institution that could not be updated.
            details: Optional dictionary with additional error context.
        """
        self.institution_id = institution_id
        super().__init__(message, details)


class SubOperationError(InstitutionWorkflowError):
    """A classroom call failed during reconciliation.

    Recorded in the commit report; never raised out of the committer.

    Attributes:
        operation: Operation that failed (delete, restore, update, create).
        classroom_id: Classroom involved, None for creations.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        classroom_id: str | None = None,
        details: dict | None = None,
    ):
        """Initialize sub-operation error.

        Args:
            message: Human-readable error description.
            operation: Operation that failed.
            classroom_id: Classroom involved, None for creations.
            details: Optional dictionary with additional error context.
        """
        self.operation = operation
        self.classroom_id = classroom_id
        super().__init__(message, details)

    def __str__(self) -> str:
        """Return string representation with operation context."""
        base = f"[{self.operation}] {self.message}"
        if self.classroom_id:
            base = f"{base} (classroom_id: {self.classroom_id})"
        return base
