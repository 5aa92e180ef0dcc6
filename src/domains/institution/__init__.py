# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institution domain package.

This package provides the institution edit workflow including:
- Field and shift schedule validation
- Step-gated wizard navigation
- Staged classroom and director changes
- Ordered reconciliation of a staged edit with the backend
"""

from src.domains.institution.actions import (
    AddRow,
    DraftAction,
    RemoveRow,
    SetField,
    SetScalar,
    UpdateRow,
    reduce,
)
from src.domains.institution.classrooms import ClassroomChange, ClassroomDiffTracker
from src.domains.institution.committer import (
    CommitReport,
    CommitStatus,
    OperationKind,
    OperationOutcome,
    ReconciliationCommitter,
)
from src.domains.institution.director import (
    DirectorReassignmentStaging,
    available_directors,
)
from src.domains.institution.exceptions import (
    ClassroomStateError,
    ClassroomTrackingError,
    InstitutionWorkflowError,
    PrimaryCommitError,
    StepTransitionError,
    StepValidationError,
    StructuralValidationError,
    SubOperationError,
    UnknownClassroomError,
)
from src.domains.institution.models import (
    ClassroomDraft,
    ClassroomRecord,
    ClassroomStatus,
    ContactMethod,
    ContactType,
    InstitutionDraft,
    InstitutionRecord,
    Schedule,
    ShiftType,
    UserRecord,
    WizardStep,
)
from src.domains.institution.ports import (
    ConfirmationPrompter,
    InstitutionBackend,
    LoggingNotifier,
    Notifier,
)
from src.domains.institution.schedules import validate_schedule_time, validate_schedules
from src.domains.institution.steps import StepCheck, StepGate
from src.domains.institution.wizard import InstitutionEditSession

__all__ = [
    # Actions
    "AddRow",
    "DraftAction",
    "RemoveRow",
    "SetField",
    "SetScalar",
    "UpdateRow",
    "reduce",
    # Classrooms
    "ClassroomChange",
    "ClassroomDiffTracker",
    # Commit
    "CommitReport",
    "CommitStatus",
    "OperationKind",
    "OperationOutcome",
    "ReconciliationCommitter",
    # Director
    "DirectorReassignmentStaging",
    "available_directors",
    # Exceptions
    "ClassroomStateError",
    "ClassroomTrackingError",
    "InstitutionWorkflowError",
    "PrimaryCommitError",
    "StepTransitionError",
    "StepValidationError",
    "StructuralValidationError",
    "SubOperationError",
    "UnknownClassroomError",
    # Models
    "ClassroomDraft",
    "ClassroomRecord",
    "ClassroomStatus",
    "ContactMethod",
    "ContactType",
    "InstitutionDraft",
    "InstitutionRecord",
    "Schedule",
    "ShiftType",
    "UserRecord",
    "WizardStep",
    # Ports
    "ConfirmationPrompter",
    "InstitutionBackend",
    "LoggingNotifier",
    "Notifier",
    # Validation and navigation
    "StepCheck",
    "StepGate",
    "validate_schedule_time",
    "validate_schedules",
    # Session
    "InstitutionEditSession",
]
