# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Institution domain models.

This module defines the value types of the institution edit workflow:
- Enums for shifts, contact types, classroom status and wizard steps
- Backend records (InstitutionRecord, ClassroomRecord, UserRecord)
- The immutable InstitutionDraft edited by the wizard
- Request payloads sent to the backend

Models keep snake_case attribute names and camelCase aliases matching
the REST API. Use ``model_dump(by_alias=True, mode="json")`` to build
request bodies.
"""

from datetime import datetime
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShiftType(str, Enum):
    """Daily shift an institution schedule entry belongs to."""

    MORNING = "MAÑANA"
    AFTERNOON = "TARDE"


class ContactType(str, Enum):
    """Known contact method types."""

    PHONE = "TELEFONO"
    CELL = "CELULAR"
    WHATSAPP = "WHATSAPP"
    EMAIL = "EMAIL"
    WEBSITE = "WEBSITE"


PHONE_LIKE_CONTACT_TYPES = frozenset(
    {ContactType.PHONE.value, ContactType.CELL.value, ContactType.WHATSAPP.value}
)


class ClassroomStatus(str, Enum):
    """Classroom lifecycle status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class WizardStep(IntEnum):
    """Steps of the institution wizard, in navigation order."""

    BASIC_INFO = 1
    ADDRESS_CONTACT = 2
    ACADEMIC_CONFIG = 3
    DIRECTOR = 4
    FINAL = 5

    @property
    def title(self) -> str:
        """Step title as shown in the wizard progress bar."""
        return _STEP_TITLES[self]


_STEP_TITLES = {
    WizardStep.BASIC_INFO: "Información Básica",
    WizardStep.ADDRESS_CONTACT: "Dirección y Contacto",
    WizardStep.ACADEMIC_CONFIG: "Configuración Académica",
    WizardStep.DIRECTOR: "Director",
    WizardStep.FINAL: "Configuración Final",
}


class _ApiModel(BaseModel):
    """Base for models exchanged with the backend."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _DraftModel(BaseModel):
    """Base for immutable draft values."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


# =============================================================================
# Draft value types
# =============================================================================


class ContactMethod(_DraftModel):
    """A single contact channel of an institution."""

    type: str = ""
    value: str = ""

    @property
    def is_filled(self) -> bool:
        """Whether both type and value are present."""
        return bool(self.type and self.value)


class Address(_DraftModel):
    """Postal address of an institution."""

    department: str = ""
    province: str = ""
    district: str = ""
    street: str = ""
    postal_code: str = Field(default="", alias="postalCode")


class InstitutionInformation(_DraftModel):
    """Identity information of an institution."""

    institution_name: str = Field(default="", alias="institutionName")
    code_institution: str = Field(default="", alias="codeInstitution")
    modular_code: str = Field(default="", alias="modularCode")
    institution_type: str = Field(default="", alias="institutionType")
    institution_level: str = Field(default="", alias="institutionLevel")
    gender: str = ""
    slogan: str = ""
    logo_url: str = Field(default="", alias="logoUrl")


class Schedule(_DraftModel):
    """A shift schedule entry (times are ``HH:MM`` strings)."""

    shift_type: ShiftType | None = Field(default=None, alias="type")
    entry_time: str = Field(default="", alias="entryTime")
    exit_time: str = Field(default="", alias="exitTime")

    @field_validator("shift_type", mode="before")
    @classmethod
    def _blank_shift_is_unset(cls, value: object) -> object:
        return None if value == "" else value

    @property
    def is_complete(self) -> bool:
        """Whether shift type, entry time and exit time are all set."""
        return bool(self.shift_type and self.entry_time and self.exit_time)

    @property
    def is_blank(self) -> bool:
        """Whether no part of the entry has been filled."""
        return not (self.shift_type or self.entry_time or self.exit_time)


class ClassroomDraft(_DraftModel):
    """Local working copy of a classroom.

    A classroom without ``classroom_id`` has not been persisted yet.
    """

    classroom_id: str | None = Field(default=None, alias="classroomId")
    name: str = Field(default="", alias="classroomName")
    age: str = Field(default="", alias="classroomAge")
    capacity: int = 0
    color: str = "#3B82F6"
    status: ClassroomStatus = ClassroomStatus.ACTIVE

    @property
    def is_new(self) -> bool:
        """Whether this classroom has no backend identity yet."""
        return self.classroom_id is None

    def to_fields(self) -> dict:
        """Editable fields as sent to the classroom endpoints."""
        return ClassroomFields(
            name=self.name,
            age=self.age,
            capacity=self.capacity,
            color=self.color,
        ).model_dump(by_alias=True, mode="json")


class DirectorInfo(_DraftModel):
    """Director data displayed by the wizard."""

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    document_type: str = Field(default="", alias="documentType")
    document_number: str = Field(default="", alias="documentNumber")
    phone: str = ""
    email: str = ""
    role: str = "DIRECTOR"


# =============================================================================
# Backend records
# =============================================================================


class UserRecord(_ApiModel):
    """A platform user as returned by the backend."""

    user_id: str = Field(alias="userId")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    document_type: str = Field(default="", alias="documentType")
    document_number: str = Field(default="", alias="documentNumber")
    phone: str = ""
    email: str = ""
    role: str = ""
    status: str = ""
    institution_id: str | None = Field(default=None, alias="institutionId")

    @property
    def full_name(self) -> str:
        """First and last name joined by a space."""
        return f"{self.first_name} {self.last_name}".strip()


class ClassroomRecord(_ApiModel):
    """A classroom as returned by the backend."""

    classroom_id: str = Field(alias="classroomId")
    name: str = Field(default="", alias="classroomName")
    age: str = Field(default="", alias="classroomAge")
    capacity: int = 0
    color: str = ""
    institution_id: str | None = Field(default=None, alias="institutionId")
    status: ClassroomStatus = ClassroomStatus.ACTIVE
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class InstitutionRecord(_ApiModel):
    """An institution with its classrooms and users, as returned by the backend."""

    institution_id: str = Field(alias="institutionId")
    institution_information: InstitutionInformation = Field(
        default_factory=InstitutionInformation,
        alias="institutionInformation",
    )
    address: Address = Field(default_factory=Address)
    contact_methods: list[ContactMethod] = Field(default_factory=list, alias="contactMethods")
    grading_type: str = Field(default="", alias="gradingType")
    classroom_type: str = Field(default="", alias="classroomType")
    schedules: list[Schedule] = Field(default_factory=list)
    classrooms: list[ClassroomRecord] = Field(default_factory=list)
    director: UserRecord | None = None
    director_id: str | None = Field(default=None, alias="directorId")
    auxiliaries: list[UserRecord] = Field(default_factory=list)
    ugel: str = ""
    dre: str = ""
    status: str = "ACTIVE"


# =============================================================================
# Requests
# =============================================================================


class ClassroomFields(_ApiModel):
    """Editable classroom fields accepted by the classroom endpoints."""

    name: str = Field(alias="classroomName")
    age: str = Field(alias="classroomAge")
    capacity: int
    color: str


class InstitutionUpdateRequest(_ApiModel):
    """Body of the institution update call."""

    institution_information: InstitutionInformation = Field(alias="institutionInformation")
    address: Address
    contact_methods: list[ContactMethod] = Field(alias="contactMethods")
    grading_type: str = Field(alias="gradingType")
    classroom_type: str = Field(alias="classroomType")
    schedules: list[Schedule]
    director_id: str = Field(alias="directorId")
    auxiliary_ids: list[str] = Field(default_factory=list, alias="auxiliaryIds")
    ugel: str
    dre: str


# =============================================================================
# Draft aggregate
# =============================================================================


class InstitutionDraft(_DraftModel):
    """Immutable working copy of an institution being edited.

    Every change produces a new draft (see ``src.domains.institution.actions``).
    Classrooms are not part of the draft: the session's
    ClassroomDiffTracker owns them.
    """

    institution_id: str
    information: InstitutionInformation = Field(default_factory=InstitutionInformation)
    address: Address = Field(default_factory=Address)
    contact_methods: tuple[ContactMethod, ...] = (ContactMethod(),)
    grading_type: str = ""
    classroom_type: str = ""
    schedules: tuple[Schedule, ...] = (Schedule(),)
    director: DirectorInfo = Field(default_factory=DirectorInfo)
    auxiliary_ids: tuple[str, ...] = ()
    ugel: str = ""
    dre: str = ""

    @classmethod
    def from_record(cls, record: InstitutionRecord) -> "InstitutionDraft":
        """Seed a draft from an existing institution.

        Empty contact and schedule lists are seeded with one blank row.

        Args:
            record: Institution as fetched from the backend.

        Returns:
            New draft.
        """
        director = DirectorInfo()
        if record.director is not None:
            director = DirectorInfo(
                first_name=record.director.first_name,
                last_name=record.director.last_name,
                document_type=record.director.document_type,
                document_number=record.director.document_number,
                phone=record.director.phone,
                email=record.director.email,
            )

        return cls(
            institution_id=record.institution_id,
            information=record.institution_information,
            address=record.address,
            contact_methods=tuple(record.contact_methods) or (ContactMethod(),),
            grading_type=record.grading_type,
            classroom_type=record.classroom_type,
            schedules=tuple(record.schedules) or (Schedule(),),
            director=director,
            auxiliary_ids=tuple(aux.user_id for aux in record.auxiliaries),
            ugel=record.ugel,
            dre=record.dre,
        )

    def to_update_request(self, director_id: str) -> InstitutionUpdateRequest:
        """Build the institution update payload.

        Blank contact rows and incomplete schedule rows are left out.

        Args:
            director_id: Director reference to send (staged or current).

        Returns:
            Update request for the backend.
        """
        return InstitutionUpdateRequest(
            institution_information=self.information,
            address=self.address,
            contact_methods=[cm for cm in self.contact_methods if cm.is_filled],
            grading_type=self.grading_type,
            classroom_type=self.classroom_type,
            schedules=[s for s in self.schedules if s.is_complete],
            director_id=director_id,
            auxiliary_ids=list(self.auxiliary_ids),
            ugel=self.ugel,
            dre=self.dre,
        )
