# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Field validators shared by the institution create and edit workflows.

Every validator is a pure function that takes a field value and returns
the error message to show next to the field, or None when the value is
valid. Messages are the Spanish UI strings of the admin console.

Example:
    >>> validate_modular_code("123456")
    'El código modular debe tener exactamente 7 dígitos'
    >>> validate_contact_value("TELEFONO", "912345678") is None
    True
"""

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from src.domains.institution.models import (
    PHONE_LIKE_CONTACT_TYPES,
    ContactMethod,
    ContactType,
)

_LETTERS = re.compile(r"[a-zA-ZáéíóúÁÉÍÓÚñÑ\s]+")
_STREET = re.compile(r"[a-zA-Z0-9áéíóúÁÉÍÓÚñÑ\s.,#-]+")
_DIGITS = re.compile(r"[0-9]+")
_INSTITUTION_CODE = re.compile(r"[0-9]{8}")
_MODULAR_CODE = re.compile(r"[0-9]{7}")
_PHONE = re.compile(r"[0-9]{9}")
_PHONE_SEPARATORS = re.compile(r"[\s-]")
_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_WEBSITE = re.compile(r"(https?://)?[\da-z.-]+\.[a-z.]{2,6}[/\w .-]*", re.ASCII)
_URL_PREFIX = re.compile(r"(https?://|www\.|[a-zA-Z0-9])")

MIN_NAME_LENGTH = 5
MIN_SLOGAN_LENGTH = 5


# =============================================================================
# Basic information
# =============================================================================


def validate_institution_name(name: str) -> str | None:
    """Require a name of at least five characters."""
    if not name:
        return "El nombre es requerido"
    if len(name) < MIN_NAME_LENGTH:
        return "El nombre debe tener al menos 5 caracteres"
    return None


def validate_code_institution(code: str) -> str | None:
    """Require an institution code of exactly eight digits."""
    if not code:
        return "El código de institución es requerido"
    if not _INSTITUTION_CODE.fullmatch(code):
        return "El código debe tener exactamente 8 dígitos"
    return None


def validate_modular_code(code: str) -> str | None:
    """Require a modular code of exactly seven digits."""
    if not code:
        return "El código modular es requerido"
    if not _MODULAR_CODE.fullmatch(code):
        return "El código modular debe tener exactamente 7 dígitos"
    return None


def validate_institution_type(value: str) -> str | None:
    """Require a selected institution type."""
    if not value:
        return "Debe seleccionar un tipo de institución"
    return None


def validate_institution_level(value: str) -> str | None:
    """Require a selected institution level."""
    if not value:
        return "Debe seleccionar un nivel de institución"
    return None


def validate_gender(value: str) -> str | None:
    """Require a selected gender."""
    if not value:
        return "Debe seleccionar un género"
    return None


def validate_slogan(slogan: str) -> str | None:
    """Slogan is optional, but short slogans are rejected."""
    if not slogan:
        return None
    if len(slogan) < MIN_SLOGAN_LENGTH:
        return "El lema debe tener al menos 5 caracteres"
    return None


def validate_logo_url(url: str) -> str | None:
    """Validate the logo URL.

    Absolute URLs are accepted as-is. Anything else is accepted when it
    at least looks like the start of a URL (``http://``, ``https://``,
    ``www.`` or an alphanumeric character).

    Args:
        url: Logo URL as typed by the user.

    Returns:
        Error message, or None when valid.
    """
    if not url:
        return "La URL del logo es requerida"
    if _is_absolute_url(url):
        return None
    if not _URL_PREFIX.match(url):
        return "URL inválida. Debe comenzar con http://, https:// o www."
    return None


def _is_absolute_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme)


# =============================================================================
# Address
# =============================================================================


def validate_department(value: str) -> str | None:
    """Require a department with letters and spaces only."""
    if not value:
        return "El departamento es requerido"
    if not _LETTERS.fullmatch(value):
        return "Solo se permiten letras"
    return None


def validate_province(value: str) -> str | None:
    """Require a province with letters and spaces only."""
    if not value:
        return "La provincia es requerida"
    if not _LETTERS.fullmatch(value):
        return "Solo se permiten letras"
    return None


def validate_district(value: str) -> str | None:
    """Require a district with letters and spaces only."""
    if not value:
        return "El distrito es requerido"
    if not _LETTERS.fullmatch(value):
        return "Solo se permiten letras"
    return None


def validate_postal_code(code: str) -> str | None:
    """Postal code is optional, digits only when present."""
    if not code:
        return None
    if not _DIGITS.fullmatch(code):
        return "Solo se permiten números"
    return None


def validate_street(street: str) -> str | None:
    """Require a street address without unusual characters."""
    if not street:
        return "La dirección es requerida"
    if not _STREET.fullmatch(street):
        return "Caracteres inválidos en la dirección"
    return None


# =============================================================================
# Contact methods
# =============================================================================


def validate_contact_type(contact_type: str) -> str | None:
    """Require a selected contact type."""
    if not contact_type:
        return "Debe seleccionar un tipo de contacto"
    return None


def validate_contact_value(contact_type: str, value: str) -> str | None:
    """Validate a contact value against its type.

    Phone-like values may contain spaces and hyphens; they are stripped
    before checking for nine digits starting with 9. Unknown types only
    require a value.

    Args:
        contact_type: Contact type (TELEFONO, CELULAR, WHATSAPP, EMAIL, WEBSITE).
        value: Contact value.

    Returns:
        Error message, or None when valid.
    """
    if not value:
        return "El valor es requerido"

    if contact_type in PHONE_LIKE_CONTACT_TYPES:
        digits = _PHONE_SEPARATORS.sub("", value)
        if not _PHONE.fullmatch(digits):
            return "Debe tener exactamente 9 dígitos"
        if not digits.startswith("9"):
            return "Debe comenzar con 9"
    elif contact_type == ContactType.EMAIL:
        if not _EMAIL.fullmatch(value):
            return "Email inválido"
    elif contact_type == ContactType.WEBSITE:
        if not _WEBSITE.fullmatch(value):
            return "URL inválida"
    return None


def has_at_least_one_contact(contacts: Iterable[ContactMethod]) -> bool:
    """Whether any contact has both a type and a value."""
    return any(contact.is_filled for contact in contacts)


def validate_at_least_one_contact(contacts: Iterable[ContactMethod]) -> str | None:
    """Require at least one filled contact method."""
    if not has_at_least_one_contact(contacts):
        return "Debe agregar al menos un método de contacto"
    return None


# =============================================================================
# Academic and final configuration
# =============================================================================


def validate_grading_type(value: str) -> str | None:
    """Require a selected grading type."""
    if not value:
        return "Debe seleccionar un tipo de calificación"
    return None


def validate_classroom_type(value: str) -> str | None:
    """Require a selected classroom type."""
    if not value:
        return "Debe seleccionar un tipo de aula"
    return None


def validate_ugel(value: str) -> str | None:
    """Require the UGEL."""
    if not value:
        return "La UGEL es requerida"
    return None


def validate_dre(value: str) -> str | None:
    """Require the DRE."""
    if not value:
        return "La DRE es requerida"
    return None
