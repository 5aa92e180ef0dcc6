# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain layer for the school administration console.

This package contains the workflow logic behind the admin screens.
Each domain module exposes plain services and state objects that the
UI layer drives; I/O goes through the ports each domain declares.

Domains:
    institution: Institution edit wizard (validation, staged classroom
        and director changes, reconciliation against the backend).
"""
