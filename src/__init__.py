"""School administration console core.

Workflow library behind the institution management screens: multi-step
edit wizard validation and reconciliation of staged institution edits
against the REST backends.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
