"""
auth/models.py -- Domain dataclass for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in tasks/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/, tasks/, or docstore/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered identity. Identified by email alone; there is no password.

    email is stored exactly as submitted, so lookups are case-sensitive.
    id is None before the record is written to the store.
    """

    email: str
    id: str | None = None
    created_at: datetime | None = None
