"""
tasks/models.py -- Domain dataclass for a to-do item.

Pure data container with zero logic. Ownership checks, timestamp handling and
field immutability all live in tasks/store.py.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Task:
    """A to-do item owned by exactly one user.

    user_id and created_at never change after creation. Timestamps are
    timezone-aware UTC datetimes once read back from the store.

    id and created_at are None before the record is written to the store.
    """

    title: str
    completed: bool
    user_id: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
