"""
auth/store.py -- User directory on top of the document store.

Pattern: Repository + Data Mapper (same as tasks/store.py).
UserStore is the repository; _doc_to_user is the mapper.
Route code never touches the document store directly.

Uniqueness: at most one user per email is a convention kept by the register
route (look up, then create). The store has no unique constraint on email, so
two concurrent registrations with the same address can both succeed.
get_by_email() returns the first match in that case.

Layer rule: no imports from api/, core/, or tasks/.
"""

from __future__ import annotations

from datetime import datetime

from auth.models import User
from docstore.models import SERVER_TIMESTAMP, DocumentSnapshot
from docstore.store import DocumentStore

_COLLECTION = "users"


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(DocumentStore())
        user_id = store.create_user("alice@example.com")
        user = store.get_by_email("alice@example.com")
    """

    def __init__(self, documents: DocumentStore) -> None:
        self._users = documents.collection(_COLLECTION)

    def create_user(self, email: str) -> str:
        """Insert a new user and return its store-assigned id."""
        return self._users.add({"email": email, "createdAt": SERVER_TIMESTAMP})

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        docs = self._users.query(where={"email": email})
        return _doc_to_user(docs[0]) if docs else None

    def get_by_id(self, user_id: str) -> User | None:
        """Look up a user by id. Returns None if not found."""
        doc = self._users.get(user_id)
        return _doc_to_user(doc) if doc is not None else None


def _doc_to_user(doc: DocumentSnapshot) -> User:
    created_at = doc.data.get("createdAt")
    return User(
        id=doc.id,
        email=doc.data["email"],
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )
