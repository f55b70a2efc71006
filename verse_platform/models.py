from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class VerseRef:
    book: str
    chapter: str
    verse: str

    @property
    def verse_id(self) -> str:
        # Storage key only; never split back into parts.
        return f"{self.book}-{self.chapter}-{self.verse}"


@dataclass(frozen=True)
class User:
    id: str
    email: str
    username: str
    password_hash: str
    bio: str
    created_at: str

    @classmethod
    def from_row(cls, row: Any) -> "User":
        return cls(
            id=str(row["id"]),
            email=str(row["email"]),
            username=str(row["username"]),
            password_hash=str(row["password_hash"]),
            bio=str(row["bio"]),
            created_at=str(row["created_at"]),
        )

    def public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "bio": self.bio,
            "created_at": self.created_at,
        }
