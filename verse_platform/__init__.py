"""Verse Platform - Backend.

Small authenticated API behind the scripture-annotation app:
- Users register and log in (JWT bearer tokens, no server-side sessions).
- Logged-in users toggle "likes" on verses.
- Anyone can read like/comment counts for a verse.

A verse is addressed by (book, chapter, verse); the storage key is the
`verse_id` string built from those three parts.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
