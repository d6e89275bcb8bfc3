# -*- coding: utf-8 -*-
"""Contracts for the remote lesson catalog and the identity provider."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RemoteError(RuntimeError):
    """Raised when a remote read or write is rejected or unreachable."""


class CatalogSource(ABC):
    """Remote document collection of lessons plus per-user documents.

    Calls are blocking; callers run them off the UI thread.
    """

    @abstractmethod
    def query(self, field: str, value: Any) -> list[tuple[str, dict[str, Any]]]:
        """Return `(doc_id, fields)` pairs whose `field` equals `value`."""

    @abstractmethod
    def add(self, fields: dict[str, Any]) -> str:
        """Create a lesson document and return its generated id."""

    @abstractmethod
    def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        """Merge `fields` into an existing lesson document."""

    @abstractmethod
    def delete(self, doc_id: str) -> None:
        """Delete a lesson document. Deleting a missing document succeeds."""

    @abstractmethod
    def set_user_favorite(self, uid: str, lesson_id: str) -> None:
        """Write the favorite marker document for a user."""

    @abstractmethod
    def delete_user_favorite(self, uid: str, lesson_id: str) -> None:
        """Remove the favorite marker document for a user."""

    @abstractmethod
    def get_user(self, uid: str) -> dict[str, Any] | None:
        """Return the user profile document, or None if absent."""

    @abstractmethod
    def save_user(self, uid: str, data: dict[str, Any]) -> None:
        """Create or replace the user profile document."""


class IdentityProvider(ABC):
    """Authentication backend."""

    @abstractmethod
    def current_uid(self) -> str | None:
        """Return the signed-in uid, or None."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> bool:
        """Authenticate an existing account."""

    @abstractmethod
    def sign_up(self, email: str, password: str) -> bool:
        """Create an account and sign it in."""

    @abstractmethod
    def sign_out(self) -> None:
        """Forget the current session."""
