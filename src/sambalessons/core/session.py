# -*- coding: utf-8 -*-
"""Session and identity context."""

from __future__ import annotations

import logging
from pathlib import Path

from sambalessons.constants import (
    KEY_PROFILE_IMAGE_PREFIX,
    KEY_USER_AGE,
    KEY_USER_EMAIL,
    KEY_USER_IS_INSTRUCTOR,
    KEY_USER_NAME,
    KEY_USER_ROLE,
    ROLE_INSTRUCTOR,
    ROLE_SYNONYMS,
    SENTINEL_UID,
)
from sambalessons.core.preference_store import PreferenceStore
from sambalessons.integrations.catalog_source import CatalogSource, IdentityProvider

logger = logging.getLogger(__name__)


PROFILE_KEYS = (KEY_USER_NAME, KEY_USER_AGE, KEY_USER_EMAIL, KEY_USER_ROLE, KEY_USER_IS_INSTRUCTOR)


def canonical_role(role: str | None) -> str | None:
    """Map legacy role labels to the current ones ("Guide" -> "Instructor")."""
    if role is None:
        return None
    return ROLE_SYNONYMS.get(role.strip().lower(), role)


class SessionContext:
    """Identity of the current user, cached in memory and in preferences.

    Build one per process and pass it to whatever needs identity.
    """

    def __init__(self, store: PreferenceStore, identity: IdentityProvider) -> None:
        self.store = store
        self.identity = identity
        self._name: str | None = None
        self._age: str | None = None
        self._email: str | None = None
        self._role: str | None = None
        self._is_privileged = False
        self.image_uri: str | None = None

    @property
    def name(self) -> str:
        return self._name if self._name is not None else "Unknown"

    @property
    def age(self) -> str | None:
        return self._age

    @property
    def email(self) -> str | None:
        return self._email

    @property
    def role(self) -> str | None:
        return self._role

    def set_identity(self, name: str | None, age: str | None, email: str | None, role: str | None) -> None:
        """Cache the profile in memory and persist it."""
        role = canonical_role(role)
        self._name = name
        self._age = age
        self._email = email
        self._role = role
        self._is_privileged = role == ROLE_INSTRUCTOR

        self.store.set_scalar(KEY_USER_NAME, name)
        self.store.set_scalar(KEY_USER_AGE, age)
        self.store.set_scalar(KEY_USER_EMAIL, email)
        self.store.set_scalar(KEY_USER_ROLE, role)
        self.store.set_scalar(KEY_USER_IS_INSTRUCTOR, self._is_privileged)
        logger.debug("Identity set: name=%s role=%s privileged=%s", name, role, self._is_privileged)

    def reload_from_store(self) -> None:
        """Restore the cached profile written by an earlier `set_identity`.

        Without a signed-in user nothing is restored and the leftover profile
        is removed, so no privileges outlive the session.
        """
        if not self.has_session():
            self._clear_profile()
            return
        self._name = self.store.get_scalar(KEY_USER_NAME)
        self._age = self.store.get_scalar(KEY_USER_AGE)
        self._email = self.store.get_scalar(KEY_USER_EMAIL)
        self._role = canonical_role(self.store.get_scalar(KEY_USER_ROLE))
        self._is_privileged = self._role == ROLE_INSTRUCTOR

    def sync_from_remote(self, catalog: CatalogSource) -> bool:
        """Re-read the remote user document and apply it. Returns False without a session."""
        if not self.has_session():
            return False
        data = catalog.get_user(self.get_uid())
        if not data:
            logger.info("No remote profile for uid %s", self.get_uid())
            return False
        self.set_identity(
            data.get("name"),
            None if data.get("age") is None else str(data.get("age")),
            data.get("email"),
            data.get("role"),
        )
        return True

    def get_uid(self) -> str:
        uid = self.identity.current_uid()
        return uid if uid else SENTINEL_UID

    def has_session(self) -> bool:
        return self.get_uid() != SENTINEL_UID

    def is_privileged(self) -> bool:
        """Instructor rights; never granted without a signed-in user."""
        return self._is_privileged and self.has_session()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> bool:
        ok = self.identity.sign_in(email, password)
        if ok:
            # The cached profile may belong to the previous account
            self._clear_profile()
            logger.info("Signed in as %s", email)
        else:
            logger.warning("Sign-in failed for %s", email)
        return ok

    def sign_up(
        self,
        email: str,
        password: str,
        *,
        name: str,
        age: str | None,
        role: str,
        catalog: CatalogSource | None = None,
    ) -> bool:
        """Create an account, cache its profile and write the remote user document."""
        if not self.identity.sign_up(email, password):
            logger.warning("Sign-up failed for %s", email)
            return False
        self.set_identity(name, age, email, role)
        if catalog is not None and self.has_session():
            catalog.save_user(
                self.get_uid(),
                {"name": name, "age": age, "role": self.role, "email": email},
            )
        return True

    def sign_out(self) -> None:
        self.identity.sign_out()
        self._clear_profile()
        logger.info("Signed out")

    def _clear_profile(self) -> None:
        self._name = self._age = self._email = self._role = None
        self._is_privileged = False
        self.image_uri = None
        for key in PROFILE_KEYS:
            self.store.remove_scalar(key)

    # ------------------------------------------------------------------
    # Profile image
    # ------------------------------------------------------------------

    def _profile_image_key(self) -> str | None:
        if not self.has_session():
            return None
        return f"{KEY_PROFILE_IMAGE_PREFIX}{self.get_uid()}"

    def set_profile_image_path(self, path: str) -> bool:
        key = self._profile_image_key()
        if key is None:
            logger.warning("Cannot store a profile image without a signed-in user")
            return False
        self.store.set_scalar(key, path)
        return True

    def resolve_profile_image(self) -> str | None:
        """Return the local profile image path, the remote image uri, or None.

        A stored local path whose file is gone is removed from preferences.
        """
        key = self._profile_image_key()
        if key is not None:
            stored = self.store.get_scalar(key)
            if stored:
                if Path(stored).exists():
                    return str(stored)
                logger.info("Profile image %s no longer exists, clearing it", stored)
                self.store.remove_scalar(key)
        return self.image_uri or None
