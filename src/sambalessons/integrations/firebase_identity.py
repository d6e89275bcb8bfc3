# -*- coding: utf-8 -*-
"""Firebase email/password authentication via the Identity Toolkit REST API."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib import error, request

from sambalessons.constants import KEY_AUTH_EMAIL, KEY_AUTH_UID
from sambalessons.core.preference_store import PreferenceStore
from sambalessons.integrations.catalog_source import IdentityProvider

logger = logging.getLogger(__name__)


IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1/accounts:{action}?key={api_key}"


class FirebaseIdentity(IdentityProvider):
    """Signs users in with email and password and remembers the uid locally."""

    def __init__(self, api_key: str, store: PreferenceStore, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.store = store
        self.timeout = timeout
        self._id_token: str | None = None

    def current_uid(self) -> str | None:
        return self.store.get_scalar(KEY_AUTH_UID)

    def sign_in(self, email: str, password: str) -> bool:
        return self._authenticate("signInWithPassword", email, password)

    def sign_up(self, email: str, password: str) -> bool:
        return self._authenticate("signUp", email, password)

    def sign_out(self) -> None:
        self._id_token = None
        self.store.remove_scalar(KEY_AUTH_UID)
        self.store.remove_scalar(KEY_AUTH_EMAIL)

    def _authenticate(self, action: str, email: str, password: str) -> bool:
        if not self.api_key or self.api_key == "USE_ENV_FILE":
            raise ValueError("Firebase API key is missing. Set FIREBASE_API_KEY in .env.")
        status, payload = self._post_json(
            IDENTITY_TOOLKIT_URL.format(action=action, api_key=self.api_key),
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if status != 200 or not payload.get("localId"):
            message = (payload.get("error") or {}).get("message", "unknown error")
            logger.warning("Firebase %s failed (%s): %s", action, status, message)
            return False
        self._id_token = payload.get("idToken")
        self.store.set_scalar(KEY_AUTH_UID, payload["localId"])
        self.store.set_scalar(KEY_AUTH_EMAIL, payload.get("email", email))
        return True

    def _post_json(self, url: str, body: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        req = request.Request(
            url,
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with request.urlopen(req, timeout=self.timeout) as response:
                status = int(getattr(response, "status", 200))
                raw = response.read().decode("utf-8", errors="ignore")
        except error.HTTPError as exc:
            status = int(exc.code)
            raw = exc.read().decode("utf-8", errors="ignore")
        except error.URLError as exc:
            logger.warning("Identity Toolkit unreachable: %s", exc)
            return 0, {}
        try:
            payload = json.loads(raw) if raw else {}
        except json.JSONDecodeError:
            payload = {}
        return status, payload if isinstance(payload, dict) else {}
