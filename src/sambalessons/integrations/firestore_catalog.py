# -*- coding: utf-8 -*-
"""Firestore-backed lesson catalog."""

from __future__ import annotations

import logging
import os
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as gexc
from google.cloud.firestore_v1 import FieldFilter

from sambalessons.constants import FAVORITES_SUBCOLLECTION, LESSONS_COLLECTION, USERS_COLLECTION
from sambalessons.integrations.catalog_source import CatalogSource, RemoteError

logger = logging.getLogger(__name__)


def init_firestore_client(credentials_path: str = "", project_id: str = "") -> Any:
    """Initialize the default Firebase app once and return a Firestore client."""
    try:
        app = firebase_admin.get_app()
    except ValueError:
        cred_path = credentials_path or os.environ.get(
            "GOOGLE_APPLICATION_CREDENTIALS", "./firebase-service-account.json"
        )
        if os.path.exists(cred_path):
            cred = credentials.Certificate(cred_path)
        else:
            cred = credentials.ApplicationDefault()
        options = {"projectId": project_id} if project_id else None
        app = firebase_admin.initialize_app(cred, options=options)
        logger.info("Firebase app initialized (credentials: %s)", cred_path)
    return firestore.client(app)


class FirestoreCatalog(CatalogSource):
    """Lessons in one collection, user profiles and favorite markers in another."""

    def __init__(
        self,
        client: Any,
        *,
        lessons_collection: str = LESSONS_COLLECTION,
        users_collection: str = USERS_COLLECTION,
        favorites_subcollection: str = FAVORITES_SUBCOLLECTION,
    ) -> None:
        self.client = client
        self.lessons_collection = lessons_collection
        self.users_collection = users_collection
        self.favorites_subcollection = favorites_subcollection

    def _lessons(self) -> Any:
        return self.client.collection(self.lessons_collection)

    def _user(self, uid: str) -> Any:
        return self.client.collection(self.users_collection).document(uid)

    def _favorite(self, uid: str, lesson_id: str) -> Any:
        return self._user(uid).collection(self.favorites_subcollection).document(lesson_id)

    def query(self, field: str, value: Any) -> list[tuple[str, dict[str, Any]]]:
        try:
            docs = self._lessons().where(filter=FieldFilter(field, "==", value)).stream()
            return [(doc.id, doc.to_dict() or {}) for doc in docs]
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Query {field}=={value!r} failed: {exc}") from exc

    def add(self, fields: dict[str, Any]) -> str:
        try:
            _, doc_ref = self._lessons().add(dict(fields))
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Adding lesson failed: {exc}") from exc
        logger.info("Lesson %s created", doc_ref.id)
        return doc_ref.id

    def update(self, doc_id: str, fields: dict[str, Any]) -> None:
        try:
            self._lessons().document(doc_id).update(dict(fields))
        except gexc.NotFound as exc:
            raise RemoteError(f"Lesson {doc_id} no longer exists") from exc
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Updating lesson {doc_id} failed: {exc}") from exc

    def delete(self, doc_id: str) -> None:
        try:
            self._lessons().document(doc_id).delete()
        except gexc.NotFound:
            logger.info("Lesson %s was already deleted", doc_id)
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Deleting lesson {doc_id} failed: {exc}") from exc

    def set_user_favorite(self, uid: str, lesson_id: str) -> None:
        try:
            self._favorite(uid, lesson_id).set({"savedAt": firestore.SERVER_TIMESTAMP})
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Saving favorite {lesson_id} failed: {exc}") from exc

    def delete_user_favorite(self, uid: str, lesson_id: str) -> None:
        try:
            self._favorite(uid, lesson_id).delete()
        except gexc.NotFound:
            logger.debug("Favorite marker %s/%s already absent", uid, lesson_id)
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Removing favorite {lesson_id} failed: {exc}") from exc

    def get_user(self, uid: str) -> dict[str, Any] | None:
        try:
            snapshot = self._user(uid).get()
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Loading user {uid} failed: {exc}") from exc
        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def save_user(self, uid: str, data: dict[str, Any]) -> None:
        try:
            self._user(uid).set(dict(data))
        except gexc.GoogleAPICallError as exc:
            raise RemoteError(f"Saving user {uid} failed: {exc}") from exc
