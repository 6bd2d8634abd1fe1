"""
Notes API — Firebase Realtime Database Store
==============================================

What:  DocumentStore implementation backed by the Firebase Realtime Database.
Why:   The notes collection lives in a hosted realtime document tree; all
       durability, ordering and key generation are delegated to it.
How:   Uses firebase_admin.db references bound to a named Firebase Admin app.
       The Admin SDK is blocking (HTTP via requests), so every call is run in
       the server threadpool to keep the event loop free.
Who:   Constructed by the application lifespan; used by NoteService.

Error policy:
    No retries and no local recovery. Any FirebaseError (HTTP failure,
    permission denied, network error), GoogleAuthError (token refresh failed:
    revoked or expired key, bad signature) or ValueError (invalid path
    characters) becomes a StoreError carrying the original message.
"""

import logging
from typing import Any, Callable

import firebase_admin
from firebase_admin import db
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError
from starlette.concurrency import run_in_threadpool

from app.exceptions import StoreError
from app.services.store_base import DocumentStore

logger = logging.getLogger(__name__)


class FirebaseStore(DocumentStore):
    """
    Realtime Database store.

    The Firebase app handle is created once at startup and only read afterwards,
    so a single FirebaseStore is shared by all concurrent requests.
    """

    def __init__(self, app: firebase_admin.App):
        self.app = app

    def _reference(self, path: str) -> db.Reference:
        return db.reference(path, app=self.app)

    async def _call(self, operation: str, path: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return await run_in_threadpool(func, *args, **kwargs)
        except (FirebaseError, GoogleAuthError, ValueError) as e:
            logger.error("Store %s failed at '%s': %s", operation, path, e)
            raise StoreError(message=str(e), operation=operation, path=path) from e

    async def generate_key(self, path: str) -> str:
        # push() writes an empty placeholder child and returns its reference;
        # the caller overwrites it with the real value.
        def _push() -> str:
            return self._reference(path).push().key

        return await self._call("push", path, _push)

    async def get(self, path: str) -> Any:
        def _get() -> Any:
            return self._reference(path).get()

        return await self._call("get", path, _get)

    async def set(self, path: str, value: Any) -> None:
        def _set() -> None:
            self._reference(path).set(value)

        await self._call("set", path, _set)

    async def delete(self, path: str) -> None:
        def _delete() -> None:
            self._reference(path).delete()

        await self._call("delete", path, _delete)

    async def health_check(self, path: str) -> bool:
        def _shallow_read() -> Any:
            return self._reference(path).get(shallow=True)

        try:
            await self._call("health_check", path, _shallow_read)
            return True
        except StoreError:
            return False
