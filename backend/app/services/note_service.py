"""
Notes API — Note Service (Business Logic)
===========================================

What:  The five note operations: create, list, get, update (full replace), delete.
Why:   Keeps store access and error translation out of the route handlers.
How:   Composes a DocumentStore; every operation is one pass-through call
       (create is key generation followed by one write).
Who:   Called by route handlers in routes/notes.py.

Storage layout:
    <collection>            → {<id>: Note, ...}
    <collection>/<id>       → {"id": <id>, "title": ..., "content": ...}

Consistency:
    None beyond what the store gives per key. Concurrent writes to one id race
    and the last one wins; there is no existence check or version comparison
    before update or delete.
"""

import logging
from typing import Dict

from pydantic import ValidationError as PydanticValidationError

from app.exceptions import NotFoundError, StoreError
from app.schemas.note import Note, NoteCreate, NoteUpdate
from app.services.store_base import DocumentStore

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        StoreError propagates unchanged from the store (→ 500 with the store's
        message), except in get_note() where any read failure is reported as
        NotFoundError, the same as a missing key.
    """

    def __init__(self, store: DocumentStore, collection: str = "notes"):
        self.store = store
        self.collection = collection.strip("/")

    def _path(self, note_id: str) -> str:
        return f"{self.collection}/{note_id}"

    async def create_note(self, payload: NoteCreate) -> Note:
        """
        Store a new note under a freshly generated key.

        The generated key becomes the note's id; the payload has no id field.

        Raises:
            StoreError: Key generation or the write failed.
        """
        logger.debug("Received note: title=%r (%d chars content)", payload.title, len(payload.content))

        note_id = await self.store.generate_key(self.collection)
        logger.info("Generated note id %s", note_id)

        note = Note(id=note_id, title=payload.title, content=payload.content)
        await self.store.set(self._path(note_id), note.model_dump())
        return note

    async def list_notes(self) -> Dict[str, Note]:
        """
        Read the whole collection as a mapping of id → Note.

        An empty or missing collection yields {}. Children that are not note
        objects (e.g. the empty placeholder of an interrupted create) are skipped.

        Raises:
            StoreError: The collection read failed.
        """
        raw = await self.store.get(self.collection)
        if not raw:
            return {}

        # Some stores return sequential integer keys as a list
        if isinstance(raw, list):
            raw = {str(i): v for i, v in enumerate(raw) if v is not None}

        notes: Dict[str, Note] = {}
        for key, value in raw.items():
            if not isinstance(value, dict):
                logger.warning("Skipping non-note entry at %s", self._path(key))
                continue
            try:
                notes[key] = Note.model_validate(value)
            except PydanticValidationError:
                logger.warning("Skipping malformed note at %s", self._path(key))
        return notes

    async def get_note(self, note_id: str) -> Note:
        """
        Read one note.

        Raises:
            NotFoundError: Nothing is stored at the id, or the read failed.
                           The two cases are not distinguished.
        """
        try:
            raw = await self.store.get(self._path(note_id))
        except StoreError as e:
            logger.warning("Error getting note %s: %s", note_id, e.message)
            raise NotFoundError(resource_id=note_id, context={"store_error": e.message}) from e

        if not isinstance(raw, dict):
            raise NotFoundError(resource_id=note_id)

        try:
            return Note.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning("Stored note %s is malformed: %s", note_id, e)
            raise NotFoundError(resource_id=note_id) from e

    async def update_note(self, note_id: str, payload: NoteUpdate) -> Note:
        """
        Replace the note at `note_id` with the payload.

        Full replace, not a merge: fields missing from the payload are cleared.
        A missing note is created. A payload id that differs from the path id
        is ignored.

        Raises:
            StoreError: The write failed.
        """
        if payload.id and payload.id != note_id:
            logger.info("Ignoring body id %s on update of note %s", payload.id, note_id)

        note = Note(id=note_id, title=payload.title, content=payload.content)
        await self.store.set(self._path(note_id), note.model_dump())
        logger.info("Note %s replaced", note_id)
        return note

    async def delete_note(self, note_id: str) -> None:
        """
        Remove the note at `note_id`. Deleting an absent note succeeds.

        Raises:
            StoreError: The delete failed.
        """
        await self.store.delete(self._path(note_id))
        logger.info("Note %s deleted", note_id)
