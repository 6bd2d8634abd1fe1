"""
Notes API — Notes Route Handlers
==================================

What:  POST/GET /notes and GET/PUT/DELETE /notes/{note_id}.
How:   Parses the JSON body (FastAPI), delegates to NoteService, returns JSON.

Status codes:
    POST   /notes          201 Note            400 bad body, 500 store error
    GET    /notes          200 {id: Note}      500 store error
    GET    /notes/{id}     200 Note            404 absent or unreadable
    PUT    /notes/{id}     200 Note            400 bad body, 500 store error
    DELETE /notes/{id}     204 (empty)         500 store error
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends, Response, status

from app.config import settings
from app.database import get_store
from app.schemas.note import ErrorResponse, Note, NoteCreate, NoteUpdate
from app.services.note_service import NoteService
from app.services.store_base import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


def get_note_service(store: DocumentStore = Depends(get_store)) -> NoteService:
    return NoteService(store, collection=settings.notes_collection)


@router.post(
    "",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Malformed request body", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a note",
    description="Stores a new note under a server-generated id. Any id in the body is ignored.",
)
async def create_note(
    payload: NoteCreate,
    service: NoteService = Depends(get_note_service),
) -> Note:
    return await service.create_note(payload)


@router.get(
    "",
    response_model=Dict[str, Note],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all notes",
    description="Returns the whole collection as a mapping of note id to note.",
)
async def list_notes(service: NoteService = Depends(get_note_service)) -> Dict[str, Note]:
    return await service.list_notes()


@router.get(
    "/{note_id}",
    response_model=Note,
    responses={404: {"description": "Note not found", "model": ErrorResponse}},
    summary="Get a single note by id",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> Note:
    return await service.get_note(note_id)


@router.put(
    "/{note_id}",
    response_model=Note,
    responses={
        400: {"description": "Malformed request body", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Replace a note",
    description=(
        "Overwrites every field of the note with the body. Fields left out are cleared. "
        "A missing note is created. The path id is always used."
    ),
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    service: NoteService = Depends(get_note_service),
) -> Note:
    return await service.update_note(note_id, payload)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="Delete a note",
    description="Removes the note. Succeeds whether or not the note existed.",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> Response:
    await service.delete_note(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
