"""MyContacts - Contacts API FastAPI application.

Thin HTTP surface over ContactsLocalDataSource. Reads map the Result wrapper
to responses (Error(ContactNotFoundError) -> 404, other Error -> 500);
mutations return 204 and report unexpected storage failures as 500.

Run with:
    uvicorn services.contacts_api.main:app --reload  # dev server only
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from enum import StrEnum
from typing import Annotated

from fastapi import Depends, FastAPI, Response
from fastapi.responses import JSONResponse

from mycontacts.application import ContactsApplication
from mycontacts.data_source import ContactNotFoundError, ContactsDataSource
from mycontacts.models import Contact
from mycontacts.result import Error
from mycontacts.schemas import (
    ContactCreateRequest,
    ContactErrorResponse,
    ContactResponse,
    ContactUpdateRequest,
)

logger = logging.getLogger(__name__)

# --- Data Source Setup ---

# Module-level data source (initialized on startup)
_data_source: ContactsDataSource | None = None


def get_data_source() -> ContactsDataSource:
    """Dependency that provides the contacts data source.

    Raises:
        RuntimeError: If data source not initialized (app lifespan not invoked).
    """
    if _data_source is None:
        raise RuntimeError("Data source not initialized. App lifespan not invoked?")
    return _data_source


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Boots the application (logging + database) unless a data source was
    already installed with override_data_source().
    """
    global _data_source
    if _data_source is None:
        application = ContactsApplication()
        application.on_create()
        _data_source = application.data_source
    yield


# --- FastAPI App ---


app = FastAPI(
    title="MyContacts - Contacts API",
    description="Contacts CRUD over the local SQLite store.",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Error Handling ---


class ContactsErrorCode(StrEnum):
    """Error codes returned by the contacts API."""

    CONTACT_NOT_FOUND = "CONTACT_NOT_FOUND"
    STORAGE_FAILED = "STORAGE_FAILED"


def make_error_response(error_code: str, error_message: str) -> JSONResponse:
    """Create a JSON error response."""
    status_code = 404 if error_code == ContactsErrorCode.CONTACT_NOT_FOUND else 500
    return JSONResponse(
        status_code=status_code,
        content=ContactErrorResponse(
            error_code=error_code,
            error_message=error_message,
        ).model_dump(),
    )


def error_result_response(result: Error) -> JSONResponse:
    """Map an Error result to a JSON error response."""
    if isinstance(result.exception, ContactNotFoundError):
        return make_error_response(ContactsErrorCode.CONTACT_NOT_FOUND, str(result.exception))
    # Cause is already logged by the data source; keep details server-side
    return make_error_response(
        ContactsErrorCode.STORAGE_FAILED,
        "An unexpected error occurred while reading contacts",
    )


def storage_failed_response(action: str) -> JSONResponse:
    """Log the active exception and return a generic 500."""
    logger.exception("Unexpected error during %s", action)
    return make_error_response(
        ContactsErrorCode.STORAGE_FAILED,
        f"An unexpected error occurred during {action}",
    )


DataSourceDep = Annotated[ContactsDataSource, Depends(get_data_source)]

ERROR_RESPONSES = {
    500: {"model": ContactErrorResponse, "description": "Storage failure"},
}


# --- Endpoints ---


@app.get(
    "/v1/contacts",
    response_model=list[ContactResponse],
    responses=ERROR_RESPONSES,
    summary="List all contacts",
)
async def list_contacts(data_source: DataSourceDep):
    """List all contacts in insertion order."""
    result = await data_source.get_contacts()
    if isinstance(result, Error):
        return error_result_response(result)
    return [ContactResponse.from_contact(c) for c in result.data]


@app.get(
    "/v1/contacts/{contact_id}",
    response_model=ContactResponse,
    responses={
        404: {"model": ContactErrorResponse, "description": "Contact not found"},
        **ERROR_RESPONSES,
    },
    summary="Get a contact by id",
)
async def get_contact(contact_id: str, data_source: DataSourceDep):
    """Get a single contact."""
    result = await data_source.get_contact(contact_id)
    if isinstance(result, Error):
        return error_result_response(result)
    return ContactResponse.from_contact(result.data)


@app.post(
    "/v1/contacts",
    status_code=201,
    response_model=ContactResponse,
    responses=ERROR_RESPONSES,
    summary="Save a contact",
    description="Save a contact. A contact with the same id is replaced.",
)
async def save_contact(request: ContactCreateRequest, data_source: DataSourceDep):
    """Save (upsert) a contact and echo the stored values."""
    contact = Contact(request.name, request.mobile, request.id)
    try:
        await data_source.save_contact(contact)
    except Exception:
        return storage_failed_response("save")
    return ContactResponse.from_contact(contact)


@app.put(
    "/v1/contacts/{contact_id}",
    status_code=204,
    responses=ERROR_RESPONSES,
    summary="Update a contact",
    description="Update name and mobile. No-op when the id is unknown.",
)
async def update_contact(
    contact_id: str,
    request: ContactUpdateRequest,
    data_source: DataSourceDep,
):
    """Update a contact matched by id."""
    try:
        await data_source.update_contact(Contact(request.name, request.mobile, contact_id))
    except Exception:
        return storage_failed_response("update")
    return Response(status_code=204)


@app.delete(
    "/v1/contacts/{contact_id}",
    status_code=204,
    responses=ERROR_RESPONSES,
    summary="Delete a contact",
)
async def delete_contact(contact_id: str, data_source: DataSourceDep):
    """Delete a contact by id. No-op when the id is unknown."""
    try:
        await data_source.delete_contact(contact_id)
    except Exception:
        return storage_failed_response("delete")
    return Response(status_code=204)


@app.delete(
    "/v1/contacts",
    status_code=204,
    responses=ERROR_RESPONSES,
    summary="Delete all contacts",
)
async def delete_all_contacts(data_source: DataSourceDep):
    """Delete every contact."""
    try:
        await data_source.delete_all_contacts()
    except Exception:
        return storage_failed_response("delete all")
    return Response(status_code=204)


@app.get("/health", summary="Health check")
def health_check():
    """Simple health check endpoint."""
    return {"status": "ok"}


# --- For testing: allow overriding the data source ---


def override_data_source(data_source: ContactsDataSource | None) -> None:
    """Override the data source for testing (None restores lazy boot)."""
    global _data_source
    _data_source = data_source
