"""
Mock address book API - FastAPI in-memory stand-in for the remote store.

Serves the same routes and status codes as the real service so the client
can be run and tested without it:

    GET    {prefix}/addressbook          -> 200, JSON array
    GET    {prefix}/addressbook/{id}     -> 200 | 404
    POST   {prefix}/addressbook          -> 201
    PUT    {prefix}/addressbook/{id}     -> 200 | 404
    DELETE {prefix}/addressbook/{id}     -> 204 | 404
"""

from __future__ import annotations

from itertools import count
from typing import Any, Dict, Iterable, List, Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException, Response
from fastapi.responses import JSONResponse
from loguru import logger

from addressbook.contacts.models import WIRE_FIELDS


class InMemoryAddressBook:
    """Ordered in-memory contact records keyed by an auto-incrementing id."""

    def __init__(self, seed: Optional[Iterable[Dict[str, Any]]] = None):
        self._records: Dict[int, Dict[str, Any]] = {}
        self._ids = count(1)
        for item in seed or []:
            self.create(item)

    @staticmethod
    def _normalize(payload: Dict[str, Any]) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for wire_name in WIRE_FIELDS:
            value = payload.get(wire_name)
            out[wire_name] = "" if value is None else str(value)
        return out

    def list(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._records.values()]

    def get(self, contact_id: int) -> Optional[Dict[str, Any]]:
        record = self._records.get(contact_id)
        return dict(record) if record else None

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        contact_id = next(self._ids)
        record = {"id": contact_id, **self._normalize(payload)}
        self._records[contact_id] = record
        return dict(record)

    def update(self, contact_id: int, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if contact_id not in self._records:
            return None
        record = {"id": contact_id, **self._normalize(payload)}
        self._records[contact_id] = record
        return dict(record)

    def delete(self, contact_id: int) -> bool:
        return self._records.pop(contact_id, None) is not None

    def __len__(self) -> int:
        return len(self._records)


def create_app(
    store: Optional[InMemoryAddressBook] = None,
    *,
    prefix: str = "/api",
) -> FastAPI:
    """Build the mock API around `store` (a fresh empty one by default)."""
    book = store if store is not None else InMemoryAddressBook()
    router = APIRouter(prefix=f"{prefix.rstrip('/')}/addressbook")

    @router.get("")
    async def list_contacts():
        return book.list()

    @router.get("/{contact_id}")
    async def get_contact(contact_id: int):
        record = book.get(contact_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Contact not found")
        return record

    @router.post("")
    async def create_contact(payload: Dict[str, Any] = Body(...)):
        record = book.create(payload)
        logger.debug(f"Mock API created contact {record['id']}")
        return JSONResponse(status_code=201, content=record)

    @router.put("/{contact_id}")
    async def update_contact(contact_id: int, payload: Dict[str, Any] = Body(...)):
        record = book.update(contact_id, payload)
        if record is None:
            raise HTTPException(status_code=404, detail="Contact not found")
        return record

    @router.delete("/{contact_id}")
    async def delete_contact(contact_id: int):
        if not book.delete(contact_id):
            raise HTTPException(status_code=404, detail="Contact not found")
        return Response(status_code=204)

    app = FastAPI(
        title="AddressBook Mock API",
        description="In-memory address book store for local development",
        version="0.1.0",
    )
    app.include_router(router)
    app.state.store = book
    return app


def run_mock_api(host: str = "127.0.0.1", port: int = 8081, prefix: str = "/api") -> None:
    """Serve the mock API with uvicorn until interrupted."""
    import uvicorn

    logger.info(f"Mock address book API on http://{host}:{port}{prefix}/addressbook")
    uvicorn.run(create_app(prefix=prefix), host=host, port=port, log_level="info")
