"""FastAPI application — HTTP control surface over a phone directory.

Endpoints:

  GET    /health                          Health check
  GET    /api/phones                      List phones
  POST   /api/phones                      Add a phone by number
  POST   /api/phones/generate             Replace phones with random ones
  GET    /api/phones/{number}             Phone state and both registers
  DELETE /api/phones/{number}             Remove a phone
  POST   /api/phones/{number}/call        Place a call from this phone
  GET    /api/phones/{number}/register    Plain-text register export

Busy and rejected calls are ordinary results (HTTP 200 with the outcome);
only unknown phones and invalid input produce error responses.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, field_validator

from phonesim.config import configure_logging, settings
from phonesim.directory import PhoneDirectory
from phonesim.errors import DuplicatePhoneNumber, InvalidPhoneNumber, PhoneNotFound
from phonesim.export import render_register

log = logging.getLogger("phonesim.app")

_START_TIME = time.time()


class AddPhoneRequest(BaseModel):
    number: str


class GenerateRequest(BaseModel):
    amount: int = Field(ge=0)


class CallRequest(BaseModel):
    destination: str
    accept: bool
    duration: float = Field(default=0, ge=0)  # seconds

    @field_validator("duration")
    @classmethod
    def _within_limit(cls, value: float) -> float:
        if value > settings.max_conversation_seconds:
            raise ValueError(
                f"duration must not exceed {settings.max_conversation_seconds} seconds"
            )
        return value


def _not_found(number: str) -> JSONResponse:
    return JSONResponse({"error": f"Phone {number} not found"}, status_code=404)


def create_app(directory: Optional[PhoneDirectory] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Phone Simulator",
        description="Simulated phones calling each other",
        version="0.1.0",
    )
    phones = directory if directory is not None else PhoneDirectory()
    app.state.directory = phones

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Directory ──────────────────────────────────────────────

    @app.get("/api/phones")
    async def list_phones():
        return JSONResponse(phones.to_dict())

    @app.post("/api/phones")
    async def add_phone(body: AddPhoneRequest):
        try:
            phone = phones.add(body.number)
        except InvalidPhoneNumber as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except DuplicatePhoneNumber as e:
            return JSONResponse({"error": str(e)}, status_code=409)
        return JSONResponse(phone.to_dict(), status_code=201)

    @app.post("/api/phones/generate")
    async def generate_phones(body: GenerateRequest):
        phones.generate(body.amount)
        return JSONResponse(phones.to_dict())

    @app.get("/api/phones/{number}")
    async def get_phone(number: str):
        try:
            phone = phones.find(number)
        except PhoneNotFound:
            return _not_found(number)
        return JSONResponse(phone.to_dict(detail=True))

    @app.delete("/api/phones/{number}")
    async def remove_phone(number: str):
        try:
            phones.remove_number(number)
        except PhoneNotFound:
            return _not_found(number)
        return JSONResponse({"removed": number})

    # ── Calls ──────────────────────────────────────────────────

    @app.post("/api/phones/{number}/call")
    async def place_call(number: str, body: CallRequest):
        try:
            caller = phones.find(number)
        except PhoneNotFound:
            return _not_found(number)
        try:
            destination = phones.find(body.destination)
        except PhoneNotFound:
            return _not_found(body.destination)

        result = caller.call(destination, body.accept, body.duration)
        return JSONResponse(result.to_dict())

    @app.get("/api/phones/{number}/register")
    async def get_register(number: str):
        try:
            phone = phones.find(number)
        except PhoneNotFound:
            return _not_found(number)
        return PlainTextResponse(render_register(phone))

    return app


def main() -> None:
    import uvicorn

    configure_logging()
    for warning in settings.validate_startup():
        log.warning(warning)

    directory = PhoneDirectory()
    if settings.default_phone_count > 0:
        directory.generate(settings.default_phone_count)

    uvicorn.run(create_app(directory), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
