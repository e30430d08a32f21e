"""HTTP transport for callsign registration."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Form, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import RegistrationSettings, load_settings
from .models import RegistrationRequest
from .registration import Registrar, RegistrationOutcome

logger = logging.getLogger("registrar.service")

METHOD_NOT_SUPPORTED = "Sorry, that method is not supported"

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}
_FORM_PATH = "/user"


def parse_flag(value: Optional[str]) -> bool:
    """Interpret a boolean form value, treating anything unrecognised as false."""

    if value is None or value == "":
        return False
    if value in _TRUE_VALUES:
        return True
    if value not in _FALSE_VALUES:
        logger.warning("Ignoring unparseable boolean value %r", value)
    return False


class RegistrationPayload(BaseModel):
    callsign: str = Field(..., max_length=64)
    first: str = Field(default="", max_length=128)
    last: str = Field(default="", max_length=128)
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=1024)
    sip: bool = False


class RegistrationResponse(BaseModel):
    ok: bool
    callsign: str
    message: Optional[str] = None
    kind: Optional[str] = None
    extension_number: Optional[int] = None
    id: Optional[int] = None
    blocked: Optional[bool] = None
    registration_date: Optional[int] = None


def _to_response(outcome: RegistrationOutcome) -> RegistrationResponse:
    if not outcome.ok or outcome.user is None:
        return RegistrationResponse(
            ok=False,
            callsign=outcome.callsign,
            message=outcome.message,
            kind=outcome.kind.value if outcome.kind else None,
        )
    user = outcome.user
    return RegistrationResponse(
        ok=True,
        callsign=user.callsign,
        extension_number=user.extension_number,
        id=user.id,
        blocked=user.blocked,
        registration_date=user.registration_date,
    )


def render_outcome(outcome: RegistrationOutcome) -> str:
    """Render the plain-text body returned by ``POST /user``."""

    if outcome.ok:
        return f"RESULT: OK, Callsign: {outcome.callsign}\n"
    return f"ERROR: {outcome.message}"


def register_routes(app: FastAPI, registrar: Registrar) -> None:
    failure_status = (
        status.HTTP_400_BAD_REQUEST
        if registrar.settings.strict_status_codes
        else status.HTTP_200_OK
    )

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post(_FORM_PATH, response_class=PlainTextResponse)
    async def register_user(
        callsign: str = Form(""),
        first: str = Form(""),
        last: str = Form(""),
        email: str = Form(""),
        password: str = Form(""),
        sip: str = Form(""),
    ) -> PlainTextResponse:
        request = RegistrationRequest(
            callsign=callsign,
            first=first,
            last=last,
            email=email,
            password=password,
            telephony_requested=parse_flag(sip),
        )
        outcome = await registrar.submit_async(request)
        return PlainTextResponse(
            render_outcome(outcome),
            status_code=status.HTTP_200_OK if outcome.ok else failure_status,
        )

    @app.exception_handler(StarletteHTTPException)
    async def method_not_supported(request: Request, exc: StarletteHTTPException) -> Response:
        # every method other than POST on the form endpoint gets the plain-text reply
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path == _FORM_PATH:
            return PlainTextResponse(
                METHOD_NOT_SUPPORTED,
                status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
                headers=exc.headers,
            )
        return await http_exception_handler(request, exc)

    @app.post("/v1/users", response_model=RegistrationResponse)
    async def register_user_json(payload: RegistrationPayload) -> JSONResponse:
        request = RegistrationRequest(
            callsign=payload.callsign,
            first=payload.first,
            last=payload.last,
            email=payload.email,
            password=payload.password,
            telephony_requested=payload.sip,
        )
        outcome = await registrar.submit_async(request)
        body = _to_response(outcome).model_dump(exclude_none=True)
        return JSONResponse(
            body,
            status_code=status.HTTP_201_CREATED if outcome.ok else failure_status,
        )


def create_app(
    *,
    settings: RegistrationSettings | None = None,
    registrar: Registrar | None = None,
) -> FastAPI:
    """Instantiate the FastAPI application for user registration."""

    app_registrar = registrar or Registrar(settings or load_settings())

    app = FastAPI(
        title="Callsign Registration API",
        version="0.1.0",
        description="Validates registrations and derives telephony extensions.",
    )
    app.state.registrar = app_registrar

    if app_registrar.settings.strict_status_codes:
        logger.info("Rejected registrations will be answered with HTTP 400")

    register_routes(app, app_registrar)
    return app


__all__ = ["METHOD_NOT_SUPPORTED", "create_app", "parse_flag", "render_outcome"]
