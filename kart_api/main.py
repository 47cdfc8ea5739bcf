"""FastAPI entrypoint for the Konaseema Kart catalog and ordering API."""

from __future__ import annotations

import logging
from typing import Any

import uvicorn
from fastapi import Body, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from kart_api.api.router import api_router
from kart_api.core.config import settings
from kart_api.core.logging import setup_logging
from kart_api.db import session as db_session
from kart_api.db.base import Base
from kart_api.services.errors import ServiceError

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router)


def _missing_fields_message(exc: RequestValidationError) -> str:
    fields: list[str] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        if field not in fields:
            fields.append(field)
    return f"Missing or invalid fields: {', '.join(fields)}"


@app.exception_handler(ServiceError)
def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _missing_fields_message(exc)
    logger.info("%s %s rejected (400): %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(SQLAlchemyError)
def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Database error while processing the request"},
    )


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


@app.on_event("startup")
def startup() -> None:
    logger.info("Starting %s (env=%s)", settings.app_name, settings.app_env)
    Base.metadata.create_all(bind=db_session.engine)


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "Welcome to my server!"


@app.post("/echo")
def echo(payload: Any = Body(default=None)) -> Any:
    """Return the request body unchanged."""
    return payload


def run() -> None:
    """Run the API with uvicorn."""
    uvicorn.run("kart_api.main:app", host="0.0.0.0", port=3000, reload=settings.debug)


if __name__ == "__main__":
    run()
