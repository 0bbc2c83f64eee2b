# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from fastapi import Request, FastAPI, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from common.model.exception import ErrorResponse
from certificate_registry.exception.registry_errors import RegistryError


def _render(status_code: int, error: str, error_description: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers={"Cache-Control": "no-store"},
        content=ErrorResponse(error=error, error_description=error_description).model_dump(),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configure exception handlers on the FastAPI app instance.
    Rejected registry operations are rendered with their error code,
    422 Unprocessable Entity is changed to 400 Bad Request.

    Args:
        app (FastAPI): the instance to configure the handlers for.
    """

    @app.exception_handler(RegistryError)
    async def registry_exception_handler(request: Request, exc: RegistryError):
        return _render(exc.status_code, exc.error, exc.error_description)

    @app.exception_handler(RequestValidationError)
    async def invalid_request_exception_handler(request: Request, exc: RequestValidationError):
        return _render(
            status.HTTP_400_BAD_REQUEST,
            "invalid_request",
            f"Request was malformed. One or more of the parameters are missing or malformed. Details: {exc.errors()}",
        )
