# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from pydantic import BaseModel


class HTTPError(BaseModel):
    """
    General HTTPException raised
    """

    detail: str


class ErrorResponse(BaseModel):
    """
    Error raised by a rejected registry operation.
    * error: Machine readable code identifying the exception
    * error_description: Human readable error description for the error type.
    """

    error: str
    error_description: str
