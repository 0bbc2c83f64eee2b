# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Common health endpoints `/health/debug`, `/health/liveness` and `/health/readiness`."""

import logging
from enum import Enum

from pydantic import BaseModel
from sqlalchemy import text
from fastapi import APIRouter, status, Response

import common.config as conf
import common.db.database as db
from common.version import get_version

_logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Indicator of system health."""

    healthy = "HEALTHY"
    unhealthy = "UNHEALTHY"


class HealthResponse(BaseModel):
    """Response body model for health request operation.

    May only contain `HealthStatus` fields. Those can be set with boolean values,
    those get converted before the model is returned to the client."""

    http_server_connectivity: HealthStatus = HealthStatus.unhealthy

    def convert_from_bool(self) -> None:
        '''Converts every boolean field into its `HealthStatus` representation.'''
        for k, v in iter(self):
            if isinstance(v, bool):
                setattr(self, k, HealthStatus.healthy if v else HealthStatus.unhealthy)

    def is_healthy(self) -> bool:
        return all([v == HealthStatus.healthy for _, v in iter(self)])


class ReadinessHealthResponse(HealthResponse):
    db_connectivity: HealthStatus = HealthStatus.unhealthy


class DebugResponse(BaseModel):
    app_name: str
    version: str
    debug_mode: bool
    documentation_endpoints: bool
    cors: bool


def check_health_of_db(session_to_check: db.Session) -> HealthStatus:
    """Checks weather the session can reach the database."""
    result = False
    try:
        session_to_check.execute(text('SELECT 1'))
        result = session_to_check.is_active
    except Exception:
        _logger.exception("Error in health check db probe.")
    return HealthStatus.healthy if result else HealthStatus.unhealthy


class HealthAPIRouter(APIRouter):
    """Api router for the health endpoints.

    Applications with additional readiness checks extend `ReadinessHealthResponse`
    and overwrite `_build_readiness_probe`, daisy chaining to this implementation.
    """

    def __init__(self, readiness_response_model: type[ReadinessHealthResponse] = ReadinessHealthResponse, *args, **kwargs) -> None:
        super().__init__(prefix="/health", tags=["Health"], *args, **kwargs)
        self.readiness_response_model = readiness_response_model
        self.add_api_route(
            "/debug",
            endpoint=self.get_debug_probe,
            description="Provides information regarding debug and config states.",
        )
        self.add_api_route(
            "/liveness",
            endpoint=self.get_liveness_probe,
            description="Determines whether the application instance needs to be restarted.",
            responses={
                status.HTTP_200_OK: {"model": HealthResponse},
                status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthResponse},
            },
        )
        self.add_api_route(
            "/readiness",
            endpoint=self.get_readiness_probe,
            description="Determines whether the application instance is ready to accept requests.",
            responses={
                status.HTTP_200_OK: {"model": readiness_response_model},
                status.HTTP_503_SERVICE_UNAVAILABLE: {"model": readiness_response_model},
            },
        )

    def _resolve_probe(self, result: HealthResponse, response: Response) -> HealthResponse:
        """Sets the http code of `response` according to the checks performed."""
        result.http_server_connectivity = HealthStatus.healthy
        result.convert_from_bool()
        if result.is_healthy():
            response.status_code = status.HTTP_200_OK
        else:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return result

    def get_debug_probe(self, config: conf.inject) -> DebugResponse:
        return DebugResponse(
            app_name=config.app_name,
            version=get_version(),
            debug_mode=config.enable_debug_mode,
            documentation_endpoints=config.enable_documentation_endpoints,
            cors=config.enable_cors,
        )

    def get_liveness_probe(self, response: Response) -> HealthResponse:
        return self._resolve_probe(HealthResponse(), response)

    def _build_readiness_probe(self, result: ReadinessHealthResponse, response: Response, session: db.Session) -> ReadinessHealthResponse:
        """If any probe fails the system should not receive any data."""
        result.db_connectivity = check_health_of_db(session)
        return self._resolve_probe(result, response)

    def get_readiness_probe(self, response: Response, session: db.inject) -> ReadinessHealthResponse:
        return self._build_readiness_probe(self.readiness_response_model(), response, session)
