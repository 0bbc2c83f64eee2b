# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from common.logging import operations


class RegistryOperationsLogEntry(operations.OperationsLogEntry):
    """Container for registry operations specific logging."""

    class Operation(Enum):
        admin_initialization = "ADMIN_INITIALIZATION"
        issuer_registration = "ISSUER_REGISTRATION"
        issuer_verification = "ISSUER_VERIFICATION"
        issuer_revocation = "ISSUER_REVOCATION"
        certificate_issuance = "CERTIFICATE_ISSUANCE"
        certificate_revocation = "CERTIFICATE_REVOCATION"

    class Step(Enum):
        validation = "VALIDATION"
        authorization = "AUTHORIZATION"
        state_check = "STATE_CHECK"
        persistence = "PERSISTENCE"

    operation: Operation
    step: Step

    caller: str | None = None
    error: str | None = None
