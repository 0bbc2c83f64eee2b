# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Errors rejecting a registry operation.

Every error is raised before the operation changed anything, the store is left
untouched. The machine readable `error` code is part of the public interface.
"""

from fastapi import status


class RegistryError(Exception):
    """Base class for all rejected registry operations."""

    error: str = None
    """Machine readable code identifieng the exception."""

    error_description: str = None
    """Human readable error description for the error type."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, additional_error_description: str = None) -> None:
        """Create a registry error.

        Args:
            additional_error_description (str, optional): Additional, human readable data, to identify the issue resulting in this exception.
        """
        if additional_error_description:
            self.error_description = f"{self.error_description} {additional_error_description}"
        super().__init__(self.error_description)


###################
# Input Validation #
###################


class InputValidationError(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST


class InstitutionNameTooLong(InputValidationError):
    error = "InstitutionNameTooLong"
    error_description = "Institution name exceeds maximum length of 64 characters."


class EmptyInstitutionName(InputValidationError):
    error = "EmptyInstitutionName"
    error_description = "Institution name cannot be empty."


class StudentNameTooLong(InputValidationError):
    error = "StudentNameTooLong"
    error_description = "Student name exceeds maximum length of 64 characters."


class CourseNameTooLong(InputValidationError):
    error = "CourseNameTooLong"
    error_description = "Course name exceeds maximum length of 128 characters."


class CertificateHashTooLong(InputValidationError):
    error = "CertificateHashTooLong"
    error_description = "Certificate hash exceeds maximum length of 64 characters."


class CertificateIdTooLong(InputValidationError):
    error = "CertificateIdTooLong"
    error_description = "Certificate ID exceeds maximum length of 64 characters."


class EmptyField(InputValidationError):
    error = "EmptyField"
    error_description = "Required field cannot be empty."


class EmptyBulkRequest(InputValidationError):
    error = "EmptyBulkRequest"
    error_description = "No entries provided."


class TooManyBulkEntries(InputValidationError):
    error = "TooManyBulkEntries"
    error_description = "Too many entries in a single bulk request."


#################
# Authorization #
#################


class AuthorizationError(RegistryError):
    status_code = status.HTTP_403_FORBIDDEN


class UnauthorizedAdmin(AuthorizationError):
    error = "UnauthorizedAdmin"
    error_description = "Unauthorized: not the admin authority."


class UnauthorizedIssuer(AuthorizationError):
    error = "UnauthorizedIssuer"
    error_description = "Unauthorized: not the issuer authority."


#######################
# State Preconditions #
#######################


class StatePreconditionError(RegistryError):
    status_code = status.HTTP_409_CONFLICT


class AlreadyInitialized(StatePreconditionError):
    error = "AlreadyInitialized"
    error_description = "The admin authority has already been initialized."


class AlreadyRegistered(StatePreconditionError):
    error = "AlreadyRegistered"
    error_description = "An issuer is already registered for this identity."


class AlreadyExists(StatePreconditionError):
    """The issuer already used the certificate id."""

    error = "AlreadyExists"
    error_description = "A certificate with this id has already been issued by this issuer."


class IssuerNotVerified(StatePreconditionError):
    error = "IssuerNotVerified"
    error_description = "Issuer is not verified by admin."


class IssuerRevoked(StatePreconditionError):
    error = "IssuerRevoked"
    error_description = "Issuer has been revoked."


class CertificateAlreadyRevoked(StatePreconditionError):
    error = "CertificateAlreadyRevoked"
    error_description = "Certificate has already been revoked."


class NotFoundError(StatePreconditionError):
    status_code = status.HTTP_404_NOT_FOUND


class AdminNotInitialized(NotFoundError):
    error = "AdminNotInitialized"
    error_description = "The admin authority has not been initialized yet."


class IssuerNotFound(NotFoundError):
    error = "IssuerNotFound"
    error_description = "No issuer is registered at this address."


class CertificateNotFound(NotFoundError):
    error = "CertificateNotFound"
    error_description = "No certificate exists at this address."


##############
# Arithmetic #
##############


class Overflow(RegistryError):
    """A counter of the issuer would exceed its representable range."""

    error = "Overflow"
    error_description = "Arithmetic overflow."
    status_code = status.HTTP_409_CONFLICT
