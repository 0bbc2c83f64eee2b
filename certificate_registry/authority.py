# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Authorization and lifecycle rules of the certificate registry.

Three tiers of trust: the admin authority verifies and revokes issuers,
verified issuers issue certificates, issuers revoke their own certificates.

Every mutating operation is one unit of work on the session: all checks run
before anything is changed, the changes are committed together, and any error
rolls the session back.

`caller` is the identity authenticated by the calling layer, it is not
verified again here.

State transitions:
 * Issuer: Unverified -> Verified (admin), Unverified | Verified -> Revoked (admin, final)
 * Certificate: Active -> Revoked (issuer, final)
"""

import time
import logging
import contextlib
from collections.abc import Iterator

import sqlalchemy.exc
import sqlalchemy.orm as sa_orm

from certificate_registry import addressing, credentials, models
from certificate_registry.db import records
from certificate_registry.db.records import AdminRecord, IssuerRecord, CertificateRecord, IssuerStatus, CertificateStatus
from certificate_registry.exception import registry_errors as errors
from certificate_registry.logging import RegistryOperationsLogEntry

_logger = logging.getLogger(__name__)

MAX_INSTITUTION_NAME_LENGTH = 64
MAX_STUDENT_NAME_LENGTH = 64
MAX_COURSE_NAME_LENGTH = 128
MAX_CERTIFICATE_HASH_LENGTH = 64
MAX_CERTIFICATE_ID_LENGTH = 64

CERTIFICATES_ISSUED_INCREMENT = 1
REPUTATION_SCORE_INCREMENT = 10

Operation = RegistryOperationsLogEntry.Operation
Step = RegistryOperationsLogEntry.Step


def _now() -> int:
    return int(time.time())


def _length(value: str) -> int:
    """Lengths are counted in UTF-8 bytes, the storage size of the value"""
    return len(value.encode())


def _checked_add(counter: int, increment: int) -> int:
    result = counter + increment
    if result > records.MAX_COUNTER:
        raise errors.Overflow()
    return result


def _step_of(error: errors.RegistryError) -> Step:
    if isinstance(error, errors.InputValidationError):
        return Step.validation
    if isinstance(error, errors.AuthorizationError):
        return Step.authorization
    return Step.state_check


@contextlib.contextmanager
def _unit_of_work(
    session: sa_orm.Session,
    operation: Operation,
    caller: str,
    address_in_use: type[errors.RegistryError] = errors.AlreadyExists,
) -> Iterator[None]:
    """
    Commits the changes made in the block, rolls back on any error.
    An address found occupied while flushing (concurrent creation) is raised as `address_in_use`.
    """
    try:
        yield
        session.commit()
    except errors.RegistryError as e:
        session.rollback()
        _logger.info(
            RegistryOperationsLogEntry(
                message="Operation rejected.",
                status=RegistryOperationsLogEntry.Status.error,
                operation=operation,
                step=_step_of(e),
                caller=caller,
                error=e.error,
            )
        )
        raise
    except sqlalchemy.exc.IntegrityError:
        session.rollback()
        _logger.info(
            RegistryOperationsLogEntry(
                message="Operation rejected, address already in use.",
                status=RegistryOperationsLogEntry.Status.error,
                operation=operation,
                step=Step.persistence,
                caller=caller,
                error=address_in_use.error,
            )
        )
        raise address_in_use()
    except Exception:
        session.rollback()
        raise


def _log_success(message: str, operation: Operation, caller: str, address: str) -> None:
    _logger.info(
        RegistryOperationsLogEntry(
            message=message,
            status=RegistryOperationsLogEntry.Status.success,
            operation=operation,
            step=Step.persistence,
            caller=caller,
            address=address,
        )
    )


def _require_admin(session: sa_orm.Session, caller: str) -> None:
    """Without an initialized admin authority nobody is admin."""
    admin = records.get_admin(session, addressing.admin_address())
    if admin is None or admin.controlling_identity != caller:
        raise errors.UnauthorizedAdmin()


#########
# Admin #
#########


def initialize_admin(session: sa_orm.Session, caller: str, now: int = None) -> AdminRecord:
    """
    One time setup. The caller becomes the sole authority to verify or revoke issuers.
    """
    address = addressing.admin_address()
    with _unit_of_work(session, Operation.admin_initialization, caller, errors.AlreadyInitialized):
        if records.get_admin(session, address) is not None:
            raise errors.AlreadyInitialized()
        admin = AdminRecord(address=address, controlling_identity=caller, created_at=now if now is not None else _now())
        records.create(session, admin)
    _log_success("Admin authority initialized.", Operation.admin_initialization, caller, address)
    return admin


###########
# Issuers #
###########


def register_issuer(session: sa_orm.Session, caller: str, institution_name: str, now: int = None) -> IssuerRecord:
    """
    Self registration of the caller as issuer. The issuer stays unverified until the admin verifies it.
    """
    address = addressing.issuer_address(caller)
    with _unit_of_work(session, Operation.issuer_registration, caller, errors.AlreadyRegistered):
        if _length(institution_name) > MAX_INSTITUTION_NAME_LENGTH:
            raise errors.InstitutionNameTooLong()
        if not institution_name:
            raise errors.EmptyInstitutionName()
        if records.get_issuer(session, address) is not None:
            raise errors.AlreadyRegistered()
        issuer = IssuerRecord(
            address=address,
            owner_identity=caller,
            institution_name=institution_name,
            status=IssuerStatus.UNVERIFIED.value,
            certificates_issued=0,
            reputation_score=0,
            registered_at=now if now is not None else _now(),
        )
        records.create(session, issuer)
    _log_success(f"Issuer {institution_name} registered.", Operation.issuer_registration, caller, address)
    return issuer


def verify_issuer(session: sa_orm.Session, caller: str, issuer_address: str) -> IssuerRecord:
    """
    Unlocks issuance for the issuer. Verifying a verified issuer changes nothing,
    a revoked issuer can never be verified again.
    """
    with _unit_of_work(session, Operation.issuer_verification, caller):
        _require_admin(session, caller)
        issuer = records.get_issuer(session, issuer_address, for_update=True)
        if issuer is None:
            raise errors.IssuerNotFound()
        if issuer.is_revoked:
            raise errors.IssuerRevoked()
        issuer.status = IssuerStatus.VERIFIED.value
    _log_success(f"Issuer {issuer.institution_name} verified.", Operation.issuer_verification, caller, issuer_address)
    return issuer


def revoke_issuer(session: sa_orm.Session, caller: str, issuer_address: str) -> IssuerRecord:
    """
    Permanently blocks issuance for the issuer. Certificates already issued stay untouched.
    """
    with _unit_of_work(session, Operation.issuer_revocation, caller):
        _require_admin(session, caller)
        issuer = records.get_issuer(session, issuer_address, for_update=True)
        if issuer is None:
            raise errors.IssuerNotFound()
        issuer.status = IssuerStatus.REVOKED.value
    _log_success(f"Issuer {issuer.institution_name} revoked.", Operation.issuer_revocation, caller, issuer_address)
    return issuer


################
# Certificates #
################


def _validate_certificate_fields(student_name: str, course_name: str, certificate_hash: str, certificate_id: str) -> None:
    if _length(student_name) > MAX_STUDENT_NAME_LENGTH:
        raise errors.StudentNameTooLong()
    if _length(course_name) > MAX_COURSE_NAME_LENGTH:
        raise errors.CourseNameTooLong()
    if _length(certificate_hash) > MAX_CERTIFICATE_HASH_LENGTH:
        raise errors.CertificateHashTooLong()
    if _length(certificate_id) > MAX_CERTIFICATE_ID_LENGTH:
        raise errors.CertificateIdTooLong()
    if not (student_name and course_name and certificate_hash and certificate_id):
        raise errors.EmptyField()


def issue_certificate(
    session: sa_orm.Session,
    caller: str,
    student_name: str,
    course_name: str,
    certificate_hash: str,
    certificate_id: str,
    now: int = None,
) -> CertificateRecord:
    """
    Issues a certificate in the name of the caller, who must be a verified, not revoked, issuer.
    The certificate and the updated counters of the issuer are committed together.
    """
    address = addressing.certificate_address(caller, certificate_id)
    with _unit_of_work(session, Operation.certificate_issuance, caller, errors.AlreadyExists):
        _validate_certificate_fields(student_name, course_name, certificate_hash, certificate_id)

        issuer = records.get_issuer(session, addressing.issuer_address(caller), for_update=True)
        if issuer is None:
            raise errors.IssuerNotFound()
        # Revocation wins over everything else
        if issuer.is_revoked:
            raise errors.IssuerRevoked()
        if not issuer.is_verified:
            raise errors.IssuerNotVerified()

        if records.get_certificate(session, address) is not None:
            raise errors.AlreadyExists()

        certificates_issued = _checked_add(issuer.certificates_issued, CERTIFICATES_ISSUED_INCREMENT)
        reputation_score = _checked_add(issuer.reputation_score, REPUTATION_SCORE_INCREMENT)

        certificate = CertificateRecord(
            address=address,
            issuer_identity=caller,
            student_name=student_name,
            course_name=course_name,
            certificate_hash=certificate_hash,
            certificate_id=certificate_id,
            issued_at=now if now is not None else _now(),
            status=CertificateStatus.ACTIVE.value,
        )
        issuer.certificates_issued = certificates_issued
        issuer.reputation_score = reputation_score
        records.create(session, certificate)
    _log_success(f"Certificate {certificate_id} issued by {issuer.institution_name}.", Operation.certificate_issuance, caller, address)
    return certificate


def revoke_certificate(session: sa_orm.Session, caller: str, certificate_address: str) -> CertificateRecord:
    """
    Revokes a certificate. Only the original issuer may do so, the admin has no override.
    """
    with _unit_of_work(session, Operation.certificate_revocation, caller):
        certificate = records.get_certificate(session, certificate_address, for_update=True)
        if certificate is None:
            raise errors.CertificateNotFound()
        if certificate.is_revoked:
            raise errors.CertificateAlreadyRevoked()
        if certificate.issuer_identity != caller:
            raise errors.UnauthorizedIssuer()
        # Only the first of concurrent revocations finds the certificate active
        if not records.revoke_certificate(session, certificate_address):
            raise errors.CertificateAlreadyRevoked()
    _log_success(f"Certificate {certificate.certificate_id} revoked.", Operation.certificate_revocation, caller, certificate_address)
    return certificate


def issue_certificates(
    session: sa_orm.Session,
    caller: str,
    entries: list[models.BulkCertificateEntry],
    now: int = None,
) -> list[models.BulkIssuanceResult]:
    """
    Issues one certificate per entry. Every entry is its own unit of work,
    a rejected entry does not undo the entries issued before it.
    """
    results = []
    for index, entry in enumerate(entries):
        certificate_id = entry.certificate_id
        if certificate_id is None:
            certificate_id = credentials.new_certificate_id()
        certificate_hash = credentials.certificate_digest(
            {
                "student_name": entry.student_name,
                "course_name": entry.course_name,
                "certificate_id": certificate_id,
                "data": entry.data,
            }
        )
        result = models.BulkIssuanceResult(index=index, certificate_id=certificate_id, certificate_hash=certificate_hash)
        try:
            certificate = issue_certificate(session, caller, entry.student_name, entry.course_name, certificate_hash, certificate_id, now=now)
            result.address = certificate.address
        except errors.RegistryError as e:
            result.error = e.error
            result.error_description = e.error_description
        results.append(result)
    return results


#############
# Read side #
#############


def get_admin(session: sa_orm.Session) -> AdminRecord:
    admin = records.get_admin(session, addressing.admin_address())
    if admin is None:
        raise errors.AdminNotInitialized()
    return admin


def get_issuer(session: sa_orm.Session, issuer_address: str) -> IssuerRecord:
    issuer = records.get_issuer(session, issuer_address)
    if issuer is None:
        raise errors.IssuerNotFound()
    return issuer


def get_certificate(session: sa_orm.Session, certificate_address: str) -> CertificateRecord:
    certificate = records.get_certificate(session, certificate_address)
    if certificate is None:
        raise errors.CertificateNotFound()
    return certificate


def list_issuers(session: sa_orm.Session) -> list[IssuerRecord]:
    return records.list_issuers(session)


def list_certificates_by_issuer(session: sa_orm.Session, issuer_identity: str) -> list[CertificateRecord]:
    return records.list_certificates_by_issuer(session, issuer_identity)


def check_certificate(session: sa_orm.Session, certificate_address: str, certificate_hash: str = None) -> models.CertificateCheck:
    """
    Summarizes whether a presented certificate can be trusted.
    If a digest of the presented credential data is given, it is compared to the registered one.
    """
    certificate = get_certificate(session, certificate_address)
    issuer_address = addressing.issuer_address(certificate.issuer_identity)
    issuer = records.get_issuer(session, issuer_address)
    hash_matches = None
    if certificate_hash is not None:
        hash_matches = certificate_hash.lower() == certificate.certificate_hash.lower()
    return models.CertificateCheck(
        address=certificate.address,
        certificate_id=certificate.certificate_id,
        student_name=certificate.student_name,
        course_name=certificate.course_name,
        issued_at=certificate.issued_at,
        status=certificate.status,
        hash_matches=hash_matches,
        issuer_address=issuer_address,
        institution_name=issuer.institution_name if issuer else None,
        issuer_status=issuer.status if issuer else None,
        is_valid=not certificate.is_revoked and hash_matches is not False,
    )
