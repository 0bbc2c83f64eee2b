# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

import common.db.database as db
from common.apikey import require_api_key
import common.model.exception as ex
from common.fastapi_extensions import ExtendedFastAPI
from common.health import HealthAPIRouter

from certificate_registry import addressing, authority, models
from certificate_registry import config as conf
from certificate_registry.exception.handler import configure_exception_handlers
from certificate_registry.exception import registry_errors as errors


app = ExtendedFastAPI(conf.RegistryConfig)
configure_exception_handlers(app)

_error_responses = {
    status.HTTP_400_BAD_REQUEST: {"model": ex.ErrorResponse, "description": "Invalid input"},
    status.HTTP_401_UNAUTHORIZED: {"model": ex.HTTPError, "description": "Invalid or missing API key / caller identity"},
    status.HTTP_403_FORBIDDEN: {"model": ex.ErrorResponse, "description": "Caller is not allowed to perform the operation"},
    status.HTTP_404_NOT_FOUND: {"model": ex.ErrorResponse, "description": "Record not found"},
    status.HTTP_409_CONFLICT: {"model": ex.ErrorResponse, "description": "Record is not in a state allowing the operation"},
}


def require_caller_identity(identity: str | None = Security(APIKeyHeader(name="x-caller-identity", auto_error=False))) -> str:
    """
    Identity of the caller as authenticated by the gateway in front of this service.
    """
    if not identity:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing caller identity")
    return identity


caller = Annotated[str, Depends(require_caller_identity)]


def valid_address(address: str) -> str:
    if not addressing.is_address(address):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"{address} is not a valid address")
    return address


def _issuer_address(issuer_address: str) -> str:
    return valid_address(issuer_address)


def _certificate_address(certificate_address: str) -> str:
    return valid_address(certificate_address)


issuer_address_inject = Annotated[str, Depends(_issuer_address)]
certificate_address_inject = Annotated[str, Depends(_certificate_address)]

#################
# REST Endpoint #
#################

#########
# Admin #
#########
admin_router = APIRouter(prefix="/admin", tags=["Admin"], responses=_error_responses)


@admin_router.put(
    "",
    status_code=status.HTTP_201_CREATED,
    description="One time initialization of the admin authority. The caller becomes the sole authority to verify or revoke issuers.",
    dependencies=[Security(require_api_key)],
)
def initialize_admin(identity: caller, session: db.inject) -> models.AdminData:
    return models.AdminData.model_validate(authority.initialize_admin(session, identity))


@admin_router.get("")
def get_admin(session: db.inject) -> models.AdminData:
    return models.AdminData.model_validate(authority.get_admin(session))


##########
# Issuer #
##########
issuers_router = APIRouter(tags=["Issuer"], responses=_error_responses)


@issuers_router.put(
    "/issuers",
    status_code=status.HTTP_201_CREATED,
    description="Registers the caller as issuer. The issuer can not issue certificates before the admin verified it.",
    dependencies=[Security(require_api_key)],
)
def register_issuer(registration: models.IssuerRegistration, identity: caller, session: db.inject) -> models.IssuerData:
    return models.IssuerData.model_validate(authority.register_issuer(session, identity, registration.institution_name))


@issuers_router.get("/issuers", description="Lists all registered issuers")
def list_issuers(session: db.inject) -> list[models.IssuerData]:
    return [models.IssuerData.model_validate(issuer) for issuer in authority.list_issuers(session)]


issuer_router = APIRouter(prefix="/issuer/{issuer_address}", tags=["Issuer"], responses=_error_responses)


@issuer_router.get("")
def get_issuer(issuer_address: issuer_address_inject, session: db.inject) -> models.IssuerData:
    return models.IssuerData.model_validate(authority.get_issuer(session, issuer_address))


@issuer_router.post(
    "/verify",
    description="Admin only. Unlocks certificate issuance for the issuer.",
    dependencies=[Security(require_api_key)],
)
def verify_issuer(issuer_address: issuer_address_inject, identity: caller, session: db.inject) -> models.IssuerData:
    return models.IssuerData.model_validate(authority.verify_issuer(session, identity, issuer_address))


@issuer_router.post(
    "/revoke",
    description="Admin only. Permanently blocks certificate issuance for the issuer.",
    dependencies=[Security(require_api_key)],
)
def revoke_issuer(issuer_address: issuer_address_inject, identity: caller, session: db.inject) -> models.IssuerData:
    return models.IssuerData.model_validate(authority.revoke_issuer(session, identity, issuer_address))


@issuer_router.get("/certificates", description="Lists all certificates issued by the issuer")
def list_issuer_certificates(issuer_address: issuer_address_inject, session: db.inject) -> list[models.CertificateData]:
    issuer = authority.get_issuer(session, issuer_address)
    return [models.CertificateData.model_validate(certificate) for certificate in authority.list_certificates_by_issuer(session, issuer.owner_identity)]


###############
# Certificate #
###############
certificates_router = APIRouter(prefix="/certificates", tags=["Certificate"], responses=_error_responses)


@certificates_router.put(
    "",
    status_code=status.HTTP_201_CREATED,
    description="Issues a certificate in the name of the caller, who must be a verified issuer.",
    dependencies=[Security(require_api_key)],
)
def issue_certificate(issuance: models.CertificateIssuance, identity: caller, session: db.inject) -> models.CertificateData:
    certificate = authority.issue_certificate(
        session,
        identity,
        student_name=issuance.student_name,
        course_name=issuance.course_name,
        certificate_hash=issuance.certificate_hash,
        certificate_id=issuance.certificate_id,
    )
    return models.CertificateData.model_validate(certificate)


@certificates_router.put(
    "/bulk",
    description="""
    Issues one certificate per entry in the name of the caller.
    Entries are issued independently, the result lists the address or the error for every entry.
    """,
    dependencies=[Security(require_api_key)],
)
def issue_certificates(
    entries: list[models.BulkCertificateEntry],
    identity: caller,
    session: db.inject,
    config: conf.inject,
) -> list[models.BulkIssuanceResult]:
    if not entries:
        raise errors.EmptyBulkRequest()
    if len(entries) > config.max_bulk_entries:
        raise errors.TooManyBulkEntries(f"At most {config.max_bulk_entries} entries can be issued at once.")
    return authority.issue_certificates(session, identity, entries)


certificate_router = APIRouter(prefix="/certificate/{certificate_address}", tags=["Certificate"], responses=_error_responses)


@certificate_router.get("")
def get_certificate(certificate_address: certificate_address_inject, session: db.inject) -> models.CertificateData:
    return models.CertificateData.model_validate(authority.get_certificate(session, certificate_address))


@certificate_router.get("/check", description="Verification summary of the certificate, optionally comparing the digest of the presented credential data")
def check_certificate(certificate_address: certificate_address_inject, session: db.inject, certificate_hash: str = None) -> models.CertificateCheck:
    return authority.check_certificate(session, certificate_address, certificate_hash)


@certificate_router.post(
    "/revoke",
    description="Revokes the certificate. Only the issuer of the certificate may revoke it.",
    dependencies=[Security(require_api_key)],
)
def revoke_certificate(certificate_address: certificate_address_inject, identity: caller, session: db.inject) -> models.CertificateData:
    return models.CertificateData.model_validate(authority.revoke_certificate(session, identity, certificate_address))


###########
# Address #
###########
address_router = APIRouter(prefix="/address", tags=["Address"])


@address_router.get("/admin", description="Well known address of the admin authority")
def get_admin_address() -> models.AddressData:
    return models.AddressData(address=addressing.admin_address())


@address_router.get("/issuer", description="Address of the issuer registered by the identity")
def get_issuer_address(identity: str) -> models.AddressData:
    return models.AddressData(address=addressing.issuer_address(identity))


@address_router.get("/certificate", description="Address of the certificate with the id issued by the identity")
def get_certificate_address(issuer_identity: str, certificate_id: str) -> models.AddressData:
    return models.AddressData(address=addressing.certificate_address(issuer_identity, certificate_id))


app.include_router(admin_router)
app.include_router(issuers_router)
app.include_router(issuer_router)
app.include_router(certificates_router)
app.include_router(certificate_router)
app.include_router(address_router)


#############
#  Health   #
#############

app.include_router(HealthAPIRouter())
