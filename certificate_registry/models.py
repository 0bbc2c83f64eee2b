# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from pydantic import BaseModel, ConfigDict, Field, computed_field

from certificate_registry import addressing
from certificate_registry.db.records import IssuerStatus, CertificateStatus


class AdminData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    controlling_identity: str
    created_at: int


class IssuerData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    owner_identity: str
    institution_name: str
    status: IssuerStatus
    is_verified: bool
    is_revoked: bool
    certificates_issued: int
    reputation_score: int
    """Trust signal for relying parties, +10 for each issued certificate"""
    registered_at: int


class CertificateData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    issuer_identity: str
    student_name: str
    course_name: str
    certificate_hash: str
    certificate_id: str
    issued_at: int
    status: CertificateStatus
    is_revoked: bool

    @computed_field
    @property
    def issuer_address(self) -> str:
        return addressing.issuer_address(self.issuer_identity)


class IssuerRegistration(BaseModel):
    """
    Self registration of an institution. Length limits are enforced by the registry
    to answer with the matching error code.
    """

    institution_name: str


class CertificateIssuance(BaseModel):
    student_name: str
    course_name: str
    certificate_hash: str
    """Hex encoded SHA-256 digest of the full credential data"""
    certificate_id: str
    """Identifier chosen by the issuer, unique among the certificates of the issuer"""


class BulkCertificateEntry(BaseModel):
    """
    Entry of a bulk issuance. The certificate id is generated if not provided,
    the certificate hash is always computed from the entry.
    """

    student_name: str
    course_name: str
    certificate_id: str | None = None
    data: dict = Field(default_factory=dict)
    """Additional credential data included in the certificate hash"""


class BulkIssuanceResult(BaseModel):
    index: int
    certificate_id: str
    certificate_hash: str
    address: str | None = None
    """Address of the issued certificate, None if the entry was rejected"""
    error: str | None = None
    error_description: str | None = None


class CertificateCheck(BaseModel):
    """Verification summary of a certificate as presented to relying parties"""

    address: str
    certificate_id: str
    student_name: str
    course_name: str
    issued_at: int
    status: CertificateStatus
    hash_matches: bool | None = None
    """Whether the presented digest equals the registered one; None if no digest was presented"""
    issuer_address: str
    institution_name: str | None = None
    issuer_status: IssuerStatus | None = None
    is_valid: bool
    """Certificate not revoked and, if presented, the digest matches"""


class AddressData(BaseModel):
    address: str
