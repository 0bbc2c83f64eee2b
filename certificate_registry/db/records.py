# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Storage for the admin authority, the issuers and their certificates.

Every record is keyed by its deterministic address. Creation relies on the
primary key: a second insert at the same address fails with an IntegrityError
when the session is flushed.
"""

from enum import Enum

import sqlalchemy.orm as sa_orm
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import BigInteger, String, Text, select, update

import common.db.database as db

ADDRESS_LENGTH = 43
"""Length of an url safe base64 encoded SHA-256 digest without padding"""

MAX_COUNTER = 2**63 - 1
"""Largest value the counter columns (BIGINT) can hold"""


class IssuerStatus(Enum):
    UNVERIFIED = "Unverified"
    VERIFIED = "Verified"
    REVOKED = "Revoked"


class CertificateStatus(Enum):
    ACTIVE = "Active"
    REVOKED = "Revoked"


##########
# Tables #
##########


class AdminRecord(db.Base):
    """
    The admin authority. Only exists once, at the well known admin address.
    """

    __tablename__ = "admin"
    address: Mapped[str] = mapped_column(String(ADDRESS_LENGTH), primary_key=True)
    controlling_identity: Mapped[str] = mapped_column(Text, nullable=False)
    """Sole identity allowed to verify and revoke issuers"""
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class IssuerRecord(db.Base):
    """
    Registered institution
    """

    __tablename__ = "issuer"
    address: Mapped[str] = mapped_column(String(ADDRESS_LENGTH), primary_key=True)
    owner_identity: Mapped[str] = mapped_column(Text, nullable=False)
    institution_name: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=IssuerStatus.UNVERIFIED.value)
    """Value of `IssuerStatus`. Verified & revoked in one column, so both can never be set at once"""
    certificates_issued: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    reputation_score: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    @property
    def is_verified(self) -> bool:
        return self.status == IssuerStatus.VERIFIED.value

    @property
    def is_revoked(self) -> bool:
        return self.status == IssuerStatus.REVOKED.value


class CertificateRecord(db.Base):
    """
    Issued credential. Only the status may change after the creation.
    """

    __tablename__ = "certificate"
    address: Mapped[str] = mapped_column(String(ADDRESS_LENGTH), primary_key=True)
    issuer_identity: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(Text, nullable=False)
    course_name: Mapped[str] = mapped_column(Text, nullable=False)
    certificate_hash: Mapped[str] = mapped_column(Text, nullable=False)
    """Hex encoded SHA-256 digest of the full credential data"""
    certificate_id: Mapped[str] = mapped_column(Text, nullable=False)
    issued_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=CertificateStatus.ACTIVE.value)

    @property
    def is_revoked(self) -> bool:
        return self.status == CertificateStatus.REVOKED.value


###########
# Queries #
###########


def get_admin(session: sa_orm.Session, address: str) -> AdminRecord | None:
    return session.get(AdminRecord, address)


def get_issuer(session: sa_orm.Session, address: str, for_update: bool = False) -> IssuerRecord | None:
    """
    Gets the issuer (if any). With `for_update` the row stays locked until the transaction ends.
    """
    return session.get(IssuerRecord, address, with_for_update=for_update)


def get_certificate(session: sa_orm.Session, address: str, for_update: bool = False) -> CertificateRecord | None:
    return session.get(CertificateRecord, address, with_for_update=for_update)


def revoke_certificate(session: sa_orm.Session, address: str) -> bool:
    """
    Sets the certificate to revoked if it still is active.
    Returns False if the certificate was revoked in the meantime.
    """
    result = session.execute(
        update(CertificateRecord)
        .where(CertificateRecord.address == address, CertificateRecord.status == CertificateStatus.ACTIVE.value)
        .values(status=CertificateStatus.REVOKED.value)
        .execution_options(synchronize_session="evaluate")
    )
    return result.rowcount == 1


def list_issuers(session: sa_orm.Session) -> list[IssuerRecord]:
    return session.scalars(select(IssuerRecord).order_by(IssuerRecord.registered_at, IssuerRecord.address)).all()


def list_certificates_by_issuer(session: sa_orm.Session, issuer_identity: str) -> list[CertificateRecord]:
    return session.scalars(
        select(CertificateRecord).where(CertificateRecord.issuer_identity == issuer_identity).order_by(CertificateRecord.issued_at, CertificateRecord.address)
    ).all()


def create(session: sa_orm.Session, *records: db.Base) -> None:
    """
    Adds new records and flushes them, so an occupied address is detected right away.
    Raises sqlalchemy.exc.IntegrityError if an address is already in use.
    """
    session.add_all(records)
    session.flush()
