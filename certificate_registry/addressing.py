# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Deterministic addresses for the records of the registry.

Every record lives at an address computed from the kind of record and the
values identifying it, so any party can locate "the issuer of identity X" or
"certificate Y of issuer X" without a lookup table.

The address is the SHA-256 digest over a domain tag, the kind label and the
seeds, each component length prefixed. The length prefix keeps the encoding
unambiguous: ("ab", "c") and ("a", "bc") never share an address, neither do
records of different kinds.
"""

import hashlib
from enum import Enum

from common import parsing

_DOMAIN_TAG = b"certificate-registry/address/v1"
_LENGTH_PREFIX_BYTES = 4

ADDRESS_BYTES = hashlib.sha256().digest_size


class RecordKind(Enum):
    admin = "admin"
    issuer = "issuer"
    certificate = "certificate"


def _component(data: bytes) -> bytes:
    return len(data).to_bytes(_LENGTH_PREFIX_BYTES, "big") + data


def derive_address(kind: RecordKind, *seeds: str) -> str:
    """Address of the record of `kind` identified by `seeds`."""
    digest = hashlib.sha256(_component(_DOMAIN_TAG))
    digest.update(_component(kind.value.encode()))
    for seed in seeds:
        digest.update(_component(seed.encode()))
    return parsing.bytes_to_url_safe(digest.digest())


def admin_address() -> str:
    """The well known address of the admin authority singleton."""
    return derive_address(RecordKind.admin)


def issuer_address(owner_identity: str) -> str:
    return derive_address(RecordKind.issuer, owner_identity)


def certificate_address(issuer_identity: str, certificate_id: str) -> str:
    """Certificate ids are scoped per issuer; two issuers may use the same id."""
    return derive_address(RecordKind.certificate, issuer_identity, certificate_id)


def is_address(candidate: str) -> bool:
    """Checks the form (not the existence) of an address."""
    try:
        decoded = parsing.bytes_from_url_safe(candidate)
    except ValueError:
        return False
    return len(decoded) == ADDRESS_BYTES and parsing.bytes_to_url_safe(decoded) == candidate
