# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import pytest

from certificate_registry import addressing
from certificate_registry.addressing import RecordKind


def test_addresses_are_deterministic():
    assert addressing.admin_address() == addressing.admin_address()
    assert addressing.issuer_address("B") == addressing.issuer_address("B")
    assert addressing.certificate_address("B", "cert-1") == addressing.certificate_address("B", "cert-1")


def test_address_format():
    address = addressing.issuer_address("B")
    assert len(address) == 43
    assert addressing.is_address(address)
    assert "=" not in address


def test_different_inputs_different_addresses():
    assert addressing.issuer_address("B") != addressing.issuer_address("C")
    assert addressing.certificate_address("B", "cert-1") != addressing.certificate_address("B", "cert-2")
    # Certificate ids are scoped per issuer
    assert addressing.certificate_address("B", "cert-1") != addressing.certificate_address("C", "cert-1")


def test_no_boundary_collisions():
    """Shifting characters between the components must change the address"""
    assert addressing.certificate_address("ab", "c") != addressing.certificate_address("a", "bc")
    assert addressing.certificate_address("a", "") != addressing.certificate_address("", "a")


def test_no_collisions_across_kinds():
    assert addressing.derive_address(RecordKind.issuer, "x") != addressing.derive_address(RecordKind.certificate, "x")
    assert addressing.derive_address(RecordKind.admin) != addressing.derive_address(RecordKind.issuer)
    # The kind label itself can not be smuggled in through a seed
    assert addressing.derive_address(RecordKind.admin) != addressing.issuer_address("")
    assert addressing.admin_address() != addressing.derive_address(RecordKind.issuer, "admin")


@pytest.mark.parametrize(
    "candidate",
    [
        "",
        "abc",
        "not an address at all",
        addressing.issuer_address("B") + "A",
        addressing.issuer_address("B")[:-1],
        addressing.issuer_address("B") + "=",
        "!" + addressing.issuer_address("B")[1:],
    ],
)
def test_malformed_addresses(candidate: str):
    assert not addressing.is_address(candidate)
