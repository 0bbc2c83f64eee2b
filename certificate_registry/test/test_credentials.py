# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import re
import hashlib

from certificate_registry import credentials


def test_certificate_digest_is_canonical():
    first = credentials.certificate_digest({"student": "Alice", "course": "CS101"})
    second = credentials.certificate_digest({"course": "CS101", "student": "Alice"})
    assert first == second, "Key order must not influence the digest"
    assert re.fullmatch(r"[0-9a-f]{64}", first)
    assert first == hashlib.sha256(b'{"course":"CS101","student":"Alice"}').hexdigest()


def test_certificate_digest_changes_with_content():
    assert credentials.certificate_digest({"student": "Alice"}) != credentials.certificate_digest({"student": "Alicf"})


def test_new_certificate_id():
    certificate_id = credentials.new_certificate_id(timestamp_ms=36**3)
    assert re.fullmatch(r"CERT-1000-[0-9A-Z]{6}", certificate_id)
    assert credentials.new_certificate_id() != credentials.new_certificate_id()
    assert len(credentials.new_certificate_id()) <= 64
