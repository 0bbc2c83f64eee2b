# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Helpers for issuers preparing a certificate: the content digest stored in the
registry and a generator for certificate ids.
"""

import json
import time
import hashlib
import secrets

_BASE36_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def certificate_digest(data: dict) -> str:
    """
    Hex encoded SHA-256 digest over the full credential data.

    The data is serialized as canonical JSON (sorted keys, no whitespace), so
    the same credential always results in the same digest.
    """
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _to_base36(number: int) -> str:
    if number == 0:
        return _BASE36_ALPHABET[0]
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def new_certificate_id(timestamp_ms: int = None) -> str:
    """Certificate id in the form CERT-<base36 milliseconds>-<6 random base36 characters>"""
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    random_part = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(6))
    return f"CERT-{_to_base36(timestamp_ms)}-{random_part}"
