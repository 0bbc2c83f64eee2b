# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import base64
import re


def bytes_to_url_safe(data: bytes) -> str:
    """Encode the bytes to a url_safe b64 encoded string without padding"""
    return remove_padding(base64.urlsafe_b64encode(data).decode())


def bytes_from_url_safe(data: str) -> bytes:
    """
    Decode url_safe b64 encoded bytes. Adds padding as needed.
    Throws ValueError if data is not valid b64
    """
    return base64.urlsafe_b64decode(add_padding(data))


def remove_padding(base64_encoded: str) -> str:
    """Remove padding form b64 encoded string"""
    return base64_encoded.rstrip('=')


def add_padding(base64_encoded: str) -> str:
    """Add padding (=) for b64 encoded string, so it can be decoded"""
    return f'{base64_encoded}==='


def interpret_as_bool(boolify: str) -> bool:
    """
    Converts an inpput to an boolean according to commonly used patterns.
    """
    if isinstance(boolify, bool):
        return boolify
    if isinstance(boolify, int):
        return boolify > 0
    elif isinstance(boolify, str):
        return re.match(r"^(y|yes|1|true)$", boolify, re.IGNORECASE | re.MULTILINE) is not None
    raise Exception(f"Can't boolify a {boolify}.")
