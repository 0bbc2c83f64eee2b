# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import os
import binascii

import pytest

import common.parsing as parsing


def test_interpret_as_bool():
    assert parsing.interpret_as_bool("True")
    assert parsing.interpret_as_bool("true")
    assert parsing.interpret_as_bool("TrUe")
    assert parsing.interpret_as_bool("yes")
    assert parsing.interpret_as_bool("y")
    assert parsing.interpret_as_bool("1")
    assert parsing.interpret_as_bool(1)
    assert parsing.interpret_as_bool(True)
    assert not parsing.interpret_as_bool("False")
    assert not parsing.interpret_as_bool("Falee")
    assert not parsing.interpret_as_bool("Truee")
    assert not parsing.interpret_as_bool("no")
    assert not parsing.interpret_as_bool("n")
    assert not parsing.interpret_as_bool("0")
    assert not parsing.interpret_as_bool(0)
    assert not parsing.interpret_as_bool(False)


def test_interpret_as_bool_rejects_other_types():
    with pytest.raises(Exception):
        parsing.interpret_as_bool(None)


def test_bytes_parsing():
    """
    Tests encoding bytes to an unpadded url safe base64 string and back
    """
    data = os.urandom(32)
    encoded = parsing.bytes_to_url_safe(data)
    assert isinstance(encoded, str)
    assert '=' not in encoded, "Encoding should not contain padding"
    assert '+' not in encoded and '/' not in encoded, "Encoding should be url safe"
    assert parsing.bytes_from_url_safe(encoded) == data
    # Superfluous padding does not matter to the decoder
    assert parsing.bytes_from_url_safe(parsing.add_padding(encoded)) == data

    with pytest.raises(binascii.Error):
        parsing.bytes_from_url_safe("a")
