from __future__ import annotations

import string

import pytest

from propvault import generator
from propvault.errors import InvalidLength


def test_length_and_default_classes():
    value = generator.generate(200)
    assert len(value) == 200
    allowed = set(string.ascii_letters + string.digits)
    assert set(value) <= allowed


@pytest.mark.parametrize("length", [0, -1])
def test_invalid_length(length):
    with pytest.raises(InvalidLength):
        generator.generate(length)


def test_invalid_length_is_value_error():
    with pytest.raises(ValueError):
        generator.generate(0)


def test_all_classes_present_with_special_characters():
    value = generator.generate(1000, use_special_characters=True)
    assert any(c in string.ascii_lowercase for c in value)
    assert any(c in string.ascii_uppercase for c in value)
    assert any(c in string.digits for c in value)
    assert any(c in string.punctuation for c in value)


def test_no_special_characters_by_default():
    value = generator.generate(1000)
    assert not any(c in string.punctuation for c in value)


def test_values_differ():
    assert generator.generate(32) != generator.generate(32)


def test_character_classes():
    assert len(generator.character_classes()) == 3
    assert len(generator.character_classes(True)) == 4
