"""Unit tests for dictionary segment translations."""

import pytest

from domain.dictionary import (
    dictionary_to_instance,
    instance_to_dictionary,
    instance_to_native_identifier,
    native_identifier_to_instance,
)
from domain.exceptions import InvalidArgumentError
from domain.identifiers import parse_segment


def test_instance_to_dictionary():
    assert str(instance_to_dictionary(parse_segment("+first"))) == "+(+first)"
    assert str(instance_to_dictionary(parse_segment("+(personal)"))) == "+(+(personal))"


def test_dictionary_to_instance():
    assert str(dictionary_to_instance(parse_segment("+(+first)"))) == "+first"
    assert str(dictionary_to_instance(parse_segment("+(+(personal))"))) == "+(personal)"


@pytest.mark.parametrize("text", ["+first", "+(https://allfiled.com/)", "$!(+first)"])
def test_dictionary_to_instance_passes_through(text):
    """Segments that are not dictionary-wrapped come back unchanged."""
    segment = parse_segment(text)
    assert dictionary_to_instance(segment) == segment


@pytest.mark.parametrize("text", ["+first", "+(personal)", "+name(+first)"])
def test_dictionary_round_trip(text):
    segment = parse_segment(text)
    assert dictionary_to_instance(instance_to_dictionary(segment)) == segment


def test_instance_to_native_identifier():
    assert instance_to_native_identifier(parse_segment("+(personal)")) == "personal"
    assert instance_to_native_identifier(parse_segment("+(https://allfiled.com/)")) == "https://allfiled.com/"


def test_instance_to_native_identifier_passes_through():
    assert instance_to_native_identifier(parse_segment("+first")) == "+first"
    assert instance_to_native_identifier(parse_segment("$!(+(forename))")) == "$!(+(forename))"


def test_native_identifier_to_instance():
    assert str(native_identifier_to_instance("forename")) == "+(forename)"


@pytest.mark.parametrize("value", ["", "a)b("])
def test_native_identifier_to_instance_invalid(value):
    with pytest.raises(InvalidArgumentError):
        native_identifier_to_instance(value)
