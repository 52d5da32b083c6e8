"""Unit tests for multiplicity decoration rules."""

import pytest

from domain.exceptions import InvalidArgumentError
from domain.identifiers import parse_identifier, parse_segment
from domain.multiplicity import (
    attribute_singleton,
    base_form,
    decorate_path,
    entity_singleton,
    is_attribute_singleton,
    is_collection,
)


class TestBaseForm:
    """Test stripping of decoration."""

    @pytest.mark.parametrize("text,expected", [
        ("$!(+name)", "+name"),
        ("$(+name)", "+name"),
        ("$($!(+x))", "+x"),
        ("$!(+(forename))", "+(forename)"),
        ("+first", "+first"),
        ("+(personal)", "+(personal)"),
    ])
    def test_base_form(self, text, expected):
        """Test decoration is removed and undecorated segments are kept."""
        assert str(base_form(parse_segment(text))) == expected

    @pytest.mark.parametrize("text", ["$!(+name)", "$($!(+x))", "+first", "$!(https://allfiled.com/)"])
    def test_idempotent(self, text):
        """Test base_form(base_form(s)) == base_form(s)."""
        segment = parse_segment(text)
        assert base_form(base_form(segment)) == base_form(segment)


class TestDecoration:
    """Test entity and attribute decoration."""

    def test_attribute_singleton(self):
        """Test a segment is wrapped as attribute singleton."""
        assert str(attribute_singleton(parse_segment("+name"))) == "$!(+name)"

    def test_attribute_singleton_not_doubled(self):
        """Test decorating an attribute again does not nest decoration."""
        assert str(attribute_singleton(parse_segment("$!(+name)"))) == "$!(+name)"

    def test_entity_singleton_is_undecorated(self):
        """Test entity singletons render as their base form."""
        assert str(entity_singleton(parse_segment("$!(+first)"))) == "+first"
        assert str(entity_singleton(parse_segment("+first"))) == "+first"

    def test_predicates(self):
        """Test decoration predicates."""
        assert is_attribute_singleton(parse_segment("$!(+name)"))
        assert not is_attribute_singleton(parse_segment("+name"))
        assert is_collection(parse_segment("$(+name)"))
        assert not is_collection(parse_segment("$!(+name)"))


class TestDecoratePath:
    """Test the positional decoration rule."""

    def test_last_segment_is_attribute(self):
        """Test entities before the terminal attribute."""
        path = parse_identifier("+home+address+street").segments
        assert str(decorate_path(path)) == "+home+address$!(+street)"

    def test_single_segment(self):
        """Test a one-segment path is a lone attribute."""
        assert str(decorate_path([parse_segment("+email")])) == "$!(+email)"

    def test_existing_decoration_is_normalized(self):
        """Test input decoration does not leak into the result."""
        path = parse_identifier("$!(+first)$(+name)").segments
        assert str(decorate_path(path)) == "+first$!(+name)"

    @pytest.mark.parametrize("texts", [
        ["+home", "+(personal)", "+street"],
        ["first", "$!(+name)"],
        ["+(personal)", "person", "+(forename)"],
    ])
    def test_render_then_parse(self, texts):
        """Test decorated paths parse back to themselves."""
        xri = decorate_path(parse_segment(text) for text in texts)

        assert parse_identifier(str(xri)) == xri

    def test_context_less_literal_after_entity(self):
        """Test a path whose entities would merge when rendered is rejected."""
        with pytest.raises(InvalidArgumentError):
            decorate_path([parse_segment("+home"), parse_segment("address"), parse_segment("+street")])

    def test_empty_path(self):
        """Test an empty path is rejected."""
        with pytest.raises(InvalidArgumentError):
            decorate_path([])
