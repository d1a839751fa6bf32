"""
Unit tests for the text and variable emission rules.

This module tests the rules defined in algen.backend.rules.text and
algen.backend.rules.variables.
"""

import pytest
from algen.backend import Order
from algen.blocks import Block, Input
from algen.core import UnknownBlockError


def text(value):
    return Block("text", fields={"TEXT": value})


def var(name):
    return Block("variables_get", fields={"VAR": name})


def num(value):
    return Block("math_number", fields={"NUM": value})


def substring(where1, where2, at1=None, at2=None):
    return Block("text_getSubstring", fields={"WHERE1": where1, "WHERE2": where2}, inputs=[
        Input.value("STRING", var("s")),
        Input.value("AT1", at1),
        Input.value("AT2", at2),
    ])


class TestTextValues:
    """Tests for text expressions."""

    def test_text_literal(self, generator):
        """Test a string literal."""
        assert generator.block_to_code(text("hello")) == ("'hello'", Order.ATOMIC)

    def test_text_literal_quote_escaping(self, generator):
        """Test that single quotes are doubled."""
        assert generator.block_to_code(text("it's"))[0] == "'it''s'"

    def test_empty_text(self, generator):
        """Test an empty string literal."""
        assert generator.block_to_code(text(""))[0] == "''"

    def test_length(self, generator):
        """Test string length."""
        block = Block("text_length", inputs=[Input.value("VALUE", var("s"))])
        assert generator.block_to_code(block) == ("strlen(s)", Order.HIGH)

    def test_is_empty(self, generator):
        """Test the emptiness check."""
        block = Block("text_isEmpty", inputs=[Input.value("VALUE", var("s"))])
        assert generator.block_to_code(block) == ("s = ''", Order.RELATIONAL)

    def test_index_of(self, generator):
        """Test substring search."""
        block = Block("text_indexOf", inputs=[
            Input.value("VALUE", var("s")),
            Input.value("FIND", text("a")),
        ])
        assert generator.block_to_code(block) == ("strpos(s, 'a')", Order.HIGH)

    def test_length_default(self, generator):
        """Test the default operand of length."""
        assert generator.block_to_code(Block("text_length"))[0] == "strlen('')"


class TestSubstring:
    """Tests for substring extraction."""

    def test_first_to_last(self, generator):
        """Test the whole-string range."""
        assert generator.block_to_code(substring("FIRST", "LAST"))[0] == "string.sub(s, 1, -1)"

    def test_from_start_to_from_end(self, generator):
        """Test counted positions from both ends."""
        code, order = generator.block_to_code(substring("FROM_START", "FROM_END", num(2), num(3)))
        assert code == "string.sub(s, 2, -3)"
        assert order == Order.HIGH

    def test_from_end_parenthesises_expression(self, generator):
        """Test that a computed position from the end is wrapped."""
        offset = Block("math_arithmetic", fields={"OP": "ADD"},
                       inputs=[Input.value("A", var("a")), Input.value("B", num(1))])
        code, _ = generator.block_to_code(substring("FROM_END", "LAST", offset))
        assert code == "string.sub(s, -(a + 1), -1)"

    def test_unhandled_option(self, generator):
        """Test that an unknown position kind is reported."""
        with pytest.raises(UnknownBlockError, match="RANDOM"):
            generator.block_to_code(substring("RANDOM", "LAST"))


class TestTextStatements:
    """Tests for text statements and case changes."""

    def test_append(self, generator):
        """Test appending to a variable."""
        block = Block("text_append", fields={"VAR": "s"}, inputs=[Input.value("TEXT", text("x"))])
        assert generator.block_to_code(block) == "s := s + 'x';\n"

    def test_print(self, generator):
        """Test the print statement."""
        block = Block("text_print", inputs=[Input.value("TEXT", text("hi"))])
        assert generator.block_to_code(block) == "message('hi');\n"

    def test_print_default(self, generator):
        """Test printing nothing."""
        assert generator.block_to_code(Block("text_print")) == "message('');\n"

    @pytest.mark.parametrize("case,function", [
        ("UPPERCASE", "UpperCase"),
        ("LOWERCASE", "LowerCase"),
        ("TITLECASE", "UpperCase"),
    ])
    def test_change_case(self, generator, case, function):
        """Test case conversion functions."""
        block = Block("text_changeCase", fields={"CASE": case}, inputs=[Input.value("TEXT", var("s"))])
        assert generator.block_to_code(block) == (f"{function}(s)", Order.HIGH)

    def test_unknown_case(self, generator):
        """Test that an unknown case is reported."""
        block = Block("text_changeCase", fields={"CASE": "SNAKE"})
        with pytest.raises(UnknownBlockError):
            generator.block_to_code(block)

    def test_missing_substring_bound(self, generator):
        """Test that a missing WHERE2 dropdown names the field."""
        block = Block("text_getSubstring", fields={"WHERE1": "FIRST"})
        with pytest.raises(UnknownBlockError, match='Missing value for field "WHERE2"'):
            generator.block_to_code(block)


class TestVariables:
    """Tests for variable getters and setters."""

    def test_get(self, generator):
        """Test reading a variable."""
        assert generator.block_to_code(var("total")) == ("total", Order.ATOMIC)

    def test_set(self, generator):
        """Test assigning a variable."""
        block = Block("variables_set", fields={"VAR": "total"}, inputs=[Input.value("VALUE", num(5))])
        assert generator.block_to_code(block) == "total := 5;\n"

    def test_set_default(self, generator):
        """Test that a missing value assigns 0."""
        assert generator.block_to_code(Block("variables_set", fields={"VAR": "x"})) == "x := 0;\n"

    def test_reserved_variable_name(self, generator):
        """Test that a keyword-named variable is renamed consistently."""
        block = Block("variables_set", fields={"VAR": "repeat"}, inputs=[Input.value("VALUE", var("repeat"))])
        assert generator.block_to_code(block) == "repeat2 := repeat2;\n"

    def test_dynamic_variants(self, generator):
        """Test that the dynamic blocks share the plain rules."""
        getter = Block("variables_get_dynamic", fields={"VAR": "x"})
        setter = Block("variables_set_dynamic", fields={"VAR": "x"}, inputs=[Input.value("VALUE", getter)])
        assert generator.block_to_code(setter) == "x := x;\n"
