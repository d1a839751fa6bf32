"""
Unit tests for the procedure emission rules.

This module tests the rules defined in algen.backend.rules.procedures.
"""

import pytest
from algen.backend import ALGenerator, Order
from algen.backend.rules.procedures import return_type_for
from algen.blocks import Block, Input, Workspace


def num(value):
    return Block("math_number", fields={"NUM": value})


def var(name):
    return Block("variables_get", fields={"VAR": name})


def say(value):
    return Block("text_print", inputs=[Input.value("TEXT", Block("text", fields={"TEXT": value}))])


def define(name, params=(), body=None, returns=None, kind=None):
    inputs = [Input.statement("STACK", body)]
    if kind is None:
        kind = "procedures_defreturn" if returns is not None else "procedures_defnoreturn"
    if kind == "procedures_defreturn":
        inputs.append(Input.value("RETURN", returns))
    return Block(kind, fields={"NAME": name}, inputs=inputs,
                 extra_state={"params": [{"name": p} for p in params]})


def call(name, args=(), statement=False):
    kind = "procedures_callnoreturn" if statement else "procedures_callreturn"
    return Block(kind, fields={"NAME": name},
                 inputs=[Input.value(f"ARG{i}", a) for i, a in enumerate(args)],
                 extra_state={"params": [f"p{i}" for i in range(len(args))]})


class TestReturnType:
    """Tests for the return type heuristic."""

    @pytest.mark.parametrize("kind,expected", [
        ("math_number", "decimal"),
        ("math_arithmetic", "decimal"),
        ("logic_boolean", "Boolean"),
        ("variables_get", "Variant"),
        (None, None),
    ])
    def test_return_type_for(self, kind, expected):
        """Test the mapping from value kind to declared type."""
        assert return_type_for(kind) == expected


class TestDefinitions:
    """Tests for procedure definitions."""

    def test_definition_is_hoisted(self, generator):
        """Test that a definition emits nothing in place."""
        block = define("double", ["n"], returns=Block(
            "math_arithmetic", fields={"OP": "MULTIPLY"},
            inputs=[Input.value("A", var("n")), Input.value("B", num(2))]))
        assert generator.block_to_code(block) == ""
        assert generator.definitions_["%double"] == (
            "procedure double(n) : decimal\n"
            "begin\n"
            "  exit(n * 2);\n"
            "end;\n"
        )

    def test_definition_without_return(self, generator):
        """Test that a procedure without a return value has no type."""
        generator.block_to_code(define("greet", body=say("hi")))
        assert generator.definitions_["%greet"] == (
            "procedure greet()\n"
            "begin\n"
            "  message('hi');\n"
            "end;\n"
        )

    def test_definition_with_body_and_return(self, generator):
        """Test that the body precedes the return."""
        generator.block_to_code(define("check", ["a", "b"], body=say("x"),
                                       returns=Block("logic_boolean", fields={"BOOL": "TRUE"})))
        assert generator.definitions_["%check"] == (
            "procedure check(a, b) : Boolean\n"
            "begin\n"
            "  message('x');\n"
            "  exit(true);\n"
            "end;\n"
        )

    def test_definition_comment(self, generator):
        """Test that a definition's comment is kept with it."""
        block = define("greet", body=say("hi"))
        block.comment = "Says hi."
        generator.block_to_code(block)
        assert generator.definitions_["%greet"].startswith("// Says hi.\nprocedure greet()")

    def test_reserved_procedure_name(self):
        """Test that a procedure named like a keyword is renamed everywhere."""
        workspace = Workspace(top_blocks=[define("end", body=say("x")), call("end", statement=True)])
        code = ALGenerator().workspace_to_code(workspace)
        assert "procedure end2()" in code
        assert "end2();" in code


class TestCalls:
    """Tests for procedure calls."""

    def test_call_with_return(self, generator):
        """Test a call used as a value."""
        assert generator.block_to_code(call("double", [num(5)])) == ("double(5)", Order.HIGH)

    def test_missing_argument(self, generator):
        """Test that missing arguments become nil."""
        assert generator.block_to_code(call("f", [None, var("x")]))[0] == "f(nil, x)"

    def test_call_statement(self, generator):
        """Test a call used as a statement."""
        assert generator.block_to_code(call("greet", statement=True)) == "greet();\n"

    def test_definitions_precede_body(self):
        """Test that definitions are assembled ahead of the program body."""
        workspace = Workspace(top_blocks=[call("greet", statement=True), define("greet", body=say("hi"))])
        code = ALGenerator().workspace_to_code(workspace)
        assert code == (
            "procedure greet()\n"
            "begin\n"
            "  message('hi');\n"
            "end;\n"
            "\n\n\n"
            "greet();\n"
        )


class TestIfReturn:
    """Tests for conditional returns."""

    def test_if_return_value(self, generator):
        """Test a conditional return inside a procedure with a result."""
        guard = Block("procedures_ifreturn", inputs=[
            Input.value("CONDITION", var("x")),
            Input.value("VALUE", num(1)),
        ])
        define("f", body=guard, returns=num(0))
        assert generator.block_to_code(guard) == (
            "if x then begin\n"
            "  exit(1);\n"
            "end;\n"
        )

    def test_if_return_without_value(self, generator):
        """Test a conditional return inside a procedure without a result."""
        guard = Block("procedures_ifreturn", inputs=[Input.value("CONDITION", var("x"))])
        define("f", body=guard)
        assert generator.block_to_code(guard) == "if x then begin\n  exit;\nend;\n"

    def test_if_return_mutation_overrides(self, generator):
        """Test that explicit mutation data decides the return form."""
        guard = Block("procedures_ifreturn", extra_state={"hasReturnValue": False})
        assert generator.block_to_code(guard) == "if false then begin\n  exit;\nend;\n"
