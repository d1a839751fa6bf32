"""
Unit tests for the block tree module.

This module tests the classes and loader defined in algen.blocks.nodes.
"""

import pytest
from algen.blocks import (
    Block, BlockLoadError, Input, InputType, Variable, Workspace,
    block_from_dict, workspace_from_dict,
)


class TestBlock:
    """Tests for block construction and navigation."""

    def test_generated_id(self):
        """Test that blocks without an id get a unique one."""
        a = Block("text")
        b = Block("text")
        assert a.id and b.id and a.id != b.id

    def test_children_are_linked(self):
        """Test that inputs and next blocks point back to their parent."""
        child = Block("math_number")
        following = Block("text_print")
        parent = Block("variables_set", inputs=[Input.value("VALUE", child)], next_block=following)
        assert child.parent is parent
        assert child.output_connected
        assert following.parent is parent
        assert not following.output_connected
        assert not parent.output_connected

    def test_statement_child_is_not_value(self):
        """Test that a statement child is not consumed as a value."""
        body = Block("text_print")
        Block("controls_whileUntil", inputs=[Input.statement("DO", body)])
        assert not body.output_connected

    def test_get_input(self):
        """Test input lookup."""
        child = Block("math_number")
        block = Block("math_single", inputs=[Input.value("NUM", child)])
        assert block.get_input("NUM").type is InputType.VALUE
        assert block.get_input_target_block("NUM") is child
        assert block.get_input("OTHER") is None
        assert block.get_input_target_block("OTHER") is None

    def test_surround_loop(self):
        """Test finding the enclosing loop through a statement chain."""
        jump = Block("controls_flow_statements")
        first = Block("text_print", next_block=jump)
        loop = Block("controls_forEach", inputs=[Input.statement("DO", first)])
        assert jump.get_surround_parent() is loop
        assert jump.get_surround_loop() is loop
        assert Block("controls_flow_statements").get_surround_loop() is None

    def test_descendants(self):
        """Test tree-order traversal."""
        a = Block("math_number", id="a")
        b = Block("text_print", id="b")
        root = Block("variables_set", id="root", inputs=[Input.value("VALUE", a)], next_block=b)
        assert [blk.id for blk in root.get_descendants()] == ["root", "a", "b"]

    def test_suppress_prefix_suffix(self):
        """Test which kinds place instrumentation themselves."""
        assert Block("controls_if").suppress_prefix_suffix
        assert not Block("text_print").suppress_prefix_suffix
        assert Block("text_print", extra_state={"suppressPrefixSuffix": True}).suppress_prefix_suffix

    def test_get_vars(self):
        """Test reading procedure parameters from mutation data."""
        block = Block("procedures_defreturn", extra_state={"params": [{"name": "a"}, "b"]})
        assert block.get_vars() == ["a", "b"]
        assert Block("procedures_callreturn").get_vars() == []

    def test_has_return_value_follows_definition(self):
        """Test that a conditional return follows its enclosing procedure."""
        guard = Block("procedures_ifreturn")
        Block("procedures_defnoreturn", inputs=[Input.statement("STACK", guard)])
        assert guard.has_return_value is False
        assert Block("procedures_ifreturn").has_return_value is True


class TestWorkspace:
    """Tests for the workspace container."""

    def test_variable_lookup(self):
        """Test finding variables by id."""
        workspace = Workspace(variables=[Variable("v1", "x")])
        assert workspace.get_variable_by_id("v1").name == "x"
        assert workspace.get_variable_by_id("v2") is None

    def test_all_blocks(self):
        """Test that all blocks of all trees are listed."""
        workspace = Workspace(top_blocks=[
            Block("text_print", inputs=[Input.value("TEXT", Block("text"))]),
            Block("logic_null"),
        ])
        assert [b.type for b in workspace.get_all_blocks()] == ["text_print", "text", "logic_null"]


class TestLoader:
    """Tests for loading the JSON form of a program."""

    def test_load_block_tree(self):
        """Test loading fields, inputs, next and comments."""
        block = block_from_dict({
            "type": "variables_set",
            "id": "s1",
            "fields": {"VAR": {"id": "v1"}},
            "inputs": {"VALUE": {"block": {"type": "math_number", "fields": {"NUM": 3}}}},
            "next": {"block": {"type": "text_print", "icons": {"comment": {"text": "note"}}}},
            "comment": "assign",
        })
        assert block.id == "s1"
        assert block.get_field_value("VAR") == "v1"
        assert block.get_input_target_block("VALUE").get_field_value("NUM") == 3
        assert block.comment == "assign"
        assert block.next_block.comment == "note"
        assert block.next_block.parent is block

    def test_statement_inputs_detected_by_name(self):
        """Test that DO/ELSE/STACK inputs are statement inputs."""
        block = block_from_dict({
            "type": "controls_whileUntil",
            "inputs": {
                "BOOL": {"block": {"type": "logic_boolean"}},
                "DO": {"block": {"type": "text_print"}},
            },
        })
        assert block.get_input("BOOL").type is InputType.VALUE
        assert block.get_input("DO").type is InputType.STATEMENT

    def test_explicit_input_kind(self):
        """Test that an explicit kind overrides the naming rule."""
        block = block_from_dict({"type": "custom", "inputs": {"BODY": {"kind": "statement"}}})
        assert block.get_input("BODY").type is InputType.STATEMENT

    def test_unknown_input_kind(self):
        """Test that an unknown input kind is rejected."""
        with pytest.raises(BlockLoadError):
            block_from_dict({"type": "custom", "inputs": {"X": {"kind": "sideways"}}})

    def test_shadow_block(self):
        """Test that shadow blocks fill empty inputs."""
        block = block_from_dict({
            "type": "text_print",
            "inputs": {"TEXT": {"shadow": {"type": "text", "fields": {"TEXT": "abc"}}}},
        })
        assert block.get_input_target_block("TEXT").get_field_value("TEXT") == "abc"

    def test_if_inputs_ordered_by_mutation(self):
        """Test that if inputs follow the else-if count."""
        block = block_from_dict({
            "type": "controls_if",
            "extraState": {"elseIfCount": 1, "hasElse": True},
            "inputs": {
                "ELSE": {"block": {"type": "text_print"}},
                "DO1": {"block": {"type": "text_print"}},
                "IF0": {"block": {"type": "logic_boolean"}},
                "IF1": {"block": {"type": "logic_boolean"}},
            },
        })
        assert [i.name for i in block.input_list] == ["IF0", "DO0", "IF1", "DO1", "ELSE"]

    def test_procedure_name_from_mutation(self):
        """Test that a call's name may come from mutation data."""
        block = block_from_dict({"type": "procedures_callnoreturn", "extraState": {"name": "go"}})
        assert block.get_field_value("NAME") == "go"

    def test_disabled_block(self):
        """Test loading the enabled flag."""
        assert not block_from_dict({"type": "text_print", "enabled": False}).is_enabled()

    @pytest.mark.parametrize("data", [None, [], {"fields": {}}])
    def test_malformed_block(self, data):
        """Test that entries without a type are rejected."""
        with pytest.raises(BlockLoadError):
            block_from_dict(data)

    def test_load_workspace(self):
        """Test loading both workspace shapes."""
        nested = workspace_from_dict({
            "blocks": {"blocks": [{"type": "logic_null"}]},
            "variables": [{"id": "v1", "name": "x", "type": "Decimal"}],
        })
        flat = workspace_from_dict({"blocks": [{"type": "logic_null"}]})
        assert [b.type for b in nested.top_blocks] == ["logic_null"]
        assert nested.variables == [Variable("v1", "x", "Decimal")]
        assert len(flat.top_blocks) == 1

    def test_variable_without_name(self):
        """Test that a nameless variable is rejected."""
        with pytest.raises(BlockLoadError):
            workspace_from_dict({"variables": [{"id": "v1"}]})

    def test_non_object_program(self):
        """Test that a non-object program is rejected."""
        with pytest.raises(BlockLoadError):
            workspace_from_dict([])
