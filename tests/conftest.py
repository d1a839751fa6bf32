"""
Pytest configuration and fixtures for algen tests.
"""

import json
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


@pytest.fixture
def sample_program_file(temp_dir):
    """Create a sample JSON block program for testing."""
    program = {
        "variables": [{"id": "v1", "name": "x"}],
        "blocks": {"blocks": [{
            "type": "variables_set",
            "fields": {"VAR": {"id": "v1"}},
            "inputs": {"VALUE": {"block": {"type": "math_number", "fields": {"NUM": 42}}}},
        }]},
    }
    json_file = temp_dir / "program.json"
    json_file.write_text(json.dumps(program))
    return json_file


@pytest.fixture
def compiler():
    """Provide a Compiler instance."""
    from algen import Compiler
    return Compiler()


@pytest.fixture
def generator():
    """Provide an ALGenerator instance with a pass started."""
    from algen.backend import ALGenerator
    gen = ALGenerator()
    gen.init(None)
    return gen
