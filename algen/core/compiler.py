"""
Main compiler orchestration module for algen.

This module provides the high-level Compiler class that coordinates
loading a serialized block program, generating AL and writing the result.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..backend.al import ALGenerator
from ..blocks.nodes import BlockLoadError, Workspace, workspace_from_dict
from ..utils.settings import Settings
from .generator import GenerationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ALSource:
    """Container for generated AL source code.

    Attributes:
        al_source: The generated AL source code as a string
    """
    al_source: str


@dataclass
class BuildResult:
    """Result of a build operation.

    Attributes:
        success: Whether the build succeeded
        al_source_path: Path to the generated AL file (if written)
        error_message: Error message if the build failed
    """
    success: bool
    al_source_path: Optional[Path] = None
    error_message: Optional[str] = None


class Compiler:
    """Main compiler class for algen.

    This class orchestrates the process from a JSON block program to an
    AL source file.

    Example:
        >>> compiler = Compiler()
        >>> result = compiler.build(
        ...     input_json=Path("program.json"),
        ...     out_al=Path("program.al"),
        ... )
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the compiler.

        Args:
            settings: Generator settings. Defaults are used when omitted.
        """
        self._generator = ALGenerator(settings)

    @property
    def generator(self) -> ALGenerator:
        return self._generator

    def load(self, source: Union[str, dict]) -> Workspace:
        """Load a block program into a workspace.

        Args:
            source: JSON text, or the already decoded mapping

        Returns:
            Workspace: The loaded program

        Raises:
            BlockLoadError: If the program is malformed
            json.JSONDecodeError: If the text is not valid JSON
        """
        data = json.loads(source) if isinstance(source, str) else source
        return workspace_from_dict(data)

    def generate(self, workspace: Workspace) -> ALSource:
        """Generate AL code for a workspace.

        Args:
            workspace: The program to translate

        Returns:
            ALSource: The generated AL source code

        Raises:
            GenerationError: If a block cannot be translated
        """
        return ALSource(self._generator.workspace_to_code(workspace))

    def build(self, input_json: Path, out_al: Optional[Path] = None) -> BuildResult:
        """Translate a JSON block program file into an AL file.

        Args:
            input_json: Path to the input program
            out_al: Path for the output AL file. Defaults to the input path
                    with an ".al" suffix.

        Returns:
            BuildResult: The result of the build operation
        """
        # Validate input
        if not input_json.exists():
            return BuildResult(
                success=False,
                error_message=f"Input file not found: {input_json}"
            )

        # Load the block program
        try:
            workspace = self.load(input_json.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            return BuildResult(
                success=False,
                error_message=f"Invalid JSON: {e}"
            )
        except BlockLoadError as e:
            return BuildResult(
                success=False,
                error_message=f"Load error: {e}"
            )

        # Generate AL code
        try:
            al_source = self.generate(workspace)
        except GenerationError as e:
            logger.debug("Generation failed on block type %s", e.block_type)
            return BuildResult(
                success=False,
                error_message=f"Code generation error: {e}"
            )

        # Write AL source to file
        if out_al is None:
            out_al = input_json.with_suffix(".al")
        out_al.parent.mkdir(parents=True, exist_ok=True)
        out_al.write_text(al_source.al_source, encoding="utf-8")
        logger.info("Wrote %s", out_al)

        return BuildResult(
            success=True,
            al_source_path=out_al
        )
