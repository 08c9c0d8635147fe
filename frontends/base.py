"""
Base interface for language front-ends.

A front-end owns one source grammar. It turns a source unit into the
internal syntax tree and reports malformed input as ``ParseFailed``; nothing
downstream ever sees the parser's own tree representation.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

import yaml

from rusty_ast.models.source_unit import SourceUnit
from rusty_ast.models.syntax_node import SyntaxNode

REQUIRED_CONFIG_FIELDS = ("name", "version", "file_extensions")


class LanguageFrontend(ABC):
    """Base interface for language front-ends."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'rust')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.rs'])."""
        pass

    @abstractmethod
    def parse(self, unit: SourceUnit) -> SyntaxNode:
        """
        Parse a source unit into a syntax tree.

        Args:
            unit: Source unit to parse

        Returns:
            Root node representing the whole source unit

        Raises:
            ParseFailed: If the source is malformed
        """
        pass


def load_frontend_config(frontend_dir: Path) -> Dict[str, Any]:
    """
    Load front-end configuration from ``config.yaml``.

    Args:
        frontend_dir: Directory containing config.yaml

    Returns:
        Dictionary containing front-end configuration

    Raises:
        FileNotFoundError: If config.yaml is not found
        ValueError: If a required field is missing
        yaml.YAMLError: If config.yaml is malformed
    """
    config_path = frontend_dir / "config.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Front-end configuration not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}

    for field in REQUIRED_CONFIG_FIELDS:
        if field not in config:
            raise ValueError(f"Missing required field '{field}' in {config_path}")

    return config
