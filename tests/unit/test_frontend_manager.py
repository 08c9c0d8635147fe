"""Unit tests for FrontendManager."""

import pytest
import yaml
from typing import List

from frontends import FrontendManager, LanguageFrontend, get_frontend_manager, load_frontend_config
from rusty_ast.models import NodeKind, SourceUnit, SyntaxNode, make_node


class MockRustFrontend(LanguageFrontend):
    """Mock Rust front-end for testing."""

    @property
    def language_name(self) -> str:
        return "rust"

    @property
    def file_extensions(self) -> List[str]:
        return [".rs"]

    def parse(self, unit: SourceUnit) -> SyntaxNode:
        return make_node(NodeKind.FILE)


class MockToyFrontend(LanguageFrontend):
    """Mock front-end with two extensions."""

    @property
    def language_name(self) -> str:
        return "toy"

    @property
    def file_extensions(self) -> List[str]:
        return [".toy", ".ty"]

    def parse(self, unit: SourceUnit) -> SyntaxNode:
        return make_node(NodeKind.FILE, [make_node(NodeKind.PATH, name=unit.text)])


class TestFrontendManager:
    """Test cases for FrontendManager."""

    def test_register_frontend(self):
        """Test front-end registration."""
        manager = FrontendManager()
        manager.register_frontend(MockRustFrontend())

        assert manager.get_frontend("rust") is not None
        assert ".rs" in manager.list_supported_extensions()

    def test_get_frontend_for_file(self):
        """Test getting front-end by file extension."""
        manager = FrontendManager()
        manager.register_frontend(MockRustFrontend())
        manager.register_frontend(MockToyFrontend())

        frontend = manager.get_frontend_for_file("src/main.rs")
        assert frontend is not None
        assert frontend.language_name == "rust"

        frontend = manager.get_frontend_for_file("examples/demo.ty")
        assert frontend is not None
        assert frontend.language_name == "toy"

        # Unsupported file
        assert manager.get_frontend_for_file("script.py") is None

    def test_get_frontend_by_name(self):
        """Test getting front-end by language name."""
        manager = FrontendManager()
        manager.register_frontend(MockRustFrontend())

        assert manager.get_frontend("rust").language_name == "rust"
        assert manager.get_frontend("python") is None

    def test_multiple_extensions_same_language(self):
        """Test front-end with multiple file extensions."""
        manager = FrontendManager()
        manager.register_frontend(MockToyFrontend())

        assert manager.get_frontend_for_file("a.toy") is manager.get_frontend_for_file("b.ty")

    def test_frontend_override(self):
        """Test that registering a language twice keeps the latest front-end."""
        manager = FrontendManager()
        first = MockRustFrontend()
        second = MockRustFrontend()

        manager.register_frontend(first)
        manager.register_frontend(second)  # Should log warning

        assert manager.get_frontend("rust") is second

    def test_default_manager_has_rust(self):
        """Test that the bundled manager serves .rs files."""
        manager = get_frontend_manager()

        assert manager.list_supported_extensions() == [".rs"]
        assert manager.get_frontend_for_file("lib.rs").language_name == "rust"


class TestLoadFrontendConfig:
    """Test cases for load_frontend_config()."""

    def test_load_config(self, tmp_path):
        """Test loading front-end configuration from YAML."""
        (tmp_path / "config.yaml").write_text("""
name: toy
version: 1.0.0
file_extensions:
  - .toy
unsupported_text_limit: 80
""")

        config = load_frontend_config(tmp_path)

        assert config["name"] == "toy"
        assert config["version"] == "1.0.0"
        assert ".toy" in config["file_extensions"]
        assert config["unsupported_text_limit"] == 80

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_frontend_config(tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "config.yaml").write_text("invalid: yaml: content: [")

        with pytest.raises(yaml.YAMLError):
            load_frontend_config(tmp_path)

    def test_missing_required_fields(self, tmp_path):
        (tmp_path / "config.yaml").write_text("""
name: toy
# Missing version and file_extensions
""")

        with pytest.raises(ValueError):
            load_frontend_config(tmp_path)

    def test_empty_file(self, tmp_path):
        (tmp_path / "config.yaml").write_text("")

        with pytest.raises(ValueError):
            load_frontend_config(tmp_path)
