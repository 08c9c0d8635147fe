"""
Rust language front-end.

Parses Rust source with tree-sitter-rust and converts the concrete syntax
tree into the renderer's syntax node model.
"""

from frontends.rust.frontend import RustFrontend

__all__ = ['RustFrontend']
