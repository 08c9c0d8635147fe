"""
Language front-ends for the Rust AST renderer.

This package provides the front-end interface, the manager that selects a
front-end per source unit, and the bundled Rust front-end.
"""

from frontends.base import LanguageFrontend, load_frontend_config
from frontends.manager import FrontendManager, get_frontend_manager

__all__ = ['LanguageFrontend', 'FrontendManager', 'get_frontend_manager', 'load_frontend_config']
