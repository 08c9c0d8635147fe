"""
Front-end manager.

Registers language front-ends and selects one by language name or by file
extension.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from frontends.base import LanguageFrontend

logger = logging.getLogger(__name__)


class FrontendManager:
    """Manages language front-end registration and selection."""

    def __init__(self):
        self._frontends: Dict[str, LanguageFrontend] = {}
        self._extension_map: Dict[str, str] = {}

    def register_frontend(self, frontend: LanguageFrontend) -> None:
        """
        Register a language front-end.

        Args:
            frontend: LanguageFrontend instance to register
        """
        language_name = frontend.language_name

        if language_name in self._frontends:
            logger.warning(f"Front-end for language '{language_name}' already registered, overwriting")

        self._frontends[language_name] = frontend

        for ext in frontend.file_extensions:
            if ext in self._extension_map:
                logger.warning(
                    f"Extension '{ext}' already mapped to '{self._extension_map[ext]}', "
                    f"overwriting with '{language_name}'"
                )
            self._extension_map[ext] = language_name

        logger.debug(
            f"Registered front-end for language '{language_name}' "
            f"with extensions: {frontend.file_extensions}"
        )

    def get_frontend_for_file(self, file_path: Union[str, Path]) -> Optional[LanguageFrontend]:
        """
        Get the front-end for a file based on its extension.

        Args:
            file_path: Path to the file

        Returns:
            LanguageFrontend instance if found, None otherwise
        """
        ext = Path(file_path).suffix
        language = self._extension_map.get(ext)

        if language:
            return self._frontends.get(language)

        logger.debug(f"No front-end found for file extension '{ext}' (file: {file_path})")
        return None

    def get_frontend(self, language_name: str) -> Optional[LanguageFrontend]:
        """
        Get front-end by language name.

        Args:
            language_name: Name of the language

        Returns:
            LanguageFrontend instance if found, None otherwise
        """
        return self._frontends.get(language_name)

    def list_supported_extensions(self) -> List[str]:
        return list(self._extension_map.keys())


# Global manager factory
def get_frontend_manager() -> FrontendManager:
    """
    Create a front-end manager with the bundled front-ends registered.

    Returns:
        FrontendManager instance
    """
    from frontends.rust import RustFrontend

    manager = FrontendManager()
    manager.register_frontend(RustFrontend())
    return manager
