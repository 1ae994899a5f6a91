"""
.env file loading for Prompta.

Search order (stops at first file found):
1. Current directory: .prompta/.env → .env
2. Parent directories (up to git root or home): .prompta/.env → .env
3. Home directory: ~/.prompta/.env → ~/.env
"""

from pathlib import Path
from typing import Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class EnvFileLoader:
    """Loads the nearest .env file without overriding existing variables."""

    CONFIG_DIR_NAME = ".prompta"
    ENV_FILE_NAME = ".env"

    def __init__(self, working_directory: Optional[Path] = None):
        """Initialize env file loader.

        Args:
            working_directory: Starting directory for search
        """
        self.working_directory = Path(working_directory or Path.cwd()).resolve()
        self._loaded_file: Optional[Path] = None

    def load_env_file(self) -> Optional[Path]:
        """Load environment variables from the nearest .env file.

        Returns:
            Path to loaded .env file or None if none found
        """
        env_file_path = self.find_env_file()
        if not env_file_path:
            logger.debug("No .env file found in search path")
            return None

        load_dotenv(env_file_path, override=False)
        self._loaded_file = env_file_path
        logger.debug(f"Loaded environment variables from: {env_file_path}")
        return env_file_path

    def get_loaded_file(self) -> Optional[Path]:
        """Get path to the loaded .env file."""
        return self._loaded_file

    def find_env_file(self) -> Optional[Path]:
        """Find the first .env file in the search hierarchy."""
        current_dir = self.working_directory

        while current_dir != current_dir.parent:
            found = self._env_file_in(current_dir)
            if found:
                return found

            if self._should_stop_search(current_dir):
                break

            current_dir = current_dir.parent

        return self._env_file_in(Path.home())

    def _env_file_in(self, directory: Path) -> Optional[Path]:
        for candidate in (
            directory / self.CONFIG_DIR_NAME / self.ENV_FILE_NAME,
            directory / self.ENV_FILE_NAME,
        ):
            if candidate.is_file():
                return candidate
        return None

    def _should_stop_search(self, directory: Path) -> bool:
        """Stop at a git repository root or the home directory."""
        return (directory / ".git").exists() or directory == Path.home()
