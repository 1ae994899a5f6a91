"""System clipboard access."""

import logging

import pyperclip

from ..core.errors import ClipboardError

logger = logging.getLogger(__name__)


class Clipboard:
    """Write text to the system clipboard."""

    def copy(self, text: str) -> None:
        """Copy ``text`` to the clipboard.

        Raises:
            ClipboardError: If no clipboard backend is available
        """
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.warning(f"Clipboard write failed: {e}")
            raise ClipboardError(
                f"Could not copy to clipboard: {e}",
                original_error=e
            ) from e

        logger.debug(f"Copied {len(text)} characters to clipboard")
