"""
External text editor integration.

The editor is launched on a temporary file and the process blocks until it
exits. The temporary file is removed on every exit path.
"""

import logging
import os
import shlex
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Mapping, Optional

from ..core.errors import EditorError

logger = logging.getLogger(__name__)

WINDOWS_DEFAULT_EDITOR = "notepad"
POSIX_DEFAULT_EDITOR = "vi"


def resolve_editor(
    explicit: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> str:
    """Choose the editor command to launch.

    Order: explicit setting, ``VISUAL``, ``EDITOR``, platform default.

    Args:
        explicit: Editor configured for Prompta
        environ: Environment to consult (defaults to ``os.environ``)

    Returns:
        Editor command line
    """
    if explicit and explicit.strip():
        return explicit.strip()

    environ = os.environ if environ is None else environ
    for var_name in ("VISUAL", "EDITOR"):
        value = environ.get(var_name, "").strip()
        if value:
            return value

    return WINDOWS_DEFAULT_EDITOR if os.name == "nt" else POSIX_DEFAULT_EDITOR


@contextmanager
def scratch_file(initial_text: str, prefix: str = "prompta-") -> Iterator[Path]:
    """Create a temporary text file that is deleted on exit.

    Args:
        initial_text: Content written before the file is handed out
        prefix: File name prefix

    Yields:
        Path to the temporary file
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=".txt", text=True)
    path = Path(name)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(initial_text)
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


class ExternalEditor:
    """Edit text in the user's editor."""

    def __init__(self, command: str):
        """Initialize the editor.

        Args:
            command: Editor command line, e.g. ``"code --wait"``
        """
        if not command or not command.strip():
            raise EditorError("No editor command configured")
        self.command = command.strip()

    @property
    def display_name(self) -> str:
        """Short name of the editor program.

        Falls back to the raw command when it cannot be parsed; the parse
        error is only raised once the editor is launched.
        """
        try:
            args = self._split_command()
        except EditorError:
            return self.command
        return Path(args[0]).name if args else self.command

    def edit(self, initial_text: str = "") -> str:
        """Open the editor on ``initial_text`` and return the saved text.

        Raises:
            EditorError: If the editor cannot be started or exits non-zero
        """
        with scratch_file(initial_text) as path:
            self._launch(path)
            try:
                return path.read_text(encoding='utf-8')
            except OSError as e:
                raise EditorError(
                    f"Could not read back edited file {path}: {e}",
                    command=self.command,
                    original_error=e
                ) from e

    def _launch(self, path: Path) -> None:
        """Run the editor on ``path`` and wait for it to exit."""
        args = self._split_command() + [str(path)]
        logger.debug(f"Launching editor: {args}")

        try:
            result = subprocess.run(args, check=False)
        except OSError as e:
            raise EditorError(
                f"Could not start editor '{self.command}': {e}",
                command=self.command,
                original_error=e
            ) from e

        if result.returncode != 0:
            raise EditorError(
                f"Editor '{self.command}' exited with code {result.returncode}",
                command=self.command,
                exit_code=result.returncode
            )

        logger.debug(f"Editor exited: {self.command}")

    def _split_command(self) -> List[str]:
        try:
            return shlex.split(self.command, posix=os.name != "nt")
        except ValueError as e:
            raise EditorError(
                f"Invalid editor command '{self.command}': {e}",
                command=self.command,
                original_error=e
            ) from e
