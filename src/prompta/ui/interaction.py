"""
Interactive input for Prompta commands.

Commands talk to the user only through the ``Interaction`` interface so the
prompt flows can run against a scripted implementation in tests.
"""

import sys
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt


class Interaction(ABC):
    """Request/response capability used by the command flows."""

    @abstractmethod
    def ask_text(
        self,
        message: str,
        default: Optional[str] = None,
        required: bool = False
    ) -> str:
        """Ask for a single line of text.

        Args:
            message: Question to show
            default: Value returned on empty input
            required: Re-ask while the answer is blank
        """

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes/no question."""

    @abstractmethod
    def ask_number(self, message: str, minimum: int, maximum: int) -> int:
        """Ask for an integer in ``[minimum, maximum]``, re-asking until valid."""

    @abstractmethod
    def choose(self, message: str, choices: Sequence[str]) -> int:
        """Ask the user to pick one of ``choices``.

        Returns:
            Zero-based index of the picked choice
        """

    @abstractmethod
    def read_multiline(self) -> str:
        """Read free text until two consecutive blank lines or end of input."""


def collect_lines(lines: Sequence[str]) -> str:
    """Join entered lines, stopping at the first pair of blank lines.

    A single blank line is kept as part of the text; trailing blank lines are
    dropped.
    """
    collected: List[str] = []
    blank_run = 0
    for line in lines:
        if line.strip() == "":
            blank_run += 1
            if blank_run == 2:
                break
        else:
            if blank_run and collected:
                collected.append("")
            blank_run = 0
            collected.append(line)
    return "\n".join(collected)


class RichInteraction(Interaction):
    """Terminal implementation backed by ``rich.prompt``."""

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None):
        """Initialize the interaction.

        Args:
            console: Console used for questions and feedback
            stream: Input stream; standard input when omitted
        """
        self.console = console or Console()
        self._stream = stream

    def ask_text(
        self,
        message: str,
        default: Optional[str] = None,
        required: bool = False
    ) -> str:
        while True:
            if default is None:
                answer = Prompt.ask(message, console=self.console, stream=self._stream)
            else:
                answer = Prompt.ask(
                    message,
                    console=self.console,
                    default=default,
                    show_default=bool(default),
                    stream=self._stream
                )

            if default is not None and not answer.strip():
                return default
            if required and not answer.strip():
                self.console.print("[red]A value is required[/red]")
                continue
            return answer

    def confirm(self, message: str, default: bool = False) -> bool:
        return Confirm.ask(message, console=self.console, default=default, stream=self._stream)

    def ask_number(self, message: str, minimum: int, maximum: int) -> int:
        while True:
            number = IntPrompt.ask(message, console=self.console, stream=self._stream)
            if minimum <= number <= maximum:
                return number
            self.console.print(f"[red]Please enter a number between {minimum} and {maximum}[/red]")

    def choose(self, message: str, choices: Sequence[str]) -> int:
        for position, choice in enumerate(choices, 1):
            self.console.print(f"  [green]{position}.[/green] {escape(choice)}")
        return self.ask_number(message, 1, len(choices)) - 1

    def read_multiline(self) -> str:
        stream = self._stream or sys.stdin
        lines: List[str] = []
        blank_run = 0
        while blank_run < 2:
            line = stream.readline()
            if line == "":
                break
            line = line.rstrip("\r\n")
            blank_run = blank_run + 1 if not line.strip() else 0
            lines.append(line)
        return collect_lines(lines)
