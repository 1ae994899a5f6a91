"""
Shared fixtures for Prompta tests.
"""

import io
from typing import List, Optional, Sequence

import pytest
from rich.console import Console

from prompta.cli.commands import PromptCommands
from prompta.prompts.store import PromptStore
from prompta.ui.interaction import Interaction


class ScriptedInteraction(Interaction):
    """Interaction that replays queued answers and records the questions."""

    def __init__(self, answers: Optional[Sequence] = None):
        self.answers: List = list(answers or [])
        self.questions: List[str] = []
        self.multiline: List[str] = []

    def _next(self, message: str):
        self.questions.append(message)
        if not self.answers:
            raise AssertionError(f"No scripted answer for: {message}")
        return self.answers.pop(0)

    def ask_text(self, message, default=None, required=False):
        answer = self._next(message)
        if answer == "" and default is not None:
            return default
        return answer

    def confirm(self, message, default=False):
        return self._next(message)

    def ask_number(self, message, minimum, maximum):
        number = self._next(message)
        assert minimum <= number <= maximum
        return number

    def choose(self, message, choices):
        index = self._next(message)
        assert 0 <= index < len(choices)
        return index

    def read_multiline(self):
        self.questions.append("<multiline>")
        return self.multiline.pop(0)


class FakeEditor:
    """Editor stand-in returning a prepared result."""

    display_name = "fake-editor"

    def __init__(self, result: str = "", error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.received: List[str] = []

    def edit(self, initial_text=""):
        self.received.append(initial_text)
        if self.error is not None:
            raise self.error
        return self.result


class FakeClipboard:
    """Clipboard stand-in remembering what was copied."""

    def __init__(self, error: Optional[Exception] = None):
        self.copied: List[str] = []
        self.error = error

    def copy(self, text):
        if self.error is not None:
            raise self.error
        self.copied.append(text)


@pytest.fixture
def store(tmp_path):
    return PromptStore(tmp_path / "prompts.json")


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def interaction():
    return ScriptedInteraction()


@pytest.fixture
def editor():
    return FakeEditor()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def commands(store, interaction, editor, clipboard, console):
    return PromptCommands(
        store=store,
        interaction=interaction,
        editor=editor,
        clipboard=clipboard,
        console=console
    )
