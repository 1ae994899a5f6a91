"""
Interactive prompt-library commands.

Each flow reads the store at most once and writes it at most once, only after
the new content has been confirmed non-empty.
"""

import logging
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ..prompts.models import Parameter, Prompt
from ..prompts.store import PromptStore
from ..prompts.templates import (
    default_values,
    extract_parameters,
    reconcile_parameters,
    render_template,
)
from ..services.clipboard import Clipboard
from ..services.editor import ExternalEditor
from ..ui.interaction import Interaction

logger = logging.getLogger(__name__)

EDITOR_HEADER = "# Write your prompt here\n# Use {{paramName}} syntax for parameters\n\n"


def describe(prompt: Prompt) -> str:
    """One-line label for a prompt in selection lists."""
    count = len(prompt.parameters)
    if not count:
        return prompt.name
    return f"{prompt.name} ({count} parameter{'s' if count != 1 else ''})"


class PromptCommands:
    """The create, list, edit and run flows."""

    def __init__(
        self,
        store: PromptStore,
        interaction: Interaction,
        editor: ExternalEditor,
        clipboard: Clipboard,
        console: Optional[Console] = None
    ):
        self.store = store
        self.interaction = interaction
        self.editor = editor
        self.clipboard = clipboard
        self.console = console or Console()

    def create(self) -> Optional[Prompt]:
        """Create a new prompt.

        Returns:
            The stored prompt, or None when no content was provided
        """
        prompts = self.store.load()
        logger.debug(f"Creating prompt, library has {len(prompts)} entries")

        name = self.interaction.ask_text("Enter a name for the prompt", required=True).strip()
        use_editor = self.interaction.confirm(
            f"Would you like to use {escape(self.editor.display_name)} to write your prompt?",
            default=True
        )

        if use_editor:
            self._show_editor_hint()
            content = self.editor.edit(EDITOR_HEADER).replace(EDITOR_HEADER, "", 1)
        else:
            self.console.print("\n[blue]Enter your prompt content below. Use {{paramName}} for parameters.[/blue]")
            self.console.print("[yellow]Press Enter twice when finished.[/yellow]")
            content = self.interaction.read_multiline()

        if not content.strip():
            self.console.print("[red]No content was provided. Aborting prompt creation.[/red]")
            return None

        parameters = self._ask_new_defaults(content)
        prompt = self.store.create(name, content, parameters)
        return prompt

    def list_prompts(self) -> Optional[Prompt]:
        """List stored prompts and optionally show one in detail.

        Returns:
            The prompt whose details were shown, if any
        """
        prompts = self.store.load()
        if not prompts:
            self._show_empty_hint()
            return None

        table = Table(title="Saved Prompts", show_header=True, header_style="bold magenta")
        table.add_column("#", style="green", justify="right")
        table.add_column("Name", style="white")
        table.add_column("Parameters", style="yellow", justify="right")
        for position, prompt in enumerate(prompts, 1):
            count = len(prompt.parameters)
            table.add_row(str(position), Text(prompt.name), str(count) if count else "")
        self.console.print(table)

        if not self.interaction.confirm("Do you want to view details of a prompt?", default=False):
            return None

        number = self.interaction.ask_number(
            "Enter the number of the prompt to view", 1, len(prompts)
        )
        selected = prompts[number - 1]
        self._show_details(selected)

        if self.interaction.confirm("Copy this prompt to clipboard?", default=False):
            self.clipboard.copy(selected.content)
            self.console.print("[green]Prompt copied to clipboard![/green]")

        return selected

    def edit(self) -> Optional[Prompt]:
        """Edit the name, content and parameter defaults of a prompt.

        Returns:
            The updated prompt, or None when the library is empty
        """
        prompts = self.store.load()
        if not prompts:
            self._show_empty_hint()
            return None

        index = self.interaction.choose(
            "Select a prompt to edit", [describe(prompt) for prompt in prompts]
        )
        selected = prompts[index]

        name = self.interaction.ask_text(
            "Enter a new name for the prompt (leave empty to keep existing)",
            default=selected.name
        ).strip() or selected.name

        use_editor = self.interaction.confirm(
            f"Would you like to use {escape(self.editor.display_name)} to edit your prompt?",
            default=True
        )

        if use_editor:
            self._show_editor_hint()
            content = self.editor.edit(selected.content)
            if not content.strip():
                self.console.print("[red]No content was provided. Keeping original content.[/red]")
                content = selected.content
        else:
            self.console.print("\n[blue]Edit your prompt content below. Use {{paramName}} for parameters.[/blue]")
            self.console.print("[blue]Current content:[/blue]")
            self.console.print(selected.content, markup=False, highlight=False)
            self.console.print("\n[yellow]Enter your new content (press Enter twice when finished):[/yellow]")
            content = self.interaction.read_multiline()
            if not content.strip():
                self.console.print("[yellow]No content entered. Keeping original content.[/yellow]")
                content = selected.content

        parameters = reconcile_parameters(content, selected.parameters)
        if parameters:
            self._show_detected(parameters)
            if self.interaction.confirm("Do you want to update parameter default values?", default=True):
                parameters = [
                    Parameter(
                        name=param.name,
                        default=self.interaction.ask_text(
                            f"Default value for {escape(param.name)}", default=param.default
                        )
                    )
                    for param in parameters
                ]
        else:
            self.console.print("[yellow]\nNo parameters detected in the prompt.[/yellow]")

        def apply(prompt: Prompt) -> Prompt:
            return prompt.model_copy(
                update={"name": name, "content": content, "parameters": parameters}
            )

        return self.store.update(index, apply)

    def run(self) -> Optional[str]:
        """Fill in a prompt's parameters and copy the result to the clipboard.

        Returns:
            The rendered prompt text, or None when the library is empty
        """
        prompts = self.store.load()
        if not prompts:
            self._show_empty_hint()
            return None

        index = self.interaction.choose(
            "Select a prompt to execute", [describe(prompt) for prompt in prompts]
        )
        selected = prompts[index]

        values = default_values(selected.parameters)
        for name, default in values.items():
            values[name] = self.interaction.ask_text(
                f"Value for {escape(name)}", default=default
            )

        rendered = render_template(selected.content, values)
        logger.debug(f"Rendered prompt '{selected.name}' with {len(values)} values")

        self.console.print("\n[blue]Executed Prompt:[/blue]")
        self.console.print(rendered, markup=False, highlight=False)

        self.clipboard.copy(rendered)
        self.console.print("[green]✅ Prompt copied to clipboard![/green]")
        return rendered

    def _ask_new_defaults(self, content: str) -> List[Parameter]:
        names = extract_parameters(content)
        if not names:
            self.console.print(
                "[yellow]\nNo parameters detected in the prompt. "
                "Use {{paramName}} syntax to define parameters.[/yellow]"
            )
            return []

        self.console.print(f"\n[blue]Detected parameters: {escape(', '.join(names))}[/blue]")
        return [
            Parameter(
                name=name,
                default=self.interaction.ask_text(
                    f"Default value for {escape(name)} (leave empty for no default)", default=""
                )
            )
            for name in names
        ]

    def _show_details(self, prompt: Prompt) -> None:
        self.console.print("\n[blue]Prompt Details:[/blue]")
        self.console.print(f"Name: {prompt.name}", markup=False, highlight=False)
        self.console.print(f"Content:\n{prompt.content}", markup=False, highlight=False)

        if prompt.parameters:
            self.console.print("\nParameters:")
            for param in prompt.parameters:
                suffix = f' (default: "{param.default}")' if param.default else ""
                self.console.print(f"- {param.name}{suffix}", markup=False, highlight=False)

    def _show_detected(self, parameters: List[Parameter]) -> None:
        names = ", ".join(param.name for param in parameters)
        self.console.print(f"\n[blue]Detected parameters: {escape(names)}[/blue]")

    def _show_editor_hint(self) -> None:
        self.console.print(f"\n[blue]Opening {escape(self.editor.display_name)} to edit your prompt...[/blue]")
        self.console.print("[yellow]Use {{paramName}} syntax for parameters in your prompt.[/yellow]")
        self.console.print("[yellow]Save the file and close the editor when you are done.[/yellow]")

    def _show_empty_hint(self) -> None:
        self.console.print("[yellow]No prompts found. Create one using the create command.[/yellow]")
