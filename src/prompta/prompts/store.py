"""
JSON record store for the prompt library.

The whole library lives in one JSON document holding the list of prompts under
the ``prompts`` key. It is read once per command and rewritten as a whole on
every mutation.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from ..core.errors import InputValidationError, SelectionError, StoreError
from .models import Parameter, Prompt, generate_id, utc_timestamp

logger = logging.getLogger(__name__)

PROMPTS_KEY = "prompts"


class PromptStore:
    """Persistent, ordered collection of prompts."""

    def __init__(self, path: Union[str, Path]):
        """Initialize the store.

        Args:
            path: Location of the JSON document
        """
        self._path = Path(path)
        self._document: Dict[str, Any] = {}
        self._prompts: Optional[List[Prompt]] = None

    @property
    def path(self) -> Path:
        """Location of the JSON document."""
        return self._path

    @property
    def prompts(self) -> List[Prompt]:
        """The stored prompts, loading them on first access."""
        if self._prompts is None:
            self.load()
        return list(self._prompts)

    def load(self) -> List[Prompt]:
        """Read the prompt collection from disk.

        A missing file, an empty file or a document without a ``prompts``
        key is an empty collection.

        Returns:
            Stored prompts in order

        Raises:
            StoreError: If the document cannot be read or parsed
        """
        document = self._read_document()
        records = document.get(PROMPTS_KEY) or []
        if not isinstance(records, list):
            raise StoreError(
                f"Invalid prompt store {self._path}: '{PROMPTS_KEY}' is not a list",
                path=self._path
            )

        try:
            prompts = [Prompt.from_record(record) for record in records]
        except ValidationError as e:
            raise StoreError(
                f"Invalid prompt record in {self._path}: {e}",
                path=self._path,
                original_error=e
            ) from e

        self._document = document
        self._prompts = prompts
        logger.debug(f"Loaded {len(prompts)} prompts from {self._path}")
        return list(prompts)

    def save_all(self, prompts: List[Prompt]) -> None:
        """Overwrite the stored collection.

        Args:
            prompts: Complete, ordered prompt collection

        Raises:
            StoreError: If the document cannot be written
        """
        document = dict(self._document)
        document[PROMPTS_KEY] = [prompt.to_record() for prompt in prompts]
        self._write_document(document)

        self._document = document
        self._prompts = list(prompts)
        logger.debug(f"Saved {len(prompts)} prompts to {self._path}")

    def get(self, index: int) -> Prompt:
        """Get the prompt at a position.

        Args:
            index: Zero-based position

        Returns:
            The stored prompt

        Raises:
            SelectionError: If the index is out of range
        """
        prompts = self.prompts
        if not 0 <= index < len(prompts):
            raise SelectionError(
                f"No prompt at position {index + 1}",
                index=index,
                size=len(prompts)
            )
        return prompts[index]

    def create(
        self,
        name: str,
        content: str,
        parameters: Optional[List[Parameter]] = None
    ) -> Prompt:
        """Add a new prompt and persist the collection.

        Args:
            name: Display name
            content: Template text
            parameters: Parameters with defaults

        Returns:
            The stored prompt with its new id and creation time

        Raises:
            InputValidationError: If the name or content is blank
        """
        if not name.strip():
            raise InputValidationError("Prompt name must not be empty", field="name")
        if not content.strip():
            raise InputValidationError("Prompt content must not be empty", field="content")

        prompts = self.prompts
        existing_ids = {prompt.id for prompt in prompts}

        prompt_id = generate_id()
        while prompt_id in existing_ids:
            prompt_id = generate_id()

        prompt = Prompt(
            id=prompt_id,
            name=name,
            content=content,
            parameters=list(parameters or []),
            created_at=utc_timestamp()
        )
        prompts.append(prompt)
        self.save_all(prompts)

        logger.info(f"Created prompt '{name}' ({prompt.id})")
        return prompt

    def update(self, index: int, mutator: Callable[[Prompt], Prompt]) -> Prompt:
        """Replace the prompt at a position and persist the collection.

        Args:
            index: Zero-based position
            mutator: Function returning the new version of the prompt

        Returns:
            The stored prompt, stamped with its update time

        Raises:
            SelectionError: If the index is out of range
            StoreError: If the mutator changed the prompt id
        """
        current = self.get(index)
        changed = mutator(current.model_copy(deep=True))

        if changed.id != current.id:
            raise StoreError(
                f"Prompt id is immutable ({current.id} -> {changed.id})",
                path=self._path
            )

        updated = changed.model_copy(update={"updated_at": utc_timestamp()})
        prompts = self.prompts
        prompts[index] = updated
        self.save_all(prompts)

        logger.info(f"Updated prompt '{updated.name}' ({updated.id})")
        return updated

    def _read_document(self) -> Dict[str, Any]:
        """Read and parse the JSON document."""
        if not self._path.exists():
            logger.debug(f"Prompt store not found, starting empty: {self._path}")
            return {}

        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            raise StoreError(
                f"Cannot read prompt store {self._path}: {e}",
                path=self._path,
                original_error=e
            ) from e

        if not text.strip():
            return {}

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreError(
                f"Invalid JSON in prompt store {self._path}: {e}",
                path=self._path,
                original_error=e
            ) from e

        if not isinstance(document, dict):
            raise StoreError(
                f"Invalid prompt store {self._path}: expected a JSON object",
                path=self._path
            )
        return document

    def _write_document(self, document: Dict[str, Any]) -> None:
        """Write the JSON document atomically."""
        temp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)

            # Write to a sibling temporary file, then move it into place
            with tempfile.NamedTemporaryFile(
                mode='w',
                encoding='utf-8',
                dir=self._path.parent,
                delete=False,
                prefix=f".{self._path.name}.",
                suffix=".tmp"
            ) as temp_file:
                temp_name = temp_file.name
                json.dump(document, temp_file, indent=2, ensure_ascii=False)
                temp_file.write("\n")
                temp_file.flush()
                os.fsync(temp_file.fileno())

            os.replace(temp_name, self._path)
            temp_name = None

        except OSError as e:
            logger.error(f"Failed to write prompt store {self._path}: {e}")
            raise StoreError(
                f"Cannot write prompt store {self._path}: {e}",
                path=self._path,
                original_error=e
            ) from e

        finally:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
