"""
Tests for the prompt record model and JSON store.
"""

import json
import re
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from prompta.core.errors import InputValidationError, SelectionError, StoreError
from prompta.prompts.models import Parameter, Prompt, utc_timestamp
from prompta.prompts.store import PromptStore
from prompta.prompts.templates import reconcile_parameters

TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestPromptModel:
    """Test the Prompt record."""

    def test_record_uses_camel_case_keys(self):
        """Test serialization matches the persisted layout."""
        prompt = Prompt(
            id="abc",
            name="Greeting",
            content="Hi {{who}}",
            parameters=[Parameter(name="who", default="you")],
            created_at="2024-01-01T00:00:00.000Z"
        )

        assert prompt.to_record() == {
            "id": "abc",
            "name": "Greeting",
            "content": "Hi {{who}}",
            "parameters": [{"name": "who", "default": "you"}],
            "createdAt": "2024-01-01T00:00:00.000Z",
        }

    def test_updated_at_written_once_set(self):
        """Test updatedAt appears after an edit."""
        prompt = Prompt.from_record({
            "id": "abc",
            "name": "n",
            "content": "c",
            "parameters": [],
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-02T00:00:00.000Z",
        })
        assert prompt.updated_at == "2024-01-02T00:00:00.000Z"
        assert prompt.to_record()["updatedAt"] == "2024-01-02T00:00:00.000Z"

    def test_unknown_keys_preserved(self):
        """Test extra record keys survive a round trip."""
        record = {
            "id": "abc",
            "name": "n",
            "content": "c",
            "parameters": [],
            "createdAt": "2024-01-01T00:00:00.000Z",
            "tags": ["x"],
        }
        assert Prompt.from_record(record).to_record() == record

    def test_explicit_null_updated_at_kept(self):
        """Test a stored null updatedAt is written back as null."""
        record = {
            "id": "abc",
            "name": "n",
            "content": "c",
            "parameters": [],
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": None,
        }
        assert Prompt.from_record(record).to_record() == record

    @pytest.mark.parametrize("missing", ["id", "createdAt"])
    def test_record_without_identity_rejected(self, missing):
        """Test loading never invents an id or creation time."""
        record = {
            "id": "abc",
            "name": "n",
            "content": "c",
            "parameters": [],
            "createdAt": "2024-01-01T00:00:00.000Z",
        }
        del record[missing]

        with pytest.raises(ValidationError, match=missing):
            Prompt.from_record(record)

    def test_generated_ids_are_distinct(self):
        """Test default ids do not depend on the clock."""
        ids = {Prompt(name="n", content="c").id for _ in range(100)}
        assert len(ids) == 100

    def test_timestamp_format(self):
        """Test ISO-8601 UTC timestamps with milliseconds."""
        moment = datetime(2025, 1, 31, 9, 15, 2, 114000, tzinfo=timezone.utc)
        assert utc_timestamp(moment) == "2025-01-31T09:15:02.114Z"
        assert TIMESTAMP.match(utc_timestamp())


class TestPromptStore:
    """Test the whole-collection JSON store."""

    def test_missing_file_is_empty(self, store):
        """Test first run starts with an empty library."""
        assert store.load() == []
        assert not store.path.exists()

    @pytest.mark.parametrize("text", ["", "  \n", "{}", '{"other": 1}', '{"prompts": null}'])
    def test_empty_documents(self, tmp_path, text):
        """Test empty files and missing keys mean no prompts."""
        path = tmp_path / "prompts.json"
        path.write_text(text, encoding="utf-8")
        assert PromptStore(path).load() == []

    def test_invalid_json_raises(self, tmp_path):
        """Test corrupt files are reported, not overwritten."""
        path = tmp_path / "prompts.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreError) as exc_info:
            PromptStore(path).load()

        assert exc_info.value.path == path
        assert path.read_text(encoding="utf-8") == "{not json"

    def test_invalid_record_raises(self, tmp_path):
        """Test records missing required fields are rejected."""
        path = tmp_path / "prompts.json"
        path.write_text(json.dumps({"prompts": [{"id": "x"}]}), encoding="utf-8")

        with pytest.raises(StoreError):
            PromptStore(path).load()

    def test_record_without_created_at_not_rewritten(self, tmp_path):
        """Test a record lacking createdAt is reported instead of stamped."""
        path = tmp_path / "prompts.json"
        text = json.dumps({"prompts": [{"id": "x", "name": "n", "content": "c", "parameters": []}]})
        path.write_text(text, encoding="utf-8")

        with pytest.raises(StoreError, match="createdAt"):
            PromptStore(path).load()
        assert path.read_text(encoding="utf-8") == text

    def test_prompts_not_a_list_raises(self, tmp_path):
        """Test a malformed collection is rejected."""
        path = tmp_path / "prompts.json"
        path.write_text(json.dumps({"prompts": {"id": "x"}}), encoding="utf-8")

        with pytest.raises(StoreError):
            PromptStore(path).load()

    def test_create_persists(self, store):
        """Test create assigns id and timestamp and writes the file."""
        prompt = store.create("Greeting", "Hi {{who}}", [Parameter(name="who", default="you")])

        assert prompt.id
        assert TIMESTAMP.match(prompt.created_at)
        assert prompt.updated_at is None

        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["prompts"][0]["id"] == prompt.id
        assert data["prompts"][0]["parameters"] == [{"name": "who", "default": "you"}]
        assert "updatedAt" not in data["prompts"][0]

    def test_create_appends_in_order(self, store):
        """Test new prompts go to the end of the collection."""
        store.create("first", "1")
        store.create("second", "2")

        assert [p.name for p in PromptStore(store.path).load()] == ["first", "second"]

    @pytest.mark.parametrize("name, content, field", [
        ("", "text", "name"),
        ("   ", "text", "name"),
        ("Name", "", "content"),
        ("Name", " \n\t", "content"),
    ])
    def test_create_rejects_blank_input(self, store, name, content, field):
        """Test blank names and content are never persisted."""
        with pytest.raises(InputValidationError) as exc_info:
            store.create(name, content)

        assert exc_info.value.details["field"] == field
        assert exc_info.value.code == "INVALID_INPUT"
        assert not store.path.exists()

    def test_ids_unique_within_same_millisecond(self, store):
        """Test ids stay unique when the clock does not move."""
        with patch("prompta.prompts.store.utc_timestamp", return_value="2024-01-01T00:00:00.000Z"):
            first = store.create("a", "x")
            second = store.create("b", "y")

        assert first.created_at == second.created_at
        assert first.id != second.id

    def test_create_regenerates_colliding_id(self, store):
        """Test an id already in the collection is never reused."""
        existing = store.create("a", "x")
        with patch(
            "prompta.prompts.store.generate_id",
            side_effect=[existing.id, "fresh-id"]
        ):
            created = store.create("b", "y")

        assert created.id == "fresh-id"

    def test_round_trip_is_idempotent(self, store):
        """Test saving what was loaded leaves the file unchanged."""
        store.create("a", "Hello {{name}}", [Parameter(name="name", default="Bo")])
        store.create("b", "ünïcødé ✅")
        before = store.path.read_bytes()

        reloaded = PromptStore(store.path)
        reloaded.save_all(reloaded.load())

        assert store.path.read_bytes() == before

    def test_save_all_preserves_other_keys(self, tmp_path):
        """Test unrelated top-level keys are kept."""
        path = tmp_path / "prompts.json"
        path.write_text(json.dumps({"__meta": {"v": 1}, "prompts": []}), encoding="utf-8")

        store = PromptStore(path)
        store.save_all(store.load() + [Prompt(name="n", content="c")])

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["__meta"] == {"v": 1}
        assert len(data["prompts"]) == 1

    def test_save_creates_parent_directory(self, tmp_path):
        """Test the config directory is created on first save."""
        store = PromptStore(tmp_path / "nested" / "dir" / "prompts.json")
        store.create("n", "c")
        assert store.path.exists()

    def test_save_leaves_no_temp_files(self, store):
        """Test the atomic write cleans up after itself."""
        store.create("n", "c")
        assert [p.name for p in store.path.parent.iterdir()] == ["prompts.json"]

    def test_failed_write_keeps_previous_file(self, store):
        """Test a failed replace leaves the old document in place."""
        store.create("n", "c")
        before = store.path.read_bytes()

        with patch("prompta.prompts.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StoreError):
                store.create("m", "d")

        assert store.path.read_bytes() == before
        assert [p.name for p in store.path.parent.iterdir()] == ["prompts.json"]

    def test_update_stamps_and_persists(self, store):
        """Test update replaces the record and sets updatedAt."""
        original = store.create("old", "c")

        updated = store.update(0, lambda p: p.model_copy(update={"name": "new"}))

        assert updated.id == original.id
        assert updated.created_at == original.created_at
        assert TIMESTAMP.match(updated.updated_at)

        stored = PromptStore(store.path).load()[0]
        assert stored.name == "new"
        assert stored.updated_at == updated.updated_at

    def test_update_only_touches_target(self, store):
        """Test other records are left alone."""
        store.create("a", "1")
        store.create("b", "2")

        store.update(1, lambda p: p.model_copy(update={"content": "changed"}))

        first, second = PromptStore(store.path).load()
        assert (first.content, first.updated_at) == ("1", None)
        assert second.content == "changed"

    def test_update_keeps_parameters_in_sync(self, store):
        """Test content edits drop and keep parameters by name."""
        store.create(
            "p",
            "{{keep}} {{drop}}",
            [Parameter(name="keep", default="K"), Parameter(name="drop", default="D")]
        )

        def edit(prompt):
            content = "{{keep}} {{added}}"
            return prompt.model_copy(update={
                "content": content,
                "parameters": reconcile_parameters(content, prompt.parameters),
            })

        updated = store.update(0, edit)
        assert [(p.name, p.default) for p in updated.parameters] == [("keep", "K"), ("added", "")]

    def test_update_rejects_id_change(self, store):
        """Test ids are immutable."""
        store.create("n", "c")
        before = store.path.read_bytes()

        with pytest.raises(StoreError):
            store.update(0, lambda p: p.model_copy(update={"id": "other"}))

        assert store.path.read_bytes() == before

    def test_update_out_of_range(self, store):
        """Test invalid positions are rejected."""
        store.create("n", "c")
        with pytest.raises(SelectionError):
            store.update(5, lambda p: p)

    def test_get(self, store):
        """Test positional access."""
        created = store.create("n", "c")
        assert store.get(0).id == created.id
        with pytest.raises(SelectionError):
            store.get(-1)
        with pytest.raises(SelectionError):
            store.get(1)

    def test_load_reads_file_once(self, store):
        """Test the collection is cached after the first read."""
        store.create("n", "c")
        fresh = PromptStore(store.path)
        fresh.load()

        with patch.object(fresh, "_read_document") as read:
            fresh.create("m", "d")
            read.assert_not_called()

    def test_reads_records_written_by_other_tools(self, tmp_path):
        """Test tab-indented documents with millisecond timestamps load."""
        path = tmp_path / "prompts.json"
        path.write_text(
            '{\n\t"prompts": [\n\t\t{\n\t\t\t"id": "1717171717171",\n'
            '\t\t\t"name": "Review",\n\t\t\t"content": "Review {{code}}",\n'
            '\t\t\t"parameters": [{"name": "code", "default": ""}],\n'
            '\t\t\t"createdAt": "2024-05-31T12:00:00.000Z"\n\t\t}\n\t]\n}',
            encoding="utf-8"
        )

        prompts = PromptStore(path).load()
        assert prompts[0].id == "1717171717171"
        assert prompts[0].parameter_names == ["code"]
