"""Tests for bundled prompt template and JSON schema loading."""

import json
from pathlib import Path

import pytest

from rehearsal.llm.exceptions import LLMError
from rehearsal.llm.prompt_loader import load_json_schema, load_prompt_template


class TestLoadPromptTemplate:
    @pytest.mark.parametrize(
        ("name", "placeholder"),
        [
            ("entity_classification", "{transcript}"),
            ("interview_question", "{asked_questions}"),
            ("answer_feedback", "{answer}"),
        ],
    )
    def test_loads_bundled_templates(self, name: str, placeholder: str) -> None:
        assert placeholder in load_prompt_template(name)

    def test_loads_from_custom_dir(self, tmp_path: Path) -> None:
        (tmp_path / "custom_prompt.txt").write_text("Hello {transcript}")
        assert load_prompt_template("custom", tmp_path) == "Hello {transcript}"

    def test_missing_file_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(LLMError, match="Failed to load prompt"):
            load_prompt_template("missing", tmp_path)


class TestLoadJsonSchema:
    @pytest.mark.parametrize(
        "name", ["entity_classification", "interview_question", "answer_feedback"]
    )
    def test_bundled_schemas_are_strict_objects(self, name: str) -> None:
        schema = json.loads(load_json_schema(name))
        assert schema["type"] == "object"
        assert schema["additionalProperties"] is False
        assert set(schema["required"]) == set(schema["properties"])

    def test_entity_schema_lists_all_types(self) -> None:
        schema = json.loads(load_json_schema("entity_classification"))
        item = schema["properties"]["entities"]["items"]
        assert set(item["properties"]["type"]["enum"]) == {
            "Name", "Age", "DateOfBirth", "Phone", "Email", "Location", "Organization",
        }

    def test_missing_file_raises_error(self, tmp_path: Path) -> None:
        with pytest.raises(LLMError, match="Failed to load JSON schema"):
            load_json_schema("missing", tmp_path)
