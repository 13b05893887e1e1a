"""Prompt template + JSON schema + chat client, returning a parsed object."""

import json
from pathlib import Path

from rehearsal.llm.client_base import BaseChatClient
from rehearsal.llm.exceptions import LLMResponseError
from rehearsal.llm.prompt_loader import load_json_schema, load_prompt_template
from rehearsal.logging.logger import Log


class StructuredPrompt:
    """Renders a bundled prompt, calls the model and parses its JSON reply."""

    def __init__(
        self,
        *,
        name: str,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.0,
        system_prompt: str = "",
        prompt_dir: Path | None = None,
    ) -> None:
        self._name = name
        self._client = client
        self._model = model
        self._temperature = temperature
        self._system_prompt = system_prompt
        self._template = load_prompt_template(name, prompt_dir)
        self._json_schema = json.loads(load_json_schema(name, prompt_dir))

    async def run(self, **variables: str) -> dict[str, object]:
        prompt = self._template.format(**variables)
        Log.debug(f"{self._name} prompt rendered ({len(prompt)} chars)")

        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            schema_name=f"{self._name}_result",
            json_schema=self._json_schema,
        )
        Log.debug(f"{self._name} raw response received ({len(raw_response)} chars)")
        return self._parse_json(raw_response)

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise LLMResponseError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise LLMResponseError("JSON response must be an object")
        return parsed
