from pathlib import Path

from rehearsal.llm.exceptions import LLMError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load the ``{name}_prompt.txt`` template.

    Raises:
        LLMError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LLMError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(name: str, prompt_dir: Path | None = None) -> str:
    """Load the ``{name}_schema.json`` response schema as raw text.

    Raises:
        LLMError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LLMError(f"Failed to load JSON schema: {exc}") from exc
