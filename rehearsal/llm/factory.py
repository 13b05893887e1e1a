from typing import ClassVar

from rehearsal.config.settings import Settings
from rehearsal.llm.client_base import BaseChatClient
from rehearsal.llm.openai_client_adapter import OpenAIChatClient


class ChatClientFactory:
    """Creates the chat client and model name for an LLM-backed provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def supported(cls) -> list[str]:
        return ["openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def create(cls, provider: str, settings: Settings) -> tuple[BaseChatClient, str]:
        """Return ``(client, model_name)`` for *provider*."""
        provider = provider.lower()
        base_url = cls._resolve_base_url(provider, settings)
        if provider == "openai":
            api_key = settings.openai_api_key
            model = settings.openai_model_name
        else:
            api_key = settings.openai_compatible_api_key
            model = settings.openai_compatible_model_name or settings.openai_model_name
        client = OpenAIChatClient(
            api_key=api_key,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=base_url,
        )
        return client, model

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "openai_compatible_base_url is required for provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        raise ValueError(f"Unknown LLM provider '{provider}'. Choose from: {cls.supported()}")
