import pytest

from rehearsal.config.settings import Settings
from rehearsal.llm.factory import ChatClientFactory
from rehearsal.llm.openai_client_adapter import OpenAIChatClient


class TestChatClientFactory:
    def test_openai_uses_openai_settings(self) -> None:
        settings = Settings(openai_api_key="k", openai_model_name="gpt-test")
        client, model = ChatClientFactory.create("openai", settings)
        assert isinstance(client, OpenAIChatClient)
        assert model == "gpt-test"

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(openai_compatible_api_key="k", openai_compatible_base_url="  ")
        with pytest.raises(ValueError, match="openai_compatible_base_url is required"):
            ChatClientFactory.create("openai_compatible", settings)

    def test_openai_compatible_model_falls_back(self) -> None:
        settings = Settings(
            openai_compatible_api_key="k",
            openai_compatible_base_url="http://localhost:8000/v1",
            openai_model_name="fallback-model",
        )
        _, model = ChatClientFactory.create("openai_compatible", settings)
        assert model == "fallback-model"

    def test_named_provider_uses_known_base_url(self) -> None:
        settings = Settings(openai_compatible_api_key="k", openai_compatible_model_name="llama")
        client, model = ChatClientFactory.create("Groq", settings)
        assert isinstance(client, OpenAIChatClient)
        assert model == "llama"

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            ChatClientFactory.create("carrier-pigeon", Settings())

    def test_supported_lists_builtin_providers_first(self) -> None:
        supported = ChatClientFactory.supported()
        assert supported[:2] == ["openai", "openai_compatible"]
        assert "ollama" in supported
