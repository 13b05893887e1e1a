from rehearsal.config.settings import Settings
from rehearsal.feedback.base import BaseFeedbackGenerator
from rehearsal.feedback.generator import LLMFeedbackGenerator
from rehearsal.llm.factory import ChatClientFactory
from rehearsal.llm.structured_prompt import StructuredPrompt


class FeedbackGeneratorFactory:
    """Creates the configured feedback generator, or None when disabled."""

    @classmethod
    def create(cls, settings: Settings) -> BaseFeedbackGenerator | None:
        provider = settings.feedback_provider.lower()
        if provider == "none":
            return None
        if provider in ChatClientFactory.supported():
            client, model = ChatClientFactory.create(provider, settings)
            prompt = StructuredPrompt(
                name="answer_feedback",
                client=client,
                model=model,
                temperature=settings.openai_temperature,
            )
            return LLMFeedbackGenerator(prompt)
        raise ValueError(
            f"Unknown feedback provider '{provider}'. "
            f"Choose from: {['none', *ChatClientFactory.supported()]}"
        )
