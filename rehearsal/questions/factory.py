from rehearsal.config.settings import Settings
from rehearsal.llm.factory import ChatClientFactory
from rehearsal.llm.structured_prompt import StructuredPrompt
from rehearsal.questions.base import BaseQuestionSupply
from rehearsal.questions.llm_supply import LLMQuestionSupply
from rehearsal.questions.static_supply import StaticQuestionSupply


class QuestionSupplyFactory:
    """Creates the configured question supply adapter."""

    @classmethod
    def create(cls, settings: Settings) -> BaseQuestionSupply:
        provider = settings.question_provider.lower()
        if provider == "static":
            return StaticQuestionSupply()
        if provider in ChatClientFactory.supported():
            client, model = ChatClientFactory.create(provider, settings)
            prompt = StructuredPrompt(
                name="interview_question",
                client=client,
                model=model,
                temperature=settings.openai_temperature,
            )
            return LLMQuestionSupply(prompt)
        raise ValueError(
            f"Unknown question provider '{provider}'. "
            f"Choose from: {['static', *ChatClientFactory.supported()]}"
        )
