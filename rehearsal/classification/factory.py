from rehearsal.anonymization.allocator import IdentifierAllocator
from rehearsal.anonymization.base import BaseEntityClassifier
from rehearsal.anonymization.models import EntityType
from rehearsal.anonymization.pipeline import AnonymizationPipeline
from rehearsal.anonymization.resolver import EntitySpanResolver
from rehearsal.classification.llm_classifier import LLMEntityClassifier
from rehearsal.classification.rule_based import RuleBasedClassifier
from rehearsal.config.settings import Settings
from rehearsal.llm.factory import ChatClientFactory
from rehearsal.llm.structured_prompt import StructuredPrompt


class ClassifierFactory:
    """Creates the configured entity classifier adapter."""

    @classmethod
    def create(cls, settings: Settings) -> BaseEntityClassifier:
        provider = settings.classifier_provider.lower()
        if provider == "rules":
            return RuleBasedClassifier(gazetteer=cls._gazetteer(settings))
        if provider in ChatClientFactory.supported():
            client, model = ChatClientFactory.create(provider, settings)
            prompt = StructuredPrompt(
                name="entity_classification",
                client=client,
                model=model,
                temperature=0.0,
            )
            return LLMEntityClassifier(prompt)
        raise ValueError(
            f"Unknown classifier provider '{provider}'. "
            f"Choose from: {['rules', *ChatClientFactory.supported()]}"
        )

    @staticmethod
    def _gazetteer(settings: Settings) -> dict[EntityType, list[str]]:
        return {
            EntityType.NAME: settings.gazetteer_names,
            EntityType.LOCATION: settings.gazetteer_locations,
            EntityType.ORGANIZATION: settings.gazetteer_organizations,
        }


class AnonymizerFactory:
    """Builds the full anonymization pipeline from settings."""

    @classmethod
    def create(cls, settings: Settings) -> AnonymizationPipeline:
        classifier = ClassifierFactory.create(settings)
        resolver = EntitySpanResolver(
            classifier,
            timeout_seconds=settings.classifier_timeout_seconds,
        )
        return AnonymizationPipeline(resolver=resolver, allocator=IdentifierAllocator())
