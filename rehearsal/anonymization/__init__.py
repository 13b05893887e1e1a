from rehearsal.anonymization.allocator import IdentifierAllocator
from rehearsal.anonymization.base import BaseEntityClassifier
from rehearsal.anonymization.exceptions import AnonymizationError, ClassificationUnavailable
from rehearsal.anonymization.mapping_table import MappingTable
from rehearsal.anonymization.models import (
    AnonymizationResult,
    EntityType,
    MappingEntry,
    Replacement,
    Span,
)
from rehearsal.anonymization.pipeline import AnonymizationPipeline
from rehearsal.anonymization.resolver import EntitySpanResolver
from rehearsal.anonymization.rewriter import restore, rewrite, rewrite_with_positions

__all__ = [
    "AnonymizationError",
    "AnonymizationPipeline",
    "AnonymizationResult",
    "BaseEntityClassifier",
    "ClassificationUnavailable",
    "EntitySpanResolver",
    "EntityType",
    "IdentifierAllocator",
    "MappingEntry",
    "MappingTable",
    "Replacement",
    "Span",
    "restore",
    "rewrite",
    "rewrite_with_positions",
]
