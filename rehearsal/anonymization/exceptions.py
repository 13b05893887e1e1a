class AnonymizationError(Exception):
    """Raised when anonymization fails."""


class ClassificationUnavailable(AnonymizationError):
    """Raised when the entity classifier failed or timed out.

    Distinct from "no PII found": callers must never treat it as an empty
    span list.
    """


class MappingConflictError(AnonymizationError):
    """Raised when a mapping entry would break table uniqueness."""
