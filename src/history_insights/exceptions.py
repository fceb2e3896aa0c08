"""Unified exception hierarchy for history-insights."""


class HistoryInsightsError(Exception):
    """Base exception for all history-insights errors."""


class NotFoundError(HistoryInsightsError):
    """Requested history or daily report does not exist."""


class InvalidArgumentError(HistoryInsightsError):
    """A caller-supplied argument is out of range or malformed."""


class ConflictError(HistoryInsightsError):
    """Chunk progress was moved by another writer during an advance."""


# Classification
class ClassifierError(HistoryInsightsError):
    """Classification of a chunk failed. Always absorbed into a neutral report."""


class LLMError(ClassifierError):
    """Base exception for LLM client operations."""


# Storage
class StoreError(HistoryInsightsError):
    """Key-value backend failure or corrupt stored value."""
