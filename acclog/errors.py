"""Exception taxonomy for the journal core and its collaborators."""

from __future__ import annotations


class JournalError(Exception):
    """Base exception for accomplishment journal errors."""

    pass


class ValidationError(JournalError, ValueError):
    """Malformed rating, text or timeframe input. Raised before any storage call."""

    pass


class NotConfiguredError(JournalError):
    """Storage or text-generation collaborator is unavailable."""

    pass


class GenerationError(JournalError):
    """Base class for text-generation failures."""

    pass


class TransientGenerationError(GenerationError):
    """Rate-limited or network failure. Retriable by calling generate() again."""

    pass


class PermanentGenerationError(GenerationError):
    """Auth or configuration failure. Not retried."""

    pass


class NavigationError(JournalError):
    """Stepping or selecting outside the current key sequence."""

    pass


class PreconditionError(JournalError):
    """Operation refused in the current state (empty bucket, request in flight)."""

    pass
