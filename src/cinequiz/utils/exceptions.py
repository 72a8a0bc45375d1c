"""Custom exceptions for the application."""


class CineQuizError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(CineQuizError):
    """Configuration-related errors."""

    pass


class ContentProviderError(CineQuizError):
    """Content provider (TMDb) errors."""

    pass


class SessionError(CineQuizError):
    """Game session errors."""

    pass


class UnqualifiedSubjectError(SessionError):
    """A subject lacks enough clue material to build a round."""

    pass
