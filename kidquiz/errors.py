"""
errors.py
======================

Exception hierarchy shared by the provider, the model layer and the session.

None of these are fatal to the app: the provider turns ProviderFailure and
ImageFailure into an empty result / None, and parse_questions drops records
that raise MalformedQuestion.
"""

from __future__ import annotations


class KidQuizError(Exception):
    """Base class for every error raised inside the kidquiz package."""


class ProviderFailure(KidQuizError):
    """The question-generation call failed or returned unparsable content."""


class ImageFailure(KidQuizError):
    """The image-generation call failed or returned no image."""


class MalformedQuestion(KidQuizError):
    """A provider record violates the options / correctAnswer invariant."""


class InvalidTransition(KidQuizError):
    """A session operation was requested from a state that does not allow it."""
