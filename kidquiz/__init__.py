"""
kidquiz package
======================

Internal logic of the KidQuiz Adventure app.

Main parts:
- configuration (config)
- topics and their display settings (categories)
- Question record and validation (models)
- Gemini question / image generation (provider)
- quiz session state machine (session)
- per-question image state (images)
- Streamlit components (ui)

app.py only wires Streamlit to these modules.
"""

from .categories import CATEGORY_DISPLAY, Category, CategoryDisplay
from .config import AppConfig
from .errors import (
    ImageFailure,
    InvalidTransition,
    KidQuizError,
    MalformedQuestion,
    ProviderFailure,
)
from .images import ImageLoader, ImageTracker
from .models import Question, parse_questions
from .provider import GeminiProvider, QuizImage
from .session import QuizSession, SessionPhase

__all__ = [
    "AppConfig",
    "Category",
    "CategoryDisplay",
    "CATEGORY_DISPLAY",
    "Question",
    "parse_questions",
    "GeminiProvider",
    "QuizImage",
    "QuizSession",
    "SessionPhase",
    "ImageLoader",
    "ImageTracker",
    "KidQuizError",
    "ProviderFailure",
    "ImageFailure",
    "MalformedQuestion",
    "InvalidTransition",
]
