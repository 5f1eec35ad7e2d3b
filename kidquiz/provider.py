"""
provider.py
======================

Question Provider and Image Provider on top of Google Gemini.

Both calls are a single attempt:
- generate_questions() returns [] on any failure (ProviderFailure is logged)
- generate_image() returns None on any failure (ImageFailure is logged)

The rest of the app only sees the two Protocols below, so tests and the
session never depend on the Gemini SDK directly.
"""

from __future__ import annotations

import base64
import io
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

import google.generativeai as genai
from google.api_core.exceptions import ResourceExhausted
from PIL import Image, UnidentifiedImageError

from .categories import Category, category_guidance
from .config import AppConfig
from .errors import ImageFailure, ProviderFailure
from .models import Question, parse_questions

log = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  capability interfaces
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class QuizImage:
    data: bytes
    mime_type: str = "image/png"


class QuestionProvider(Protocol):
    def generate_questions(self, category: Category) -> List[Question]:
        ...


class ImageProvider(Protocol):
    def generate_image(self, description: str) -> Optional[QuizImage]:
        ...


# ----------------------------------------------------------------------
#  prompts
# ----------------------------------------------------------------------
QUESTION_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": {"type": "STRING"},
            "prompt": {"type": "STRING"},
            "options": {"type": "ARRAY", "items": {"type": "STRING"}},
            "correctAnswer": {"type": "STRING"},
            "imageDescription": {"type": "STRING"},
            "explanation": {"type": "STRING"},
            "passage": {"type": "STRING"},
        },
        "required": [
            "id",
            "prompt",
            "options",
            "correctAnswer",
            "imageDescription",
            "explanation",
        ],
    },
}


def build_question_prompt(category: Category, count: int, audience: str) -> str:
    """Prompt for one batch of questions in a category."""
    guidance = category_guidance(category)
    extra = f"\nSpecific instructions:\n- {guidance}\n" if guidance else ""
    return f"""
Generate {count} interesting multiple-choice quiz questions for {audience} in the category: {category.value}.
{extra}
Output a JSON array only. Each object in the array must have:
- id: a unique string.
- prompt: the question.
- options: exactly 4 different choices.
- correctAnswer: the correct choice, copied exactly from options.
- imageDescription: a vivid, simple description for an AI to draw an image for this specific question.
- explanation: a "Did you know?" style fun fact for kids.
- passage: (optional) only for Reading Adventure questions.

Make the content exciting, accurate and age-appropriate, using vocabulary suitable for {audience}.
"""


def build_image_prompt(description: str) -> str:
    return (
        "High quality, kid-friendly, vibrant, clear cartoon illustration of: "
        f"{description}. Bright colors, simple shapes, 3D claymation style, "
        "white background, square 1:1 framing."
    )


def extract_json_array(text: str) -> List[Any]:
    """
    Parse the model output into a list of records.

    Tolerates ```json fences and an object wrapper like {"questions": [...]}.
    Raises ProviderFailure when nothing usable is found.
    """
    s = (text or "").strip()
    if not s:
        raise ProviderFailure("empty response")
    if s.startswith("```"):
        lines = s.strip("`").splitlines()
        if lines and lines[0].strip().lower().startswith("json"):
            lines = lines[1:]
        s = "\n".join(lines).strip()

    try:
        data = json.loads(s)
    except json.JSONDecodeError as e:
        raise ProviderFailure(f"invalid JSON: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("questions"), list):
        data = data["questions"]
    if not isinstance(data, list):
        raise ProviderFailure(f"expected a JSON array, got {type(data).__name__}")
    return data


# ----------------------------------------------------------------------
#  Gemini implementation
# ----------------------------------------------------------------------
class GeminiProvider:
    """
    Gemini-backed QuestionProvider + ImageProvider.

    model_factory builds a model object with generate_content(); it defaults
    to genai.GenerativeModel and is replaced by a fake in tests.
    """

    def __init__(
        self,
        config: AppConfig,
        model_factory: Optional[Callable[[str], Any]] = None,
    ):
        self.config = config
        self._model_factory = model_factory or genai.GenerativeModel
        self.last_error: Optional[str] = None

    def configure(self) -> bool:
        """Register the API key with the SDK. Returns False without a key."""
        if not self.config.has_api_key:
            log.warning("GEMINI_API_KEY is not set; quiz generation is disabled")
            return False
        genai.configure(api_key=self.config.gemini_api_key)
        return True

    # ------------------------------------------------------------
    # questions
    # ------------------------------------------------------------
    def generate_questions(self, category: Category) -> List[Question]:
        try:
            records = self._request_questions(category)
        except ProviderFailure as e:
            self.last_error = str(e)
            log.error("question generation failed for %s: %s", category.value, e)
            return []

        questions = parse_questions(records, category)
        log.info(
            "received %d/%d usable questions for %s",
            len(questions), len(records), category.value,
        )
        return questions

    def _request_questions(self, category: Category) -> List[Any]:
        if not self.config.has_api_key:
            raise ProviderFailure("no API key configured")

        prompt = build_question_prompt(
            category, self.config.batch_size, self.config.audience
        )
        try:
            model = self._model_factory(self.config.question_model)
            response = model.generate_content(
                prompt,
                generation_config={
                    "response_mime_type": "application/json",
                    "response_schema": QUESTION_SCHEMA,
                },
            )
            text = response.text
        except ResourceExhausted as e:
            raise ProviderFailure(f"quota exhausted (429): {e}") from e
        except Exception as e:
            raise ProviderFailure(str(e)) from e

        return extract_json_array(text)

    # ------------------------------------------------------------
    # images
    # ------------------------------------------------------------
    def generate_image(self, description: str) -> Optional[QuizImage]:
        try:
            return self._request_image(description)
        except ImageFailure as e:
            log.warning("no image for %r: %s", description[:60], e)
            return None

    def _request_image(self, description: str) -> QuizImage:
        if not self.config.has_api_key:
            raise ImageFailure("no API key configured")
        if not description:
            raise ImageFailure("empty description")

        try:
            model = self._model_factory(self.config.image_model)
            response = model.generate_content(build_image_prompt(description))
            parts = response.candidates[0].content.parts
        except ResourceExhausted as e:
            raise ImageFailure(f"quota exhausted (429): {e}") from e
        except Exception as e:
            raise ImageFailure(str(e)) from e

        for part in parts:
            blob = getattr(part, "inline_data", None)
            data = getattr(blob, "data", None)
            mime_type = getattr(blob, "mime_type", None) or "image/png"
            if not data or not mime_type.startswith("image/"):
                continue
            return QuizImage(data=_decode_image(data), mime_type=mime_type)

        raise ImageFailure("response contained no inline image")


def _decode_image(data: Any) -> bytes:
    """Raw image bytes, or ImageFailure when they do not decode as a raster image."""
    try:
        if isinstance(data, str):
            data = base64.b64decode(data)
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageFailure(f"unreadable image payload: {e}") from e
    return data
