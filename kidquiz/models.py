"""
models.py
======================

The Question record and its validation at the provider boundary.

Provider records look like this (camelCase, as requested in the prompt):

{
  "id": "q1",
  "prompt": "Which animal is known as the king of the jungle?",
  "options": ["Lion", "Tiger", "Elephant", "Zebra"],
  "correctAnswer": "Lion",
  "imageDescription": "A friendly cartoon lion with a big mane",
  "explanation": "Did you know? A lion's roar can be heard 8 km away!",
  "passage": null
}

Rendering downstream assumes the invariant correct_answer ∈ options, so
records are checked here before a session ever becomes Active.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .categories import Category, is_comprehension
from .errors import MalformedQuestion

log = logging.getLogger(__name__)

OPTION_COUNT = 4


@dataclass(frozen=True)
class Question:
    id: str
    category: Category
    prompt: str
    options: Tuple[str, ...]
    correct_answer: str
    image_description: str
    explanation: str
    passage: Optional[str] = None

    def is_correct(self, option: str) -> bool:
        return option == self.correct_answer

    # ------------------------------------------------------------------
    # provider record -> Question
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Dict[str, Any], category: Category) -> "Question":
        """
        Build a Question from one provider record.

        Raises MalformedQuestion when the record cannot be used:
        - prompt is empty
        - options is not a list of exactly 4 distinct, non-empty strings
        - correctAnswer does not match one of the options

        Small repairs are applied instead of rejecting:
        - correctAnswer that only differs from an option by case or
          surrounding whitespace is snapped to that option
        - a blank passage, or a passage outside reading comprehension,
          is dropped
        """
        if not isinstance(data, dict):
            raise MalformedQuestion(f"record is not an object: {type(data).__name__}")

        prompt = _text(data.get("prompt"))
        if not prompt:
            raise MalformedQuestion("missing prompt")

        raw_options = data.get("options")
        if not isinstance(raw_options, (list, tuple)):
            raise MalformedQuestion("options is not a list")
        options = tuple(_text(o) for o in raw_options)
        if len(options) != OPTION_COUNT:
            raise MalformedQuestion(
                f"expected {OPTION_COUNT} options, got {len(options)}"
            )
        if any(not o for o in options):
            raise MalformedQuestion("empty option")
        if len(set(options)) != len(options):
            raise MalformedQuestion("duplicate options")

        correct = _text(_first(data, "correctAnswer", "correct_answer"))
        correct = _match_option(correct, options)
        if correct is None:
            raise MalformedQuestion("correctAnswer is not one of the options")

        passage = _text(data.get("passage")) or None
        if passage is not None and not is_comprehension(category):
            passage = None

        return cls(
            id=_text(data.get("id")),
            category=category,
            prompt=prompt,
            options=options,
            correct_answer=correct,
            image_description=_text(_first(data, "imageDescription", "image_description")),
            explanation=_text(data.get("explanation")),
            passage=passage,
        )


# ----------------------------------------------------------------------
#  batch parsing
# ----------------------------------------------------------------------
def parse_questions(records: Iterable[Any], category: Category) -> List[Question]:
    """
    Validate a batch of provider records.

    Broken records are logged and skipped. Ids are made unique inside the
    batch (missing or repeated ids get a positional id).
    """
    questions: List[Question] = []
    seen_ids = set()

    for pos, record in enumerate(records):
        try:
            q = Question.from_dict(record, category)
        except MalformedQuestion as e:
            log.warning("dropping malformed question #%d for %s: %s", pos, category.value, e)
            continue

        qid = q.id
        if not qid or qid in seen_ids:
            base = f"{category.name.lower()}-{pos + 1}"
            qid, n = base, 2
            while qid in seen_ids:
                qid, n = f"{base}-{n}", n + 1
            q = replace(q, id=qid)
        seen_ids.add(qid)
        questions.append(q)

    return questions


# ----------------------------------------------------------------------
#  helpers
# ----------------------------------------------------------------------
def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _first(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _match_option(answer: str, options: Tuple[str, ...]) -> Optional[str]:
    if answer in options:
        return answer
    folded = answer.casefold()
    matches = [o for o in options if o.casefold() == folded]
    if len(matches) == 1:
        return matches[0]
    return None
