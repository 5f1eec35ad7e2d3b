"""
session.py
======================

The quiz session state machine.

    Idle --begin--> AwaitingQuestions --receive(non-empty)--> Active --advance(last)--> Complete
                                      --receive(empty)------> Unavailable
    any --reset--> Idle

Each state is its own dataclass carrying only the data that is valid in it,
so "Active with zero questions" or "feedback shown without a selection"
cannot be represented.

Active has two sub-phases:
- Answering: selected is None
- Revealed:  selected holds the chosen option and feedback is visible

Provider precondition: a question's options are distinct strings.
Scoring compares the chosen option with correct_answer by value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from .categories import Category
from .errors import InvalidTransition
from .models import Question
from .provider import QuestionProvider

log = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  states
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AwaitingQuestions:
    category: Category
    ticket: int


@dataclass(frozen=True)
class Active:
    category: Category
    questions: Tuple[Question, ...]
    index: int = 0
    score: int = 0
    selected: Optional[str] = None

    def __post_init__(self):
        if not self.questions:
            raise ValueError("Active requires at least one question")
        if not 0 <= self.index < len(self.questions):
            raise ValueError(f"index {self.index} out of range")

    @property
    def question(self) -> Question:
        return self.questions[self.index]

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def feedback_visible(self) -> bool:
        return self.selected is not None

    @property
    def is_last(self) -> bool:
        return self.index + 1 == len(self.questions)


@dataclass(frozen=True)
class Unavailable:
    category: Category
    reason: str


@dataclass(frozen=True)
class Complete:
    category: Category
    score: int
    total: int


SessionState = Union[Idle, AwaitingQuestions, Active, Unavailable, Complete]


class SessionPhase(Enum):
    IDLE = "idle"
    AWAITING = "awaiting"
    ANSWERING = "answering"
    REVEALED = "revealed"
    UNAVAILABLE = "unavailable"
    COMPLETE = "complete"


# ----------------------------------------------------------------------
#  QuizSession
# ----------------------------------------------------------------------
class QuizSession:
    """
    Owns one quiz attempt at a time and its transitions.

    generation increases on every begin() and reset(); results tagged with
    an older generation (question batches, images) are stale and must be
    ignored by whoever receives them.
    """

    def __init__(self, provider: QuestionProvider):
        self.provider = provider
        self._state: SessionState = Idle()
        self._generation = 0

    # ------------------------------------------------------------
    # read-only view
    # ------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def phase(self) -> SessionPhase:
        s = self._state
        if isinstance(s, AwaitingQuestions):
            return SessionPhase.AWAITING
        if isinstance(s, Active):
            return SessionPhase.REVEALED if s.feedback_visible else SessionPhase.ANSWERING
        if isinstance(s, Unavailable):
            return SessionPhase.UNAVAILABLE
        if isinstance(s, Complete):
            return SessionPhase.COMPLETE
        return SessionPhase.IDLE

    @property
    def current_question(self) -> Optional[Question]:
        s = self._state
        return s.question if isinstance(s, Active) else None

    # ------------------------------------------------------------
    # starting a session
    # ------------------------------------------------------------
    def begin(self, category: Category) -> int:
        """
        Idle -> AwaitingQuestions. Returns the ticket the fetch result must
        be delivered with.
        """
        if not isinstance(self._state, Idle):
            raise InvalidTransition(
                f"cannot start {category.value} from {self.phase.value}"
            )
        self._generation += 1
        self._state = AwaitingQuestions(category=category, ticket=self._generation)
        log.info("session %d: requesting questions for %s", self._generation, category.value)
        return self._generation

    def receive_questions(self, ticket: int, questions: Sequence[Question]) -> bool:
        """
        Deliver the result of the fetch issued by begin().

        A result for a ticket that is no longer pending (the user reset in
        the meantime) is dropped and False is returned.
        """
        s = self._state
        if not isinstance(s, AwaitingQuestions) or s.ticket != ticket:
            log.info("discarding stale question batch (ticket %d)", ticket)
            return False

        if not questions:
            self._state = Unavailable(
                category=s.category,
                reason="No questions could be made for this topic right now.",
            )
            log.warning("session %d: no questions available for %s", ticket, s.category.value)
            return True

        self._state = Active(category=s.category, questions=tuple(questions))
        log.info("session %d: %d questions ready", ticket, len(questions))
        return True

    def start(self, category: Category) -> SessionPhase:
        """begin() + a single provider request + receive_questions()."""
        ticket = self.begin(category)
        try:
            questions = self.provider.generate_questions(category)
        except Exception:
            log.exception("question provider raised for %s", category.value)
            questions = []
        self.receive_questions(ticket, questions)
        return self.phase

    # ------------------------------------------------------------
    # playing
    # ------------------------------------------------------------
    def answer(self, option: str) -> bool:
        """
        Record the answer for the current question (Answering only).

        Returns False and changes nothing when there is no question to
        answer or the current one is already revealed.
        """
        s = self._state
        if not isinstance(s, Active) or s.feedback_visible:
            return False

        gained = 1 if s.question.is_correct(option) else 0
        self._state = replace(s, selected=option, score=s.score + gained)
        return True

    def advance(self) -> bool:
        """
        Revealed -> next question (Answering), or Complete after the last one.
        Returns False when not in the Revealed sub-phase.
        """
        s = self._state
        if not isinstance(s, Active) or not s.feedback_visible:
            return False

        if s.is_last:
            self._state = Complete(category=s.category, score=s.score, total=s.total)
            log.info("session %d: complete, score %d/%d", self._generation, s.score, s.total)
        else:
            self._state = replace(s, index=s.index + 1, selected=None)
        return True

    def reset(self) -> None:
        """Back to Idle from anywhere. Outstanding results become stale."""
        self._generation += 1
        self._state = Idle()
