import unittest

from kidquiz.categories import Category
from kidquiz.errors import InvalidTransition, ProviderFailure
from kidquiz.session import (
    Active,
    AwaitingQuestions,
    Complete,
    Idle,
    QuizSession,
    SessionPhase,
    Unavailable,
)

from tests.fakes import FakeQuestionProvider, make_questions


def started(count: int = 5) -> QuizSession:
    session = QuizSession(FakeQuestionProvider(make_questions(count)))
    session.start(Category.ANIMALS)
    return session


class StartTests(unittest.TestCase):
    def test_start_every_category_reaches_active(self) -> None:
        for category in Category:
            provider = FakeQuestionProvider(make_questions(3, category))
            session = QuizSession(provider)
            self.assertEqual(session.start(category), SessionPhase.ANSWERING)
            state = session.state
            self.assertIsInstance(state, Active)
            self.assertEqual(state.index, 0)
            self.assertEqual(state.score, 0)
            self.assertIsNone(state.selected)
            self.assertEqual(provider.calls, [category])

    def test_empty_result_is_unavailable_not_active(self) -> None:
        session = QuizSession(FakeQuestionProvider([]))
        self.assertEqual(session.start(Category.FLAGS), SessionPhase.UNAVAILABLE)
        self.assertIsInstance(session.state, Unavailable)
        self.assertIsNone(session.current_question)
        self.assertFalse(session.answer("anything"))
        self.assertFalse(session.advance())

    def test_provider_exception_is_unavailable(self) -> None:
        session = QuizSession(FakeQuestionProvider(error=ProviderFailure("boom")))
        with self.assertLogs("kidquiz.session", level="ERROR"):
            phase = session.start(Category.BIRDS)
        self.assertEqual(phase, SessionPhase.UNAVAILABLE)

    def test_begin_only_from_idle(self) -> None:
        session = started()
        with self.assertRaises(InvalidTransition):
            session.begin(Category.MATH)

    def test_begin_then_receive(self) -> None:
        session = QuizSession(FakeQuestionProvider())
        ticket = session.begin(Category.SCIENCE)
        self.assertEqual(session.phase, SessionPhase.AWAITING)
        self.assertIsInstance(session.state, AwaitingQuestions)
        self.assertTrue(session.receive_questions(ticket, make_questions(2, Category.SCIENCE)))
        self.assertEqual(session.phase, SessionPhase.ANSWERING)

    def test_late_questions_after_reset_are_discarded(self) -> None:
        session = QuizSession(FakeQuestionProvider())
        ticket = session.begin(Category.SCIENCE)
        session.reset()
        self.assertFalse(session.receive_questions(ticket, make_questions(2)))
        self.assertIsInstance(session.state, Idle)

        # a new session does not accept the old batch either
        new_ticket = session.begin(Category.MATH)
        self.assertFalse(session.receive_questions(ticket, make_questions(2)))
        self.assertEqual(session.phase, SessionPhase.AWAITING)
        self.assertTrue(session.receive_questions(new_ticket, make_questions(2, Category.MATH)))

    def test_active_cannot_hold_zero_questions(self) -> None:
        with self.assertRaises(ValueError):
            Active(category=Category.ANIMALS, questions=())


class AnswerAdvanceTests(unittest.TestCase):
    def test_correct_answer_scores_one_and_reveals(self) -> None:
        session = started()
        q = session.current_question
        self.assertTrue(session.answer(q.correct_answer))
        self.assertEqual(session.state.score, 1)
        self.assertEqual(session.phase, SessionPhase.REVEALED)
        self.assertTrue(session.state.feedback_visible)

    def test_wrong_answer_scores_nothing_and_reveals(self) -> None:
        session = started()
        self.assertTrue(session.answer("wrong 1a"))
        self.assertEqual(session.state.score, 0)
        self.assertEqual(session.state.selected, "wrong 1a")
        self.assertEqual(session.phase, SessionPhase.REVEALED)

    def test_second_answer_is_ignored(self) -> None:
        session = started()
        session.answer("right 1")
        self.assertFalse(session.answer("wrong 1a"))
        self.assertFalse(session.answer("right 1"))
        self.assertEqual(session.state.score, 1)
        self.assertEqual(session.state.selected, "right 1")

    def test_advance_requires_reveal(self) -> None:
        session = started()
        self.assertFalse(session.advance())
        self.assertEqual(session.state.index, 0)

    def test_advance_clears_selection(self) -> None:
        session = started()
        session.answer("right 1")
        self.assertTrue(session.advance())
        state = session.state
        self.assertEqual(state.index, 1)
        self.assertIsNone(state.selected)
        self.assertEqual(session.phase, SessionPhase.ANSWERING)

    def test_full_run_final_score(self) -> None:
        session = started(5)
        pattern = [True, False, True, True, False]
        for n, correct in enumerate(pattern, start=1):
            self.assertEqual(session.current_question.id, f"q{n}")
            session.answer(f"right {n}" if correct else f"wrong {n}b")
            session.advance()

        state = session.state
        self.assertIsInstance(state, Complete)
        self.assertEqual(state.score, 3)
        self.assertEqual(state.total, 5)
        self.assertEqual(session.phase, SessionPhase.COMPLETE)

    def test_last_answer_counted_once(self) -> None:
        session = started(1)
        session.answer("right 1")
        session.advance()
        self.assertEqual(session.state.score, 1)
        self.assertFalse(session.advance())
        self.assertEqual(session.state.score, 1)


class ResetTests(unittest.TestCase):
    def test_reset_from_every_state(self) -> None:
        sessions = []

        idle = QuizSession(FakeQuestionProvider())
        sessions.append(idle)

        awaiting = QuizSession(FakeQuestionProvider())
        awaiting.begin(Category.ANIMALS)
        sessions.append(awaiting)

        answering = started()
        sessions.append(answering)

        revealed = started()
        revealed.answer("right 1")
        sessions.append(revealed)

        unavailable = QuizSession(FakeQuestionProvider([]))
        unavailable.start(Category.ANIMALS)
        sessions.append(unavailable)

        complete = started(1)
        complete.answer("right 1")
        complete.advance()
        sessions.append(complete)

        for session in sessions:
            before = session.generation
            session.reset()
            self.assertIsInstance(session.state, Idle)
            self.assertEqual(session.phase, SessionPhase.IDLE)
            self.assertIsNone(session.current_question)
            self.assertGreater(session.generation, before)

    def test_restart_after_reset(self) -> None:
        session = started()
        session.answer("right 1")
        session.reset()
        session.start(Category.ANIMALS)
        self.assertEqual(session.state.score, 0)
        self.assertEqual(session.state.index, 0)


if __name__ == "__main__":
    unittest.main()
