"""
app.py
======================

KidQuiz Adventure (Streamlit) entry point.

Features:
- topic selection -> AI-generated questions (Google Gemini)
- one AI illustration per question, loaded in the background
- instant feedback with a fun fact, running score, final summary

Prerequisites:
- GEMINI_API_KEY in the environment (or .env); without it every topic ends
  on the "no questions" view
- optional config.toml for model names, batch size and log level

Run with:  streamlit run app.py
"""

from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from kidquiz.config import AppConfig
from kidquiz.images import ImageLoader, ImageLoading
from kidquiz.logging_utils import setup_logging
from kidquiz.provider import GeminiProvider
from kidquiz.session import Active, AwaitingQuestions, QuizSession, SessionPhase
from kidquiz.ui import (
    inject_css,
    render_category_selector,
    render_image_panel,
    render_loading,
    render_quiz_screen,
    render_summary,
    render_unavailable,
)

log = logging.getLogger("kidquiz.app")

IMAGE_POLL_SECONDS = 1.0


# ----------------------------------------------------------------------
#  objects kept in st.session_state
# ----------------------------------------------------------------------
def get_config() -> AppConfig:
    if "app_config" not in st.session_state:
        st.session_state["app_config"] = AppConfig.load()
    return st.session_state["app_config"]


def get_provider() -> GeminiProvider:
    if "provider" not in st.session_state:
        provider = GeminiProvider(get_config())
        provider.configure()
        st.session_state["provider"] = provider
    return st.session_state["provider"]


def get_session() -> QuizSession:
    """Quiz session for this browser tab."""
    if "quiz_session" not in st.session_state:
        st.session_state["quiz_session"] = QuizSession(get_provider())
    return st.session_state["quiz_session"]


def get_image_loader() -> ImageLoader:
    if "image_loader" not in st.session_state:
        st.session_state["image_loader"] = ImageLoader(get_provider())
    return st.session_state["image_loader"]


# ----------------------------------------------------------------------
#  views
# ----------------------------------------------------------------------
def render_select_view() -> None:
    session = get_session()
    chosen = render_category_selector(get_config().app_name)
    if chosen is not None:
        session.begin(chosen)
        st.rerun()


def render_loading_view() -> None:
    session = get_session()
    state = session.state
    if not isinstance(state, AwaitingQuestions):
        return

    render_loading(state.category)
    with st.spinner("Thinking up questions..."):
        try:
            questions = session.provider.generate_questions(state.category)
        except Exception:
            log.exception("question provider raised for %s", state.category.value)
            questions = []
    session.receive_questions(state.ticket, questions)
    st.rerun()


def _image_fragment() -> None:
    session = get_session()
    loader = get_image_loader()
    image_state = loader.poll(session)
    render_image_panel(image_state)
    if not isinstance(image_state, ImageLoading) and st.session_state.get("image_polling"):
        # stop polling: a full rerun rebuilds the fragment without run_every
        st.session_state["image_polling"] = False
        st.rerun()


def render_image_area() -> None:
    session = get_session()
    loader = get_image_loader()
    loader.ensure_requested(session)

    loading = isinstance(loader.poll(session), ImageLoading)
    st.session_state["image_polling"] = loading
    run_every: Optional[float] = IMAGE_POLL_SECONDS if loading else None
    st.fragment(_image_fragment, run_every=run_every)()


def render_quiz_view() -> None:
    session = get_session()
    state = session.state
    if not isinstance(state, Active):
        return

    result = render_quiz_screen(state, image_panel=render_image_area)

    if result["clicked_home"]:
        session.reset()
        st.rerun()
    elif result["selected_option"] is not None:
        if session.answer(result["selected_option"]):
            st.rerun()
    elif result["clicked_next"]:
        session.advance()
        st.rerun()


def render_unavailable_view() -> None:
    session = get_session()
    if render_unavailable(session.state):
        session.reset()
        st.rerun()


def render_summary_view() -> None:
    session = get_session()
    if render_summary(session.state):
        session.reset()
        st.rerun()


# ----------------------------------------------------------------------
#  main
# ----------------------------------------------------------------------
def main() -> None:
    st.set_page_config(
        page_title="KidQuiz Adventure",
        page_icon="🚀",
        layout="centered",
    )

    cfg = get_config()
    setup_logging(cfg.log_level)
    inject_css()

    phase = get_session().phase

    if phase is SessionPhase.AWAITING:
        render_loading_view()
    elif phase in (SessionPhase.ANSWERING, SessionPhase.REVEALED):
        render_quiz_view()
    elif phase is SessionPhase.UNAVAILABLE:
        render_unavailable_view()
    elif phase is SessionPhase.COMPLETE:
        render_summary_view()
    else:
        render_select_view()


if __name__ == "__main__":
    main()
