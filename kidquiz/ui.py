"""
ui.py
======================

Streamlit components for every view of the app.

Responsibilities:
- kid-friendly theme and global CSS
- topic selector cards
- loading, "no questions", and summary views
- quiz screen (passage, image panel, prompt, options, feedback, next)

Only presentation and user input live here. Render functions report what
was clicked and app.py applies the matching session transition.
"""

from __future__ import annotations

import html
import logging
from typing import Any, Callable, Dict, Optional

import streamlit as st

from .categories import Category, display_for, featured_categories
from .images import ImageLoading, ImageReady, ImageState
from .session import Active, Complete, Unavailable

log = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  theme
# ----------------------------------------------------------------------

THEME: Dict[str, str] = {
    "bg": "#eff6ff",
    "text": "#1e3a8a",
    "surface": "#ffffff",
    "border": "#bfdbfe",
    "primary": "#2563eb",
    "correct": "#22c55e",
    "incorrect": "#ef4444",
    "muted": "#9ca3af",
    "feedback": "#fef9c3",
}

OPTION_LETTERS = "ABCD"


def _generate_css(theme: Dict[str, str]) -> str:
    """Global CSS for the whole app."""

    return f"""
    <style>
    .stApp {{
        background: {theme['bg']};
    }}

    .kq-title {{
        text-align: center;
        font-size: 2.6rem;
        font-weight: 900;
        color: {theme['primary']};
        margin-bottom: 0.2rem;
    }}

    .kq-subtitle {{
        text-align: center;
        font-weight: 700;
        color: {theme['text']}aa;
        margin-bottom: 1.5rem;
    }}

    .kq-card {{
        border-radius: 18px;
        padding: 1rem 0.5rem 0.4rem 0.5rem;
        color: #ffffff;
        text-align: center;
        box-shadow: 0 6px 14px rgba(0,0,0,0.12);
    }}

    .kq-card-icon {{
        font-size: 2.6rem;
    }}

    .kq-card-label {{
        font-weight: 700;
        font-size: 1.05rem;
        margin-top: 0.3rem;
    }}

    .kq-badges {{
        display: flex;
        justify-content: flex-end;
        gap: 0.5rem;
        font-weight: 700;
    }}

    .kq-badge {{
        padding: 0.15rem 0.8rem;
        border-radius: 999px;
    }}

    .kq-badge-progress {{
        background: #facc15;
        color: #713f12;
    }}

    .kq-badge-score {{
        background: #4ade80;
        color: #14532d;
    }}

    .kq-passage {{
        background: {theme['bg']};
        border: 2px solid {theme['border']};
        border-radius: 16px;
        padding: 1rem 1.2rem;
        font-style: italic;
        font-size: 1.15rem;
        text-align: center;
        color: {theme['text']};
        margin-bottom: 1rem;
    }}

    .kq-image-box {{
        aspect-ratio: 1 / 1;
        max-width: 360px;
        margin: 0 auto;
        border-radius: 24px;
        border: 4px solid {theme['border']};
        background: #f8fafc;
        display: flex;
        align-items: center;
        justify-content: center;
        flex-direction: column;
        font-weight: 700;
        color: {theme['primary']}99;
    }}

    .kq-image-placeholder {{
        font-size: 4rem;
        opacity: 0.2;
        filter: grayscale(1);
    }}

    .kq-prompt {{
        text-align: center;
        font-size: 1.6rem;
        font-weight: 800;
        color: #1e293b;
        margin: 1rem 0;
    }}

    .kq-option {{
        padding: 0.9rem 1rem;
        border-radius: 14px;
        font-size: 1.1rem;
        font-weight: 700;
        margin-bottom: 0.5rem;
        border-bottom: 4px solid transparent;
    }}

    .kq-option-correct {{
        background: {theme['correct']};
        border-color: #15803d;
        color: #ffffff;
    }}

    .kq-option-incorrect {{
        background: {theme['incorrect']};
        border-color: #b91c1c;
        color: #ffffff;
    }}

    .kq-option-muted {{
        background: #f3f4f6;
        border-color: #d1d5db;
        color: {theme['muted']};
        opacity: 0.5;
    }}

    .kq-feedback {{
        background: {theme['feedback']};
        border: 4px solid #fde68a;
        border-radius: 18px;
        padding: 1rem 1.2rem;
        margin-top: 1rem;
    }}

    .kq-feedback-title {{
        font-size: 1.25rem;
        font-weight: 800;
        color: #713f12;
    }}

    .kq-trophy {{
        font-size: 5rem;
        text-align: center;
    }}

    .kq-score {{
        text-align: center;
        font-size: 3.5rem;
        font-weight: 900;
        color: {theme['primary']};
    }}
    </style>
    """


def inject_css() -> None:
    st.markdown(_generate_css(THEME), unsafe_allow_html=True)


# ----------------------------------------------------------------------
#  pure helpers (no Streamlit calls)
# ----------------------------------------------------------------------
def option_style(option: str, active: Active) -> str:
    """
    Presentational class of one option.

    - "idle" while the question is still being answered
    - "correct" for the right answer once revealed
    - "incorrect" for the chosen option when it was wrong
    - "muted" for everything else once revealed
    """
    if not active.feedback_visible:
        return "idle"
    if active.question.is_correct(option):
        return "correct"
    if option == active.selected:
        return "incorrect"
    return "muted"


def next_label(active: Active) -> str:
    return "Finish Adventure! 🏁" if active.is_last else "Next Mission! 🚀"


def feedback_title(active: Active) -> str:
    if active.selected is not None and active.question.is_correct(active.selected):
        return "🌈 Fantastic!"
    return f"💡 Almost! The answer is: {active.question.correct_answer}"


# ----------------------------------------------------------------------
#  topic selector
# ----------------------------------------------------------------------
def render_category_selector(app_name: str) -> Optional[Category]:
    """Topic grid. Returns the category the user clicked, if any."""
    st.markdown(f"<div class='kq-title'>{html.escape(app_name)} 🚀</div>", unsafe_allow_html=True)
    st.markdown(
        "<div class='kq-subtitle'>Choose a path and start your journey through "
        "myths, legends, and logic!</div>",
        unsafe_allow_html=True,
    )
    st.markdown("### 1️⃣ Select a Topic")

    chosen: Optional[Category] = None
    categories = featured_categories()
    per_row = 3

    for start in range(0, len(categories), per_row):
        cols = st.columns(per_row)
        for col, category in zip(cols, categories[start:start + per_row]):
            display = display_for(category)
            with col:
                st.markdown(
                    f"<div class='kq-card' style='background:{display.color};'>"
                    f"<div class='kq-card-icon'>{display.icon}</div>"
                    f"<div class='kq-card-label'>{html.escape(category.value)}</div>"
                    "</div>",
                    unsafe_allow_html=True,
                )
                if st.button(
                    "Play",
                    key=f"kq_cat_{category.name}",
                    width="stretch",
                ):
                    chosen = category

    st.write("")
    col1, col2 = st.columns(2)
    with col1:
        st.info(
            "🕉️ **Mythology Hub**\n\nLearn about Hanuman, Ganesha, Thor, and more! "
            "Epic stories for little heroes."
        )
    with col2:
        st.info(
            "🧠 **Reading Power**\n\nBoost your brain with stories and comprehension "
            "puzzles. Every answer makes you smarter!"
        )

    st.caption("Created for 3rd Grade Legends Everywhere ✨")
    return chosen


# ----------------------------------------------------------------------
#  loading / unavailable / summary
# ----------------------------------------------------------------------
def render_loading(category: Category) -> None:
    st.markdown("<div class='kq-trophy'>✨</div>", unsafe_allow_html=True)
    st.markdown("## Summoning Wisdom...")
    st.markdown(f"*Gathering questions for {html.escape(category.value)}!*")


def render_unavailable(state: Unavailable) -> bool:
    """Returns True when the user asked to go back to the topics."""
    st.markdown("<div class='kq-trophy'>🙈</div>", unsafe_allow_html=True)
    st.markdown("## Oops! The question wizard is resting")
    st.warning(f"{state.reason} ({state.category.value})")
    st.write("Pick a topic again to give it another try.")
    return st.button("⬅️ Back to topics", key="kq_unavailable_back", width="stretch")


def render_summary(state: Complete) -> bool:
    """Returns True when "Play Again" was clicked."""
    st.markdown("<div class='kq-trophy'>🏆</div>", unsafe_allow_html=True)
    st.markdown("<h1 style='text-align:center;'>Quiz Complete!</h1>", unsafe_allow_html=True)
    st.markdown(
        f"<div class='kq-score'>{state.score} / {state.total}</div>",
        unsafe_allow_html=True,
    )
    st.markdown(
        "<p style='text-align:center; font-weight:700;'>POINTS WON!</p>",
        unsafe_allow_html=True,
    )
    st.markdown(
        f"<p style='text-align:center; font-style:italic;'>You're becoming a real "
        f"expert in {html.escape(state.category.value)}!</p>",
        unsafe_allow_html=True,
    )
    return st.button("Play Again! 🔄", key="kq_play_again", width="stretch")


# ----------------------------------------------------------------------
#  image panel
# ----------------------------------------------------------------------
def render_image_panel(image_state: ImageState) -> None:
    if isinstance(image_state, ImageReady):
        _, mid, _ = st.columns([1, 3, 1])
        with mid:
            try:
                st.image(image_state.image.data, caption="Guessing time!", width="stretch")
                return
            except Exception as e:
                log.warning("could not draw question image: %s", e)
        _render_image_placeholder()
    elif isinstance(image_state, ImageLoading):
        st.markdown(
            "<div class='kq-image-box'><div>✏️</div><div>Sketching...</div></div>",
            unsafe_allow_html=True,
        )
    else:
        _render_image_placeholder()


def _render_image_placeholder() -> None:
    st.markdown(
        "<div class='kq-image-box'><div class='kq-image-placeholder'>🖼️</div></div>",
        unsafe_allow_html=True,
    )


# ----------------------------------------------------------------------
#  quiz screen
# ----------------------------------------------------------------------
def render_quiz_screen(
    active: Active,
    image_panel: Callable[[], None],
) -> Dict[str, Any]:
    """
    Draw the current question and report user actions.

    Args:
        active:
            the Active session state to draw.
        image_panel:
            draws the image area; called between the passage and the prompt.

    Returns:
        {
          "selected_option": Optional[str],  # option clicked while answering
          "clicked_next": bool,
          "clicked_home": bool,
        }
    """
    selected_option: Optional[str] = None
    clicked_next = False
    q = active.question

    # ----------------------------------------
    # header
    # ----------------------------------------
    col_home, col_badges = st.columns([1, 2])
    with col_home:
        clicked_home = st.button("← Home", key="kq_home")
    with col_badges:
        st.markdown(
            "<div class='kq-badges'>"
            f"<span class='kq-badge kq-badge-progress'>{active.index + 1} / {active.total}</span>"
            f"<span class='kq-badge kq-badge-score'>⭐ {active.score}</span>"
            "</div>",
            unsafe_allow_html=True,
        )

    # ----------------------------------------
    # passage, image, prompt
    # ----------------------------------------
    if q.passage:
        st.markdown(
            f"<div class='kq-passage'>\"{html.escape(q.passage)}\"</div>",
            unsafe_allow_html=True,
        )

    image_panel()

    st.markdown(f"<div class='kq-prompt'>{html.escape(q.prompt)}</div>", unsafe_allow_html=True)

    # ----------------------------------------
    # options
    # ----------------------------------------
    cols = st.columns(2)
    for idx, option in enumerate(q.options):
        label = f"{OPTION_LETTERS[idx]}. {option}"
        with cols[idx % 2]:
            if not active.feedback_visible:
                if st.button(label, key=f"kq_opt_{active.index}_{idx}", width="stretch"):
                    selected_option = option
            else:
                # revealed options are plain HTML, so they cannot be clicked again
                style = option_style(option, active)
                st.markdown(
                    f"<div class='kq-option kq-option-{style}'>{html.escape(label)}</div>",
                    unsafe_allow_html=True,
                )

    # ----------------------------------------
    # feedback + next
    # ----------------------------------------
    if active.feedback_visible:
        st.markdown(
            "<div class='kq-feedback'>"
            f"<div class='kq-feedback-title'>{html.escape(feedback_title(active))}</div>"
            "<div><b>Fun Fact Time!</b></div>"
            f"<div>{html.escape(q.explanation)}</div>"
            "</div>",
            unsafe_allow_html=True,
        )
        st.write("")
        if st.button(next_label(active), key="kq_next", type="primary", width="stretch"):
            clicked_next = True

    return {
        "selected_option": selected_option,
        "clicked_next": clicked_next,
        "clicked_home": clicked_home,
    }
