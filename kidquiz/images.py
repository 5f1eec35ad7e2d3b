"""
images.py
======================

Per-question image state for the quiz screen.

Every image request is tagged with (session generation, question index).
A response is applied only if its tag still names the question on screen;
anything that arrives after the user advanced or reset is dropped.

ImageLoader runs the provider calls on a small thread pool so the quiz
never waits for an image. Results are handed to the tracker from poll(),
which the UI calls on its own thread, so state changes stay on the UI side.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .provider import ImageProvider, QuizImage
from .session import Active, QuizSession

log = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  ImageState
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class ImageLoading:
    pass


@dataclass(frozen=True)
class ImageReady:
    image: QuizImage


@dataclass(frozen=True)
class ImageUnavailable:
    pass


ImageState = Union[ImageLoading, ImageReady, ImageUnavailable]


@dataclass(frozen=True)
class ImageTicket:
    generation: int
    index: int


def ticket_for(session: QuizSession) -> Optional[ImageTicket]:
    """Tag of the question currently displayed, or None outside Active."""
    s = session.state
    if not isinstance(s, Active):
        return None
    return ImageTicket(generation=session.generation, index=s.index)


# ----------------------------------------------------------------------
#  ImageTracker
# ----------------------------------------------------------------------
class ImageTracker:
    """Holds the ImageState of the displayed question only."""

    def __init__(self):
        self._ticket: Optional[ImageTicket] = None
        self._state: ImageState = ImageLoading()

    def request(self, session: QuizSession) -> Optional[ImageTicket]:
        """
        Issue a ticket when the displayed question changed since the last
        request. Returns None when nothing new needs fetching.
        """
        current = ticket_for(session)
        if current is None or current == self._ticket:
            return None
        self._ticket = current
        self._state = ImageLoading()
        return current

    def resolve(
        self,
        ticket: ImageTicket,
        session: QuizSession,
        image: Optional[QuizImage],
    ) -> bool:
        if ticket != self._ticket or ticket != ticket_for(session):
            log.debug("dropping stale image for %s", ticket)
            return False
        self._state = ImageReady(image) if image is not None else ImageUnavailable()
        return True

    def state_for(self, session: QuizSession) -> ImageState:
        # a question that has not been requested yet is about to load
        if ticket_for(session) != self._ticket:
            return ImageLoading()
        return self._state


# ----------------------------------------------------------------------
#  ImageLoader
# ----------------------------------------------------------------------
class ImageLoader:
    """Fire-and-forget image requests, no cancellation."""

    def __init__(
        self,
        provider: ImageProvider,
        tracker: Optional[ImageTracker] = None,
        max_workers: int = 2,
    ):
        self.provider = provider
        self.tracker = tracker or ImageTracker()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="kidquiz-image"
        )
        self._pending: Dict[ImageTicket, Future] = {}

    def ensure_requested(self, session: QuizSession) -> Optional[ImageTicket]:
        """Start fetching the image for the displayed question if needed."""
        ticket = self.tracker.request(session)
        question = session.current_question
        if ticket is None or question is None:
            return None
        self._pending[ticket] = self._executor.submit(
            self.provider.generate_image, question.image_description
        )
        return ticket

    def poll(self, session: QuizSession) -> ImageState:
        """Apply finished results and return the displayed question's state."""
        for ticket, future in list(self._pending.items()):
            if not future.done():
                continue
            del self._pending[ticket]
            try:
                image = future.result()
            except Exception:
                log.exception("image provider raised")
                image = None
            self.tracker.resolve(ticket, session, image)
        return self.tracker.state_for(session)

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every outstanding request has finished."""
        wait(list(self._pending.values()), timeout=timeout)

    @property
    def pending(self) -> int:
        return len(self._pending)
