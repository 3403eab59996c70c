from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from codemaster.core.catalog import Catalog, Entry
from codemaster.core.progress import ProgressStore

logger = logging.getLogger(__name__)

Scheduler = Callable[[int, Callable[[], None]], None]
Listener = Callable[[], None]

_WHITESPACE = re.compile(r"\s+")

FEEDBACK_CORRECT = "✅ Correct!"
FEEDBACK_CORRECT_PICK_NEXT = "✅ Correct! Select next location on map."
FEEDBACK_INCORRECT = "❌ Incorrect. Try again!"
FEEDBACK_ALL_MASTERED = "🎉 You have mastered EVERY UK code!"


class QuizDirection(str, Enum):
    PLACE_TO_CODE = "placeToCode"
    CODE_TO_PLACE = "codeToPlace"

    @classmethod
    def parse(cls, value: str) -> "QuizDirection":
        """Accept current and legacy spellings; unknown values fall back to place-to-code."""
        legacy = {"nameToCode": cls.PLACE_TO_CODE, "codeToName": cls.CODE_TO_PLACE}
        if value in legacy:
            return legacy[value]
        try:
            return cls(value)
        except ValueError:
            logger.warning("Unknown quiz direction %r, using %s", value, cls.PLACE_TO_CODE.value)
            return cls.PLACE_TO_CODE


@dataclass(frozen=True)
class FocusRequest:
    """Ask the map to centre on an entry, optionally animating there."""

    entry: Entry
    animate: bool


class AdvanceToken:
    """One-shot handle for a deferred auto-advance. Cancelled tokens never fire."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    def cancel(self) -> None:
        self._cancelled = True

    def fire(self) -> None:
        if self._cancelled or self._fired:
            return
        self._fired = True
        self._callback()


@dataclass
class SessionState:
    """Transient quiz session. Only the three settings are persisted."""

    direction: QuizDirection = QuizDirection.PLACE_TO_CODE
    auto_advance: bool = True
    show_mastered: bool = True
    current_question: Optional[Entry] = None
    feedback: str = ""
    answer_text: str = ""
    focus_request: Optional[FocusRequest] = None
    pending_advance: Optional[AdvanceToken] = None
    complete: bool = False
    focus_input: bool = False
    selection_count: int = 0


@dataclass(frozen=True)
class AnswerResult:
    correct: bool


def _normalize(text: str) -> str:
    return _WHITESPACE.sub("", text).lower()


def evaluate_answer(question: Entry, raw_input: str, direction: QuizDirection) -> AnswerResult:
    """Compare an answer leniently.

    Codes: whitespace and case are ignored and a missing leading zero is
    supplied before an exact comparison. Places: the answer only has to be
    contained in the place name, so abbreviations are accepted. A blank
    place answer is contained in every name and counts as correct.
    """
    answer = _normalize(raw_input)
    if direction is QuizDirection.PLACE_TO_CODE:
        if not answer.startswith("0"):
            answer = "0" + answer
        return AnswerResult(correct=answer == _normalize(question.code))
    return AnswerResult(correct=answer in _normalize(question.place))


def prompt_text(question: Entry, direction: QuizDirection) -> str:
    if direction is QuizDirection.PLACE_TO_CODE:
        return f"Code for: {question.place}"
    return f"Place for: {question.code}"


def answer_for(question: Entry, direction: QuizDirection) -> str:
    return question.code if direction is QuizDirection.PLACE_TO_CODE else question.place


class QuizEngine:
    """Selects questions, grades answers and tracks mastery, review and mistakes.

    Mastered and review codes are kept as ordered lists mirrored to the
    progress store after every mutation. The scheduler is called as
    ``scheduler(delay_ms, callback)`` to defer an auto-advance.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: ProgressStore,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        advance_delay_ms: int = 1000,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._advance_delay_ms = advance_delay_ms
        self._listeners: List[Listener] = []

        self._mastered: List[str] = store.mastered()
        self._mastered_set = set(self._mastered)
        self._review: List[str] = store.review()
        self._review_set = set(self._review)
        self._mistakes: int = store.mistakes()

        self._state = SessionState(
            direction=QuizDirection.parse(store.direction()),
            auto_advance=store.auto_advance(),
            show_mastered=store.show_mastered(),
        )

    # ---- accessors ----
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def current_question(self) -> Optional[Entry]:
        return self._state.current_question

    @property
    def direction(self) -> QuizDirection:
        return self._state.direction

    @property
    def mistakes(self) -> int:
        return self._mistakes

    @property
    def mastered_count(self) -> int:
        return len(self._mastered)

    def mastered_codes(self) -> List[str]:
        return list(self._mastered)

    def review_codes(self) -> List[str]:
        return list(self._review)

    def is_mastered(self, code: str) -> bool:
        return code in self._mastered_set

    def is_review(self, code: str) -> bool:
        return code in self._review_set

    def pending(self) -> List[Entry]:
        return [e for e in self._catalog if e.code not in self._mastered_set]

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def take_focus_request(self) -> Optional[FocusRequest]:
        """Return and clear the pending map focus request."""
        request = self._state.focus_request
        self._state.focus_request = None
        return request

    # ---- question selection ----
    def select_next_question(self, explicit_entry: Optional[Entry] = None) -> Optional[Entry]:
        """Pick the next question, or use the entry the learner clicked.

        Returns None once every entry is mastered.
        """
        self._cancel_pending_advance()
        self._state.feedback = ""
        self._state.answer_text = ""
        self._state.focus_input = True
        self._state.selection_count += 1

        if explicit_entry is not None:
            self._set_question(explicit_entry, animate=False)
            return explicit_entry

        pending = self.pending()
        if not pending:
            logger.info("All %d entries mastered", len(self._catalog))
            self._state.current_question = None
            self._state.complete = True
            self._state.feedback = FEEDBACK_ALL_MASTERED
            self._notify()
            return None

        question = self._rng.choice(pending)
        self._set_question(question, animate=True)
        return question

    def select_entry(self, entry: Entry) -> Entry:
        """Map click: ask about this entry without moving the camera."""
        self.select_next_question(entry)
        return entry

    def jump_to_entry(self, entry: Entry) -> Entry:
        """Dictionary click: make the entry current and fly the map to it."""
        self._cancel_pending_advance()
        self._set_question(entry, animate=True)
        return entry

    def skip(self) -> Optional[Entry]:
        if self._state.current_question is None:
            return None
        return self.select_next_question()

    # ---- answering ----
    def evaluate_answer(self, question: Entry, raw_input: str, direction: Optional[QuizDirection] = None) -> AnswerResult:
        """Grade an answer and record the outcome."""
        result = evaluate_answer(question, raw_input, direction or self._state.direction)
        if result.correct:
            self._record_correct(question)
        else:
            self._record_failure(question)
        return result

    def submit(self, raw_input: str) -> Optional[AnswerResult]:
        """Grade an answer for the current question. A no-op without one."""
        question = self._state.current_question
        if question is None:
            return None
        self._cancel_pending_advance()
        self._state.answer_text = raw_input
        result = self.evaluate_answer(question, raw_input)

        if result.correct:
            if self._state.auto_advance:
                self._state.feedback = FEEDBACK_CORRECT
                self._schedule_advance()
            else:
                self._state.feedback = FEEDBACK_CORRECT_PICK_NEXT
        else:
            self._state.feedback = FEEDBACK_INCORRECT
            self._state.focus_input = True
        self._notify()
        return result

    def reveal_answer(self, question: Optional[Entry] = None, direction: Optional[QuizDirection] = None) -> Optional[str]:
        """Give up on a question. Counts as a miss and never auto-advances."""
        question = question or self._state.current_question
        if question is None:
            return None
        self._cancel_pending_advance()
        self._record_failure(question)
        revealed = answer_for(question, direction or self._state.direction)
        self._state.feedback = f"The answer is: {revealed}"
        self._notify()
        return revealed

    def reset_progress(self) -> Optional[Entry]:
        """Wipe mastered, review and mistakes, then draw a fresh question.

        Destructive: callers confirm with the learner first. Dictionary
        status is stored separately and is not touched.
        """
        self._cancel_pending_advance()
        self._mastered = []
        self._mastered_set = set()
        self._review = []
        self._review_set = set()
        self._mistakes = 0
        self._state.complete = False
        self._store.reset_game()
        logger.info("Game progress reset")
        return self.select_next_question()

    # ---- settings ----
    def set_direction(self, direction: QuizDirection) -> None:
        self._state.direction = direction
        self._store.set_direction(direction.value)
        self._notify()

    def set_auto_advance(self, enabled: bool) -> None:
        self._state.auto_advance = enabled
        if not enabled:
            self._cancel_pending_advance()
        self._store.set_auto_advance(enabled)
        self._notify()

    def set_show_mastered(self, enabled: bool) -> None:
        self._state.show_mastered = enabled
        self._store.set_show_mastered(enabled)
        self._notify()

    # ---- internals ----
    def _set_question(self, entry: Entry, animate: bool) -> None:
        self._state.current_question = entry
        self._state.complete = False
        self._state.focus_request = FocusRequest(entry=entry, animate=animate)
        self._notify()

    def _record_correct(self, question: Entry) -> None:
        if question.code in self._mastered_set:
            return
        self._mastered_set.add(question.code)
        self._mastered.append(question.code)
        self._store.set_mastered(self._mastered)

    def _record_failure(self, question: Entry) -> None:
        self._mistakes += 1
        self._store.set_mistakes(self._mistakes)
        if question.code not in self._review_set:
            self._review_set.add(question.code)
            self._review.append(question.code)
            self._store.set_review(self._review)

    def _schedule_advance(self) -> None:
        token = AdvanceToken(self._auto_advance)
        self._state.pending_advance = token
        self._scheduler(self._advance_delay_ms, token.fire)

    def _auto_advance(self) -> None:
        self._state.pending_advance = None
        self.select_next_question()

    def _cancel_pending_advance(self) -> None:
        token = self._state.pending_advance
        if token is not None:
            token.cancel()
            self._state.pending_advance = None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
