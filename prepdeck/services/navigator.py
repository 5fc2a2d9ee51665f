"""Practice session navigation: cursor, answered flags, answer buffer and timer."""

import time
import uuid
from typing import Callable, Optional

from prepdeck.exceptions import PracticeSessionError
from prepdeck.schemas.practice import Question

# Used when a session is started without a search to draw questions from
DEFAULT_QUESTIONS = [
    {"id": "1", "stage": "Phone Screening", "question": "Why do you want to work at Google?"},
    {"id": "2", "stage": "Phone Screening", "question": "Tell me about yourself"},
    {"id": "3", "stage": "Technical Phone Screen", "question": "Implement a function to reverse a linked list"},
    {"id": "4", "stage": "Technical Phone Screen", "question": "Find the intersection of two arrays"},
    {"id": "5", "stage": "Virtual Onsite - Coding", "question": "Design a URL shortener service"},
    {"id": "6", "stage": "Behavioral Interview", "question": "Describe a time you had to work with a difficult team member"},
]


def default_questions() -> list[Question]:
    return [Question(**q) for q in DEFAULT_QUESTIONS]


def format_time(seconds: int) -> str:
    """Format elapsed seconds as m:ss."""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


class PracticeSession:
    """
    A linear walk over an ordered list of questions.

    Every move (next, previous, skip, jump) clears the answer buffer and resets
    the timer. ``next`` marks the question being left as answered; ``skip`` does
    not. Moves past either end are no-ops.
    """

    def __init__(self, questions: list[Question], clock: Callable[[], float] = time.monotonic):
        self.questions = list(questions)
        self.current_index = 0
        self.answer = ""
        self.time_elapsed = 0
        self.is_timer_running = False
        self.is_recording = False
        self.created_at = time.time()
        self._clock = clock
        self._last_tick = None

    @property
    def current_question(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return (self.current_index + 1) / len(self.questions) * 100

    @property
    def answered_count(self) -> int:
        return sum(1 for q in self.questions if q.answered)

    def _is_last(self) -> bool:
        return self.current_index >= len(self.questions) - 1

    def _move_to(self, index: int) -> None:
        self.current_index = index
        self.answer = ""
        self.reset_timer()

    def next_question(self) -> None:
        if self.questions and not self._is_last():
            self.mark_answered()
            self._move_to(self.current_index + 1)

    def previous_question(self) -> None:
        if self.current_index > 0:
            self._move_to(self.current_index - 1)

    def skip_question(self) -> None:
        if self.questions and not self._is_last():
            self._move_to(self.current_index + 1)

    def jump_to(self, index: int) -> None:
        if not 0 <= index < len(self.questions):
            raise PracticeSessionError(f"Question index {index} is out of range")
        self._move_to(index)

    def mark_answered(self, index: Optional[int] = None) -> None:
        if index is None:
            index = self.current_index
        if not 0 <= index < len(self.questions):
            raise PracticeSessionError(f"Question index {index} is out of range")
        self.questions[index].answered = True

    def update_answer(self, value: str) -> None:
        self.answer = value
        if value.strip() and not self.is_timer_running:
            self.start_timer()

    def toggle_recording(self) -> None:
        starting = not self.is_recording
        self.is_recording = starting
        if starting and not self.is_timer_running:
            self.start_timer()

    # Timer

    def start_timer(self) -> None:
        self.is_timer_running = True
        self._last_tick = self._clock()

    def reset_timer(self) -> None:
        self.time_elapsed = 0
        self.is_timer_running = False
        self._last_tick = None

    def tick(self) -> None:
        if self.is_timer_running:
            self.time_elapsed += 1

    def sync_timer(self) -> None:
        """Apply one tick per whole second passed since the last applied tick."""
        if not self.is_timer_running or self._last_tick is None:
            return
        whole_seconds = int(self._clock() - self._last_tick)
        for _ in range(whole_seconds):
            self.tick()
        self._last_tick += whole_seconds

    def to_state(self, session_id: str) -> dict:
        self.sync_timer()
        return {
            "session_id": session_id,
            "questions": self.questions,
            "current_index": self.current_index,
            "current_question": self.current_question,
            "answer": self.answer,
            "time_elapsed": self.time_elapsed,
            "time_display": format_time(self.time_elapsed),
            "is_timer_running": self.is_timer_running,
            "is_recording": self.is_recording,
            "progress": round(self.progress, 2),
            "answered_count": self.answered_count,
            "total_questions": len(self.questions),
        }


# In-memory storage for live practice sessions
_practice_sessions: dict[str, dict] = {}


def _prune_practice_sessions(max_age_seconds: int = 6 * 60 * 60, max_sessions: int = 500) -> None:
    """Best-effort pruning to keep memory bounded."""
    now = time.time()
    old_ids = [
        sid
        for sid, entry in _practice_sessions.items()
        if (now - entry["session"].created_at) > max_age_seconds
    ]
    for sid in old_ids:
        _practice_sessions.pop(sid, None)

    if len(_practice_sessions) > max_sessions:
        ordered = sorted(_practice_sessions.items(), key=lambda kv: kv[1]["session"].created_at)
        for sid, _entry in ordered[: len(ordered) - max_sessions]:
            _practice_sessions.pop(sid, None)


def create_session(user_id: int, questions: list[Question], clock: Callable[[], float] = time.monotonic) -> tuple[str, PracticeSession]:
    _prune_practice_sessions()
    session_id = str(uuid.uuid4())
    session = PracticeSession(questions, clock=clock)
    _practice_sessions[session_id] = {"user_id": user_id, "session": session}
    return session_id, session


def get_session(session_id: str, user_id: int) -> Optional[PracticeSession]:
    entry = _practice_sessions.get(session_id)
    if not entry or entry["user_id"] != user_id:
        return None
    return entry["session"]


def end_session(session_id: str, user_id: int) -> bool:
    if get_session(session_id, user_id) is None:
        return False
    _practice_sessions.pop(session_id, None)
    return True
