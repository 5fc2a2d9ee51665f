import pytest

from prepdeck.exceptions import PracticeSessionError
from prepdeck.services import navigator
from prepdeck.services.navigator import PracticeSession, default_questions, format_time


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def session():
    return PracticeSession(default_questions())


def test_starts_on_first_question(session):
    assert session.current_index == 0
    assert session.current_question.id == "1"
    assert session.answered_count == 0


def test_previous_at_start_is_noop(session):
    session.previous_question()
    assert session.current_index == 0


def test_next_marks_answered_and_stops_at_last(session):
    for _ in range(5):
        session.next_question()

    assert session.current_index == 5
    assert [q.answered for q in session.questions] == [True] * 5 + [False]

    session.next_question()
    assert session.current_index == 5
    assert session.questions[5].answered is False


def test_skip_does_not_mark_answered(session):
    session.skip_question()
    assert session.current_index == 1
    assert session.questions[0].answered is False


def test_skip_at_last_is_noop(session):
    session.jump_to(5)
    session.skip_question()
    assert session.current_index == 5


def test_jump_to_and_out_of_range(session):
    session.jump_to(3)
    assert session.current_index == 3

    with pytest.raises(PracticeSessionError):
        session.jump_to(6)
    with pytest.raises(PracticeSessionError):
        session.jump_to(-1)
    assert session.current_index == 3


def test_mark_answered_is_idempotent(session):
    session.mark_answered(2)
    session.mark_answered(2)
    assert session.answered_count == 1
    assert session.questions[2].answered is True


@pytest.mark.parametrize(
    "move",
    [
        lambda s: s.next_question(),
        lambda s: s.previous_question(),
        lambda s: s.skip_question(),
        lambda s: s.jump_to(4),
    ],
    ids=["next", "previous", "skip", "jump"],
)
def test_moves_reset_answer_and_timer(session, move):
    session.jump_to(2)
    session.update_answer("My answer")
    session.tick()
    assert session.time_elapsed == 1

    move(session)
    assert session.current_index != 2
    assert session.answer == ""
    assert session.time_elapsed == 0
    assert session.is_timer_running is False


def test_blank_answer_does_not_start_timer(session):
    session.update_answer("   ")
    assert session.is_timer_running is False
    session.tick()
    assert session.time_elapsed == 0


def test_recording_starts_timer(session):
    session.toggle_recording()
    assert session.is_recording is True
    assert session.is_timer_running is True

    session.toggle_recording()
    assert session.is_recording is False
    assert session.is_timer_running is True


def test_reset_timer(session):
    session.update_answer("x")
    session.tick()
    session.tick()
    session.reset_timer()
    assert session.time_elapsed == 0
    assert session.is_timer_running is False


def test_sync_timer_applies_whole_seconds():
    clock = FakeClock()
    session = PracticeSession(default_questions(), clock=clock)
    session.update_answer("thinking")

    clock.now += 2.5
    session.sync_timer()
    assert session.time_elapsed == 2

    clock.now += 0.6
    session.sync_timer()
    assert session.time_elapsed == 3


def test_empty_session_has_no_current_question():
    session = PracticeSession([])
    assert session.current_question is None
    assert session.progress == 0.0
    session.next_question()
    session.skip_question()
    session.previous_question()
    assert session.current_index == 0


def test_progress(session):
    session.jump_to(2)
    assert session.progress == pytest.approx(50.0)


@pytest.mark.parametrize("seconds, expected", [(0, "0:00"), (9, "0:09"), (75, "1:15"), (600, "10:00")])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


def test_registry_is_scoped_to_user():
    session_id, session = navigator.create_session(1, default_questions())
    try:
        assert navigator.get_session(session_id, 1) is session
        assert navigator.get_session(session_id, 2) is None
        assert navigator.end_session(session_id, 2) is False
        assert navigator.end_session(session_id, 1) is True
        assert navigator.get_session(session_id, 1) is None
    finally:
        navigator._practice_sessions.clear()
