"""Tests for the participant session state machine."""

from __future__ import annotations

import pytest

from daily_quiz.core.config import SessionConfig
from daily_quiz.core.errors import InvalidInputError, NotReadyError
from daily_quiz.core.models import AnsweredPair, SessionPhase
from daily_quiz.core.services.submission_store import InMemorySubmissionStore
from daily_quiz.core.services.quiz_session import QuizSession

from conftest import FakeProvider, FakeStore, make_question, make_quiz


def test_session_waits_until_a_quiz_is_published(session_factory, bridge, two_questions):
    provider = FakeProvider(questions=two_questions)
    session = session_factory(provider)

    assert session.start() is SessionPhase.AWAITING_QUIZ
    assert session.view().current_question is None

    provider.quiz = make_quiz()
    bridge.notify_quiz_published(provider.quiz.id)

    view = session.view()
    assert view.phase is SessionPhase.IN_PROGRESS
    assert view.current_question.id == "q1"
    assert view.question_number == 1
    assert view.total_questions == 2
    assert view.question_seconds_left == 60
    assert view.global_seconds_left == 600


def test_late_joiner_gets_remaining_time_from_publish_anchor(session_factory, clock, ten_questions):
    clock.jump(125_000)
    session = session_factory(FakeProvider(make_quiz(), ten_questions))

    session.start()

    assert session.view().global_seconds_left == 475


def test_selection_shows_feedback_then_advances_with_fresh_question_timer(
    session_factory, scheduler, ten_questions
):
    session = session_factory(FakeProvider(make_quiz(), ten_questions))
    session.start()

    scheduler.advance(45)
    assert session.view().question_seconds_left == 15

    feedback = session.select_option("a")
    assert feedback.is_correct is True
    view = session.view()
    assert view.phase is SessionPhase.SHOWING_FEEDBACK
    assert view.feedback.selected_option_id == "a"

    scheduler.advance(1)

    view = session.view()
    assert view.phase is SessionPhase.IN_PROGRESS
    assert view.feedback is None
    assert view.question_number == 2
    assert view.question_seconds_left == 60


def test_question_timer_is_paused_while_feedback_is_visible(session_factory, scheduler, ten_questions):
    session = session_factory(FakeProvider(make_quiz(), ten_questions), SessionConfig(feedback_delay_seconds=5))
    session.start()
    scheduler.advance(10)

    session.select_option("b")
    scheduler.advance(4)

    view = session.view()
    assert view.phase is SessionPhase.SHOWING_FEEDBACK
    assert view.question_seconds_left == 50
    assert view.global_seconds_left == 586


def test_question_timeout_advances_without_recording_an_answer(session_factory, scheduler, ten_questions):
    session = session_factory(FakeProvider(make_quiz(), ten_questions))
    session.start()

    scheduler.advance(180)
    view = session.view()
    assert view.question_number == 4
    assert view.question_seconds_left == 60

    scheduler.advance(60)

    view = session.view()
    assert view.question_number == 5
    assert view.current_question.id == "q5"
    assert "q4" not in session.get_answers()


def test_global_timeout_submits_partial_attempt(session_factory, scheduler, store, ten_questions):
    config = SessionConfig(quiz_duration_seconds=30)
    session = session_factory(FakeProvider(make_quiz(), ten_questions), config)
    session.start()

    for _ in range(4):
        session.select_option("a")
        scheduler.advance(1)
    assert session.view().question_number == 5

    scheduler.advance(26)

    view = session.view()
    assert view.phase is SessionPhase.SUBMITTED
    assert view.submitted is True
    assert view.global_seconds_left == 0
    assert len(store.records) == 1
    record = store.records[0]
    assert len(record.answers) == 4
    assert record.score == 4
    assert record.total_questions == 10

    scheduler.advance(120)
    assert len(store.records) == 1


def test_all_correct_answers_score_full_marks(session_factory, scheduler, store, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()

    assert session.select_option("b").is_correct is True
    scheduler.advance(1)
    assert session.select_option("a").is_correct is True
    scheduler.advance(1)

    view = session.view()
    assert view.phase is SessionPhase.SUBMITTED
    assert view.result.score == 2
    assert view.result.label == "2 / 2"
    assert view.result.percentage == 100.0
    assert view.submission_persisted is True
    assert store.records[0].answers == (
        AnsweredPair(question_id="q1", option_id="b"),
        AnsweredPair(question_id="q2", option_id="a"),
    )


def test_wrong_answer_then_timeout_scores_zero(session_factory, scheduler, store, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()

    feedback = session.select_option("a")
    assert feedback.is_correct is False
    scheduler.advance(1)
    scheduler.advance(60)

    view = session.view()
    assert view.phase is SessionPhase.SUBMITTED
    assert view.result.label == "0 / 2"
    assert view.result.percentage == 0.0
    assert session.get_answers() == {"q1": "a"}
    assert len(store.records) == 1


def test_finalize_runs_once(session_factory, store, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()

    first = session.finalize()
    second = session.finalize()

    assert first is not None
    assert second is None
    assert store.calls == 1
    assert session.submission_record is first


def test_selection_during_feedback_is_ignored(session_factory, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()

    session.select_option("b")
    assert session.select_option("c") is None
    assert session.get_answers() == {"q1": "b"}


def test_selection_after_submission_is_ignored(session_factory, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()
    session.finalize()

    assert session.select_option("a") is None
    assert session.get_answers() == {}


def test_selection_before_quiz_is_rejected(session_factory):
    session = session_factory(FakeProvider())
    session.start()

    with pytest.raises(NotReadyError):
        session.select_option("a")


def test_unknown_option_is_rejected(session_factory, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()

    with pytest.raises(InvalidInputError):
        session.select_option("z")
    assert session.view().phase is SessionPhase.IN_PROGRESS


def test_global_expiry_during_feedback_keeps_the_recorded_answer(session_factory, scheduler, store, two_questions):
    config = SessionConfig(quiz_duration_seconds=5, feedback_delay_seconds=3)
    session = session_factory(FakeProvider(make_quiz(), two_questions), config)
    session.start()
    scheduler.advance(3)

    session.select_option("b")
    scheduler.advance(2)

    assert session.phase is SessionPhase.SUBMITTED
    assert store.records[0].score == 1
    scheduler.advance(5)
    assert len(store.records) == 1


def test_redelivered_quiz_does_not_reset_the_attempt(session_factory, bridge, scheduler, ten_questions):
    quiz = make_quiz()
    session = session_factory(FakeProvider(quiz, ten_questions))
    session.start()
    session.select_option("a")
    scheduler.advance(1)
    scheduler.advance(10)

    bridge.notify_quiz_published(quiz.id)

    view = session.view()
    assert view.question_number == 2
    assert view.question_seconds_left == 50
    assert view.global_seconds_left == 589
    assert session.get_answers() == {"q1": "a"}


def test_redelivered_quiz_after_submission_is_ignored(session_factory, bridge, store, two_questions):
    quiz = make_quiz()
    session = session_factory(FakeProvider(quiz, two_questions))
    session.start()
    session.finalize()

    bridge.notify_quiz_published(quiz.id)

    assert session.phase is SessionPhase.SUBMITTED
    assert len(store.records) == 1


def test_new_quiz_finalizes_the_running_attempt(session_factory, bridge, store, two_questions):
    provider = FakeProvider(make_quiz("monday"), two_questions)
    session = session_factory(provider)
    session.start()
    session.select_option("b")

    provider.quiz = make_quiz("tuesday")
    bridge.notify_quiz_published("tuesday")

    assert [record.quiz_id for record in store.records] == ["monday"]
    assert store.records[0].score == 1
    view = session.view()
    assert view.phase is SessionPhase.IN_PROGRESS
    assert view.quiz_id == "tuesday"
    assert view.question_number == 1
    assert session.get_answers() == {}


def test_joining_after_the_deadline_submits_immediately(session_factory, clock, store, two_questions):
    clock.jump(11 * 60 * 1000)
    session = session_factory(FakeProvider(make_quiz(), two_questions))

    assert session.start() is SessionPhase.SUBMITTED
    assert store.records[0].answers == ()
    assert store.records[0].total_questions == 2


def test_store_failure_keeps_result_and_allows_retry(clock, scheduler, bridge, two_questions):
    store = FakeStore(failures=3)
    session = QuizSession(
        "A01", FakeProvider(make_quiz(), two_questions), store, bridge, scheduler=scheduler, clock=clock
    )
    session.start()
    session.select_option("b")
    scheduler.advance(1)
    session.select_option("a")
    scheduler.advance(1)

    view = session.view()
    assert view.phase is SessionPhase.SUBMITTED
    assert view.result.label == "2 / 2"
    assert view.submission_persisted is False
    assert view.error_message == "Your result could not be saved yet. Please retry."
    assert store.calls == 3

    record = session.submission_record
    assert session.retry_submission() is True
    assert store.records == [record]
    view = session.view()
    assert view.submission_persisted is True
    assert view.error_message is None


def test_transient_store_failure_is_retried(session_factory, two_questions, store):
    store.failures = 2
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()
    session.finalize()

    assert store.calls == 3
    assert session.view().submission_persisted is True


def test_retry_without_submission_is_rejected(session_factory, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()

    with pytest.raises(NotReadyError):
        session.retry_submission()


def test_question_load_failure_enters_error_state(session_factory, two_questions):
    provider = FakeProvider(make_quiz(), two_questions)
    provider.fail_questions = True
    session = session_factory(provider)

    assert session.start() is SessionPhase.ERRORED
    assert session.view().error_message
    with pytest.raises(NotReadyError):
        session.select_option("a")


def test_empty_question_bank_enters_error_state(session_factory):
    session = session_factory(FakeProvider(make_quiz(), []))

    assert session.start() is SessionPhase.ERRORED


def test_unpublished_quiz_enters_error_state(session_factory, two_questions):
    session = session_factory(FakeProvider(make_quiz(published_at=None), two_questions))

    assert session.start() is SessionPhase.ERRORED


def test_error_state_recovers_on_next_publish(session_factory, bridge, two_questions):
    provider = FakeProvider(make_quiz(), two_questions)
    provider.fail_questions = True
    session = session_factory(provider)
    session.start()

    provider.fail_questions = False
    bridge.notify_quiz_published(provider.quiz.id)

    assert session.phase is SessionPhase.IN_PROGRESS


def test_quiz_question_ids_pick_and_order_the_attempt(session_factory, ten_questions):
    quiz = make_quiz()
    quiz.question_ids = ["q3", "q1"]
    session = session_factory(FakeProvider(quiz, ten_questions))
    session.start()

    view = session.view()
    assert view.total_questions == 2
    assert view.current_question.id == "q3"


def test_attempt_is_limited_to_configured_question_count(session_factory):
    bank = [make_question(f"q{i}") for i in range(1, 16)]
    session = session_factory(FakeProvider(make_quiz(), bank))
    session.start()

    assert session.view().total_questions == 10


def test_existing_submission_is_restored_on_login(clock, scheduler, bridge, two_questions):
    store = InMemorySubmissionStore()
    provider = FakeProvider(make_quiz(), two_questions)
    first = QuizSession("A01", provider, store, bridge, scheduler=scheduler, clock=clock)
    first.start()
    first.select_option("b")
    first.finalize()
    first.close()

    second = QuizSession("A01", provider, store, bridge, scheduler=scheduler, clock=clock)
    assert second.start() is SessionPhase.SUBMITTED

    view = second.view()
    assert view.result.label == "1 / 2"
    assert view.submission_persisted is True
    assert second.select_option("a") is None
    assert len(store.get_submissions()) == 1


def test_close_cancels_timers_and_unsubscribes(session_factory, scheduler, bridge, store, two_questions):
    session = session_factory(FakeProvider(make_quiz(), two_questions))
    session.start()
    assert bridge.subscriber_count() == 1

    session.close()
    scheduler.advance(900)

    assert session.phase is SessionPhase.IDLE
    assert bridge.subscriber_count() == 0
    assert store.records == []
    assert scheduler.pending() == 0


def test_online_count_updates_reach_the_view(session_factory, bridge):
    session = session_factory(FakeProvider())
    session.start()

    bridge.notify_online_count(7)

    assert session.view().online_count == 7
