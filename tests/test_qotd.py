import random
from datetime import timedelta

from mentorquest.models.progress import STATUS_SOLVED, StudentQuestion
from mentorquest.models.user import TopicStat
from mentorquest.services import qotd
from mentorquest.services.grading import AcceptAllGrader
from mentorquest.services.ledger import record_submission
from mentorquest.services.qotd import (
    assign_question_of_the_day,
    get_question_of_the_day,
    run_daily_selection,
    run_manual_selection,
    run_scheduled_selection,
    select_question_of_the_day,
)


def mark_solved(db, student, *questions):
    for question in questions:
        db.add(StudentQuestion(student_id=student.id, question_id=question.id, status=STATUS_SOLVED, attempts=1))
    db.commit()


def add_stat(db, student, topic, total, solved):
    student.topic_stats.append(TopicStat(topic=topic, total_questions=total, solved_questions=solved))
    db.commit()


def test_new_student_gets_oldest_cakewalk(db, student, make_question):
    make_question(difficulty="easy")
    first = make_question(difficulty="cakewalk")
    make_question(difficulty="cakewalk")

    assert select_question_of_the_day(db, student) == first


def test_new_student_without_cakewalk_gets_nothing(db, student, make_question):
    make_question(difficulty="easy")
    make_question(difficulty="cakewalk", is_active=False)
    assert select_question_of_the_day(db, student) is None


def test_empty_catalog(db, student):
    assert select_question_of_the_day(db, student) is None


def test_weakest_topic_wins(db, student, make_question):
    make_question(tags=["arrays"], difficulty="easy")
    graphs = make_question(tags=["graphs"], difficulty="easy")
    add_stat(db, student, "arrays", total=4, solved=3)
    add_stat(db, student, "graphs", total=4, solved=1)

    assert select_question_of_the_day(db, student, random.Random(1)) == graphs


def test_untracked_stats_fall_back_to_random_tag(db, student, make_question):
    solved = make_question(tags=["arrays"])
    make_question(tags=["strings"], difficulty="easy")
    add_stat(db, student, "arrays", total=0, solved=1)
    mark_solved(db, student, solved)

    # arrays has nothing left, so any draw ends on the strings question
    for seed in range(5):
        pick = select_question_of_the_day(db, student, random.Random(seed))
        assert pick.tags == ["strings"]


def test_picks_lowest_difficulty_by_rank(db, student, make_question):
    # "hard" sorts before "medium" alphabetically; rank order must win
    make_question(tags=["dp"], difficulty="hard")
    medium = make_question(tags=["dp"], difficulty="medium")
    add_stat(db, student, "dp", total=2, solved=0)

    assert select_question_of_the_day(db, student, random.Random(3)) == medium


def test_random_among_lowest_difficulty(db, student, make_question):
    easy = {make_question(tags=["dp"], difficulty="easy").id for _ in range(3)}
    make_question(tags=["dp"], difficulty="medium")
    add_stat(db, student, "dp", total=4, solved=0)

    picks = {select_question_of_the_day(db, student, random.Random(seed)).id for seed in range(20)}
    assert picks <= easy
    assert len(picks) > 1


def test_exhausted_topic_falls_back_to_any_unsolved(db, student, make_question):
    done = make_question(tags=["dp"], difficulty="easy")
    other = make_question(tags=["math"], difficulty="medium")
    add_stat(db, student, "dp", total=1, solved=1)
    mark_solved(db, student, done)

    assert select_question_of_the_day(db, student) == other


def test_everything_solved(db, student, make_question):
    q = make_question(tags=["dp"])
    add_stat(db, student, "dp", total=1, solved=1)
    mark_solved(db, student, q)
    assert select_question_of_the_day(db, student) is None


def test_pick_only_shown_on_its_day(db, student, make_question, clock):
    question = make_question()
    assign_question_of_the_day(db, student, clock.today())
    db.commit()

    assert get_question_of_the_day(db, student, clock) == question
    clock.advance(days=1)
    assert get_question_of_the_day(db, student, clock) is None


def test_inactive_pick_is_hidden(db, student, make_question, clock):
    question = make_question()
    assign_question_of_the_day(db, student, clock.today())
    question.is_active = False
    db.commit()
    assert get_question_of_the_day(db, student, clock) is None


def test_failed_selection_keeps_previous_pick(db, student, make_question, clock):
    question = make_question()
    assign_question_of_the_day(db, student, clock.today())
    db.commit()
    question.is_active = False
    db.commit()

    assert assign_question_of_the_day(db, student, clock.today() + timedelta(days=1)) is None
    assert student.question_of_the_day_id == question.id
    assert student.question_of_the_day_date == clock.today()


def test_batch_covers_students_only(db, make_student, admin, make_question, clock):
    make_question()
    alice, bob = make_student("Alice"), make_student("Bob")

    summary = run_daily_selection(db, clock.today(), random.Random(0))

    assert (summary.assigned, summary.skipped, summary.failed) == (2, 0, 0)
    assert alice.question_of_the_day_id is not None
    assert bob.question_of_the_day_id is not None
    assert admin.question_of_the_day_id is None


def test_batch_counts_skips(db, student, clock):
    summary = run_daily_selection(db, clock.today())
    assert (summary.assigned, summary.skipped) == (0, 1)


def test_batch_isolates_failures(db, make_student, make_question, clock, monkeypatch):
    make_question()
    bad, good = make_student("Bad"), make_student("Good")
    real = qotd.assign_question_of_the_day

    def flaky(db, student, effective_date, rng=None):
        if student.id == bad.id:
            raise RuntimeError("boom")
        return real(db, student, effective_date, rng)

    monkeypatch.setattr(qotd, "assign_question_of_the_day", flaky)
    summary = run_daily_selection(db, clock.today())

    assert (summary.assigned, summary.failed) == (1, 1)
    assert good.question_of_the_day_id is not None


def test_scheduled_run_targets_tomorrow(db, student, make_question, clock):
    make_question()
    summary = run_scheduled_selection(db, clock)
    assert summary.effective_date == clock.today() + timedelta(days=1)
    assert student.question_of_the_day_date == clock.today() + timedelta(days=1)
    assert get_question_of_the_day(db, student, clock) is None

    clock.advance(days=1)
    assert get_question_of_the_day(db, student, clock) is not None


def test_manual_run_targets_today(db, student, make_question, clock):
    question = make_question()
    summary = run_manual_selection(db, clock)
    assert summary.effective_date == clock.today()
    assert get_question_of_the_day(db, student, clock) == question


def test_new_student_pick_then_solve(db, student, make_question, clock):
    q1 = make_question(tags=["arrays"], points=10)
    assert select_question_of_the_day(db, student) == q1

    result = record_submission(db, student.id, q1.id, "print(1)", "python", clock=clock, grader=AcceptAllGrader())

    assert result.status == "solved"
    assert (student.total_points, student.current_streak) == (10, 1)
    assert [(s.topic, s.solved_questions) for s in student.topic_stats] == [("arrays", 1)]
