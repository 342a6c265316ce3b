import pytest
from sqlalchemy import select

from mentorquest.core.errors import NotFoundError, ValidationError
from mentorquest.models.activity import ActivityLog
from mentorquest.models.progress import STATUS_ATTEMPTED, STATUS_SOLVED, StudentQuestion
from mentorquest.models.submission import Submission
from mentorquest.services.grading import AcceptAllGrader, FixedVerdictGrader
from mentorquest.services.ledger import mark_solved, record_submission, touch_progress


def submit(db, student, question, clock, grader=None, **kwargs):
    return record_submission(
        db, student.id, question.id, "print(1)", "python",
        clock=clock, grader=grader or AcceptAllGrader(), **kwargs,
    )


def progress_for(db, student, question):
    return db.scalar(
        select(StudentQuestion).where(
            StudentQuestion.student_id == student.id,
            StudentQuestion.question_id == question.id,
        )
    )


def activity_types(db, student):
    return [
        a.activity_type
        for a in db.scalars(
            select(ActivityLog).where(ActivityLog.student_id == student.id).order_by(ActivityLog.id)
        )
    ]


def test_first_solve_credits_student(db, student, make_question, clock):
    question = make_question(tags=["arrays"], points=10)

    result = submit(db, student, question, clock)

    assert result.status == "solved"
    assert result.first_solve is True
    assert result.points_earned == 10
    assert result.message == "Solution accepted!"
    assert student.total_points == 10
    assert (student.current_streak, student.max_streak) == (1, 1)
    stat = student.topic_stats[0]
    assert (stat.topic, stat.solved_questions) == ("arrays", 1)

    progress = progress_for(db, student, question)
    assert progress.status == STATUS_SOLVED
    assert progress.attempts == 1
    assert progress.total_points_earned == 10
    assert progress.best_language == "python"
    assert activity_types(db, student) == ["streak_maintained", "question_solved"]


def test_resubmitting_solved_question_only_counts_attempt(db, student, make_question, clock):
    question = make_question(points=10)
    submit(db, student, question, clock)
    clock.advance(days=1)

    result = submit(db, student, question, clock)

    assert result.first_solve is False
    assert result.points_earned == 0
    assert result.status == "solved"
    assert student.total_points == 10
    assert student.current_streak == 1
    assert student.topic_stats[0].solved_questions == 1
    assert progress_for(db, student, question).attempts == 2
    assert activity_types(db, student).count("question_solved") == 1

    rows = db.scalars(select(Submission).order_by(Submission.id)).all()
    assert [r.points_earned for r in rows] == [10, 0]


def test_question_counters(db, student, make_student, make_question, clock):
    other = make_student("Olive")
    question = make_question()
    submit(db, student, question, clock)
    submit(db, student, question, clock)
    submit(db, other, question, clock, grader=FixedVerdictGrader("partial"))

    assert question.total_submissions == 3
    assert question.successful_submissions == 1


def test_attempted_verdict_keeps_question_open(db, student, make_question, clock):
    question = make_question(points=20)

    result = submit(db, student, question, clock, grader=FixedVerdictGrader("attempted"))

    assert result.status == "attempted"
    assert result.points_earned == 0
    assert result.message == "Keep trying!"
    assert student.total_points == 0
    assert student.current_streak == 0
    progress = progress_for(db, student, question)
    assert progress.status == STATUS_ATTEMPTED
    assert progress.attempts == 1
    assert activity_types(db, student) == ["question_attempted"]

    result = submit(db, student, question, clock)
    assert result.first_solve is True
    assert student.total_points == 20
    assert progress_for(db, student, question).attempts == 2
    assert activity_types(db, student) == ["question_attempted", "streak_maintained", "question_solved"]


def test_unknown_or_inactive_question(db, student, make_question, clock):
    inactive = make_question(is_active=False)
    with pytest.raises(NotFoundError):
        submit(db, student, inactive, clock)
    with pytest.raises(NotFoundError):
        record_submission(db, student.id, 9999, "x", "python", clock=clock, grader=AcceptAllGrader())
    assert db.scalars(select(Submission)).all() == []


def test_admin_cannot_submit(db, admin, make_question, clock):
    question = make_question()
    with pytest.raises(NotFoundError):
        submit(db, admin, question, clock)


def test_rejects_empty_code_and_unknown_language(db, student, make_question, clock):
    question = make_question()
    with pytest.raises(ValidationError) as excinfo:
        record_submission(db, student.id, question.id, "   ", "python", clock=clock, grader=AcceptAllGrader())
    assert excinfo.value.field == "code"
    with pytest.raises(ValidationError) as excinfo:
        record_submission(db, student.id, question.id, "x", "cobol", clock=clock, grader=AcceptAllGrader())
    assert excinfo.value.field == "language"


def test_topic_attempt_tracking_is_opt_in(db, student, make_question, clock):
    question = make_question(tags=["graphs"])
    submit(db, student, question, clock, grader=FixedVerdictGrader("attempted"), track_topic_attempts=True)

    stat = student.topic_stats[0]
    assert (stat.topic, stat.total_questions, stat.attempted_questions) == ("graphs", 1, 1)

    submit(db, student, question, clock, track_topic_attempts=True)
    assert (stat.total_questions, stat.attempted_questions, stat.solved_questions) == (1, 1, 1)


def test_streak_across_days(db, student, make_question, clock):
    q1, q2 = make_question(), make_question()
    submit(db, student, q1, clock)
    clock.advance(days=2)
    submit(db, student, q2, clock)
    assert (student.current_streak, student.max_streak) == (1, 1)


def test_solve_transition_happens_once(db, student, make_question, clock):
    question = make_question()
    progress, created = touch_progress(db, student.id, question.id, clock.now())
    assert created is True

    verdict = AcceptAllGrader().grade(question, "x", "python")
    assert mark_solved(db, progress, question, "x", "python", verdict, clock.now()) is True
    assert mark_solved(db, progress, question, "x", "python", verdict, clock.now()) is False

    again, created = touch_progress(db, student.id, question.id, clock.now())
    assert created is False
    assert again.id == progress.id
    assert again.attempts == 2


def test_flags_question_of_the_day_submissions(db, student, make_question, clock):
    pick, other = make_question(), make_question()
    student.question_of_the_day_id = pick.id
    student.question_of_the_day_date = clock.today()
    db.commit()

    submit(db, student, pick, clock)
    submit(db, student, other, clock)

    flags = [s.is_question_of_the_day for s in db.scalars(select(Submission).order_by(Submission.id))]
    assert flags == [True, False]
