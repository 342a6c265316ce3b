import pytest
from sqlalchemy import select

from mentorquest.core.errors import NotFoundError, ValidationError
from mentorquest.models.activity import ActivityLog
from mentorquest.models.progress import StudentQuestion
from mentorquest.models.question import Question, QuestionTag
from mentorquest.models.submission import Submission
from mentorquest.schemas.question import QuestionCreateSchema, QuestionUpdateSchema
from mentorquest.services import catalog
from mentorquest.services.grading import AcceptAllGrader
from mentorquest.services.ledger import record_submission


def test_create_question_cleans_tags(db, admin):
    body = QuestionCreateSchema(
        title="Two Sum", difficulty="easy", points=10, tags=[" arrays", "hashing", "arrays", ""]
    )
    question = catalog.create_question(db, body, added_by=admin.id)

    assert question.tags == ["arrays", "hashing"]
    assert question.added_by == admin.id
    assert (question.total_submissions, question.successful_submissions) == (0, 0)


def test_update_question_replaces_tags(db, make_question):
    question = make_question(tags=["arrays", "math"])
    updated = catalog.update_question(db, question.id, QuestionUpdateSchema(tags=["math", "dp"], points=25))
    assert updated.tags == ["math", "dp"]
    assert updated.points == 25
    assert sorted(db.scalars(select(QuestionTag.tag).where(QuestionTag.question_id == question.id))) == [
        "dp",
        "math",
    ]


def test_distinct_tags_skip_inactive(db, make_question):
    make_question(tags=["arrays", "math"])
    make_question(tags=["graphs"], is_active=False)
    assert catalog.distinct_tags(db) == ["arrays", "math"]
    assert catalog.distinct_tags(db, active_only=False) == ["arrays", "graphs", "math"]


def test_list_questions_filters_and_pages(db, make_question):
    for _ in range(3):
        make_question(tags=["arrays"], difficulty="easy")
    make_question(tags=["graphs"], difficulty="hard")
    make_question(tags=["arrays"], is_active=False)

    questions, pagination = catalog.list_questions(db, tags=["arrays"], page=1, limit=2)
    assert len(questions) == 2
    assert (pagination.current, pagination.total, pagination.has_next, pagination.has_prev) == (1, 2, True, False)

    questions, pagination = catalog.list_questions(db, difficulty=["hard"])
    assert [q.tags for q in questions] == [["graphs"]]

    everything, _ = catalog.list_questions(db, active_only=False, limit=50)
    assert len(everything) == 5


def test_list_questions_sorting(db, make_question):
    hard = make_question(difficulty="hard", points=50)
    cake = make_question(difficulty="cakewalk", points=5)
    medium = make_question(difficulty="medium", points=20)

    newest, _ = catalog.list_questions(db)
    assert newest == [medium, cake, hard]

    by_rank, _ = catalog.list_questions(db, sort_by="difficulty", sort_order="asc")
    assert by_rank == [cake, medium, hard]

    by_points, _ = catalog.list_questions(db, sort_by="points")
    assert by_points == [hard, medium, cake]

    with pytest.raises(ValidationError):
        catalog.list_questions(db, sort_by="password")
    with pytest.raises(ValidationError):
        catalog.list_questions(db, sort_order="sideways")


def test_active_questions_sorted_by_difficulty_then_age(db, make_question):
    hard = make_question(difficulty="hard")
    easy_new = make_question(difficulty="easy")
    cake = make_question(difficulty="cakewalk")
    assert catalog.active_questions(db) == [cake, easy_new, hard]


def test_delete_question_cascades(db, make_student, make_question, clock):
    student = make_student("Sam")
    question = make_question()
    keep = make_question()
    record_submission(db, student.id, question.id, "x", "python", clock=clock, grader=AcceptAllGrader())
    record_submission(db, student.id, keep.id, "x", "python", clock=clock, grader=AcceptAllGrader())
    student.question_of_the_day_id = question.id
    student.question_of_the_day_date = clock.today()
    db.commit()
    question_id = question.id

    catalog.delete_question(db, question_id)

    assert db.get(Question, question_id) is None
    for model in (Submission, StudentQuestion, ActivityLog):
        assert db.scalars(select(model).where(model.question_id == question_id)).all() == []
    assert db.scalars(select(QuestionTag).where(QuestionTag.question_id == question_id)).all() == []
    assert student.question_of_the_day_id is None
    assert student.question_of_the_day_date is None

    # other data untouched, points already earned stay
    assert db.scalars(select(Submission).where(Submission.question_id == keep.id)).all() != []
    assert student.total_points == 20


def test_delete_question_rolls_back_on_failure(db, make_student, make_question, clock, monkeypatch):
    student = make_student("Sam")
    question = make_question()
    record_submission(db, student.id, question.id, "x", "python", clock=clock, grader=AcceptAllGrader())

    real_execute = db.execute
    calls = {"n": 0}

    def failing_execute(statement, *args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 3:
            raise RuntimeError("disk on fire")
        return real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db, "execute", failing_execute)
    with pytest.raises(RuntimeError):
        catalog.delete_question(db, question.id)
    monkeypatch.undo()

    assert db.get(Question, question.id) is not None
    assert len(db.scalars(select(Submission)).all()) == 1
    assert len(db.scalars(select(StudentQuestion)).all()) == 1


def test_delete_missing_question(db):
    with pytest.raises(NotFoundError):
        catalog.delete_question(db, 404)


def test_question_stats(db, make_student, make_question, clock):
    question = make_question()
    for name in ("Ann", "Ben"):
        student = make_student(name)
        record_submission(db, student.id, question.id, "x", "python", clock=clock, grader=AcceptAllGrader())
    student = make_student("Cat")
    record_submission(db, student.id, question.id, "x", "java", clock=clock, grader=AcceptAllGrader())

    stats = catalog.question_stats(db, question.id)
    assert [(c.key, c.count) for c in stats.submission_stats] == [("solved", 3)]
    assert [(c.key, c.count) for c in stats.language_stats] == [("java", 1), ("python", 2)]
    assert stats.question.successful_submissions == 3
