from sqlalchemy import select

from mentorquest.models.activity import ActivityLog
from mentorquest.services.streaks import next_streak, on_question_solved


def test_next_streak_first_activity():
    assert next_streak(0, 0, None) == (1, 1)


def test_next_streak_consecutive_day():
    assert next_streak(3, 5, 1) == (4, 5)
    assert next_streak(5, 5, 1) == (6, 6)


def test_next_streak_same_day_unchanged():
    assert next_streak(2, 4, 0) == (2, 4)


def test_next_streak_gap_resets_current_only():
    assert next_streak(7, 7, 2) == (1, 7)
    assert next_streak(3, 9, 30) == (1, 9)


def test_streak_follows_day_gaps():
    """current restarts on gaps > 1, grows on gap 1, holds on gap 0; max is the running max."""
    gaps = [None, 1, 1, 0, 2, 1, 0, 1, 1, 1]
    expected = [1, 2, 3, 3, 1, 2, 2, 3, 4, 5]
    current = maximum = 0
    seen_max = 0
    for gap, want in zip(gaps, expected):
        current, maximum = next_streak(current, maximum, gap)
        seen_max = max(seen_max, current)
        assert current == want
        assert maximum == seen_max


def test_on_question_solved_first_time(db, student, clock):
    on_question_solved(db, student, 10, ["arrays", "math"], clock)
    db.commit()

    assert student.total_points == 10
    assert student.current_streak == 1
    assert student.max_streak == 1
    assert student.last_active_date == clock.now()
    assert sorted((s.topic, s.solved_questions) for s in student.topic_stats) == [
        ("arrays", 1),
        ("math", 1),
    ]


def test_same_day_adds_points_but_not_streak(db, student, clock):
    on_question_solved(db, student, 10, ["arrays"], clock)
    clock.advance(hours=3)
    on_question_solved(db, student, 20, ["arrays"], clock)
    db.commit()

    assert student.total_points == 30
    assert student.current_streak == 1
    stat = student.topic_stats[0]
    assert stat.solved_questions == 2
    assert stat.total_questions == 0
    assert stat.attempted_questions == 0


def test_next_day_extends_streak(db, student, clock):
    on_question_solved(db, student, 10, ["arrays"], clock)
    clock.advance(days=1)
    on_question_solved(db, student, 10, ["arrays"], clock)
    assert (student.current_streak, student.max_streak) == (2, 2)


def test_day_boundary_uses_calendar_days(db, student, clock):
    # 23:50 then 00:10 the next day is still one calendar day apart
    clock.set(clock.now().replace(hour=23, minute=50))
    on_question_solved(db, student, 10, ["arrays"], clock)
    clock.advance(minutes=20)
    on_question_solved(db, student, 10, ["arrays"], clock)
    assert student.current_streak == 2


def test_gap_resets_streak_keeps_max(db, student, clock):
    for _ in range(3):
        on_question_solved(db, student, 5, ["arrays"], clock)
        clock.advance(days=1)
    clock.advance(days=1)  # skip a day
    on_question_solved(db, student, 5, ["arrays"], clock)
    assert student.current_streak == 1
    assert student.max_streak == 3


def test_every_solve_logs_streak_entry(db, student, clock):
    on_question_solved(db, student, 10, ["arrays"], clock)
    on_question_solved(db, student, 10, ["arrays"], clock)
    db.commit()
    entries = db.scalars(
        select(ActivityLog).where(ActivityLog.activity_type == "streak_maintained")
    ).all()
    assert [e.streak_count for e in entries] == [1, 1]
