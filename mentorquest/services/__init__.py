from mentorquest.services.badges import evaluate_and_grant
from mentorquest.services.ledger import record_submission
from mentorquest.services.leaderboard import get_leaderboard
from mentorquest.services.qotd import get_question_of_the_day, select_question_of_the_day
from mentorquest.services.streaks import on_question_solved

__all__ = [
    "evaluate_and_grant",
    "record_submission",
    "get_leaderboard",
    "get_question_of_the_day",
    "select_question_of_the_day",
    "on_question_solved",
]
