"""Grading boundary. Code is not executed; the default grader accepts everything."""
from dataclasses import dataclass

from mentorquest.models.submission import VERDICTS


@dataclass(frozen=True)
class Verdict:
    status: str  # solved | attempted | partial
    execution_time_ms: int | None = None

    def __post_init__(self):
        if self.status not in VERDICTS:
            raise ValueError(f"unknown verdict {self.status!r}")

    @property
    def solved(self) -> bool:
        return self.status == "solved"


class Grader:
    def grade(self, question, code: str, language: str) -> Verdict:
        raise NotImplementedError


class AcceptAllGrader(Grader):
    def grade(self, question, code: str, language: str) -> Verdict:
        return Verdict(status="solved", execution_time_ms=0)


class FixedVerdictGrader(Grader):
    """Returns the same verdict for every submission."""

    def __init__(self, status: str):
        self.verdict = Verdict(status=status)

    def grade(self, question, code: str, language: str) -> Verdict:
        return self.verdict


_grader: Grader = AcceptAllGrader()


def get_grader() -> Grader:
    return _grader
