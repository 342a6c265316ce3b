"""Domain errors raised by services; mapped to HTTP responses in main."""


class MentorQuestError(Exception):
    pass


class NotFoundError(MentorQuestError):
    """Id does not resolve (or the question is inactive)."""

    def __init__(self, kind: str, ident=None):
        self.kind = kind
        self.ident = ident
        super().__init__(f"{kind} not found")


class ValidationError(MentorQuestError):
    """Field-level constraint violation; the request is rejected."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ConflictError(MentorQuestError):
    """Concurrent write on the same student-question pair. Never leaves the ledger."""
