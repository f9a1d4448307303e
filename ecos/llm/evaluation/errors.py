"""Exceptions for evaluation operations."""


class EvaluationError(Exception):
    """Error during an evaluation operation."""

    pass


class InsufficientContentError(EvaluationError):
    """The session transcript has nothing to grade."""

    def __init__(self, session_id: str, message_count: int = 0) -> None:
        self.session_id = session_id
        self.message_count = message_count
        super().__init__(f"session {session_id} has {message_count} transcript messages, nothing to evaluate")
