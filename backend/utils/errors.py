"""
Error taxonomy for the interview engine.

Generation faults (GenerationError, ValidationError) are absorbed inside the
question generator; session faults (SessionStateError, NotFoundError) and
ConfigurationError are surfaced to callers and mapped to HTTP responses in
main.py.
"""


class InterviewEngineError(Exception):
    """Base class for all engine errors."""

    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ConfigurationError(InterviewEngineError):
    """No provider credentials and deterministic mode is off."""

    status_code = 503


class GenerationError(InterviewEngineError):
    """Provider call failed or its response could not be parsed."""

    status_code = 502


class ValidationError(InterviewEngineError):
    """A generated question set does not match the required composition."""

    status_code = 422


class SessionStateError(InterviewEngineError):
    """Operation is not legal in the session's current state."""

    status_code = 409


class NotFoundError(InterviewEngineError):
    status_code = 404
