"""
Service Layer Exceptions

Custom exceptions for the screen pipeline. Every one of them is fatal for
the current run and leaves the stored session untouched.
"""


class ScreenBuilderError(Exception):
    """Base class for errors whose message is safe to show to the user."""
    pass


class InvalidInputError(ScreenBuilderError):
    """Raised when a request is malformed, before any session access or LLM call."""
    pass


class RoutingFailure(ScreenBuilderError):
    """Raised when the router does not select exactly one valid action."""
    pass


class GenerationFailure(ScreenBuilderError):
    """Raised when a component generation call still fails after all retries."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts
