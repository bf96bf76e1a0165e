"""Compiler exceptions."""

from typing import Optional


class CompilerError(Exception):
    """Base exception for compiler errors."""
    pass


class MalformedPostingError(CompilerError):
    """
    A posting's destination type does not match its destination data.

    Fatal for the whole intent: a script with only some postings would
    misrepresent the requested transaction.
    """

    def __init__(self, posting_index: int, reason: str):
        self.posting_index = posting_index
        self.reason = reason
        super().__init__(f"posting {posting_index + 1} {reason}")


class SplitModeConflictError(CompilerError):
    """
    A split mixed fraction and max rules while strict mode was enabled.

    Outside strict mode the same condition is only a warning.
    """

    def __init__(self, posting_index: int, message: str):
        self.posting_index = posting_index
        super().__init__(message)


class IntentValidationError(CompilerError):
    """A raw payload did not match the intent schema."""

    def __init__(self, issues: list[str], message: Optional[str] = None):
        self.issues = issues
        super().__init__(
            message or f"Intent failed schema validation: {'; '.join(issues)}"
        )
