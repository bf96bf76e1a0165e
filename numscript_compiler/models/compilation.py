"""
Compilation Result Models

The compiler returns its script together with any diagnostics it raised
along the way, instead of printing them to a console. Callers decide
whether to show, log, or ignore them.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DiagnosticCode(str, Enum):
    """Non-fatal conditions the compiler can report."""
    CONFLICTING_SPLIT_MODES = "conflicting_split_modes"


class CompilationWarning(BaseModel):
    """
    A single non-fatal diagnostic.

    A warning means the intent producer broke its own contract but the
    compiler could still render a best-effort script.
    """

    code: DiagnosticCode = Field(
        ...,
        description="Machine-readable diagnostic code"
    )
    posting_index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Zero-based index of the offending posting"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="warning",
        pattern="^(warning|info)$",
        description="Diagnostic severity"
    )


class CompilationResult(BaseModel):
    """Script text plus everything the caller needs to review it."""

    script: str = Field(
        ...,
        description="Complete Numscript program"
    )
    warnings: list[CompilationWarning] = Field(
        default_factory=list,
        description="Non-fatal diagnostics raised during compilation"
    )
    posting_count: int = Field(
        ...,
        ge=1,
        description="Number of send statements emitted"
    )
    metadata_count: int = Field(
        default=0,
        ge=0,
        description="Number of set_tx_meta statements emitted"
    )

    @property
    def has_warnings(self) -> bool:
        """Check if any diagnostics were raised."""
        return len(self.warnings) > 0

    def warnings_for(self, code: DiagnosticCode) -> list[CompilationWarning]:
        """Return the warnings carrying a given code."""
        return [w for w in self.warnings if w.code == code]
