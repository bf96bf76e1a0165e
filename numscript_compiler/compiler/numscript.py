"""
Numscript Compiler

Sequences a summary comment, every posting and every metadata entry into
one script.

DESIGN DECISION: Compilation is all-or-nothing. If any posting is
malformed, no script is returned at all. Split-mode conflicts are the
one tolerated contract violation: they come back as warnings on the
result so the caller can decide what to do.
"""

from typing import Optional

import structlog

from numscript_compiler.compiler.errors import CompilerError
from numscript_compiler.compiler.renderers import compile_posting, format_metadata
from numscript_compiler.config import CompilerSettings, get_settings
from numscript_compiler.models.compilation import CompilationResult, CompilationWarning
from numscript_compiler.models.intent import Intent


COMMENT_SIGIL = "//"
STATEMENT_SEPARATOR = "\n\n"


class NumscriptCompiler:
    """
    Stateless intent → Numscript compiler.

    Holds only its settings, so one instance can be shared freely.
    """

    def __init__(self, settings: Optional[CompilerSettings] = None):
        self._settings = settings or get_settings().compiler
        self._logger = structlog.get_logger("numscript_compiler.compiler")

    @property
    def settings(self) -> CompilerSettings:
        return self._settings

    def compile(self, intent: Intent) -> CompilationResult:
        """
        Compile a full intent.

        Returns:
            CompilationResult with the script and any warnings

        Raises:
            MalformedPostingError: If any posting's destination is inconsistent
            SplitModeConflictError: On a fraction/max mix in strict mode
        """
        statements = []
        warnings: list[CompilationWarning] = []

        try:
            for index, posting in enumerate(intent.postings):
                statement, posting_warnings = compile_posting(
                    posting,
                    index=index,
                    strict=self._settings.strict_split_modes,
                )
                statements.append(statement)
                warnings.extend(posting_warnings)
        except CompilerError as e:
            self._logger.error(
                "compilation_failed",
                posting_index=getattr(e, "posting_index", None),
                error=str(e),
            )
            raise

        for warning in warnings:
            self._logger.warning(
                "compilation_warning",
                code=warning.code.value,
                posting_index=warning.posting_index,
                message=warning.message,
            )

        metadata_lines = format_metadata(intent.metadata)

        script = STATEMENT_SEPARATOR.join([f"{COMMENT_SIGIL} {intent.summary}", *statements])
        if metadata_lines:
            script += STATEMENT_SEPARATOR + "\n".join(metadata_lines)
        if self._settings.trailing_newline:
            script += "\n"

        self._logger.debug(
            "compilation_completed",
            posting_count=len(statements),
            metadata_count=len(metadata_lines),
            warning_count=len(warnings),
        )

        return CompilationResult(
            script=script,
            warnings=warnings,
            posting_count=len(statements),
            metadata_count=len(metadata_lines),
        )


def compile_to_numscript(intent: Intent) -> str:
    """Compile an intent and return only the script text."""
    return NumscriptCompiler().compile(intent).script
