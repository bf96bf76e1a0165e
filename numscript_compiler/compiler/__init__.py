"""Compiler package."""

from numscript_compiler.compiler.errors import (
    CompilerError,
    IntentValidationError,
    MalformedPostingError,
    SplitModeConflictError,
)
from numscript_compiler.compiler.numscript import NumscriptCompiler, compile_to_numscript
from numscript_compiler.compiler.renderers import (
    compile_posting,
    format_account,
    format_amount,
    format_destination,
    format_metadata,
    format_source,
    format_split_destination,
    format_split_rule,
)

__all__ = [
    # Errors
    "CompilerError",
    "IntentValidationError",
    "MalformedPostingError",
    "SplitModeConflictError",
    # Compiler
    "NumscriptCompiler",
    "compile_to_numscript",
    # Renderers
    "compile_posting",
    "format_account",
    "format_amount",
    "format_destination",
    "format_metadata",
    "format_source",
    "format_split_destination",
    "format_split_rule",
]
