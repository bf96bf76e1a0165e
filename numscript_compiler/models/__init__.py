"""
Data Models Package

This package contains all Pydantic models used by the Numscript compiler.
All data flowing through the system must conform to these schemas.
"""

from numscript_compiler.models.intent import (
    DEFAULT_ASSET,
    WORLD_ACCOUNT,
    AmountMode,
    DestinationType,
    Intent,
    MetadataEntry,
    OverdraftPolicy,
    Posting,
    SplitRule,
    safe_validate_intent,
    validate_intent,
)
from numscript_compiler.models.compilation import (
    CompilationResult,
    CompilationWarning,
    DiagnosticCode,
)
from numscript_compiler.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Intent models
    "DEFAULT_ASSET",
    "WORLD_ACCOUNT",
    "AmountMode",
    "DestinationType",
    "Intent",
    "MetadataEntry",
    "OverdraftPolicy",
    "Posting",
    "SplitRule",
    "safe_validate_intent",
    "validate_intent",
    # Compilation models
    "CompilationResult",
    "CompilationWarning",
    "DiagnosticCode",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
