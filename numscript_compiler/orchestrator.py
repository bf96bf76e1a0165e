"""
Main Orchestrator for the Numscript Compiler

Ties together schema validation, compilation and auditing into one flow:
raw payload → validated Intent → CompilationResult.

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is compiled until the payload matches the intent schema
- A failed posting aborts the flow, no partial script escapes
- Every step is audited under one correlation ID

Calling the AI model and the external checker is left to the caller.
"""

from typing import Any, Optional
from uuid import UUID

from numscript_compiler.audit import AuditLogger, create_correlation_id
from numscript_compiler.compiler import (
    CompilerError,
    IntentValidationError,
    NumscriptCompiler,
)
from numscript_compiler.config import CompilerSettings, FlowSettings, get_settings
from numscript_compiler.models.compilation import CompilationResult, DiagnosticCode
from numscript_compiler.models.intent import Intent, safe_validate_intent


class IntentCompilationFlow:
    """
    Orchestrates payload intake and compilation.

    Flow:
    1. Receive → Audit the raw payload
    2. Validate → Schema check, fill configured defaults
    3. Compile → Render the script
    4. Report → Audit warnings and the outcome
    """

    def __init__(
        self,
        compiler: Optional[NumscriptCompiler] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[CompilerSettings] = None,
        flow_settings: Optional[FlowSettings] = None,
    ):
        self._compiler = compiler or NumscriptCompiler(settings or get_settings().compiler)
        self._flow_settings = flow_settings or get_settings().flow
        self._audit_logger = audit_logger

    def _apply_defaults(self, payload: Any) -> Any:
        """Return a copy of the payload with the default asset on postings that lack one."""
        if not isinstance(payload, dict) or not isinstance(payload.get("postings"), list):
            return payload

        postings = [
            {"asset": self._flow_settings.default_asset, **posting}
            if isinstance(posting, dict) else posting
            for posting in payload["postings"]
        ]
        return {**payload, "postings": postings}

    def compile_payload(
        self,
        payload: Any,
        correlation_id: Optional[UUID] = None,
    ) -> CompilationResult:
        """
        Validate and compile a raw intent payload (e.g. parsed AI JSON).

        Raises:
            IntentValidationError: If the payload does not match the schema
            MalformedPostingError: If a posting's destination is inconsistent
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            summary = ""
            posting_count = None
            if isinstance(payload, dict):
                summary = str(payload.get("summary", ""))
                if isinstance(payload.get("postings"), list):
                    posting_count = len(payload["postings"])
            self._audit_logger.log_intent_received(
                summary=summary,
                posting_count=posting_count,
                correlation_id=correlation_id,
            )

        intent, issues = safe_validate_intent(self._apply_defaults(payload))
        if intent is None:
            if self._audit_logger:
                self._audit_logger.log_intent_validation_failed(
                    issues=issues,
                    correlation_id=correlation_id,
                )
            raise IntentValidationError(issues)

        return self.compile_intent(intent, correlation_id=correlation_id)

    def compile_intent(
        self,
        intent: Intent,
        correlation_id: Optional[UUID] = None,
    ) -> CompilationResult:
        """
        Compile an already-validated intent.

        Raises:
            MalformedPostingError: If a posting's destination is inconsistent
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            self._audit_logger.log_compilation_started(
                posting_count=len(intent.postings),
                metadata_count=len(intent.metadata),
                correlation_id=correlation_id,
            )

        try:
            result = self._compiler.compile(intent)
        except CompilerError as e:
            if self._audit_logger:
                self._audit_logger.log_compilation_failed(
                    posting_index=getattr(e, "posting_index", None),
                    reason=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            for warning in result.warnings_for(DiagnosticCode.CONFLICTING_SPLIT_MODES):
                self._audit_logger.log_split_mode_conflict(
                    posting_index=warning.posting_index,
                    message=warning.message,
                    correlation_id=correlation_id,
                )
            self._audit_logger.log_compilation_completed(
                posting_count=result.posting_count,
                warning_count=len(result.warnings),
                script_length=len(result.script),
                correlation_id=correlation_id,
            )

        return result

    def get_user_friendly_summary(self, result: CompilationResult) -> str:
        """
        Generate a readable recap of a compilation for human review.
        """
        headline = (
            f"{result.posting_count} posting(s), "
            f"{result.metadata_count} metadata entr{'y' if result.metadata_count == 1 else 'ies'}"
        )

        if not result.has_warnings:
            return f"✅ Script compiled: {headline}."

        lines = [f"⚠️ Script compiled with {len(result.warnings)} warning(s): {headline}."]
        for warning in result.warnings:
            lines.append(f"   • {warning.message}")
        lines.append("")
        lines.append("Please review the script before sending it to the checker.")

        return "\n".join(lines)


def create_flow(
    keep_audit_trail: bool = True,
) -> tuple[IntentCompilationFlow, AuditLogger]:
    """
    Factory function to create the compilation flow.

    Returns:
        (flow, audit_logger)
    """
    settings = get_settings()
    audit_logger = AuditLogger(keep_trail=keep_audit_trail)

    flow = IntentCompilationFlow(
        compiler=NumscriptCompiler(settings.compiler),
        audit_logger=audit_logger,
        flow_settings=settings.flow,
    )

    return flow, audit_logger
