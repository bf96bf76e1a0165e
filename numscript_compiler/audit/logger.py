"""
Audit Logger

DESIGN DECISION: Every compilation step is logged.
This provides:
1. Traceability from payload to script
2. Debugging capability when the checker rejects output
3. A record of upstream contract violations

The audit logger:
- Is synchronous, like the compiler it observes
- Never raises into the compilation flow
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from numscript_compiler.config import get_settings
from numscript_compiler.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


PACKAGE_LOGGER = "numscript_compiler"


def configure_logging(json_logs: bool = True, debug: bool = False) -> None:
    """
    Configure structlog for local logging.

    Args:
        json_logs: Render JSON lines instead of console output
        debug: Let debug-level events through the package logger
    """
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if debug else logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


_app_settings = get_settings().app
configure_logging(json_logs=_app_settings.log_json, debug=_app_settings.debug_mode)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An append-only in-memory trail (for callers to inspect)
    """

    def __init__(self, keep_trail: bool = True):
        """
        Initialize audit logger.

        Args:
            keep_trail: Retain events in memory. If False, only logs locally.
        """
        self._keep_trail = keep_trail
        self._events: list[AuditEvent] = []
        self._logger = structlog.get_logger(f"{PACKAGE_LOGGER}.audit")

    @property
    def events(self) -> list[AuditEvent]:
        """Events recorded so far, oldest first."""
        return list(self._events)

    def events_for(self, correlation_id: UUID) -> list[AuditEvent]:
        """Events belonging to one compilation."""
        return [e for e in self._events if e.correlation_id == correlation_id]

    def log(self, event: AuditEvent) -> None:
        """
        Log an audit event.

        Always logs locally. Appends to the trail if enabled.
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._keep_trail:
            self._events.append(event)

    def log_intent_received(
        self,
        summary: str,
        posting_count: Optional[int],
        correlation_id: UUID,
    ) -> None:
        """Log intake of a raw payload."""
        self.log(AuditEventBuilder.intent_received(
            summary=summary,
            posting_count=posting_count,
            correlation_id=correlation_id,
        ))

    def log_intent_validation_failed(
        self,
        issues: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log schema validation failure."""
        self.log(AuditEventBuilder.intent_validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_compilation_started(
        self,
        posting_count: int,
        metadata_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log start of compilation."""
        self.log(AuditEventBuilder.compilation_started(
            posting_count=posting_count,
            metadata_count=metadata_count,
            correlation_id=correlation_id,
        ))

    def log_compilation_completed(
        self,
        posting_count: int,
        warning_count: int,
        script_length: int,
        correlation_id: UUID,
    ) -> None:
        """Log successful compilation."""
        self.log(AuditEventBuilder.compilation_completed(
            posting_count=posting_count,
            warning_count=warning_count,
            script_length=script_length,
            correlation_id=correlation_id,
        ))

    def log_compilation_failed(
        self,
        posting_index: Optional[int],
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log aborted compilation."""
        self.log(AuditEventBuilder.compilation_failed(
            posting_index=posting_index,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_split_mode_conflict(
        self,
        posting_index: Optional[int],
        message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a split that mixed fraction and max rules."""
        self.log(AuditEventBuilder.split_mode_conflict(
            posting_index=posting_index,
            message=message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this once per payload and pass it through every step.
    """
    return uuid4()
