"""
Audit Models for the Numscript Compiler

Every compilation leaves a trail of events. This provides:
1. Traceability from a raw AI payload to the script it became
2. Debugging information when the checker rejects a script
3. Visibility into upstream contract violations

DESIGN DECISION: Audit trails are append-only. Events are never modified.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each step of the payload → script flow has its own event type.
    """
    # Intake
    INTENT_RECEIVED = "intent_received"
    INTENT_VALIDATION_FAILED = "intent_validation_failed"

    # Compilation
    COMPILATION_STARTED = "compilation_started"
    COMPILATION_COMPLETED = "compilation_completed"
    COMPILATION_FAILED = "compilation_failed"

    # Contract violations tolerated by the compiler
    SPLIT_MODE_CONFLICT = "split_mode_conflict"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant step of a compilation creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - all events of one compilation share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one compilation"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.intent_received(summary, posting_count, correlation_id)
        event = AuditEventBuilder.compilation_failed(index, reason, correlation_id)
    """

    @staticmethod
    def intent_received(
        summary: str,
        posting_count: Optional[int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTENT_RECEIVED,
            correlation_id=correlation_id,
            description=f"Intent received: {summary[:200]}",
            details={
                "summary": summary,
                "posting_count": posting_count,
            },
        )

    @staticmethod
    def intent_validation_failed(
        issues: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INTENT_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Intent schema validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def compilation_started(
        posting_count: int,
        metadata_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMPILATION_STARTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Compiling {posting_count} postings",
            details={
                "posting_count": posting_count,
                "metadata_count": metadata_count,
            },
        )

    @staticmethod
    def compilation_completed(
        posting_count: int,
        warning_count: int,
        script_length: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMPILATION_COMPLETED,
            correlation_id=correlation_id,
            description=(
                f"Compiled {posting_count} postings with {warning_count} warnings"
            ),
            details={
                "posting_count": posting_count,
                "warning_count": warning_count,
                "script_length": script_length,
            },
        )

    @staticmethod
    def compilation_failed(
        posting_index: Optional[int],
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMPILATION_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Compilation aborted, no script produced",
            details={
                "posting_index": posting_index,
            },
            error_message=reason,
        )

    @staticmethod
    def split_mode_conflict(
        posting_index: Optional[int],
        message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_MODE_CONFLICT,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=message,
            details={
                "posting_index": posting_index,
            },
        )
