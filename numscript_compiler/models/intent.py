"""
Intent Models for the Numscript Compiler

These models define the shape of a transaction intent as produced by the
upstream AI step. They are designed to:
1. Reject structurally invalid payloads before compilation
2. Constrain every mode to a closed set of values
3. Stay read-only once built

DESIGN DECISION: The schema only checks shape. Cross-field consistency
(destination type vs. destination data, split mode mixing) is left to the
compiler, which reports it with posting-level context.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


DEFAULT_ASSET = "USD/2"
WORLD_ACCOUNT = "world"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class OverdraftPolicy(str, Enum):
    """
    How far a source account may go negative.

    The unlimited "world" source ignores this entirely.
    """
    NONE = "none"
    UNBOUNDED = "unbounded"
    LIMITED = "limited"  # Requires overdraft_limit


class DestinationType(str, Enum):
    """Whether a posting pays a single account or a split block."""
    SIMPLE = "simple"
    SPLIT = "split"


class AmountMode(str, Enum):
    """
    How one split rule computes its share.

    CRITICAL: FRACTION and MAX are alternative split semantics
    (allotment vs. capped in-order allocation) and cannot be mixed
    within one split. REMAINING combines with either.
    """
    FRACTION = "fraction"    # value is a percentage, e.g. "10%"
    MAX = "max"              # value is a cap in the asset's smallest unit
    REMAINING = "remaining"  # leftover, value is empty


# =============================================================================
# INTENT MODELS
# =============================================================================

class SplitRule(BaseModel):
    """One line of a multi-target destination."""
    model_config = ConfigDict(frozen=True)

    target: str = Field(
        ...,
        description="Account path - must be a string"
    )
    amount_mode: AmountMode = Field(
        ...,
        description="fraction for %, remaining for leftover, max for capped"
    )
    value: str = Field(
        default="",
        description="'5%' for fraction, '' for remaining, '1000' (cents) for max cap"
    )


class Posting(BaseModel):
    """
    One source → destination movement, compiled to one send statement.

    Both destination fields are optional at the schema level; the
    compiler rejects a posting whose destination data does not match
    its destination_type.
    """
    model_config = ConfigDict(frozen=True)

    source: str = Field(
        ...,
        description="Account path or 'world'"
    )
    source_overdraft: OverdraftPolicy = Field(
        default=OverdraftPolicy.NONE,
        description="Overdraft policy for the source account"
    )
    overdraft_limit: Optional[str] = Field(
        default=None,
        description="Amount in cents if source_overdraft is 'limited'"
    )
    destination_type: DestinationType
    simple_destination: Optional[str] = Field(
        default=None,
        description="Account path if destination_type is 'simple'"
    )
    split_rules: Optional[list[SplitRule]] = Field(
        default=None,
        description="Split rules if destination_type is 'split'"
    )
    asset: str = Field(
        default=DEFAULT_ASSET,
        description="Asset notation e.g. USD/2"
    )
    amount: str = Field(
        ...,
        description="Amount in smallest unit (cents for USD), or '*' for entire balance"
    )


class MetadataEntry(BaseModel):
    """A key/value annotation emitted as set_tx_meta."""
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class Intent(BaseModel):
    """
    A complete transaction intent.

    Posting order is significant: the script runs statements in
    sequence and later postings may spend balances left by earlier ones.
    """
    model_config = ConfigDict(frozen=True)

    summary: str = Field(
        ...,
        description="Brief description of the transaction"
    )
    postings: list[Posting] = Field(
        ...,
        min_length=1,
        description="Ordered postings, at least one"
    )
    metadata: list[MetadataEntry] = Field(
        default_factory=list,
        description="Ordered transaction metadata"
    )


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

def validate_intent(data: Any) -> Intent:
    """
    Validate a raw payload into an Intent.

    Raises:
        pydantic.ValidationError: If the payload does not match the schema
    """
    return Intent.model_validate(data)


def safe_validate_intent(data: Any) -> tuple[Optional[Intent], list[str]]:
    """
    Validate a raw payload without raising.

    Returns:
        (intent, issues) - intent is None when issues is non-empty.
        Each issue reads "field.path: message".
    """
    try:
        return Intent.model_validate(data), []
    except ValidationError as e:
        issues = []
        for error in e.errors():
            path = ".".join(str(part) for part in error["loc"]) or "intent"
            issues.append(f"{path}: {error['msg']}")
        return None, issues
