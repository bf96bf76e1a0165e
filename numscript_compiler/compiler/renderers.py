"""
Numscript Renderers

Pure functions that turn intent fragments into Numscript text. Each one
handles a single clause; the compiler strings them together.

Output shape of one posting:

    send [USD/2 10000] (
      source = @clients:u1:main allowing overdraft up to [USD/2 20000]
      destination = {
        80% to @merchants:m1:main
        remaining to @platform:fees
      }
    )

IMPORTANT: These functions never validate business meaning (amounts,
account existence, percentages summing to 100). The external checker
does that. They only enforce what the grammar needs structurally.
"""

from typing import Optional

from numscript_compiler.compiler.errors import MalformedPostingError, SplitModeConflictError
from numscript_compiler.models.compilation import CompilationWarning, DiagnosticCode
from numscript_compiler.models.intent import (
    WORLD_ACCOUNT,
    AmountMode,
    DestinationType,
    MetadataEntry,
    OverdraftPolicy,
    Posting,
    SplitRule,
)


ADDRESS_SIGIL = "@"
WORLD_ADDRESS = ADDRESS_SIGIL + WORLD_ACCOUNT
SPLIT_RULE_INDENT = "    "


def format_account(account: str) -> str:
    """Canonicalize an account path into @address form."""
    if account == WORLD_ACCOUNT:
        return WORLD_ADDRESS
    return account if account.startswith(ADDRESS_SIGIL) else f"{ADDRESS_SIGIL}{account}"


def _is_world(account: str) -> bool:
    return account in (WORLD_ACCOUNT, WORLD_ADDRESS)


def format_amount(asset: str, amount: str) -> str:
    """
    Render a [ASSET AMOUNT] monetary literal.

    The '*' wildcard is emitted as-is; the interpreter resolves it to the
    available balance at execution time.
    """
    return f"[{asset} {amount}]"


def format_source(posting: Posting) -> str:
    """
    Render the source clause, including any overdraft allowance.

    @world is already unlimited, so it never gets an overdraft suffix
    even if the intent asked for one.
    """
    account = format_account(posting.source)

    if _is_world(posting.source):
        return account

    if posting.source_overdraft == OverdraftPolicy.UNBOUNDED:
        return f"{account} allowing unbounded overdraft"

    if posting.source_overdraft == OverdraftPolicy.LIMITED and posting.overdraft_limit:
        return (
            f"{account} allowing overdraft up to "
            f"{format_amount(posting.asset, posting.overdraft_limit)}"
        )

    return account


def _percentage(value: str) -> str:
    return value if "%" in value else f"{value}%"


def _cap_value(value: str) -> str:
    # A fraction forced into capped form keeps its number, not its sigil
    return value.replace("%", "").strip()


def format_split_rule(rule: SplitRule, asset: str, capped: bool = False) -> str:
    """
    Render one allocation line of a split block.

    Args:
        rule: The split rule
        asset: Posting-level asset, used for max caps
        capped: Render fraction rules in max form (conflict fallback)
    """
    target = format_account(rule.target)

    if rule.amount_mode == AmountMode.REMAINING:
        return f"{SPLIT_RULE_INDENT}remaining to {target}"

    if rule.amount_mode == AmountMode.MAX:
        return f"{SPLIT_RULE_INDENT}max {format_amount(asset, rule.value)} to {target}"

    if capped and rule.amount_mode == AmountMode.FRACTION:
        cap = format_amount(asset, _cap_value(rule.value))
        return f"{SPLIT_RULE_INDENT}max {cap} to {target}"

    if rule.amount_mode == AmountMode.FRACTION:
        return f"{SPLIT_RULE_INDENT}{_percentage(rule.value)} to {target}"

    raise ValueError(f"Unsupported amount mode: {rule.amount_mode!r}")


def _sort_key(rule: SplitRule) -> int:
    return 1 if rule.amount_mode == AmountMode.REMAINING else 0


def format_split_destination(
    rules: list[SplitRule],
    asset: str,
    posting_index: int = 0,
    strict: bool = False,
) -> tuple[str, list[CompilationWarning]]:
    """
    Render a brace-delimited split block.

    Rules are stable-sorted so every remaining rule comes last; the
    relative order of the other rules is kept as given.

    Fraction and max rules cannot share a block. When they do, every
    non-remaining rule is rendered in capped form and a
    CONFLICTING_SPLIT_MODES warning is returned.

    Raises:
        SplitModeConflictError: On a fraction/max mix when strict is True
    """
    warnings: list[CompilationWarning] = []

    modes = {rule.amount_mode for rule in rules}
    conflicting = AmountMode.FRACTION in modes and AmountMode.MAX in modes

    if conflicting:
        message = (
            f"Posting {posting_index + 1} mixes fraction and max split rules; "
            "rendering all of them as capped amounts"
        )
        if strict:
            raise SplitModeConflictError(posting_index, message)
        warnings.append(CompilationWarning(
            code=DiagnosticCode.CONFLICTING_SPLIT_MODES,
            posting_index=posting_index,
            message=message,
        ))

    ordered = sorted(rules, key=_sort_key)
    lines = [format_split_rule(rule, asset, capped=conflicting) for rule in ordered]

    return "{\n" + "\n".join(lines) + "\n  }", warnings


def format_destination(
    posting: Posting,
    posting_index: int = 0,
    strict: bool = False,
) -> tuple[str, list[CompilationWarning]]:
    """
    Render the destination clause for either destination type.

    Raises:
        MalformedPostingError: Destination data missing for the declared type
    """
    if posting.destination_type == DestinationType.SIMPLE:
        if not posting.simple_destination:
            raise MalformedPostingError(
                posting_index,
                "has simple destination type but no simple destination",
            )
        return format_account(posting.simple_destination), []

    if posting.destination_type == DestinationType.SPLIT:
        if not posting.split_rules:
            raise MalformedPostingError(
                posting_index,
                "has split destination type but no split rules",
            )
        return format_split_destination(
            posting.split_rules,
            posting.asset,
            posting_index=posting_index,
            strict=strict,
        )

    raise MalformedPostingError(
        posting_index,
        f"has unsupported destination type {posting.destination_type!r}",
    )


def compile_posting(
    posting: Posting,
    index: int = 0,
    strict: bool = False,
) -> tuple[str, list[CompilationWarning]]:
    """
    Render one posting as a complete send statement.

    Returns:
        (statement, warnings)

    Raises:
        MalformedPostingError: If destination type and data are inconsistent
    """
    destination, warnings = format_destination(posting, posting_index=index, strict=strict)

    statement = "\n".join([
        f"send {format_amount(posting.asset, posting.amount)} (",
        f"  source = {format_source(posting)}",
        f"  destination = {destination}",
        ")",
    ])
    return statement, warnings


def format_metadata_entry(entry: MetadataEntry) -> str:
    # Values are not escaped; callers must keep '"' out of them
    return f'set_tx_meta("{entry.key}", "{entry.value}")'


def format_metadata(entries: Optional[list[MetadataEntry]]) -> list[str]:
    """Render one set_tx_meta statement per entry, in input order."""
    return [format_metadata_entry(entry) for entry in entries or []]
