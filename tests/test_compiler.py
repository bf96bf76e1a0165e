"""Tests for the top-level Numscript compiler."""

import pytest

from numscript_compiler.compiler import (
    MalformedPostingError,
    NumscriptCompiler,
    SplitModeConflictError,
    compile_to_numscript,
)
from numscript_compiler.config import CompilerSettings
from numscript_compiler.models.compilation import DiagnosticCode
from numscript_compiler.models.intent import validate_intent


REFUND_INTENT = {
    "summary": "Refund",
    "postings": [{
        "source": "clients:u1:main",
        "source_overdraft": "none",
        "destination_type": "simple",
        "simple_destination": "acquirers:a1:main",
        "asset": "EUR/2",
        "amount": "5000",
    }],
    "metadata": [{"key": "type", "value": "refund"}],
}


def simple_posting(source, destination, amount="100", **extra):
    posting = {
        "source": source,
        "destination_type": "simple",
        "simple_destination": destination,
        "asset": "USD/2",
        "amount": amount,
    }
    posting.update(extra)
    return posting


def split_posting(rules, source="payments:in", amount="10000"):
    return {
        "source": source,
        "destination_type": "split",
        "split_rules": rules,
        "asset": "USD/2",
        "amount": amount,
    }


@pytest.fixture
def compiler():
    return NumscriptCompiler(CompilerSettings(strict_split_modes=False, trailing_newline=True))


class TestScenarios:
    """End-to-end compilation scenarios."""

    def test_refund_script(self, compiler):
        """Test the complete script for a one-posting refund with metadata."""
        result = compiler.compile(validate_intent(REFUND_INTENT))
        assert result.script == (
            "// Refund\n"
            "\n"
            "send [EUR/2 5000] (\n"
            "  source = @clients:u1:main\n"
            "  destination = @acquirers:a1:main\n"
            ")\n"
            "\n"
            'set_tx_meta("type", "refund")\n'
        )
        assert result.warnings == []
        assert result.posting_count == 1
        assert result.metadata_count == 1

    def test_world_unbounded_source(self, compiler):
        """Test that a world source drops the requested overdraft."""
        intent = validate_intent({
            "summary": "Seed",
            "postings": [simple_posting("world", "clients:u1:main", source_overdraft="unbounded")],
        })
        script = compiler.compile(intent).script
        assert "  source = @world\n" in script
        assert "overdraft" not in script

    def test_fraction_then_remaining(self, compiler):
        """Test percentage sigil and remaining-last ordering."""
        intent = validate_intent({
            "summary": "Split",
            "postings": [split_posting([
                {"target": "a", "amount_mode": "fraction", "value": "80"},
                {"target": "b", "amount_mode": "remaining", "value": ""},
            ])],
        })
        script = compiler.compile(intent).script
        assert "    80% to @a\n    remaining to @b\n  }" in script

    def test_conflicting_split_modes(self, compiler):
        """Test that a fraction/max mix is flagged but still rendered."""
        intent = validate_intent({
            "summary": "Mixed",
            "postings": [split_posting([
                {"target": "a", "amount_mode": "max", "value": "1000"},
                {"target": "b", "amount_mode": "fraction", "value": "10%"},
            ])],
        })
        result = compiler.compile(intent)
        conflicts = result.warnings_for(DiagnosticCode.CONFLICTING_SPLIT_MODES)
        assert len(conflicts) == 1
        assert conflicts[0].posting_index == 0
        assert "    max [USD/2 1000] to @a" in result.script
        assert "    max [USD/2 10] to @b" in result.script
        assert "%" not in result.script

    def test_empty_split_rules_abort(self, compiler):
        """Test that an empty split aborts the whole compilation."""
        intent = validate_intent({
            "summary": "Broken",
            "postings": [
                simple_posting("world", "a"),
                split_posting([]),
            ],
        })
        with pytest.raises(MalformedPostingError) as exc_info:
            compiler.compile(intent)
        assert exc_info.value.posting_index == 1
        assert str(exc_info.value) == "posting 2 has split destination type but no split rules"

    def test_two_postings_in_order(self, compiler):
        """Test that postings keep input order, separated by one blank line."""
        intent = validate_intent({
            "summary": "Two legs",
            "postings": [
                simple_posting("world", "clients:u1:main", amount="111"),
                simple_posting("clients:u1:main", "merchants:m1:main", amount="222"),
            ],
        })
        script = compiler.compile(intent).script
        assert script.count("send ") == 2
        assert script.index("[USD/2 111]") < script.index("[USD/2 222]")
        assert ")\n\nsend [USD/2 222] (" in script
        assert "\n\n\n" not in script


class TestProperties:
    """Structural guarantees of compiled scripts."""

    @pytest.mark.parametrize("posting_count,metadata_count", [(1, 0), (1, 3), (4, 0), (3, 2)])
    def test_statement_counts(self, compiler, posting_count, metadata_count):
        """Test N send and M set_tx_meta statements, in input order."""
        intent = validate_intent({
            "summary": "Batch",
            "postings": [
                simple_posting("world", f"acct:{i}", amount=str(i + 1))
                for i in range(posting_count)
            ],
            "metadata": [{"key": f"k{i}", "value": f"v{i}"} for i in range(metadata_count)],
        })
        result = compiler.compile(intent)
        script = result.script

        assert script.count("send [") == posting_count
        assert script.count("set_tx_meta(") == metadata_count
        assert result.posting_count == posting_count
        assert result.metadata_count == metadata_count

        positions = [script.index(f"@acct:{i}\n") for i in range(posting_count)]
        assert positions == sorted(positions)
        meta_positions = [script.index(f'"k{i}"') for i in range(metadata_count)]
        assert meta_positions == sorted(meta_positions)

    def test_no_metadata_section_when_empty(self, compiler):
        """Test that empty metadata leaves no trailing separator."""
        intent = validate_intent({
            "summary": "Plain",
            "postings": [simple_posting("world", "a")],
        })
        assert compiler.compile(intent).script.endswith(")\n")

    def test_summary_comment_first(self, compiler):
        """Test that the summary is the leading comment, verbatim."""
        intent = validate_intent({
            "summary": "Pay 80% to merchant: $100 (test)",
            "postings": [simple_posting("world", "a")],
        })
        script = compiler.compile(intent).script
        assert script.splitlines()[0] == "// Pay 80% to merchant: $100 (test)"

    def test_wildcard_passthrough(self, compiler):
        """Test that a wildcard amount is rendered literally."""
        intent = validate_intent({
            "summary": "Sweep",
            "postings": [simple_posting("clients:u1:main", "banks:main", amount="*")],
        })
        assert "send [USD/2 *] (" in compiler.compile(intent).script

    def test_deterministic(self, compiler):
        """Test that the same intent always yields the same script."""
        intent = validate_intent(REFUND_INTENT)
        assert compiler.compile(intent).script == compiler.compile(intent).script


class TestSettings:
    """Tests for settings-driven behaviour."""

    def test_no_trailing_newline(self):
        """Test that the trailing newline can be disabled."""
        compiler = NumscriptCompiler(CompilerSettings(trailing_newline=False))
        script = compiler.compile(validate_intent(REFUND_INTENT)).script
        assert script.endswith('set_tx_meta("type", "refund")')

    def test_strict_split_modes(self):
        """Test that strict mode fails compilation on a fraction/max mix."""
        compiler = NumscriptCompiler(CompilerSettings(strict_split_modes=True))
        intent = validate_intent({
            "summary": "Mixed",
            "postings": [split_posting([
                {"target": "a", "amount_mode": "max", "value": "1000"},
                {"target": "b", "amount_mode": "fraction", "value": "10%"},
            ])],
        })
        with pytest.raises(SplitModeConflictError) as exc_info:
            compiler.compile(intent)
        assert exc_info.value.posting_index == 0

    def test_compile_to_numscript(self):
        """Test the script-only helper."""
        script = compile_to_numscript(validate_intent(REFUND_INTENT))
        assert script.startswith("// Refund\n\nsend [EUR/2 5000] (")
