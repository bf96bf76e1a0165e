"""
Numscript Compiler - Source Package

Turns a validated transaction intent into Numscript text that moves
money between ledger accounts.

DESIGN PRINCIPLES:
1. AI proposes the intent → the compiler renders it → the checker verifies
2. Deterministic output (same intent, same script)
3. No partial scripts (a malformed posting fails the whole intent)
4. Contract violations are surfaced, never silently fixed
5. Every compilation is auditable
"""

__version__ = "1.0.0"
__author__ = "Numscript Compiler Team"
